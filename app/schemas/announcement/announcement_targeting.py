# --- File: app/schemas/announcement/announcement_targeting.py ---
"""
Announcement scope schemas.

The organisation catalog the scope resolver works on, and the request /
response pair of the server-side scope preview used by the admin form.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from pydantic import ConfigDict, Field

from app.models.base.enums import ScopeDimension
from app.schemas.common.base import BaseSchema

__all__ = [
    "ScopeOption",
    "ScopeCatalog",
    "ScopeSelection",
    "ScopeResolveRequest",
    "ScopeResolveResponse",
]


class ScopeOption(BaseSchema):
    """One selectable entity of a scope dimension."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    parent_id: Optional[str] = None


class ScopeCatalog(BaseSchema):
    """
    The organisation hierarchy available for targeting.

    Options are kept in display order; churches carry their diocese and
    classes their church as ``parent_id``.
    """

    model_config = ConfigDict(frozen=True)

    dioceses: Tuple[ScopeOption, ...] = ()
    churches: Tuple[ScopeOption, ...] = ()
    classes: Tuple[ScopeOption, ...] = ()

    def options(self, dimension: ScopeDimension) -> Tuple[ScopeOption, ...]:
        if dimension == ScopeDimension.DIOCESE:
            return self.dioceses
        if dimension == ScopeDimension.CHURCH:
            return self.churches
        return self.classes

    def parent_map(self, dimension: ScopeDimension) -> Dict[str, Optional[str]]:
        return {option.id: option.parent_id for option in self.options(dimension)}


class ScopeSelection(BaseSchema):
    """Selected ids per scope dimension. Empty means unscoped."""

    diocese_ids: List[str] = Field(default_factory=list)
    church_ids: List[str] = Field(default_factory=list)
    class_ids: List[str] = Field(default_factory=list)


class ScopeResolveRequest(ScopeSelection):
    """
    Current form selection plus optional bulk actions.

    ``clear`` is applied before ``select_all``; both run top-down.
    """

    select_all: List[ScopeDimension] = Field(default_factory=list)
    clear: List[ScopeDimension] = Field(default_factory=list)


class ScopeResolveResponse(ScopeSelection):
    """Clamped selection with the candidates each dimension offers."""

    available: Dict[str, List[str]] = Field(default_factory=dict)
    all_selected: Dict[str, bool] = Field(default_factory=dict)
