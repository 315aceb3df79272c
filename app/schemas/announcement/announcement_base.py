# --- File: app/schemas/announcement/announcement_base.py ---
"""
Base announcement schemas for creation and updates.

Scope lists carry diocese/church/class ids; they are clamped to a
consistent hierarchy by the service before being stored.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, Field, field_validator

from app.models.announcement.announcement import DEFAULT_TARGET_ROLES
from app.models.base.enums import AnnouncementTargetRole, PublishRangePreset
from app.schemas.common.base import (
    BaseCreateSchema,
    BaseSchema,
    BaseUpdateSchema,
    UTCDateTime,
)

__all__ = [
    "AnnouncementBase",
    "AnnouncementCreate",
    "AnnouncementUpdate",
    "AnnouncementDeactivate",
    "AnnouncementRepublish",
    "SCOPE_FIELDS",
]

SCOPE_FIELDS = ("diocese_ids", "church_ids", "class_ids")


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


BodyText = Annotated[Optional[str], AfterValidator(_blank_to_none)]


class AnnouncementBase(BaseSchema):
    """
    Base announcement schema with common fields.
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Announcement title",
    )
    description: BodyText = Field(
        None,
        description="Announcement body; blank is stored as null",
    )
    types: List[str] = Field(
        default_factory=list,
        description="Free-form type tags (e.g. urgent, class)",
    )
    target_roles: List[AnnouncementTargetRole] = Field(
        default_factory=lambda: [AnnouncementTargetRole(role) for role in DEFAULT_TARGET_ROLES],
        min_length=1,
        description="Roles the announcement is addressed to",
    )
    publish_from: UTCDateTime = Field(
        ...,
        description="Start of the publish window",
    )
    publish_to: Optional[UTCDateTime] = Field(
        None,
        description="End of the publish window; omitted means no end",
    )


class AnnouncementCreate(AnnouncementBase, BaseCreateSchema):
    """
    Schema for creating an announcement.

    ``publish_range`` fills ``publish_to`` from one of the quick ranges when
    no explicit end is given.
    """

    publish_range: Optional[PublishRangePreset] = Field(
        None,
        description="Quick range used when publish_to is omitted",
    )
    diocese_ids: List[str] = Field(default_factory=list)
    church_ids: List[str] = Field(default_factory=list)
    class_ids: List[str] = Field(default_factory=list)


class AnnouncementUpdate(BaseUpdateSchema):
    """
    Partial update. Only fields that were sent are applied.

    Sending any scope list replaces the whole scope; lists not sent are
    treated as empty in that case.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: BodyText = None
    types: Optional[List[str]] = None
    target_roles: Optional[List[AnnouncementTargetRole]] = Field(None, min_length=1)
    publish_from: Optional[UTCDateTime] = None
    publish_to: Optional[UTCDateTime] = None

    diocese_ids: Optional[List[str]] = None
    church_ids: Optional[List[str]] = None
    class_ids: Optional[List[str]] = None

    @field_validator("title", "target_roles", "publish_from")
    @classmethod
    def reject_explicit_null(cls, v: Any) -> Any:
        # Required columns may be omitted but not cleared
        if v is None:
            raise ValueError("field cannot be null")
        return v

    def has_scope(self) -> bool:
        return self.was_sent(*SCOPE_FIELDS)

    def field_changes(self) -> Dict[str, Any]:
        """Supplied non-scope fields as a column mapping."""
        data = self.changes(exclude=SCOPE_FIELDS)
        if "target_roles" in data:
            data["target_roles"] = [
                AnnouncementTargetRole(role).value for role in data["target_roles"]
            ]
        return data

    def scope(self) -> Dict[str, List[str]]:
        return {name: list(getattr(self, name) or []) for name in SCOPE_FIELDS}


class AnnouncementDeactivate(BaseSchema):
    """Soft-delete request."""

    reason: Optional[str] = Field(
        None,
        max_length=1000,
        description="Optional free-text reason; blank is treated as none",
    )


class AnnouncementRepublish(AnnouncementUpdate):
    """
    Republish request with an optional simultaneous edit.

    Edited fields override the computed publish window. An ``id`` in the
    body is ignored.
    """
    pass
