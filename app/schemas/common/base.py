# --- File: app/schemas/common/base.py ---
"""
Shared schema bases and field types.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, Iterable, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from app.utils.datetime_utils import DateTimeHelper

__all__ = [
    "UTCDateTime",
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
]

# Aware datetime in UTC; naive input is taken to already be UTC.
UTCDateTime = Annotated[datetime, AfterValidator(DateTimeHelper.ensure_utc)]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        # Keep enums as Enum instances; callers use `.value` where needed.
        use_enum_values=False,
        str_strip_whitespace=True,
    )


class BaseCreateSchema(BaseSchema):
    """Base schema for create requests."""


class BaseUpdateSchema(BaseSchema):
    """
    Base schema for partial updates.

    Every field of a subclass should be optional. Whether a field was sent
    at all is tracked separately from its value, so ``{"description": null}``
    clears the column while an omitted ``description`` leaves it alone.
    """

    model_config = ConfigDict(extra="ignore")

    def was_sent(self, *names: str) -> bool:
        """True if any of ``names`` was present in the request body."""
        return any(name in self.model_fields_set for name in names)

    def changes(self, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        """Sent fields (minus ``exclude``) as a plain column mapping."""
        return self.model_dump(exclude_unset=True, exclude=set(exclude))


class BaseResponseSchema(BaseSchema):
    """Base schema for stored rows returned by the API."""

    id: str = Field(..., description="Unique identifier")
    created_at: Optional[UTCDateTime] = Field(None, description="Creation timestamp")
    updated_at: Optional[UTCDateTime] = Field(None, description="Last update timestamp")
