"""
Base models package.

Provides base classes and enums for all database models.
"""

from app.models.base.base_model import (
    Base,
    BaseModel,
    TimestampModel,
    generate_uuid,
)

from app.models.base.enums import (
    UserRole,
    AnnouncementTargetRole,
    AnnouncementStatus,
    ScopeDimension,
    PublishRangePreset,
    AnnouncementDisplayType,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "generate_uuid",
    "UserRole",
    "AnnouncementTargetRole",
    "AnnouncementStatus",
    "ScopeDimension",
    "PublishRangePreset",
    "AnnouncementDisplayType",
]
