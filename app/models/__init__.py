# models/__init__.py
from .base import Base, BaseModel, TimestampModel
from .organization import Church, Diocese, SchoolClass
from .user import User
from .announcement import (
    Announcement,
    AnnouncementChurch,
    AnnouncementClass,
    AnnouncementDiocese,
    AnnouncementView,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "Diocese",
    "Church",
    "SchoolClass",
    "User",
    "Announcement",
    "AnnouncementDiocese",
    "AnnouncementChurch",
    "AnnouncementClass",
    "AnnouncementView",
]
