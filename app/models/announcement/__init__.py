"""
Announcement models package.
"""

from app.models.announcement.announcement import (
    DEACTIVATION_FIELDS,
    DEFAULT_TARGET_ROLES,
    Announcement,
    JSONList,
)
from app.models.announcement.announcement_targeting import (
    AnnouncementChurch,
    AnnouncementClass,
    AnnouncementDiocese,
)
from app.models.announcement.announcement_tracking import AnnouncementView

__all__ = [
    "Announcement",
    "AnnouncementDiocese",
    "AnnouncementChurch",
    "AnnouncementClass",
    "AnnouncementView",
    "JSONList",
    "DEFAULT_TARGET_ROLES",
    "DEACTIVATION_FIELDS",
]
