"""
Database enums mirroring schema enums.

Provides SQLAlchemy-compatible enum definitions that match
the Pydantic schema enums for consistency.
"""

import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    STUDENT = "student"
    PARENT = "parent"
    TEACHER = "teacher"
    CHURCH_ADMIN = "church_admin"
    DIOCESE_ADMIN = "diocese_admin"
    SUPER_ADMIN = "super_admin"


# Roles an announcement can target are the platform roles themselves
AnnouncementTargetRole = UserRole


class AnnouncementStatus(str, enum.Enum):
    """Announcement display status. Derived at read time, never stored."""
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    EXPIRED = "expired"
    DEACTIVATED = "deactivated"


class ScopeDimension(str, enum.Enum):
    """Announcement targeting axes, broadest first."""
    DIOCESE = "diocese"
    CHURCH = "church"
    CLASS = "class"


class PublishRangePreset(str, enum.Enum):
    """Quick ranges offered for the publish window end."""
    NO_END = "no_end"
    WEEK = "week"
    CURRENT_MONTH = "current_month"
    ONE_MONTH = "one_month"


class AnnouncementDisplayType(str, enum.Enum):
    """Reader-facing classification derived from type tags."""
    URGENT = "urgent"
    CLASS = "class"
    GENERAL = "general"
