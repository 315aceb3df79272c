"""
Announcement Repositories Package

Repositories:
- AnnouncementRepository: announcement rows, listing and lifecycle updates
- AnnouncementScopeRepository: diocese/church/class scope rows and the
  organisation catalog
- AnnouncementViewRepository: read/unread tracking

Usage:
    from app.repositories.announcement import AnnouncementRepository

    announcement_repo = AnnouncementRepository(session)
"""

from app.repositories.announcement.announcement_repository import AnnouncementRepository
from app.repositories.announcement.announcement_targeting_repository import (
    AnnouncementScopeRepository,
    empty_scope,
)
from app.repositories.announcement.announcement_tracking_repository import (
    AnnouncementViewRepository,
)

__all__ = [
    "AnnouncementRepository",
    "AnnouncementScopeRepository",
    "AnnouncementViewRepository",
    "empty_scope",
]
