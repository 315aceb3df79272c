"""
Announcement service layer.

- announcement_service: admin CRUD, deactivate and republish
- announcement_targeting_service: audience resolution, feed and read state
- announcement_lifecycle: derived status and lifecycle transitions
- announcement_scope: diocese/church/class selection resolver
- announcement_tags: type tag list helpers
"""

from app.services.announcement.announcement_lifecycle import (
    LifecycleState,
    compute_republish_to,
    compute_status,
    deactivate,
    quick_range,
    republish,
    soft_delete,
)
from app.services.announcement.announcement_scope import ScopeResolver
from app.services.announcement.announcement_service import AnnouncementService
from app.services.announcement.announcement_tags import (
    add_tag,
    normalize_tags,
    remove_tag,
)
from app.services.announcement.announcement_targeting_service import (
    AnnouncementTargetingService,
    audience_matches,
    display_type_for,
)

__all__ = [
    "AnnouncementService",
    "AnnouncementTargetingService",
    "LifecycleState",
    "ScopeResolver",
    "audience_matches",
    "compute_republish_to",
    "compute_status",
    "deactivate",
    "display_type_for",
    "normalize_tags",
    "add_tag",
    "quick_range",
    "remove_tag",
    "republish",
    "soft_delete",
]
