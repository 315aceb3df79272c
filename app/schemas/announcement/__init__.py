# --- File: app/schemas/announcement/__init__.py ---
"""
Announcement schemas package.

Modules:
    announcement_base: Create, update, deactivate and republish requests
    announcement_response: Admin and reader-facing responses
    announcement_targeting: Scope catalog and scope preview
"""

from app.schemas.announcement.announcement_base import (
    SCOPE_FIELDS,
    AnnouncementBase,
    AnnouncementCreate,
    AnnouncementDeactivate,
    AnnouncementRepublish,
    AnnouncementUpdate,
)
from app.schemas.announcement.announcement_response import (
    AnnouncementDetail,
    AnnouncementFeed,
    AnnouncementFeedItem,
    AnnouncementList,
    MarkViewedRequest,
    MarkViewedResponse,
    TypeSuggestions,
    UnreadCount,
)
from app.schemas.announcement.announcement_targeting import (
    ScopeCatalog,
    ScopeOption,
    ScopeResolveRequest,
    ScopeResolveResponse,
    ScopeSelection,
)

__all__ = [
    "SCOPE_FIELDS",
    "AnnouncementBase",
    "AnnouncementCreate",
    "AnnouncementUpdate",
    "AnnouncementDeactivate",
    "AnnouncementRepublish",
    "AnnouncementDetail",
    "AnnouncementList",
    "AnnouncementFeedItem",
    "AnnouncementFeed",
    "TypeSuggestions",
    "UnreadCount",
    "MarkViewedRequest",
    "MarkViewedResponse",
    "ScopeOption",
    "ScopeCatalog",
    "ScopeSelection",
    "ScopeResolveRequest",
    "ScopeResolveResponse",
]
