# --- File: app/schemas/announcement/announcement_response.py ---
"""
Announcement response schemas for API responses.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field

from app.models.base.enums import AnnouncementDisplayType, AnnouncementStatus
from app.schemas.common.base import BaseResponseSchema, BaseSchema, UTCDateTime

__all__ = [
    "AnnouncementDetail",
    "AnnouncementList",
    "AnnouncementFeedItem",
    "AnnouncementFeed",
    "TypeSuggestions",
    "UnreadCount",
    "MarkViewedRequest",
    "MarkViewedResponse",
]


class AnnouncementDetail(BaseResponseSchema):
    """
    Announcement with its scope ids and derived status, as shown to admins.
    """

    title: str
    description: Optional[str] = None
    types: List[str] = Field(default_factory=list)
    target_roles: List[str] = Field(default_factory=list)
    publish_from: UTCDateTime
    publish_to: Optional[UTCDateTime] = None

    is_deleted: bool = False
    deactivated_reason: Optional[str] = None
    deactivated_at: Optional[UTCDateTime] = None
    deactivated_by: Optional[str] = None
    created_by: Optional[str] = None

    diocese_ids: List[str] = Field(default_factory=list)
    church_ids: List[str] = Field(default_factory=list)
    class_ids: List[str] = Field(default_factory=list)

    status: AnnouncementStatus


class AnnouncementList(BaseSchema):
    """
    Admin list response.

    ``schema_missing`` is set instead of failing when the announcements
    table has not been provisioned yet.
    """

    items: List[AnnouncementDetail] = Field(default_factory=list)
    total: int = 0
    status_counts: Dict[str, int] = Field(default_factory=dict)
    schema_missing: bool = False


class AnnouncementFeedItem(BaseSchema):
    """Announcement as shown to a reader."""

    id: str
    title: str
    description: Optional[str] = None
    types: List[str] = Field(default_factory=list)
    publish_from: UTCDateTime
    publish_to: Optional[UTCDateTime] = None
    display_type: AnnouncementDisplayType
    is_read: bool = False


class AnnouncementFeed(BaseSchema):
    items: List[AnnouncementFeedItem] = Field(default_factory=list)
    total: int = 0
    unread_count: int = 0


class TypeSuggestions(BaseSchema):
    types: List[str] = Field(default_factory=list)


class UnreadCount(BaseSchema):
    unread_count: int = 0
    # Every announcement the user has ever opened, including expired ones
    viewed_total: int = 0


class MarkViewedRequest(BaseSchema):
    announcement_ids: List[str] = Field(..., min_length=1)


class MarkViewedResponse(BaseSchema):
    marked: List[str] = Field(default_factory=list)
