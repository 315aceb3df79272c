"""
Feed Routes
Reader-facing announcement feed and read tracking
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api import deps
from app.models.user import User
from app.schemas.announcement import (
    AnnouncementFeed,
    MarkViewedRequest,
    MarkViewedResponse,
    UnreadCount,
)
from app.services.announcement import AnnouncementTargetingService

router = APIRouter(prefix="/feed/announcements")


def _split_types(values: Optional[List[str]]) -> List[str]:
    # ?types=a&types=b and ?types=a,b are both accepted
    result = []
    for value in values or []:
        result.extend(part.strip() for part in value.split(",") if part.strip())
    return result


@router.get("", response_model=AnnouncementFeed)
def read_feed(
    types: Optional[List[str]] = Query(None),
    unread_only: bool = False,
    current_user: User = Depends(deps.get_current_user),
    service: AnnouncementTargetingService = Depends(deps.get_targeting_service),
):
    """Active announcements addressed to the current user."""
    return deps.unwrap_result(
        service.feed_for_user(
            current_user,
            types=_split_types(types),
            unread_only=unread_only,
        )
    )


@router.get("/unread-count", response_model=UnreadCount)
def read_unread_count(
    current_user: User = Depends(deps.get_current_user),
    service: AnnouncementTargetingService = Depends(deps.get_targeting_service),
):
    return deps.unwrap_result(service.unread_count(current_user))


@router.post("/views", response_model=MarkViewedResponse)
def mark_viewed(
    payload: MarkViewedRequest,
    current_user: User = Depends(deps.get_current_user),
    service: AnnouncementTargetingService = Depends(deps.get_targeting_service),
):
    return deps.unwrap_result(service.mark_viewed(current_user, payload.announcement_ids))
