"""
Announcement Routes
Admin endpoints for managing announcements
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api import deps
from app.models.base.enums import AnnouncementStatus
from app.models.user import User
from app.schemas.announcement import (
    AnnouncementCreate,
    AnnouncementDeactivate,
    AnnouncementDetail,
    AnnouncementList,
    AnnouncementRepublish,
    AnnouncementUpdate,
    ScopeResolveRequest,
    ScopeResolveResponse,
    TypeSuggestions,
)
from app.services.announcement import (
    AnnouncementService,
    AnnouncementTargetingService,
)

router = APIRouter(prefix="/announcements")


@router.get("", response_model=AnnouncementList)
def list_announcements(
    status_filter: Optional[AnnouncementStatus] = Query(None, alias="status"),
    _: User = Depends(deps.require_admin_user),
    service: AnnouncementService = Depends(deps.get_announcement_service),
):
    """All announcements, newest first, with derived status."""
    return deps.unwrap_result(service.list_announcements(status=status_filter))


@router.get("/types", response_model=TypeSuggestions)
def list_type_suggestions(
    _: User = Depends(deps.require_admin_user),
    service: AnnouncementService = Depends(deps.get_announcement_service),
):
    """Type tags already in use, for the tag input's suggestions."""
    return deps.unwrap_result(service.get_type_suggestions())


@router.post("/scope/resolve", response_model=ScopeResolveResponse)
def resolve_scope(
    payload: ScopeResolveRequest,
    _: User = Depends(deps.require_admin_user),
    service: AnnouncementTargetingService = Depends(deps.get_targeting_service),
):
    """Clamp a scope selection and list the candidates of each dimension."""
    return deps.unwrap_result(service.preview_scope(payload))


@router.get("/{announcement_id}", response_model=AnnouncementDetail)
def get_announcement(
    announcement_id: str,
    _: User = Depends(deps.require_admin_user),
    service: AnnouncementService = Depends(deps.get_announcement_service),
):
    return deps.unwrap_result(service.get_announcement(announcement_id))


@router.post("", response_model=AnnouncementDetail, status_code=status.HTTP_201_CREATED)
def create_announcement(
    payload: AnnouncementCreate,
    current_user: User = Depends(deps.require_admin_user),
    service: AnnouncementService = Depends(deps.get_announcement_service),
):
    return deps.unwrap_result(service.create_announcement(payload, actor=current_user.id))


@router.patch("/{announcement_id}", response_model=AnnouncementDetail)
def update_announcement(
    announcement_id: str,
    payload: AnnouncementUpdate,
    _: User = Depends(deps.require_admin_user),
    service: AnnouncementService = Depends(deps.get_announcement_service),
):
    """Apply the sent fields; sending any scope list replaces the scope."""
    return deps.unwrap_result(service.update_announcement(announcement_id, payload))


@router.post("/{announcement_id}/deactivate", response_model=AnnouncementDetail)
def deactivate_announcement(
    announcement_id: str,
    payload: Optional[AnnouncementDeactivate] = None,
    current_user: User = Depends(deps.require_admin_user),
    service: AnnouncementService = Depends(deps.get_announcement_service),
):
    reason = payload.reason if payload is not None else None
    return deps.unwrap_result(
        service.deactivate_announcement(announcement_id, reason, actor=current_user.id)
    )


@router.delete("/{announcement_id}", response_model=AnnouncementDetail)
def delete_announcement(
    announcement_id: str,
    current_user: User = Depends(deps.require_admin_user),
    service: AnnouncementService = Depends(deps.get_announcement_service),
):
    """Soft delete; a reason recorded by an earlier deactivation is kept."""
    return deps.unwrap_result(
        service.soft_delete_announcement(announcement_id, actor=current_user.id)
    )


@router.post("/{announcement_id}/republish", response_model=AnnouncementDetail)
def republish_announcement(
    announcement_id: str,
    payload: Optional[AnnouncementRepublish] = None,
    _: User = Depends(deps.require_admin_user),
    service: AnnouncementService = Depends(deps.get_announcement_service),
):
    """Revive into a window starting now, optionally saving edits in the same update."""
    return deps.unwrap_result(service.republish_announcement(announcement_id, payload))
