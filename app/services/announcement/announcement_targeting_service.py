"""
Audience resolution and the reader-facing announcement feed.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from app.core.exceptions import RepositoryError
from app.models.announcement.announcement import Announcement as AnnouncementModel
from app.models.base.enums import (
    AnnouncementDisplayType,
    AnnouncementStatus,
    ScopeDimension,
)
from app.models.user import User
from app.repositories.announcement import (
    AnnouncementRepository,
    AnnouncementScopeRepository,
    AnnouncementViewRepository,
    empty_scope,
)
from app.schemas.announcement.announcement_response import (
    AnnouncementFeed,
    AnnouncementFeedItem,
    MarkViewedResponse,
    UnreadCount,
)
from app.schemas.announcement.announcement_targeting import (
    ScopeResolveRequest,
    ScopeResolveResponse,
)
from app.services.announcement.announcement_lifecycle import (
    LifecycleState,
    compute_status,
)
from app.services.announcement.announcement_scope import ScopeResolver
from app.services.base import BaseService, ServiceResult
from app.utils.datetime_utils import DateTimeHelper

# Most specific dimension first: (scope key, user attribute)
AUDIENCE_LEVELS = (
    ("class_ids", "class_id"),
    ("church_ids", "church_id"),
    ("diocese_ids", "diocese_id"),
)


def display_type_for(types: Optional[Sequence[str]]) -> AnnouncementDisplayType:
    """Card style for a tag list: urgent beats class, anything else is general."""
    types = types or []
    if AnnouncementDisplayType.URGENT.value in types:
        return AnnouncementDisplayType.URGENT
    if AnnouncementDisplayType.CLASS.value in types:
        return AnnouncementDisplayType.CLASS
    return AnnouncementDisplayType.GENERAL


def audience_matches(
    target_roles: Optional[Sequence[str]],
    scope: Dict[str, List[str]],
    user: User,
) -> bool:
    """
    Whether ``user`` belongs to the audience of an announcement.

    The role must be targeted (an empty role list targets everyone). Only
    the most specific non-empty scope dimension is checked; an unscoped
    announcement reaches every organisation.
    """
    if target_roles and user.role_value not in target_roles:
        return False

    for key, attribute in AUDIENCE_LEVELS:
        ids = scope.get(key) or []
        if ids:
            return getattr(user, attribute, None) in ids
    return True


class AnnouncementTargetingService(
    BaseService[AnnouncementModel, AnnouncementRepository]
):
    """
    Reader-side announcement operations.

    Responsibilities:
    - Resolve which active announcements reach a user
    - Track read state and unread counts
    - Preview scope selections for the admin form
    """

    def __init__(
        self,
        repository: AnnouncementRepository,
        db_session: Session,
        scope_repository: Optional[AnnouncementScopeRepository] = None,
        view_repository: Optional[AnnouncementViewRepository] = None,
    ):
        super().__init__(repository, db_session)
        self.scope_repository = scope_repository or AnnouncementScopeRepository(db_session)
        self.view_repository = view_repository or AnnouncementViewRepository(db_session)

    # =========================================================================
    # Feed
    # =========================================================================

    def feed_for_user(
        self,
        user: User,
        now: Optional[datetime] = None,
        types: Optional[Iterable[str]] = None,
        unread_only: bool = False,
    ) -> ServiceResult[AnnouncementFeed]:
        """
        Active announcements addressed to ``user``, latest first.

        Args:
            user: Reader
            now: Evaluation instant, defaults to the current time
            types: Keep only items carrying at least one of these tags
            unread_only: Drop items the user has already viewed

        ``unread_count`` always covers the whole unfiltered feed.
        """
        now = DateTimeHelper.ensure_utc(now) or DateTimeHelper.now()
        try:
            visible = self._visible_for(user, now)
            read_ids = self.view_repository.viewed_ids(
                user.id, [entity.id for entity in visible]
            )
        except RepositoryError as e:
            return self._handle_database_error(e, "load announcement feed", user.id)

        items = [
            AnnouncementFeedItem(
                id=entity.id,
                title=entity.title,
                description=entity.description,
                types=list(entity.types or []),
                publish_from=entity.publish_from,
                publish_to=entity.publish_to,
                display_type=display_type_for(entity.types),
                is_read=entity.id in read_ids,
            )
            for entity in visible
        ]
        unread_count = sum(1 for item in items if not item.is_read)

        wanted = {tag.strip() for tag in types or [] if tag and tag.strip()}
        if wanted:
            items = [item for item in items if wanted.intersection(item.types)]
        if unread_only:
            items = [item for item in items if not item.is_read]

        return ServiceResult.success(
            AnnouncementFeed(items=items, total=len(items), unread_count=unread_count)
        )

    def unread_count(
        self,
        user: User,
        now: Optional[datetime] = None,
    ) -> ServiceResult[UnreadCount]:
        """Feed items the user has not viewed yet, plus their lifetime view count."""
        result = self.feed_for_user(user, now)
        if not result.is_success:
            return result
        try:
            viewed_total = self.view_repository.count_for_user(user.id)
        except RepositoryError as e:
            return self._handle_database_error(e, "count viewed announcements", user.id)

        return ServiceResult.success(
            UnreadCount(unread_count=result.data.unread_count, viewed_total=viewed_total)
        )

    def mark_viewed(
        self,
        user: User,
        announcement_ids: Iterable[str],
        now: Optional[datetime] = None,
    ) -> ServiceResult[MarkViewedResponse]:
        """
        Mark announcements as read.

        Ids outside the user's current feed are ignored; repeated calls are
        no-ops.
        """
        now = DateTimeHelper.ensure_utc(now) or DateTimeHelper.now()
        try:
            visible_ids = {entity.id for entity in self._visible_for(user, now)}
            requested = [
                announcement_id for announcement_id in dict.fromkeys(announcement_ids)
                if announcement_id in visible_ids
            ]
            marked = self.view_repository.mark_viewed(user.id, requested, viewed_at=now)
        except RepositoryError as e:
            return self._handle_database_error(e, "mark announcements viewed", user.id)

        self._log_operation(
            "mark announcements viewed",
            user.id,
            extra={"marked_count": len(marked)},
        )
        return ServiceResult.success(MarkViewedResponse(marked=marked))

    # =========================================================================
    # Scope preview
    # =========================================================================

    def preview_scope(
        self,
        request: ScopeResolveRequest,
    ) -> ServiceResult[ScopeResolveResponse]:
        """
        Run the form's cascading selection server-side.

        The submitted selection is normalized, then ``clear`` and
        ``select_all`` dimensions are applied from the top of the hierarchy
        down.
        """
        try:
            catalog = self.scope_repository.load_catalog()
        except RepositoryError as e:
            return self._handle_database_error(e, "load scope catalog")

        resolver = ScopeResolver(catalog).normalize(
            request.diocese_ids, request.church_ids, request.class_ids
        )
        order = list(ScopeDimension)
        for dimension in sorted(set(request.clear), key=order.index):
            resolver.clear_dimension(dimension)
        for dimension in sorted(set(request.select_all), key=order.index):
            resolver.select_all_in_dimension(dimension)

        return ServiceResult.success(
            ScopeResolveResponse(
                **resolver.as_dict(),
                available={
                    dimension.value: resolver.available(dimension) for dimension in order
                },
                all_selected={
                    dimension.value: resolver.is_all_selected(dimension) for dimension in order
                },
            )
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _visible_for(self, user: User, now: datetime) -> List[AnnouncementModel]:
        candidates = [
            entity for entity in self.repository.find_visible(now)
            if compute_status(LifecycleState.from_entity(entity), now)
            == AnnouncementStatus.ACTIVE
        ]
        scopes = self.scope_repository.fetch_scope_ids([entity.id for entity in candidates])
        return [
            entity for entity in candidates
            if audience_matches(
                entity.target_roles, scopes.get(entity.id, empty_scope()), user
            )
        ]
