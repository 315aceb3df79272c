"""
Core announcement service: list, create/update, deactivate/republish and
type suggestions for the admin screens.

Status is never stored; every response recomputes it from the publish
window and the soft-delete flag.
"""

from collections import Counter
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.exceptions import RepositoryError, SchemaNotReadyError
from app.models.announcement import DEACTIVATION_FIELDS
from app.models.announcement.announcement import Announcement as AnnouncementModel
from app.models.base.enums import AnnouncementStatus, AnnouncementTargetRole
from app.repositories.announcement import (
    AnnouncementRepository,
    AnnouncementScopeRepository,
    empty_scope,
)
from app.schemas.announcement.announcement_base import (
    AnnouncementCreate,
    AnnouncementRepublish,
    AnnouncementUpdate,
)
from app.schemas.announcement.announcement_response import (
    AnnouncementDetail,
    AnnouncementList,
    TypeSuggestions,
)
from app.services.announcement.announcement_lifecycle import (
    LifecycleState,
    compute_status,
    deactivate,
    quick_range,
    republish,
    soft_delete,
)
from app.services.announcement.announcement_scope import ScopeResolver
from app.services.announcement.announcement_tags import normalize_tags
from app.services.base import (
    BaseService,
    ServiceResult,
)
from app.utils.datetime_utils import DateTimeHelper


class AnnouncementService(BaseService[AnnouncementModel, AnnouncementRepository]):
    """
    Admin-side announcement operations.

    Responsibilities:
    - List announcements with scope ids and computed status
    - Create and update announcements, replacing scope rows wholesale
    - Deactivate (soft delete) and republish
    - Best-effort type tag suggestions
    """

    def __init__(
        self,
        repository: AnnouncementRepository,
        db_session: Session,
        scope_repository: Optional[AnnouncementScopeRepository] = None,
    ):
        """
        Initialize announcement service.

        Args:
            repository: Announcement repository instance
            db_session: SQLAlchemy database session
            scope_repository: Scope repository, created from the session if omitted
        """
        super().__init__(repository, db_session)
        self.scope_repository = scope_repository or AnnouncementScopeRepository(db_session)

    # =========================================================================
    # Queries
    # =========================================================================

    def list_announcements(
        self,
        status: Optional[AnnouncementStatus] = None,
        now: Optional[datetime] = None,
    ) -> ServiceResult[AnnouncementList]:
        """
        All announcements, newest first, optionally filtered by status.

        A missing announcements table yields an empty list flagged with
        ``schema_missing`` instead of a failure.
        """
        now = DateTimeHelper.ensure_utc(now) or DateTimeHelper.now()
        try:
            entities = self.repository.list_all()
            scopes = self.scope_repository.fetch_scope_ids([entity.id for entity in entities])
        except SchemaNotReadyError as e:
            self._logger.warning(
                "Announcements table not provisioned, returning empty list",
                extra={"error": e.message},
            )
            return ServiceResult.success(AnnouncementList(schema_missing=True))
        except RepositoryError as e:
            return self._handle_database_error(e, "fetch announcements")

        items = [self._to_detail(entity, scopes.get(entity.id), now) for entity in entities]

        counts = Counter(item.status.value for item in items)
        status_counts = {value.value: counts.get(value.value, 0) for value in AnnouncementStatus}

        if status is not None:
            status = AnnouncementStatus(status)
            items = [item for item in items if item.status == status]

        return ServiceResult.success(
            AnnouncementList(items=items, total=len(items), status_counts=status_counts)
        )

    def get_announcement(
        self,
        announcement_id: str,
        now: Optional[datetime] = None,
    ) -> ServiceResult[AnnouncementDetail]:
        """Single announcement with scope ids and status."""
        now = DateTimeHelper.ensure_utc(now) or DateTimeHelper.now()
        try:
            entity = self.repository.find_by_id(announcement_id)
            if entity is None:
                return ServiceResult.not_found("Announcement", announcement_id)
            scopes = self.scope_repository.fetch_scope_ids([entity.id])
        except RepositoryError as e:
            return self._handle_database_error(e, "fetch announcement", announcement_id)

        return ServiceResult.success(self._to_detail(entity, scopes.get(entity.id), now))

    def get_type_suggestions(self) -> ServiceResult[TypeSuggestions]:
        """
        Distinct tags used across announcements.

        Non-critical: a storage failure degrades to an empty list.
        """
        try:
            types = self.repository.distinct_types()
        except RepositoryError as e:
            self._logger.warning(
                "Type suggestions unavailable",
                extra={"error": e.message},
            )
            types = []
        return ServiceResult.success(TypeSuggestions(types=types))

    # =========================================================================
    # Create & Update
    # =========================================================================

    def create_announcement(
        self,
        request: AnnouncementCreate,
        actor: Optional[str],
    ) -> ServiceResult[AnnouncementDetail]:
        """
        Insert the announcement, then replace its scope rows.

        The scope is clamped to a consistent hierarchy first.
        """
        payload = request.model_dump(
            exclude={"diocese_ids", "church_ids", "class_ids", "publish_range"}
        )
        payload["types"] = normalize_tags(payload.get("types"))
        payload["target_roles"] = self._role_values(payload["target_roles"])
        if payload.get("publish_to") is None and request.publish_range is not None:
            payload["publish_to"] = quick_range(request.publish_from, request.publish_range)
        payload["created_by"] = actor

        try:
            entity = self.repository.create_announcement(payload)
            scope = self._normalize_scope(
                request.diocese_ids, request.church_ids, request.class_ids
            )
            self.scope_repository.replace_scope(entity.id, **scope)
        except RepositoryError as e:
            return self._handle_database_error(e, "create announcement")

        self._log_operation(
            "create announcement",
            entity.id,
            extra={"actor": actor, **{name: len(ids) for name, ids in scope.items()}},
        )
        return self._detail_result(entity.id, "Announcement created successfully")

    def update_announcement(
        self,
        announcement_id: str,
        request: AnnouncementUpdate,
    ) -> ServiceResult[AnnouncementDetail]:
        """
        Apply the supplied fields; replace scope only if a scope list was sent.
        """
        changes = request.field_changes()
        if "types" in changes:
            changes["types"] = normalize_tags(changes["types"])

        try:
            if self.repository.find_by_id(announcement_id) is None:
                return ServiceResult.not_found("Announcement", announcement_id)

            if changes:
                self.repository.update_fields(announcement_id, changes)

            if request.has_scope():
                scope = request.scope()
                self.scope_repository.replace_scope(
                    announcement_id, **self._normalize_scope(**scope)
                )
        except RepositoryError as e:
            return self._handle_database_error(e, "update announcement", announcement_id)

        self._log_operation(
            "update announcement",
            announcement_id,
            extra={"fields": sorted(changes), "scope_replaced": request.has_scope()},
        )
        return self._detail_result(announcement_id, "Announcement updated successfully")

    # =========================================================================
    # Lifecycle Transitions
    # =========================================================================

    def deactivate_announcement(
        self,
        announcement_id: str,
        reason: Optional[str],
        actor: Optional[str],
        now: Optional[datetime] = None,
    ) -> ServiceResult[AnnouncementDetail]:
        """
        Soft-delete an announcement, recording reason, time and actor.

        Deactivating twice overwrites the earlier metadata.
        """
        return self._deactivate(
            announcement_id,
            lambda state, at: deactivate(state, reason, actor, at),
            DEACTIVATION_FIELDS,
            "deactivate announcement",
            actor,
            now,
        )

    def soft_delete_announcement(
        self,
        announcement_id: str,
        actor: Optional[str],
        now: Optional[datetime] = None,
    ) -> ServiceResult[AnnouncementDetail]:
        """Soft-delete, stamping time and actor; an existing reason is kept."""
        return self._deactivate(
            announcement_id,
            lambda state, at: soft_delete(state, actor, at),
            ("deactivated_at", "deactivated_by"),
            "delete announcement",
            actor,
            now,
        )

    def _deactivate(
        self,
        announcement_id: str,
        transition: Callable[[LifecycleState, datetime], LifecycleState],
        written_fields: Tuple[str, ...],
        operation: str,
        actor: Optional[str],
        now: Optional[datetime],
    ) -> ServiceResult[AnnouncementDetail]:
        now = DateTimeHelper.ensure_utc(now) or DateTimeHelper.now()
        try:
            entity = self.repository.find_by_id(announcement_id)
            if entity is None:
                return ServiceResult.not_found("Announcement", announcement_id)

            state = transition(LifecycleState.from_entity(entity), now)
            payload = {"is_deleted": state.is_deleted}
            payload.update({name: getattr(state, name) for name in written_fields})
            self.repository.update_lifecycle(announcement_id, payload)
        except RepositoryError as e:
            return self._handle_database_error(e, operation, announcement_id)

        self._log_operation(
            operation,
            announcement_id,
            extra={"actor": actor, "has_reason": state.deactivated_reason is not None},
        )
        return self._detail_result(announcement_id, "Announcement deactivated", now)

    def republish_announcement(
        self,
        announcement_id: str,
        request: Optional[AnnouncementRepublish] = None,
        now: Optional[datetime] = None,
    ) -> ServiceResult[AnnouncementDetail]:
        """
        Revive an announcement into a window starting now.

        The original window length is preserved when it was positive and
        bounded. Fields edited in ``request`` are merged into the same update
        and take precedence; scope lists, if sent, replace the scope.
        """
        now = DateTimeHelper.ensure_utc(now) or DateTimeHelper.now()
        overrides = request.field_changes() if request is not None else {}
        if "types" in overrides:
            overrides["types"] = normalize_tags(overrides["types"])

        try:
            entity = self.repository.find_by_id(announcement_id)
            if entity is None:
                return ServiceResult.not_found("Announcement", announcement_id)

            _, payload = republish(LifecycleState.from_entity(entity), now, overrides)
            self.repository.update_lifecycle(announcement_id, payload)

            if request is not None and request.has_scope():
                self.scope_repository.replace_scope(
                    announcement_id, **self._normalize_scope(**request.scope())
                )
        except RepositoryError as e:
            return self._handle_database_error(e, "republish announcement", announcement_id)

        self._log_operation(
            "republish announcement",
            announcement_id,
            extra={
                "publish_from": payload["publish_from"].isoformat() if payload.get("publish_from") else None,
                "publish_to": payload["publish_to"].isoformat() if payload.get("publish_to") else None,
                "edited_fields": sorted(overrides),
            },
        )
        return self._detail_result(announcement_id, "Announcement republished", now)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _normalize_scope(
        self,
        diocese_ids: Iterable[str],
        church_ids: Iterable[str],
        class_ids: Iterable[str],
    ) -> Dict[str, List[str]]:
        catalog = self.scope_repository.load_catalog()
        return ScopeResolver(catalog).normalize(diocese_ids, church_ids, class_ids).as_dict()

    def _detail_result(
        self,
        announcement_id: str,
        message: str,
        now: Optional[datetime] = None,
    ) -> ServiceResult[AnnouncementDetail]:
        result = self.get_announcement(announcement_id, now)
        if result.is_success:
            result.message = message
        return result

    @staticmethod
    def _role_values(roles: Iterable) -> List[str]:
        return [AnnouncementTargetRole(role).value for role in roles]

    @staticmethod
    def _to_detail(
        entity: AnnouncementModel,
        scope: Optional[Dict[str, List[str]]],
        now: datetime,
    ) -> AnnouncementDetail:
        data = entity.to_dict()
        data.update(scope or empty_scope())
        data["status"] = compute_status(LifecycleState.from_entity(entity), now)
        return AnnouncementDetail.model_validate(data)
