"""
Announcement Repository

Announcement rows: listing, lookup, field updates and the lifecycle
updates (deactivate / republish) with their schema-not-ready fallback.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, defer
from sqlalchemy.orm.attributes import set_committed_value
from sqlalchemy.sql import Select

from app.core.exceptions import (
    SchemaNotReadyError,
    is_schema_not_ready,
)
from app.core.logging import get_logger
from app.models.announcement import DEACTIVATION_FIELDS, Announcement
from app.repositories.base.base_repository import BaseRepository

logger = get_logger(__name__)


class AnnouncementRepository(BaseRepository[Announcement]):
    """
    Repository for announcement rows.

    Scope rows live in AnnouncementScopeRepository; read tracking in
    AnnouncementViewRepository.
    """

    def __init__(self, session: Session):
        super().__init__(Announcement, session)

    # ==================== Read Operations ====================

    def list_all(self) -> List[Announcement]:
        """
        All announcements, newest first.

        Raises:
            SchemaNotReadyError: the announcements table is not provisioned
            RepositoryError: any other storage failure
        """
        try:
            return self._load(
                select(Announcement).order_by(Announcement.created_at.desc()),
                "list",
            )
        except SQLAlchemyError as e:
            error = self._fail(e, "list")
            if is_schema_not_ready(e, [self.table_name]):
                raise SchemaNotReadyError(
                    f"Table {self.table_name} is not available",
                    operation="list",
                    table=self.table_name
                ) from e
            raise error from e

    def find_by_id(self, id: str) -> Optional[Announcement]:
        try:
            found = self._load(select(Announcement).where(Announcement.id == id), "find_by_id")
        except SQLAlchemyError as e:
            raise self._fail(e, "find_by_id") from e
        return found[0] if found else None

    def find_visible(self, now: datetime) -> List[Announcement]:
        """
        Announcements inside their publish window at ``now`` and not
        soft-deleted, latest ``publish_from`` first.
        """
        query = (
            select(Announcement)
            .where(
                and_(
                    Announcement.is_deleted.is_(False),
                    Announcement.publish_from <= now,
                    or_(
                        Announcement.publish_to.is_(None),
                        Announcement.publish_to >= now,
                    ),
                )
            )
            .order_by(Announcement.publish_from.desc())
        )
        try:
            return self._load(query, "find_visible")
        except SQLAlchemyError as e:
            raise self._fail(e, "find_visible") from e

    def _load(self, query: Select, operation: str) -> List[Announcement]:
        """
        Run an entity select.

        On a store without the deactivation columns the select is repeated
        with them deferred and they read as None on the loaded entities.
        """
        try:
            return list(self.db.execute(query).scalars().all())
        except SQLAlchemyError as e:
            if not is_schema_not_ready(e, list(DEACTIVATION_FIELDS)):
                raise
            self.db.rollback()
            logger.warning(
                "Deactivation columns missing, loading announcements without them",
                extra={"operation": operation}
            )

        entities = list(
            self.db.execute(
                query.options(*[defer(getattr(Announcement, name)) for name in DEACTIVATION_FIELDS])
            ).scalars().all()
        )
        for entity in entities:
            for name in DEACTIVATION_FIELDS:
                set_committed_value(entity, name, None)
        return entities

    def distinct_types(self) -> List[str]:
        """Distinct type tags used across all announcements, sorted."""
        try:
            rows = self.db.execute(select(Announcement.types)).scalars().all()
        except SQLAlchemyError as e:
            raise self._fail(e, "distinct_types") from e

        tags = set()
        for types in rows:
            for tag in types or []:
                if isinstance(tag, str) and tag.strip():
                    tags.add(tag)
        return sorted(tags)

    # ==================== Write Operations ====================

    def create_announcement(self, data: Dict[str, Any]) -> Announcement:
        """Insert a new announcement row from a field mapping."""
        return self.create(Announcement(**data))

    def update_fields(self, announcement_id: str, data: Dict[str, Any]) -> Optional[Announcement]:
        """
        Update the supplied fields of one announcement.

        Returns:
            The refreshed entity, or None if it does not exist
        """
        entity = self.find_by_id(announcement_id)
        if entity is None:
            return None
        return self.update(entity, data)

    def update_lifecycle(self, announcement_id: str, payload: Dict[str, Any]) -> int:
        """
        Write a deactivate/republish payload.

        If the store rejects the deactivation metadata columns as unknown,
        the update is retried once without them so the soft-delete flag and
        the publish window still change.

        Returns:
            Number of rows updated
        """
        try:
            return self._execute_update(announcement_id, payload)
        except SQLAlchemyError as e:
            error = self._fail(e, "update_lifecycle")
            if not is_schema_not_ready(e, list(DEACTIVATION_FIELDS)):
                raise error from e

            fallback = {
                key: value for key, value in payload.items()
                if key not in DEACTIVATION_FIELDS
            }
            logger.warning(
                "Deactivation columns missing, retrying lifecycle update without them",
                extra={
                    "announcement_id": announcement_id,
                    "dropped_fields": sorted(set(payload) - set(fallback)),
                }
            )

        try:
            return self._execute_update(announcement_id, fallback)
        except SQLAlchemyError as e:
            raise self._fail(e, "update_lifecycle") from e

    def _execute_update(self, announcement_id: str, values: Dict[str, Any]) -> int:
        result = self.db.execute(
            update(Announcement)
            .where(Announcement.id == announcement_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount
