"""
Announcement View Repository

Read/unread tracking: one row per (announcement, user) once the user has
opened the announcement.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.models.announcement import AnnouncementView
from app.repositories.base.base_repository import BaseRepository
from app.utils.datetime_utils import DateTimeHelper

logger = get_logger(__name__)


class AnnouncementViewRepository(BaseRepository[AnnouncementView]):
    """Repository for announcement read markers."""

    def __init__(self, session: Session):
        super().__init__(AnnouncementView, session)

    def viewed_ids(self, user_id: str, announcement_ids: Optional[Iterable[str]] = None) -> Set[str]:
        """
        Ids of announcements the user has viewed.

        Args:
            user_id: Reader
            announcement_ids: Restrict the lookup to these announcements
        """
        query = select(AnnouncementView.announcement_id).where(
            AnnouncementView.user_id == user_id
        )
        if announcement_ids is not None:
            ids = list(announcement_ids)
            if not ids:
                return set()
            query = query.where(AnnouncementView.announcement_id.in_(ids))

        try:
            return set(self.db.execute(query).scalars().all())
        except SQLAlchemyError as e:
            raise self._fail(e, "viewed_ids") from e

    def mark_viewed(
        self,
        user_id: str,
        announcement_ids: Iterable[str],
        viewed_at: Optional[datetime] = None,
    ) -> List[str]:
        """
        Record views; already viewed announcements are left untouched.

        If a concurrent request records some of the same views first, the
        insert is retried once with the ids still missing.

        Returns:
            Ids newly marked as viewed
        """
        ids = list(dict.fromkeys(announcement_ids))
        viewed_at = viewed_at or DateTimeHelper.now()

        for attempt in range(2):
            already = self.viewed_ids(user_id, ids)
            new_ids = [announcement_id for announcement_id in ids if announcement_id not in already]
            if not new_ids:
                return []

            try:
                self.db.add_all([
                    AnnouncementView(
                        announcement_id=announcement_id,
                        user_id=user_id,
                        viewed_at=viewed_at,
                    )
                    for announcement_id in new_ids
                ])
                self.db.commit()
                return new_ids
            except IntegrityError:
                self.db.rollback()
                logger.info(
                    "Concurrent view marking detected",
                    extra={"user_id": user_id, "announcement_ids": new_ids, "attempt": attempt + 1}
                )
            except SQLAlchemyError as e:
                raise self._fail(e, "mark_viewed") from e

        return []

    def count_for_user(self, user_id: str) -> int:
        """Number of announcements the user has viewed."""
        return self.count_where(user_id=user_id)
