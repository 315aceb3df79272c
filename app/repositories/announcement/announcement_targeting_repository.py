"""
Announcement Scope Repository

Reads and replaces the diocese/church/class junction rows of announcements
and loads the organisation catalog the scope resolver works on.
"""

from typing import Dict, Iterable, List

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import RepositoryError
from app.core.logging import get_logger
from app.models.announcement import (
    AnnouncementChurch,
    AnnouncementClass,
    AnnouncementDiocese,
)
from app.models.organization import Church, Diocese, SchoolClass
from app.schemas.announcement.announcement_targeting import ScopeCatalog, ScopeOption

logger = get_logger(__name__)

# (junction model, target column name, key in scope mappings)
SCOPE_TABLES = (
    (AnnouncementDiocese, "diocese_id", "diocese_ids"),
    (AnnouncementChurch, "church_id", "church_ids"),
    (AnnouncementClass, "class_id", "class_ids"),
)


def empty_scope() -> Dict[str, List[str]]:
    return {key: [] for _, _, key in SCOPE_TABLES}


class AnnouncementScopeRepository:
    """
    Junction rows for the three scope dimensions.

    Not bound to a single model, so it carries the session itself instead
    of extending BaseRepository.
    """

    def __init__(self, session: Session):
        self.db = session

    # ==================== Read Operations ====================

    def fetch_scope_ids(self, announcement_ids: Iterable[str]) -> Dict[str, Dict[str, List[str]]]:
        """
        Scope ids for a set of announcements, one query per dimension.

        Returns:
            announcement_id -> {"diocese_ids": [...], "church_ids": [...], "class_ids": [...]};
            announcements without any rows map to empty lists
        """
        ids = list(dict.fromkeys(announcement_ids))
        scopes = {announcement_id: empty_scope() for announcement_id in ids}
        if not ids:
            return scopes

        try:
            for model, column_name, key in SCOPE_TABLES:
                column = getattr(model, column_name)
                rows = self.db.execute(
                    select(model.announcement_id, column)
                    .where(model.announcement_id.in_(ids))
                ).all()
                for announcement_id, target_id in rows:
                    scopes[announcement_id][key].append(target_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(
                str(getattr(e, "orig", None) or e), operation="fetch_scope_ids"
            ) from e

        return scopes

    def load_catalog(self) -> ScopeCatalog:
        """Organisation hierarchy ordered by name."""
        try:
            dioceses = self.db.execute(
                select(Diocese.id, Diocese.name).order_by(Diocese.name)
            ).all()
            churches = self.db.execute(
                select(Church.id, Church.name, Church.diocese_id).order_by(Church.name)
            ).all()
            classes = self.db.execute(
                select(SchoolClass.id, SchoolClass.name, SchoolClass.church_id)
                .order_by(SchoolClass.name)
            ).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(
                str(getattr(e, "orig", None) or e), operation="load_catalog"
            ) from e

        return ScopeCatalog(
            dioceses=tuple(ScopeOption(id=row.id, name=row.name) for row in dioceses),
            churches=tuple(
                ScopeOption(id=row.id, name=row.name, parent_id=row.diocese_id)
                for row in churches
            ),
            classes=tuple(
                ScopeOption(id=row.id, name=row.name, parent_id=row.church_id)
                for row in classes
            ),
        )

    # ==================== Write Operations ====================

    def replace_scope(
        self,
        announcement_id: str,
        diocese_ids: Iterable[str],
        church_ids: Iterable[str],
        class_ids: Iterable[str],
    ) -> None:
        """
        Replace all scope rows of an announcement.

        Three deletes followed by an insert per non-empty dimension, committed
        together.
        """
        selections = {
            "diocese_ids": list(dict.fromkeys(diocese_ids or [])),
            "church_ids": list(dict.fromkeys(church_ids or [])),
            "class_ids": list(dict.fromkeys(class_ids or [])),
        }

        try:
            for model, _, _ in SCOPE_TABLES:
                self.db.execute(
                    delete(model).where(model.announcement_id == announcement_id)
                )

            for model, column_name, key in SCOPE_TABLES:
                if not selections[key]:
                    continue
                self.db.execute(
                    insert(model),
                    [
                        {"announcement_id": announcement_id, column_name: target_id}
                        for target_id in selections[key]
                    ],
                )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Scope replacement failed for announcement {announcement_id}",
                exc_info=True
            )
            raise RepositoryError(
                str(getattr(e, "orig", None) or e), operation="replace_scope"
            ) from e

        logger.info(
            "Announcement scope replaced",
            extra={
                "announcement_id": announcement_id,
                "diocese_count": len(selections["diocese_ids"]),
                "church_count": len(selections["church_ids"]),
                "class_count": len(selections["class_ids"]),
            }
        )
