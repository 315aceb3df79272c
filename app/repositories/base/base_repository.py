"""
Base repository for single-table CRUD.

Every SQLAlchemy failure is rolled back and re-raised as RepositoryError so
the services can report it without knowing about the ORM.
"""

from typing import Any, Dict, Generic, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import RepositoryError
from app.core.logging import get_logger
from app.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Session-bound repository for one mapped model."""

    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    def _fail(self, error: SQLAlchemyError, operation: str) -> RepositoryError:
        """Roll back the session and build the error to raise."""
        self.db.rollback()
        return RepositoryError(
            str(getattr(error, "orig", None) or error),
            operation=operation,
            table=self.table_name,
        )

    def create(self, entity: ModelType) -> ModelType:
        """Insert ``entity``, commit and return it refreshed."""
        try:
            self.db.add(entity)
            self.db.commit()
            self.db.refresh(entity)
        except SQLAlchemyError as e:
            raise self._fail(e, "create") from e

        logger.info(f"Created {self.model.__name__}", extra={"entity_ref": entity.id})
        return entity

    def update(self, entity: ModelType, data: Dict[str, Any]) -> ModelType:
        """
        Set mapped attributes from ``data`` and commit.

        Keys that are not attributes of the model are ignored.
        """
        try:
            for key, value in data.items():
                if hasattr(self.model, key):
                    setattr(entity, key, value)
            self.db.commit()
            self.db.refresh(entity)
        except SQLAlchemyError as e:
            raise self._fail(e, "update") from e

        logger.info(
            f"Updated {self.model.__name__}",
            extra={"entity_ref": entity.id, "fields": sorted(data)},
        )
        return entity

    def count_where(self, **filters: Any) -> int:
        """Number of rows whose columns equal the given values."""
        query = select(func.count()).select_from(self.model)
        for key, value in filters.items():
            query = query.where(getattr(self.model, key) == value)
        try:
            return self.db.execute(query).scalar_one()
        except SQLAlchemyError as e:
            raise self._fail(e, "count") from e
