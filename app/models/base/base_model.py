"""
Declarative base and abstract models shared by all tables.
"""

from datetime import datetime
from typing import Any, Dict, Iterable
from uuid import uuid4

from sqlalchemy import DateTime, String, inspect
from sqlalchemy.orm import Mapped, declarative_base, mapped_column
from sqlalchemy.sql import func

from app.utils.datetime_utils import DateTimeHelper, utc_now

Base = declarative_base()


def generate_uuid() -> str:
    return str(uuid4())


class BaseModel(Base):
    """
    Abstract model with a string UUID primary key.

    Rows created from client-supplied ids (organisation reference data) may
    set ``id`` explicitly; everything else gets a generated UUID.
    """

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
        comment="Primary key (UUID)"
    )

    def to_dict(self, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        """
        Column values keyed by attribute name.

        Datetimes come back timezone-aware in UTC whatever the backend
        returned (SQLite drops the offset).
        """
        skipped = set(exclude)
        result: Dict[str, Any] = {}
        for attr in inspect(self).mapper.column_attrs:
            if attr.key in skipped:
                continue
            value = getattr(self, attr.key)
            if isinstance(value, datetime):
                value = DateTimeHelper.ensure_utc(value)
            result[attr.key] = value
        return result

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


class TimestampModel(BaseModel):
    """BaseModel plus ``created_at`` / ``updated_at`` maintained on write."""

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
        index=True,
        comment="Record creation timestamp"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
        comment="Record last update timestamp"
    )
