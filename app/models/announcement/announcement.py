"""
Core announcement model.

An announcement carries its content, type tags, targeted roles and the
publish window. Its display status is derived at read time from the
window and the soft-delete flag; it is never stored.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel

if TYPE_CHECKING:
    from app.models.announcement.announcement_targeting import (
        AnnouncementChurch,
        AnnouncementClass,
        AnnouncementDiocese,
    )
    from app.models.announcement.announcement_tracking import AnnouncementView

__all__ = [
    "Announcement",
    "JSONList",
    "DEFAULT_TARGET_ROLES",
    "DEACTIVATION_FIELDS",
]

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONList = JSON().with_variant(JSONB(), "postgresql")

DEFAULT_TARGET_ROLES = ["student", "parent"]

# Columns written by deactivate/republish that older stores may not know yet
DEACTIVATION_FIELDS = ("deactivated_reason", "deactivated_at", "deactivated_by")


def _default_target_roles() -> List[str]:
    return list(DEFAULT_TARGET_ROLES)


class Announcement(TimestampModel):
    """
    Announcement entity.

    Never hard-deleted: deactivation sets ``is_deleted`` together with the
    optional deactivation metadata, republishing clears them again.
    """

    __tablename__ = "announcements"

    # Content Fields
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Announcement title",
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Announcement body",
    )

    # Classification
    types: Mapped[List[str]] = mapped_column(
        JSONList,
        nullable=False,
        default=list,
        comment="Ordered, duplicate-free type tags",
    )
    target_roles: Mapped[List[str]] = mapped_column(
        JSONList,
        nullable=False,
        default=_default_target_roles,
        comment="Roles the announcement is addressed to",
    )

    # Publish window
    publish_from: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        comment="Start of the publish window",
    )
    publish_to: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
        comment="End of the publish window (NULL = no end)",
    )

    # Soft delete / deactivation
    is_deleted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
        comment="Soft delete flag",
    )
    deactivated_reason: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Reason given when deactivated",
    )
    deactivated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the announcement was deactivated",
    )
    deactivated_by: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        comment="User who deactivated the announcement",
    )

    created_by: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        comment="User who created the announcement",
    )

    # Relationships
    dioceses: Mapped[List["AnnouncementDiocese"]] = relationship(
        "AnnouncementDiocese",
        back_populates="announcement",
        cascade="all, delete-orphan",
        lazy="select",
    )
    churches: Mapped[List["AnnouncementChurch"]] = relationship(
        "AnnouncementChurch",
        back_populates="announcement",
        cascade="all, delete-orphan",
        lazy="select",
    )
    classes: Mapped[List["AnnouncementClass"]] = relationship(
        "AnnouncementClass",
        back_populates="announcement",
        cascade="all, delete-orphan",
        lazy="select",
    )
    views: Mapped[List["AnnouncementView"]] = relationship(
        "AnnouncementView",
        back_populates="announcement",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (
        Index("ix_announcements_window", "publish_from", "publish_to"),
    )

    def __repr__(self) -> str:
        return f"<Announcement(id={self.id}, title='{self.title}', is_deleted={self.is_deleted})>"
