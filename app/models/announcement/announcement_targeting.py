"""
Announcement scope association models.

One junction table per scope dimension. An announcement with no rows in a
dimension is unscoped in that dimension. Rows are always replaced
wholesale, never edited.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import Base

if TYPE_CHECKING:
    from app.models.announcement.announcement import Announcement

__all__ = [
    "AnnouncementDiocese",
    "AnnouncementChurch",
    "AnnouncementClass",
]


class AnnouncementDiocese(Base):
    """Diocese an announcement is scoped to."""

    __tablename__ = "announcement_dioceses"

    announcement_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("announcements.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Scoped announcement",
    )
    diocese_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("dioceses.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
        comment="Targeted diocese",
    )

    announcement: Mapped["Announcement"] = relationship(
        "Announcement",
        back_populates="dioceses",
    )


class AnnouncementChurch(Base):
    """Church an announcement is scoped to."""

    __tablename__ = "announcement_churches"

    announcement_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("announcements.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Scoped announcement",
    )
    church_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("churches.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
        comment="Targeted church",
    )

    announcement: Mapped["Announcement"] = relationship(
        "Announcement",
        back_populates="churches",
    )


class AnnouncementClass(Base):
    """Class an announcement is scoped to."""

    __tablename__ = "announcement_classes"

    announcement_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("announcements.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Scoped announcement",
    )
    class_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("classes.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
        comment="Targeted class",
    )

    announcement: Mapped["Announcement"] = relationship(
        "Announcement",
        back_populates="classes",
    )
