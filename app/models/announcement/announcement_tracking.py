"""
Announcement read tracking.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import BaseModel
from app.utils.datetime_utils import utc_now

if TYPE_CHECKING:
    from app.models.announcement.announcement import Announcement

__all__ = ["AnnouncementView"]


class AnnouncementView(BaseModel):
    """
    Marks an announcement as read by a user.

    At most one row per (announcement, user); marking again is a no-op.
    """

    __tablename__ = "announcement_views"

    announcement_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("announcements.id", ondelete="CASCADE"),
        nullable=False,
        comment="Viewed announcement",
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Reader",
    )
    viewed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        comment="First time the reader opened it",
    )

    announcement: Mapped["Announcement"] = relationship(
        "Announcement",
        back_populates="views",
    )

    __table_args__ = (
        UniqueConstraint(
            "announcement_id",
            "user_id",
            name="uq_announcement_views_announcement_user",
        ),
        Index("ix_announcement_views_user", "user_id"),
    )
