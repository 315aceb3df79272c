"""
User model configuration.
"""
from typing import Optional

from sqlalchemy import Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base.base_model import TimestampModel
from app.models.base.enums import UserRole


class User(TimestampModel):
    """
    Platform user as seen by the announcement service.

    Accounts are managed by the hosted auth provider; this table only carries
    the role and the organisational placement used for audience matching.
    """
    __tablename__ = "users"
    __table_args__ = (
        {"comment": "User identity, role and organisational placement"}
    )

    full_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Full name of the user"
    )

    # Role & Access Control
    role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            name="user_role_enum",
            native_enum=False,
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=UserRole.STUDENT,
        index=True,
        comment="Primary user role for RBAC"
    )

    # Placement
    diocese_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("dioceses.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Diocese the user belongs to"
    )
    church_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("churches.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Church the user belongs to"
    )
    class_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("classes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Class the user attends or teaches"
    )

    @property
    def role_value(self) -> str:
        return self.role.value if isinstance(self.role, UserRole) else str(self.role)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role={self.role_value})>"
