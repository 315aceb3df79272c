"""
Organisation hierarchy models: diocese -> church -> class.

These are reference data for announcement scoping and are read-only from
this service's point of view.
"""

from typing import List

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel

__all__ = [
    "Diocese",
    "Church",
    "SchoolClass",
]


class Diocese(TimestampModel):
    """Top level of the hierarchy."""

    __tablename__ = "dioceses"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Diocese name",
    )

    churches: Mapped[List["Church"]] = relationship(
        "Church",
        back_populates="diocese",
        lazy="select",
    )


class Church(TimestampModel):
    """Church belonging to exactly one diocese."""

    __tablename__ = "churches"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Church name",
    )
    diocese_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("dioceses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Parent diocese",
    )

    diocese: Mapped["Diocese"] = relationship(
        "Diocese",
        back_populates="churches",
    )
    classes: Mapped[List["SchoolClass"]] = relationship(
        "SchoolClass",
        back_populates="church",
        lazy="select",
    )


class SchoolClass(TimestampModel):
    """Sunday-school class belonging to exactly one church."""

    __tablename__ = "classes"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Class name",
    )
    church_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("churches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Parent church",
    )

    church: Mapped["Church"] = relationship(
        "Church",
        back_populates="classes",
    )
