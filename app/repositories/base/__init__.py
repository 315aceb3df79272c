"""
Base repositories package.

Single-table CRUD shared by the announcement repositories.
"""

from app.repositories.base.base_repository import BaseRepository, ModelType

__all__ = [
    "BaseRepository",
    "ModelType",
]
