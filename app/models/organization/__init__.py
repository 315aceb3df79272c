"""
Organisation models package.
"""
from app.models.organization.organization import Church, Diocese, SchoolClass

__all__ = [
    "Diocese",
    "Church",
    "SchoolClass",
]
