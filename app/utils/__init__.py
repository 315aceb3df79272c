"""
Utility package initialization and exports
"""

# DateTime utilities
from .datetime_utils import (
    DateTimeHelper,
    utc_now,
)

__all__ = [
    'DateTimeHelper',
    'utc_now',
]
