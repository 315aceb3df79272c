"""
Base services module for the announcement service.

This module provides foundational service layer components:
- Base service class with shared logger and db session
- Result handling via ServiceResult
- Error management and logging
"""

from app.services.base.service_result import (
    ServiceResult,
    ServiceError,
    ErrorCode,
    ErrorSeverity,
)

from app.services.base.base_service import BaseService

__all__ = [
    "ServiceResult",
    "ServiceError",
    "ErrorCode",
    "ErrorSeverity",
    "BaseService",
]
