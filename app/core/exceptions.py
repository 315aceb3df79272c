"""
Application exceptions for the announcement service.

Exceptions that reach the HTTP layer are rendered by
``app.core.middleware.app_exception_handler`` using ``to_dict()``; storage
exceptions are caught by the services and turned into ``ServiceResult``
failures instead.
"""

from typing import Any, Dict, Iterable, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Codes carried in the ``error.code`` field of exception responses"""
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Session / role checks
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_INVALID = "TOKEN_INVALID"

    # Storage
    DATABASE_ERROR = "DATABASE_ERROR"
    SCHEMA_NOT_READY = "SCHEMA_NOT_READY"


class BaseAppException(Exception):
    """Base class for errors that carry an HTTP status and a structured body."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"


# ========================================
# Session & Role Exceptions
# ========================================

class AuthenticationError(BaseAppException):
    """Raised when no valid session accompanies the request"""

    status_code = 401
    error_code = ErrorCode.AUTHENTICATION_FAILED

    def __init__(
        self,
        message: str = "Not authenticated",
        error_code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details)


class InvalidTokenError(AuthenticationError):
    """Raised when a bearer token is expired, malformed or has no subject"""

    def __init__(self, reason: Optional[str] = None):
        code = ErrorCode.TOKEN_EXPIRED if reason == "expired" else ErrorCode.TOKEN_INVALID
        super().__init__(
            error_code=code,
            details={"reason": reason} if reason else None,
        )


class AuthorizationError(BaseAppException):
    """Raised when the caller's role is outside the allowed set"""

    status_code = 403
    error_code = ErrorCode.AUTHORIZATION_FAILED

    def __init__(
        self,
        message: str = "Unauthorized",
        role: Optional[str] = None,
        allowed_roles: Optional[Iterable[str]] = None
    ):
        details: Dict[str, Any] = {}
        if role is not None:
            details["role"] = role
        if allowed_roles:
            details["allowed_roles"] = list(allowed_roles)
        super().__init__(message, details=details)


# ========================================
# Storage Exceptions
# ========================================

class DatabaseError(BaseAppException):
    """A storage call failed"""

    error_code = ErrorCode.DATABASE_ERROR

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
        table: Optional[str] = None
    ):
        super().__init__(message, details={"operation": operation, "table": table})


class RepositoryError(DatabaseError):
    """Raised by repositories when a query or commit fails"""


class SchemaNotReadyError(DatabaseError):
    """Raised when a table or column the service needs is missing from the store"""

    status_code = 503
    error_code = ErrorCode.SCHEMA_NOT_READY


# Fragments of driver / hosted-platform messages for unknown tables or columns.
SCHEMA_NOT_READY_MARKERS = (
    "schema cache",
    "does not exist",
    "no such column",
    "no such table",
    "could not find the",
    "unknown column",
)


def is_schema_not_ready(exc: Exception, names: Optional[List[str]] = None) -> bool:
    """
    Check whether ``exc`` reports a missing table or column.

    When ``names`` is given, at least one of them must also appear in the
    message, so an unrelated missing object is not mistaken for ours.
    """
    message = str(getattr(exc, "orig", None) or exc).lower()
    if not any(marker in message for marker in SCHEMA_NOT_READY_MARKERS):
        return False
    if names:
        return any(name.lower() in message for name in names)
    return True


__all__ = [
    'ErrorCode',
    'BaseAppException',
    'AuthenticationError',
    'InvalidTokenError',
    'AuthorizationError',
    'DatabaseError',
    'RepositoryError',
    'SchemaNotReadyError',
    'SCHEMA_NOT_READY_MARKERS',
    'is_schema_not_ready',
]
