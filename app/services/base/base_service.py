"""
Common base for the announcement services.
"""

from typing import Any, Dict, Generic, Optional, TypeVar
from abc import ABC

from sqlalchemy.orm import Session

from app.core.exceptions import DatabaseError, SchemaNotReadyError
from app.core.logging import get_logger
from app.services.base.service_result import (
    ServiceResult,
    ServiceError,
    ErrorCode,
    ErrorSeverity,
)


TModel = TypeVar("TModel")
TRepo = TypeVar("TRepo")


class BaseService(ABC, Generic[TModel, TRepo]):
    """
    Holds the primary repository, the request session and a logger named
    after the concrete service.

    Storage failures are reported, not raised: callers get a failed
    ``ServiceResult`` whose message reads "Failed to <operation>: <cause>".
    """

    def __init__(self, repository: TRepo, db_session: Session):
        self.repository: TRepo = repository
        self.db: Session = db_session
        self._logger = get_logger(self.__class__.__name__)

    def _handle_database_error(
        self,
        error: Exception,
        operation: str,
        entity_id: Optional[str] = None,
    ) -> ServiceResult:
        """Log ``error`` with its traceback and wrap it in a failed result."""
        self._logger.error(
            f"Failed to {operation}",
            exc_info=True,
            extra={"operation": operation, "entity_ref": entity_id},
        )

        return ServiceResult.failure(
            ServiceError(
                code=(
                    ErrorCode.SCHEMA_NOT_READY
                    if isinstance(error, SchemaNotReadyError)
                    else ErrorCode.DATABASE_ERROR
                ),
                message=f"Failed to {operation}: {self._error_text(error)}",
                severity=ErrorSeverity.ERROR,
                details={"entity_ref": entity_id, "error_type": type(error).__name__},
            )
        )

    @staticmethod
    def _error_text(error: Exception) -> str:
        if isinstance(error, DatabaseError):
            return error.message
        return str(getattr(error, "orig", None) or error)

    def _log_operation(
        self,
        operation: str,
        entity_ref: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Info line for a completed write."""
        context: Dict[str, Any] = {"operation": operation, "entity_ref": entity_ref}
        context.update(extra or {})
        self._logger.info(f"{operation} succeeded", extra=context)
