"""
FastAPI dependencies: database session, current user, admin gate and
service factories, plus the ServiceResult -> HTTP translation used by the
route handlers.

Example usage in a router:
    from fastapi import Depends, APIRouter
    from app.api import deps

    router = APIRouter()

    @router.get("/me")
    def read_me(current_user = Depends(deps.get_current_user)):
        return current_user
"""

from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    InvalidTokenError,
)
from app.core.logging import get_logger, user_id as user_id_ctx
from app.core.security import verify_token
from app.db.session import get_db
from app.models.user import User
from app.repositories.announcement import (
    AnnouncementRepository,
    AnnouncementScopeRepository,
    AnnouncementViewRepository,
)
from app.services.announcement import (
    AnnouncementService,
    AnnouncementTargetingService,
)
from app.services.base import ErrorCode, ServiceResult

logger = get_logger(__name__)

# auto_error is off so a missing header surfaces as our 401 payload
bearer_scheme = HTTPBearer(auto_error=False)

ERROR_STATUS = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SCHEMA_NOT_READY: status.HTTP_503_SERVICE_UNAVAILABLE,
}


# --- Authentication & Authorization -------------------------------------------

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the bearer token to a user row.

    The token subject is the user id issued by the auth provider.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    try:
        claims = verify_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.info("Rejected bearer token", extra={"reason": e.details.get("reason")})
        raise AuthenticationError() from e

    user = db.get(User, claims["sub"])
    if user is None:
        logger.info("Token subject has no user record", extra={"subject": claims["sub"]})
        raise AuthenticationError()

    user_id_ctx.set(user.id)
    return user


async def require_admin_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Current user, provided their role may manage announcements."""
    if current_user.role_value not in settings.ADMIN_ROLES:
        raise AuthorizationError(
            role=current_user.role_value,
            allowed_roles=list(settings.ADMIN_ROLES),
        )
    return current_user


# --- Services -----------------------------------------------------------------

def get_announcement_service(db: Session = Depends(get_db)) -> AnnouncementService:
    return AnnouncementService(
        AnnouncementRepository(db),
        db,
        scope_repository=AnnouncementScopeRepository(db),
    )


def get_targeting_service(db: Session = Depends(get_db)) -> AnnouncementTargetingService:
    return AnnouncementTargetingService(
        AnnouncementRepository(db),
        db,
        scope_repository=AnnouncementScopeRepository(db),
        view_repository=AnnouncementViewRepository(db),
    )


# --- Results ------------------------------------------------------------------

def unwrap_result(result: ServiceResult) -> Any:
    """
    Return the data of a successful result or raise the matching HTTPException.
    """
    if result.is_success:
        return result.data

    error = result.error
    status_code = ERROR_STATUS.get(
        error.code if error else None, status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    detail: Dict[str, Any] = {
        "code": error.code.value if error else ErrorCode.INTERNAL_ERROR.value,
        "message": result.message,
    }
    raise HTTPException(status_code=status_code, detail=detail)


__all__ = [
    "bearer_scheme",
    "get_db",
    "get_current_user",
    "require_admin_user",
    "get_announcement_service",
    "get_targeting_service",
    "unwrap_result",
]
