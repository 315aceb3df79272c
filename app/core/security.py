"""
Security and Authentication Module

Bearer tokens are issued by the hosted auth provider and signed with the
project's JWT secret; this module only verifies them. Token creation is
kept for local development and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from app.config.settings import settings
from .exceptions import InvalidTokenError
from .logging import get_logger

logger = get_logger(__name__)


class TokenManager:
    """JWT token management utilities"""

    @staticmethod
    def create_token(
        subject: str,
        expires_delta: Optional[timedelta] = None,
        extra_claims: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Create a token shaped like the auth provider's access tokens.

        Args:
            subject: User id placed in ``sub``
            expires_delta: Lifetime, one hour by default
            extra_claims: Additional claims to merge in

        Returns:
            Encoded JWT token
        """
        now = datetime.now(timezone.utc)
        to_encode: Dict[str, Any] = {
            "sub": subject,
            "iat": int(now.timestamp()),
            "exp": int((now + (expires_delta or timedelta(hours=1))).timestamp()),
        }
        if settings.AUTH_JWT_AUDIENCE:
            to_encode["aud"] = settings.AUTH_JWT_AUDIENCE
        if extra_claims:
            to_encode.update(extra_claims)

        return jwt.encode(
            to_encode,
            settings.AUTH_JWT_SECRET,
            algorithm=settings.AUTH_JWT_ALGORITHM
        )

    @staticmethod
    def verify_token(token: str) -> Dict[str, Any]:
        """
        Verify and decode a bearer token.

        Raises:
            InvalidTokenError: If the token is expired, malformed or lacks a subject
        """
        try:
            payload = jwt.decode(
                token,
                settings.AUTH_JWT_SECRET,
                algorithms=[settings.AUTH_JWT_ALGORITHM],
                audience=settings.AUTH_JWT_AUDIENCE,
            )
        except ExpiredSignatureError:
            raise InvalidTokenError(reason="expired")
        except JWTError as e:
            logger.warning(f"Token verification failed: {str(e)}")
            raise InvalidTokenError(reason="invalid")

        if not payload.get("sub"):
            raise InvalidTokenError(reason="missing subject")
        return payload


def create_access_token(subject: str, **extra_claims: Any) -> str:
    return TokenManager.create_token(subject, extra_claims=extra_claims or None)


def verify_token(token: str) -> Dict[str, Any]:
    return TokenManager.verify_token(token)
