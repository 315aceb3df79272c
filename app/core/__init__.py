"""Core application modules."""

from .security import TokenManager, create_access_token, verify_token

__all__ = ["TokenManager", "create_access_token", "verify_token"]
