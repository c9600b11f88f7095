"""Security utilities for authentication and authorization."""

from .jwt import (
    create_access_token,
    verify_access_token,
    TokenPayload,
    AuthenticationError,
)
from .permissions import (
    Caller,
    ManagementScope,
    PermissionDeniedError,
    PermissionGate,
    Privilege,
)

__all__ = [
    "create_access_token",
    "verify_access_token",
    "TokenPayload",
    "AuthenticationError",
    "Caller",
    "ManagementScope",
    "PermissionDeniedError",
    "PermissionGate",
    "Privilege",
]
