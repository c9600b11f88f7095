"""JWT token creation and verification."""

import jwt
from datetime import datetime, timedelta, timezone
from typing import Literal
from uuid import UUID

from pydantic import BaseModel

from backend.app.config import get_settings
from backend.app.security.permissions import Caller, Privilege


class TokenPayload(BaseModel):
    """JWT token payload."""
    user_id: UUID
    org_id: UUID | None
    privileges: frozenset[Privilege]
    token_type: Literal["access"]
    issued_at: datetime
    expires_at: datetime

    def to_caller(self) -> Caller:
        """Caller context for authorization checks."""
        return Caller(
            user_id=self.user_id,
            home_organization_id=self.org_id,
            privileges=self.privileges,
        )


class AuthenticationError(Exception):
    """Authentication-related errors."""
    pass


def get_jwt_private_key() -> str:
    """Get JWT private key from settings."""
    settings = get_settings()
    key = settings.jwt_private_key_pem.strip()

    if key.startswith("dummy-"):
        raise AuthenticationError(
            "JWT private key not configured. Set JWT_PRIVATE_KEY_PEM in environment."
        )

    return key


def get_jwt_public_key() -> str:
    """Get JWT public key from settings."""
    settings = get_settings()
    key = settings.jwt_public_key_pem.strip()

    if key.startswith("dummy-"):
        raise AuthenticationError(
            "JWT public key not configured. Set JWT_PUBLIC_KEY_PEM in environment."
        )

    return key


def create_access_token(
    user_id: UUID, org_id: UUID | None, privileges: frozenset[Privilege] | set[Privilege]
) -> str:
    """Create JWT access token.

    Args:
        user_id: User UUID
        org_id: Home organization UUID, None for users without one
        privileges: Organization management privileges granted to the user

    Returns:
        Encoded JWT token string

    Raises:
        AuthenticationError: If JWT keys not configured
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expires = now + timedelta(minutes=settings.jwt_access_ttl_minutes)

    payload = {
        "sub": str(user_id),
        "org_id": str(org_id) if org_id is not None else None,
        "privileges": sorted(privilege.value for privilege in privileges),
        "iat": now,
        "exp": expires,
        "type": "access",
        "jti": f"acc_{user_id}_{int(now.timestamp())}"  # Unique token ID
    }

    return jwt.encode(payload, get_jwt_private_key(), algorithm="RS256")


def verify_access_token(token: str) -> TokenPayload:
    """Verify and decode JWT access token.

    Args:
        token: JWT token string

    Returns:
        TokenPayload with user, home organization and privileges

    Raises:
        AuthenticationError: If token is invalid, expired, or wrong type
    """
    try:
        payload = jwt.decode(token, get_jwt_public_key(), algorithms=["RS256"])

        # Verify token type
        if payload.get("type") != "access":
            raise AuthenticationError("Invalid token type")

        org_id = payload.get("org_id")
        return TokenPayload(
            user_id=UUID(payload["sub"]),
            org_id=UUID(org_id) if org_id else None,
            privileges=frozenset(Privilege(value) for value in payload.get("privileges", [])),
            token_type=payload["type"],
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        )

    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise AuthenticationError(f"Invalid token: {e}")
    except (KeyError, ValueError) as e:
        raise AuthenticationError(f"Malformed token payload: {e}")
