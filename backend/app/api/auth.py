"""Authentication dependencies for the organization API."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.app.security import AuthenticationError, Caller, verify_access_token

__all__ = ["bearer_scheme", "get_caller"]

bearer_scheme = HTTPBearer()


def get_caller(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> Caller:
    """
    Resolve the calling user from the bearer access token.

    Returns:
        Caller with the user's home organization and privileges

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    try:
        payload = verify_access_token(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload.to_caller()
