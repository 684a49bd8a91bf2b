"""
Authentication dependencies for FastAPI.
"""

from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from crefin.infrastructure.auth.jwt_handler import JWTHandler
from crefin.domain.models.base import ValidationError


# Security scheme
security = HTTPBearer()

jwt_handler = JWTHandler()


def get_jwt_handler() -> JWTHandler:
    """Dependency to get JWT handler."""
    return jwt_handler


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> str:
    """
    FastAPI dependency to get the authenticated owner ID.

    Raises:
        HTTPException: 401 if the token does not validate
    """
    try:
        return jwt_handler.get_user_id(credentials.credentials)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
