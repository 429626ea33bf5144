"""
Authentication dependencies for FastAPI.
Provides the caller context for every request.
"""

from typing import Annotated, Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from time_reporting.application.use_cases.base_use_case import UseCaseContext
from time_reporting.infrastructure.auth.jwt_handler import JWTHandler
from time_reporting.domain.models.base import ValidationError


# Security scheme
security = HTTPBearer(auto_error=False)

# Global instances
jwt_handler = JWTHandler()


def get_jwt_handler() -> JWTHandler:
    """Dependency to get JWT handler."""
    return jwt_handler


def get_current_context(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> UseCaseContext:
    """
    FastAPI dependency building the caller context from the bearer token.
    The ACL is parsed from the token on every request.

    Raises:
        HTTPException: If authentication fails
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return jwt_handler.get_caller(
            credentials.credentials,
            request_id=getattr(request.state, "request_id", None)
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
