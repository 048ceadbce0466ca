"""
Authentication API endpoints for the reference backend.

This module provides login, logout and current-user lookup.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from teafarm.core.deps import depends_repository
from teafarm.core.security import (
    authenticate_user,
    create_access_token,
    current_user,
    require_token,
)
from teafarm.models.auth import LoginRequest, LoginResponse, User
from teafarm.services.repository import FarmRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest) -> LoginResponse:
    """
    Exchange credentials for a bearer token.

    Args:
        request: Username and password

    Returns:
        The token and the authenticated user

    Raises:
        HTTPException: 401 when the credentials are wrong

    Example:
        POST /api/auth/login
        {"username": "admin", "password": "admin123"}

        Response:
        {
            "token": "eyJhbGciOiJIUzI1NiIs...",
            "user": {"id": 1, "username": "admin", "role": "ADMIN", "email": null}
        }
    """
    user = authenticate_user(request.username, request.password)
    if user is None:
        logger.warning(f"Rejected login for '{request.username}'")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    logger.info(f"Login succeeded for '{user.username}'")
    return LoginResponse(token=create_access_token(user), user=user)


@router.post("/logout")
async def logout(
    token: str = Depends(require_token),
    repository: FarmRepository = Depends(depends_repository),
) -> dict:
    """Revoke the presented token."""
    repository.revoked_tokens.add(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=User)
async def me(user: User = Depends(current_user)) -> User:
    return user
