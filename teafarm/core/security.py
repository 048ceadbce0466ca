"""
Bearer-token authentication for the reference backend.

Tokens are HS256 JWTs carrying the username and role. Two demo accounts
are built in: ``admin`` (ADMIN) and ``user`` (WORKER).
"""

import hmac
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from teafarm.core.config import get_settings
from teafarm.core.deps import depends_repository
from teafarm.models.auth import User, UserRole
from teafarm.services.repository import FarmRepository

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

DEMO_USERS: Dict[str, Tuple[str, User]] = {
    "admin": ("admin123", User(id=1, username="admin", role=UserRole.ADMIN)),
    "user": ("user123", User(id=2, username="user", role=UserRole.WORKER)),
}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def authenticate_user(username: str, password: str) -> Optional[User]:
    """Return the user when the credentials match a known account."""
    entry = DEMO_USERS.get(username)
    if entry is None:
        return None
    expected, user = entry
    if not hmac.compare_digest(expected.encode(), password.encode()):
        return None
    return user


def create_access_token(user: User) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": user.username,
        "role": user.role.value,
        "exp": expire,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> User:
    """
    Validate a token and return its user.

    Raises:
        HTTPException: 401 when the token is expired, malformed or unknown
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired") from None
    except jwt.PyJWTError:
        raise _unauthorized("Could not validate credentials") from None

    entry = DEMO_USERS.get(payload.get("sub", ""))
    if entry is None:
        raise _unauthorized("Could not validate credentials")
    return entry[1]


async def require_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    repository: FarmRepository = Depends(depends_repository),
) -> str:
    """FastAPI dependency returning the raw bearer token of a valid session."""
    if credentials is None:
        raise _unauthorized("Authentication required")
    token = credentials.credentials
    if token in repository.revoked_tokens:
        raise _unauthorized("Token has been revoked")
    decode_access_token(token)
    return token


async def current_user(token: str = Depends(require_token)) -> User:
    """FastAPI dependency returning the authenticated user."""
    return decode_access_token(token)
