"""
Authentication data models for Tea Farm Operations.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from teafarm.models.base import CamelModel, NonBlankStr


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    WORKER = "WORKER"


class User(CamelModel):
    """Authenticated user."""

    id: Optional[int] = Field(None, description="User identifier")
    username: str = Field(..., description="Login name")
    role: UserRole = Field(..., description="Role (ADMIN or WORKER)")
    email: Optional[str] = Field(None, description="Contact e-mail")


class LoginRequest(CamelModel):
    """Credentials submitted to POST /auth/login."""

    username: NonBlankStr = Field(..., description="Login name")
    password: NonBlankStr = Field(..., description="Password")


class LoginResponse(CamelModel):
    """Result of a successful login."""

    token: str = Field(..., description="Bearer token")
    user: User
