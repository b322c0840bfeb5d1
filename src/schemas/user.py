"""User schema definitions.

This module defines the User data model and the request/response bodies of the
authentication endpoints.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Closed set of user roles."""

    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    """An authenticated user. Never carries the password hash."""

    user_id: str = Field(description="The unique identifier for the user.")
    username: str = Field(description="Unique, trimmed username.")
    role: Role = Field(default=Role.USER, description="The user's role.")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class UserInfo(BaseModel):
    """Public view of a user, as returned by the API."""

    id: str
    username: str
    role: Role

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        return cls(id=user.user_id, username=user.username, role=user.role)


class RegisterRequest(BaseModel):
    # Optional here so that missing fields are reported with the manager's messages
    username: Optional[str] = None
    password: Optional[str] = None
    # Accepted for compatibility but ignored: registration always creates a 'user'
    role: Optional[Role] = None


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(BaseModel):
    success: bool = True
    user: UserInfo
    token: str


class ProfileResponse(BaseModel):
    success: bool = True
    user: UserInfo
