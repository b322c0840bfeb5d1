"""Authentication routes.

This module handles HTTP endpoints for user authentication and registration,
and provides the token dependencies used by every protected route.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from config import ACCESS_TOKEN_EXPIRE_DAYS, JWT_ALGORITHM, JWT_SECRET_KEY
from core.dependencies import UserManagerDep
from core.exceptions import AuthenticationError, AuthorizationError
from schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    Role,
    User,
    UserInfo,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

NOT_AUTHORIZED_MESSAGE = "Not authorized to access this route"

# Missing credentials are reported by get_current_user, not by HTTPBearer
security = HTTPBearer(auto_error=False)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token for a user.

    Args:
        user: The user the token identifies.
        expires_delta: Optional expiration time delta. Defaults to
            ACCESS_TOKEN_EXPIRE_DAYS.

    Returns:
        Encoded JWT token string.
    """
    if expires_delta is None:
        expires_delta = timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode = {
        "sub": user.user_id,
        "exp": datetime.now(pytz.utc) + expires_delta,
    }
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Verify a token's signature and expiry.

    Args:
        token: Encoded JWT.

    Returns:
        The user_id the token was issued for.

    Raises:
        AuthenticationError: If the token is invalid or expired.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise AuthenticationError(NOT_AUTHORIZED_MESSAGE)
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError(NOT_AUTHORIZED_MESSAGE)
    return user_id


def get_current_user(
    user_manager: UserManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> User:
    """Resolve the bearer token on the request to a User.

    The user is re-read from the database on every request, so a token for a
    deleted user stops working immediately.

    Raises:
        AuthenticationError: If the header is missing, the token is invalid or
            expired, or the user no longer exists.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(NOT_AUTHORIZED_MESSAGE)
    user_id = decode_access_token(credentials.credentials)
    user = user_manager.get_user_by_id(user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Pass through the current user only if they are an admin.

    Raises:
        AuthorizationError: If the user is not an admin.
    """
    if not current_user.is_admin:
        raise AuthorizationError("Not authorized as an admin")
    return current_user


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def register(req: RegisterRequest, user_manager: UserManagerDep) -> AuthResponse:
    """Register a new user.

    Any role in the request is ignored; self-registered users are always
    regular users. Admins are provisioned with the create_admin tool.

    Raises:
        ValidationError: If username/password are missing or too short.
        ConflictError: If the username is taken.
    """
    if req.role is not None and req.role != Role.USER:
        logger.info("Ignoring requested role '%s' on registration", req.role.value)
    user = user_manager.register(req.username, req.password)
    return AuthResponse(user=UserInfo.from_user(user), token=create_access_token(user))


@router.post("/login", response_model=AuthResponse, summary="Log in")
def login(req: LoginRequest, user_manager: UserManagerDep) -> AuthResponse:
    """Login with username and password.

    Raises:
        AuthenticationError: If the credentials do not match.
    """
    user = user_manager.authenticate(req.username, req.password)
    return AuthResponse(user=UserInfo.from_user(user), token=create_access_token(user))


@router.get("/profile", response_model=ProfileResponse, summary="Current user")
def get_profile(current_user: User = Depends(get_current_user)) -> ProfileResponse:
    return ProfileResponse(user=UserInfo.from_user(current_user))
