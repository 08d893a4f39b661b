"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    SignupRequest,
    TokenPair,
    TokenPayload,
)
from app.schemas.user import (
    ChangePasswordRequest,
    UpdateUserRequest,
    UserPublic,
    UsersListResponse,
)

__all__ = [
    "AuthResponse",
    "ChangePasswordRequest",
    "LoginRequest",
    "RefreshRequest",
    "SignupRequest",
    "TokenPair",
    "TokenPayload",
    "UpdateUserRequest",
    "UserPublic",
    "UsersListResponse",
]
