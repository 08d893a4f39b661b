"""Request/response schemas for auth endpoints and token claims."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    fits_bcrypt,
)
from app.schemas.user import UserPublic


class TokenPayload(BaseModel):
    """Claims shared by access and refresh tokens."""

    user_id: str = Field(..., min_length=1, description="Subject user id")


class TokenPair(BaseModel):
    """Access and refresh tokens returned once per signup, login or refresh. Never persisted."""

    access_token: str = Field(..., description="Short-lived JWT access token")
    refresh_token: str = Field(..., description="Long-lived JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")


class SignupRequest(BaseModel):
    """New account: email is the login handle."""

    email: EmailStr = Field(..., description="Email")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN, description="Display name")

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: str) -> str:
        if not fits_bcrypt(v):
            raise ValueError(f"Password must be at most {PASSWORD_MAX_LEN} bytes")
        return v


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Email")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )


class RefreshRequest(BaseModel):
    """Refresh token to exchange for a new token pair."""

    refresh_token: str = Field(..., min_length=1, description="JWT refresh token")


class AuthResponse(TokenPair):
    """Token pair plus the user it was issued for."""

    user: UserPublic | None = None
