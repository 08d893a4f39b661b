"""User schemas returned to and accepted from API callers.

UserPublic has no password field: the stored hash cannot leak through any
response built from it.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.roles import Role
from app.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    fits_bcrypt,
)


class UserPublic(BaseModel):
    """User as seen outside the identity components."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: Role
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UpdateUserRequest(BaseModel):
    """Profile/role changes; omitted fields are left untouched."""

    name: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    role: Role | None = None

    def changes(self) -> dict[str, object]:
        """Only the fields the caller actually set."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ChangePasswordRequest(BaseModel):
    """Old and new password for the current user."""

    old_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)

    @field_validator("new_password")
    @classmethod
    def validate_new_password_bytes(cls, v: str) -> str:
        if not fits_bcrypt(v):
            raise ValueError(f"Password must be at most {PASSWORD_MAX_LEN} bytes")
        return v


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserPublic]
