"""ORM model for user accounts (auth and RBAC)."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, String, func

from app.core.roles import Role
from app.models.base import Base


def _new_user_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    email is the login handle and is unique. role is one of USER, ADMIN, SUPER_ADMIN.
    password_hash is the bcrypt digest; it never leaves the identity components.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "role IN ('USER', 'ADMIN', 'SUPER_ADMIN')",
            name="role",
        ),
    )

    id = Column(String(36), primary_key=True, default=_new_user_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, default="")
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=Role.USER.value)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
