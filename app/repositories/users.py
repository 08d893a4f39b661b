"""User persistence behind an abstract repository interface.

The services only see UserRepository; SqlAlchemyUserRepository is the production
implementation. Each call is atomic at the single-record level (one commit per
mutation); the core adds no transactions or retries on top.
"""

import logging
from collections.abc import Collection
from typing import Any, Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.roles import Role
from app.models.user import User

logger = logging.getLogger(__name__)

# Columns a caller may change through update(); id and timestamps are managed here.
UPDATABLE_FIELDS = frozenset({"email", "name", "password_hash", "role"})


class DuplicateUserError(Exception):
    """Raised when create() violates the unique email constraint."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("A user with this email already exists")


class UserRepository(Protocol):
    """Capabilities the identity and user services need from storage."""

    def create(self, *, email: str, name: str, password_hash: str, role: Role) -> User: ...

    def find_by_email(self, email: str) -> User | None: ...

    def find_by_id(self, user_id: str) -> User | None: ...

    def update(self, user_id: str, fields: dict[str, Any]) -> User: ...

    def delete(self, user_id: str) -> None: ...

    def list_all(self, roles: Collection[Role] | None = None) -> list[User]: ...


class SqlAlchemyUserRepository:
    """UserRepository backed by a SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, *, email: str, name: str, password_hash: str, role: Role) -> User:
        user = User(
            email=email,
            name=name,
            password_hash=password_hash,
            role=Role(role).value,
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateUserError(email) from e
        self.session.refresh(user)
        return user

    def find_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: str) -> User | None:
        return self.session.get(User, user_id)

    def update(self, user_id: str, fields: dict[str, Any]) -> User:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        user = self.session.get(User, user_id)
        if user is None:
            raise LookupError(f"User {user_id} does not exist")
        for name, value in fields.items():
            if name == "role":
                value = Role(value).value
            setattr(user, name, value)
        self.session.commit()
        self.session.refresh(user)
        return user

    def delete(self, user_id: str) -> None:
        deleted = (
            self.session.query(User)
            .filter(User.id == user_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        if deleted:
            logger.info("Deleted user: id=%s", user_id)

    def list_all(self, roles: Collection[Role] | None = None) -> list[User]:
        query = self.session.query(User)
        if roles is not None:
            query = query.filter(User.role.in_([Role(r).value for r in roles]))
        return query.order_by(User.created_at, User.email).all()
