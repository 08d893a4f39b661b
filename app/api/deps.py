"""Request-scoped construction of repositories and services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import PasswordHasher
from app.core.tokens import TokenIssuer
from app.repositories.users import SqlAlchemyUserRepository, UserRepository
from app.services.identity import IdentityService
from app.services.users import UserService


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Hasher configured from BCRYPT_SALT_OR_ROUNDS; immutable, shared across requests."""
    return PasswordHasher(get_settings().BCRYPT_SALT_OR_ROUNDS)


@lru_cache
def get_token_issuer() -> TokenIssuer:
    """Token issuer configured once from the JWT settings."""
    return TokenIssuer.from_settings(get_settings())


def get_user_repository(db: Annotated[Session, Depends(get_db)]) -> UserRepository:
    return SqlAlchemyUserRepository(db)


def get_identity_service(
    users: Annotated[UserRepository, Depends(get_user_repository)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> IdentityService:
    return IdentityService(users, hasher, tokens)


def get_user_service(
    users: Annotated[UserRepository, Depends(get_user_repository)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> UserService:
    return UserService(users, hasher)
