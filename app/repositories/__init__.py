"""Persistence adapters."""

from app.repositories.users import DuplicateUserError, SqlAlchemyUserRepository, UserRepository

__all__ = ["DuplicateUserError", "SqlAlchemyUserRepository", "UserRepository"]
