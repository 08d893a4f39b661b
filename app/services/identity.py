"""Identity service: signup, login, refresh and token-to-user resolution.

Stateless across requests; one instance is built per request around the
repository, hasher and token issuer it is given.
"""

import logging

from app.core.errors import (
    DuplicateEmailError,
    InternalError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
)
from app.core.roles import Role
from app.core.security import PasswordHasher
from app.core.tokens import TokenIssuer
from app.repositories.users import DuplicateUserError, UserRepository
from app.schemas.auth import TokenPair, TokenPayload
from app.schemas.user import UserPublic

logger = logging.getLogger(__name__)


class IdentityService:
    """Issues token pairs for credentials and resolves tokens back to users."""

    def __init__(self, users: UserRepository, hasher: PasswordHasher, tokens: TokenIssuer) -> None:
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    def _issue(self, user_id: str) -> TokenPair:
        return self.tokens.issue_pair(TokenPayload(user_id=user_id))

    def signup(self, email: str, password: str, name: str) -> TokenPair:
        """
        Create a USER account and return its first token pair.

        Raises DuplicateEmailError when the email is taken. Any other storage
        or hashing failure is wrapped in InternalError with the original chained as __cause__.
        """
        try:
            user = self.users.create(
                email=email,
                name=name,
                password_hash=self.hasher.hash(password),
                role=Role.USER,
            )
        except DuplicateUserError as e:
            raise DuplicateEmailError() from e
        except Exception as e:
            logger.exception("Signup failed with unexpected error")
            raise InternalError("Could not create user") from e
        logger.info("User signed up: id=%s", user.id)
        return self._issue(user.id)

    def login(self, email: str, password: str) -> TokenPair:
        """
        Exchange email and password for a token pair.

        Raises NotFoundError for an unknown email (the hasher is not invoked) and
        InvalidCredentialsError for a wrong password. Repository failures propagate
        unchanged.
        """
        user = self.users.find_by_email(email)
        if user is None:
            raise NotFoundError()
        if not self.hasher.verify(password, user.password_hash):
            logger.warning("Login rejected: wrong password for id=%s", user.id)
            raise InvalidCredentialsError()
        logger.info("User logged in: id=%s", user.id)
        return self._issue(user.id)

    def refresh(self, refresh_token: str) -> TokenPair:
        """
        Exchange a valid refresh token for a fresh pair.

        The token must verify against the refresh secret and its user must still
        exist; otherwise InvalidTokenError.
        """
        payload = self.tokens.verify_refresh_token(refresh_token)
        if self.users.find_by_id(payload.user_id) is None:
            logger.warning("Refresh rejected: user no longer exists id=%s", payload.user_id)
            raise InvalidTokenError("User no longer exists")
        return self._issue(payload.user_id)

    def resolve_from_access_token(self, access_token: str) -> UserPublic | None:
        """
        Authenticated-request path: verify the access token and load its user.

        Raises InvalidTokenError for a bad token; returns None when the user was
        deleted after the token was issued.
        """
        payload = self.tokens.verify_access_token(access_token)
        user = self.users.find_by_id(payload.user_id)
        if user is None:
            return None
        return UserPublic.model_validate(user)

    def lookup_from_any_token(self, token: str) -> UserPublic | None:
        """Best-effort lookup from claims read WITHOUT verification. Not an authorization boundary."""
        payload = self.tokens.decode(token)
        if payload is None:
            return None
        user = self.users.find_by_id(payload.user_id)
        if user is None:
            return None
        return UserPublic.model_validate(user)
