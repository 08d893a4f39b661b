"""JWT issuance and verification for access and refresh tokens.

Access and refresh tokens carry the same payload ({"user_id"}) but are signed
with different secrets, so rotating one secret invalidates only that kind of
token. A "type" claim is checked as well, so a token can never be replayed as
the other kind even if both secrets were configured identically.

decode() is the non-verifying path: it reads claims without checking signature
or expiry and must never back an authorization decision. Anything that needs a
trusted identity goes through verify_access_token() / verify_refresh_token().
"""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt

from app.core.errors import InvalidTokenError
from app.schemas.auth import TokenPair, TokenPayload

if TYPE_CHECKING:
    from app.core.config import Settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenIssuer:
    """Creates and verifies signed, self-contained tokens. Holds no mutable state."""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        algorithm: str = "HS256",
    ) -> None:
        if not access_secret or not refresh_secret:
            raise ValueError("Both access and refresh token secrets are required")
        if access_ttl <= timedelta(0) or refresh_ttl <= timedelta(0):
            raise ValueError("Token lifetimes must be positive")
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl
        self._algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenIssuer":
        return cls(
            access_secret=settings.JWT_ACCESS_SECRET.get_secret_value(),
            refresh_secret=settings.JWT_REFRESH_SECRET.get_secret_value(),
            access_ttl=timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES),
            refresh_ttl=timedelta(minutes=settings.JWT_REFRESH_EXPIRE_MINUTES),
            algorithm=settings.JWT_ALGORITHM,
        )

    def _encode(self, payload: TokenPayload, secret: str, ttl: timedelta, token_type: str) -> str:
        now = datetime.now(UTC)
        claims: dict[str, Any] = {
            "user_id": payload.user_id,
            "type": token_type,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(claims, secret, algorithm=self._algorithm)

    def _verify(self, token: str, secret: str, token_type: str) -> TokenPayload:
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": ["exp"]},
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e
        if claims.get("type") != token_type:
            raise InvalidTokenError("Wrong token type")
        payload = _payload_from_claims(claims)
        if payload is None:
            raise InvalidTokenError("Invalid token payload")
        return payload

    def issue_access_token(self, payload: TokenPayload) -> str:
        """Sign payload with the access secret and the short expiry."""
        return self._encode(payload, self._access_secret, self._access_ttl, ACCESS_TOKEN_TYPE)

    def issue_refresh_token(self, payload: TokenPayload) -> str:
        """Sign payload with the refresh secret and the long expiry."""
        return self._encode(payload, self._refresh_secret, self._refresh_ttl, REFRESH_TOKEN_TYPE)

    def issue_pair(self, payload: TokenPayload) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access_token(payload),
            refresh_token=self.issue_refresh_token(payload),
        )

    def verify_access_token(self, token: str) -> TokenPayload:
        """Raises InvalidTokenError on bad signature, wrong secret, expiry or wrong type."""
        return self._verify(token, self._access_secret, ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> TokenPayload:
        """Raises InvalidTokenError on bad signature, wrong secret, expiry or wrong type."""
        return self._verify(token, self._refresh_secret, REFRESH_TOKEN_TYPE)

    def decode(self, token: str) -> TokenPayload | None:
        """Read claims WITHOUT verifying signature or expiry. Returns None if unreadable."""
        try:
            claims = jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError:
            return None
        return _payload_from_claims(claims)


def _payload_from_claims(claims: dict[str, Any]) -> TokenPayload | None:
    user_id = claims.get("user_id")
    if not isinstance(user_id, str) or not user_id:
        return None
    return TokenPayload(user_id=user_id)
