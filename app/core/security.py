"""Password hashing with bcrypt. Plain passwords are never stored or logged."""

import bcrypt

# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72

# Min/max lengths for email and password validation (input validation at the API layer).
EMAIL_MAX_LEN = 255
NAME_MIN_LEN = 1
NAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = BCRYPT_MAX_BYTES


def fits_bcrypt(plain_password: str) -> bool:
    """True when bcrypt sees the whole password (at most BCRYPT_MAX_BYTES in UTF-8)."""
    return len(plain_password.encode("utf-8")) <= BCRYPT_MAX_BYTES


def parse_salt_or_rounds(value: str | int) -> int | str:
    """
    Interpret the configured bcrypt parameter.

    A value that parses as an integer is a work factor; anything else is returned
    unchanged and handed to bcrypt as a pre-generated salt.
    """
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return value


class PasswordHasher:
    """One-way hashing and verification of passwords with a configurable cost."""

    def __init__(self, salt_or_rounds: str | int) -> None:
        self._salt_or_rounds = salt_or_rounds

    @property
    def salt_rounds(self) -> int | str:
        return parse_salt_or_rounds(self._salt_or_rounds)

    def _salt(self) -> bytes:
        salt_or_rounds = self.salt_rounds
        if isinstance(salt_or_rounds, int):
            return bcrypt.gensalt(rounds=salt_or_rounds)
        return salt_or_rounds.encode("utf-8")

    def hash(self, plain_password: str) -> str:
        """
        Hash a plain-text password for storage.

        Only the first BCRYPT_MAX_BYTES bytes count, so passwords sharing that
        prefix verify against each other. New passwords are checked with
        fits_bcrypt before they get here.
        """
        # Truncate explicitly; bcrypt 4.x rejects inputs over 72 bytes.
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        return bcrypt.hashpw(pw_bytes, self._salt()).decode("utf-8")

    def verify(self, plain_password: str, hashed: str) -> bool:
        """Verify a plain password against a stored hash. Never raises on mismatch."""
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False
