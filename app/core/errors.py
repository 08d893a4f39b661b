"""Typed failures raised by the identity and user services.

Each exception carries an ErrorKind so the transport layer can map failures to
responses without string matching. Authorization and validation failures are
deterministic and never retried by the core.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Every failure the core can surface to a caller."""

    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    PASSWORD_UNCHANGED = "PASSWORD_UNCHANGED"
    INSUFFICIENT_PRIVILEGE = "INSUFFICIENT_PRIVILEGE"
    SELF_ROLE_CHANGE = "SELF_ROLE_CHANGE"
    SELF_DELETE = "SELF_DELETE"
    TARGET_NOT_FOUND = "TARGET_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class GatehouseError(Exception):
    """Base class for all typed failures."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR
    default_message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(GatehouseError):
    kind = ErrorKind.NOT_FOUND
    default_message = "User not found"


class DuplicateEmailError(GatehouseError):
    kind = ErrorKind.DUPLICATE_EMAIL
    default_message = "Email is already in use"


class InvalidCredentialsError(GatehouseError):
    kind = ErrorKind.INVALID_CREDENTIALS
    default_message = "Invalid password"


class InvalidTokenError(GatehouseError):
    kind = ErrorKind.INVALID_TOKEN
    default_message = "Invalid or expired token"


class InvalidPasswordError(GatehouseError):
    kind = ErrorKind.INVALID_PASSWORD
    default_message = "Invalid password"


class PasswordUnchangedError(GatehouseError):
    kind = ErrorKind.PASSWORD_UNCHANGED
    default_message = "New password cannot be the same as the old password."


class InsufficientPrivilegeError(GatehouseError):
    kind = ErrorKind.INSUFFICIENT_PRIVILEGE
    default_message = "You do not have permission to perform this action"


class SelfRoleChangeError(GatehouseError):
    kind = ErrorKind.SELF_ROLE_CHANGE
    default_message = "You cannot change your own role"


class SelfDeleteError(GatehouseError):
    kind = ErrorKind.SELF_DELETE
    default_message = "You cannot delete yourself"


class TargetNotFoundError(GatehouseError):
    kind = ErrorKind.TARGET_NOT_FOUND
    default_message = "User not found"


class InternalError(GatehouseError):
    """Unexpected repository or crypto failure. The original exception is chained as __cause__."""

    kind = ErrorKind.INTERNAL_ERROR


_ERRORS_BY_KIND: dict[ErrorKind, type[GatehouseError]] = {
    cls.kind: cls
    for cls in (
        NotFoundError,
        DuplicateEmailError,
        InvalidCredentialsError,
        InvalidTokenError,
        InvalidPasswordError,
        PasswordUnchangedError,
        InsufficientPrivilegeError,
        SelfRoleChangeError,
        SelfDeleteError,
        TargetNotFoundError,
        InternalError,
    )
}


def error_for(kind: ErrorKind, message: str | None = None) -> GatehouseError:
    """Build the exception instance for an error kind (e.g. a policy denial reason)."""
    return _ERRORS_BY_KIND[kind](message)
