"""Map typed service failures to HTTP errors."""

from fastapi import HTTPException, status

from app.core.errors import ErrorKind, GatehouseError

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DUPLICATE_EMAIL: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_PASSWORD: status.HTTP_400_BAD_REQUEST,
    ErrorKind.PASSWORD_UNCHANGED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INSUFFICIENT_PRIVILEGE: status.HTTP_403_FORBIDDEN,
    ErrorKind.SELF_ROLE_CHANGE: status.HTTP_403_FORBIDDEN,
    ErrorKind.SELF_DELETE: status.HTTP_403_FORBIDDEN,
    ErrorKind.TARGET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def http_error(err: GatehouseError) -> HTTPException:
    """HTTPException for a service failure. Internal errors never expose their cause."""
    status_code = STATUS_BY_KIND.get(err.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail = err.message if err.kind is not ErrorKind.INTERNAL_ERROR else "Internal server error"
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return HTTPException(status_code=status_code, detail=detail, headers=headers)
