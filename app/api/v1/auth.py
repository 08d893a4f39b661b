"""Signup, login and refresh routes plus auth dependencies (get_current_user, require_roles)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.deps import get_identity_service
from app.api.errors import http_error
from app.core.errors import GatehouseError, InvalidCredentialsError, InvalidTokenError, NotFoundError
from app.core.roles import Role
from app.schemas.auth import AuthResponse, LoginRequest, RefreshRequest, SignupRequest, TokenPair
from app.schemas.user import UserPublic
from app.services.identity import IdentityService

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _auth_response(identity: IdentityService, pair: TokenPair) -> AuthResponse:
    # The pair was minted a moment ago, so the decode-only lookup is enough for display.
    user = identity.lookup_from_any_token(pair.access_token)
    return AuthResponse(**pair.model_dump(), user=user)


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    identity: Annotated[IdentityService, Depends(get_identity_service)],
) -> AuthResponse:
    """Create a USER account; returns its first access/refresh token pair."""
    try:
        pair = identity.signup(body.email, body.password, body.name)
    except GatehouseError as e:
        raise http_error(e) from e
    return _auth_response(identity, pair)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    identity: Annotated[IdentityService, Depends(get_identity_service)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns an access/refresh token pair.
    Include the access token in the Authorization header as: Bearer <access_token>
    """
    try:
        pair = identity.login(body.email, body.password)
    except (NotFoundError, InvalidCredentialsError) as e:
        # Same answer for unknown email and wrong password.
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        ) from e
    return _auth_response(identity, pair)


@router.post("/refresh", response_model=AuthResponse)
def refresh(
    body: RefreshRequest,
    identity: Annotated[IdentityService, Depends(get_identity_service)],
) -> AuthResponse:
    """Exchange a refresh token for a new token pair."""
    try:
        pair = identity.refresh(body.refresh_token)
    except GatehouseError as e:
        raise http_error(e) from e
    return _auth_response(identity, pair)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    identity: Annotated[IdentityService, Depends(get_identity_service)],
) -> UserPublic:
    """Dependency: require a valid Bearer access token and return its user. Raises 401 otherwise."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        user = identity.resolve_from_access_token(credentials.credentials)
    except InvalidTokenError as e:
        raise http_error(e) from e
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_roles(*roles: Role) -> Callable[..., UserPublic]:
    """Dependency factory: require an authenticated user holding one of roles. Raises 403 otherwise."""
    allowed = frozenset(roles)

    def dependency(
        current_user: Annotated[UserPublic, Depends(get_current_user)],
    ) -> UserPublic:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role",
            )
        return current_user

    return dependency


require_admin = require_roles(Role.ADMIN, Role.SUPER_ADMIN)
