"""User account routes: profile, role and password changes, deletion and listing."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_user_service
from app.api.errors import http_error
from app.api.v1.auth import get_current_user, require_admin
from app.core.errors import GatehouseError
from app.schemas.user import (
    ChangePasswordRequest,
    UpdateUserRequest,
    UserPublic,
    UsersListResponse,
)
from app.services.users import UserService

router = APIRouter()


@router.get("/me", response_model=UserPublic)
def get_me(
    current_user: Annotated[UserPublic, Depends(get_current_user)],
) -> UserPublic:
    """Return the authenticated user."""
    return current_user


@router.get("", response_model=UsersListResponse)
def list_users(
    current_user: Annotated[UserPublic, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UsersListResponse:
    """List accounts visible to the caller (ADMIN: all but SUPER_ADMINs; SUPER_ADMIN: all)."""
    return UsersListResponse(users=service.list_users(current_user))


@router.patch("/me", response_model=UserPublic)
def update_me(
    body: UpdateUserRequest,
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserPublic:
    """Update the caller's own profile."""
    try:
        return service.update_user(current_user, current_user.id, body.changes())
    except GatehouseError as e:
        raise http_error(e) from e


@router.post("/me/password", response_model=UserPublic)
def change_password(
    body: ChangePasswordRequest,
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserPublic:
    """Change the caller's password; the old password must be supplied and the new one must differ."""
    try:
        return service.change_password(current_user, body.old_password, body.new_password)
    except GatehouseError as e:
        raise http_error(e) from e


@router.patch("/{user_id}", response_model=UserPublic)
def update_user(
    user_id: str,
    body: UpdateUserRequest,
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserPublic:
    """Update another account's profile or role, subject to the role hierarchy."""
    try:
        return service.update_user(current_user, user_id, body.changes())
    except GatehouseError as e:
        raise http_error(e) from e


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    current_user: Annotated[UserPublic, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> Response:
    """Delete an account (ADMIN or SUPER_ADMIN; only SUPER_ADMIN may delete admins)."""
    try:
        service.delete_user(current_user, user_id)
    except GatehouseError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
