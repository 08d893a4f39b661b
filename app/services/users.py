"""User mutation path: every change is gated by the authorization policy first."""

import logging
from typing import Any

from app.core.errors import NotFoundError, TargetNotFoundError, error_for
from app.core.security import PasswordHasher
from app.repositories.users import UserRepository
from app.schemas.user import UserPublic
from app.services.policy import (
    Decision,
    Subject,
    can_change_own_password,
    can_delete,
    can_update,
    visible_roles,
)

logger = logging.getLogger(__name__)


def _enforce(decision: Decision, action: str, actor: Subject, target_id: str) -> None:
    """Raise the typed error for a denied decision."""
    if decision.allowed:
        return
    logger.warning(
        "Denied %s: actor=%s target=%s reason=%s",
        action,
        actor.id,
        target_id,
        decision.reason.value,
    )
    raise error_for(decision.reason)


class UserService:
    """Reads and mutates accounts on behalf of an authenticated actor."""

    def __init__(self, users: UserRepository, hasher: PasswordHasher) -> None:
        self.users = users
        self.hasher = hasher

    def get_user(self, user_id: str) -> UserPublic:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError()
        return UserPublic.model_validate(user)

    def update_user(self, actor: Subject, target_id: str, changes: dict[str, Any]) -> UserPublic:
        """Apply profile/role changes to target_id if the policy allows it."""
        target = self.users.find_by_id(target_id)
        if target is None:
            raise TargetNotFoundError()
        _enforce(can_update(actor, target, changes), "update", actor, target_id)
        if not changes:
            return UserPublic.model_validate(target)
        updated = self.users.update(target_id, dict(changes))
        logger.info("Updated user: id=%s fields=%s by=%s", target_id, sorted(changes), actor.id)
        return UserPublic.model_validate(updated)

    def delete_user(self, actor: Subject, target_id: str) -> None:
        """Delete target_id if the policy allows it. Self-deletion is refused before any lookup."""
        target = None if target_id == actor.id else self.users.find_by_id(target_id)
        _enforce(can_delete(actor, target_id, target), "delete", actor, target_id)
        self.users.delete(target_id)
        logger.info("Deleted user: id=%s by=%s", target_id, actor.id)

    def change_password(self, actor: Subject, old_password: str, new_password: str) -> UserPublic:
        """Change the actor's own password after checking the old one."""
        user = self.users.find_by_id(actor.id)
        if user is None:
            raise NotFoundError()
        decision = can_change_own_password(self.hasher, old_password, new_password, user.password_hash)
        _enforce(decision, "password change", actor, actor.id)
        updated = self.users.update(actor.id, {"password_hash": decision.password_hash})
        logger.info("Password changed: id=%s", actor.id)
        return UserPublic.model_validate(updated)

    def list_users(self, actor: Subject) -> list[UserPublic]:
        """Accounts visible to actor; empty for roles without a listing scope."""
        roles = visible_roles(actor.role)
        if not roles:
            return []
        return [UserPublic.model_validate(u) for u in self.users.list_all(roles=roles)]
