"""Authorization policy for user-account mutations.

Pure decision functions: no I/O, deterministic for given roles and ids, safe to
evaluate concurrently. Each returns a Decision; the caller turns a denial into
the matching error and only touches the repository when the decision allows it.

Rules, in evaluation order:

  update  1. privileged target (ADMIN or above) requires a SUPER_ADMIN actor
          2. nobody changes their own role
          3. a plain USER may only update themself
  delete  1. nobody deletes themself (decided on ids alone, before existence)
          2. target must exist
          3. privileged target requires a SUPER_ADMIN actor

Who may call delete at all is gated by role on the route.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from app.core.errors import ErrorKind
from app.core.roles import PRIVILEGED_ROLES, ROLE_RANK, Role, has_at_least, roles_up_to
from app.core.security import PasswordHasher


class Subject(Protocol):
    """Anything with an id and a role: ORM users and UserPublic both qualify."""

    id: str
    role: Any


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy check. reason is set only when denied."""

    allowed: bool
    reason: ErrorKind | None = None

    def __bool__(self) -> bool:
        return self.allowed


@dataclass(frozen=True)
class PasswordChangeDecision(Decision):
    """Decision for a password change; carries the new hash when allowed."""

    password_hash: str | None = None


ALLOW = Decision(allowed=True)


def deny(reason: ErrorKind) -> Decision:
    return Decision(allowed=False, reason=reason)


def _is_protected(role: Role | str) -> bool:
    """ADMIN and SUPER_ADMIN accounts can only be managed by a SUPER_ADMIN."""
    return has_at_least(role, Role.ADMIN)


def _is_super_admin(role: Role | str) -> bool:
    return Role(role) is Role.SUPER_ADMIN


def can_update(actor: Subject, target: Subject, changes: Mapping[str, Any]) -> Decision:
    """Decide whether actor may apply changes to target. Target existence is checked by the caller."""
    if _is_protected(target.role) and not _is_super_admin(actor.role):
        return deny(ErrorKind.INSUFFICIENT_PRIVILEGE)

    new_role = changes.get("role")
    if new_role is not None and target.id == actor.id:
        return deny(ErrorKind.SELF_ROLE_CHANGE)

    if Role(actor.role) not in PRIVILEGED_ROLES and target.id != actor.id:
        return deny(ErrorKind.INSUFFICIENT_PRIVILEGE)

    return ALLOW


def can_delete(actor: Subject, target_id: str, target: Subject | None) -> Decision:
    """Decide whether actor may delete the account target_id (target is None when it does not exist)."""
    if target_id == actor.id:
        return deny(ErrorKind.SELF_DELETE)
    if target is None:
        return deny(ErrorKind.TARGET_NOT_FOUND)
    if _is_protected(target.role) and not _is_super_admin(actor.role):
        return deny(ErrorKind.INSUFFICIENT_PRIVILEGE)
    return ALLOW


def can_change_own_password(
    hasher: PasswordHasher,
    old_password: str,
    new_password: str,
    current_hash: str,
) -> PasswordChangeDecision:
    """
    Check a self-service password change.

    The old password must match the stored hash and the new one must not. When
    allowed, the decision carries the hash of the new password.
    """
    if not hasher.verify(old_password, current_hash):
        return PasswordChangeDecision(allowed=False, reason=ErrorKind.INVALID_PASSWORD)
    if hasher.verify(new_password, current_hash):
        return PasswordChangeDecision(allowed=False, reason=ErrorKind.PASSWORD_UNCHANGED)
    return PasswordChangeDecision(allowed=True, password_hash=hasher.hash(new_password))


def visible_roles(actor_role: Role | str) -> frozenset[Role]:
    """
    Roles whose accounts actor_role may list.

    SUPER_ADMIN sees everyone, ADMIN sees everyone except SUPER_ADMINs, and
    roles below ADMIN have no listing scope (empty set, not an error).
    """
    role = Role(actor_role)
    if role is Role.SUPER_ADMIN:
        return frozenset(ROLE_RANK)
    if role is Role.ADMIN:
        return roles_up_to(Role.ADMIN)
    return frozenset()
