"""Role hierarchy: USER < ADMIN < SUPER_ADMIN.

The ordering lives in ROLE_RANK, not in enum declaration order, so every
comparison goes through role_rank() and can be tested on its own.
"""

from enum import Enum


class Role(str, Enum):
    """User role stored on the account."""

    USER = "USER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


ROLE_RANK: dict[Role, int] = {
    Role.USER: 0,
    Role.ADMIN: 10,
    Role.SUPER_ADMIN: 20,
}

# Roles allowed to act on accounts other than their own.
PRIVILEGED_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})


def role_rank(role: Role | str) -> int:
    """Return the privilege rank of a role. Raises ValueError for unknown roles."""
    return ROLE_RANK[Role(role)]


def has_at_least(role: Role | str, minimum: Role | str) -> bool:
    """True when role is ranked at or above minimum."""
    return role_rank(role) >= role_rank(minimum)


def outranks(role: Role | str, other: Role | str) -> bool:
    """True when role is ranked strictly above other."""
    return role_rank(role) > role_rank(other)


def roles_up_to(maximum: Role | str) -> frozenset[Role]:
    """All roles ranked at or below maximum."""
    ceiling = role_rank(maximum)
    return frozenset(r for r, rank in ROLE_RANK.items() if rank <= ceiling)
