"""
Create a user (e.g. the first SUPER_ADMIN). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD NAME [role]
Example:
  python -m app.scripts.create_user root@example.com your-secure-password "Root" SUPER_ADMIN
"""
import argparse
import logging
import sys

from app.api.deps import get_password_hasher
from app.core.database import SessionLocal
from app.core.roles import Role
from app.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    fits_bcrypt,
)
from app.repositories.users import DuplicateUserError, SqlAlchemyUserRepository

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Gatehouse user (bootstrap admins).")
    parser.add_argument("email", help=f"Email (1-{EMAIL_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} bytes)")
    parser.add_argument("name", help="Display name")
    parser.add_argument("role", nargs="?", default=Role.USER.value, choices=[r.value for r in Role])
    args = parser.parse_args(argv)

    email = args.email.strip()
    if not email or len(email) > EMAIL_MAX_LEN or "@" not in email:
        print("Invalid email.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN or not fits_bcrypt(args.password):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} bytes.", file=sys.stderr)
        return 1
    name = args.name.strip()
    if not name or len(name) > NAME_MAX_LEN:
        print("Invalid name length.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        repo = SqlAlchemyUserRepository(db)
        user = repo.create(
            email=email,
            name=name,
            password_hash=get_password_hasher().hash(args.password),
            role=Role(args.role),
        )
    except DuplicateUserError:
        print(f"User '{email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
    logger.info("Created user id=%s role=%s", user.id, user.role)
    print(f"Created user '{email}' with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
