"""Tests for app.repositories.users.SqlAlchemyUserRepository on in-memory SQLite."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.roles import Role
from app.models import Base
from app.repositories.users import DuplicateUserError, SqlAlchemyUserRepository


def _session() -> Session:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False)()


class TestSqlAlchemyUserRepository(unittest.TestCase):
    def setUp(self) -> None:
        self.session = _session()
        self.repo = SqlAlchemyUserRepository(self.session)

    def tearDown(self) -> None:
        self.session.close()

    def _create(self, email: str = "a@example.com", role: Role = Role.USER):
        return self.repo.create(email=email, name="A", password_hash="hash", role=role)

    def test_create_assigns_id_and_timestamps(self) -> None:
        user = self._create()
        self.assertEqual(len(user.id), 36)
        self.assertEqual(user.role, "USER")
        self.assertIsNotNone(user.created_at)
        self.assertIsNotNone(user.updated_at)

    def test_create_duplicate_email(self) -> None:
        self._create()
        with self.assertRaises(DuplicateUserError) as ctx:
            self._create()
        self.assertEqual(ctx.exception.email, "a@example.com")
        # Session is usable after the rollback.
        self.assertIsNotNone(self.repo.find_by_email("a@example.com"))

    def test_find_by_email_and_id(self) -> None:
        user = self._create()
        self.assertEqual(self.repo.find_by_email("a@example.com").id, user.id)
        self.assertEqual(self.repo.find_by_id(user.id).email, "a@example.com")
        self.assertIsNone(self.repo.find_by_email("missing@example.com"))
        self.assertIsNone(self.repo.find_by_id("missing"))

    def test_update_fields(self) -> None:
        user = self._create()
        updated = self.repo.update(user.id, {"name": "B", "role": Role.ADMIN})
        self.assertEqual(updated.name, "B")
        self.assertEqual(updated.role, "ADMIN")

    def test_update_rejects_unknown_fields(self) -> None:
        user = self._create()
        with self.assertRaises(ValueError):
            self.repo.update(user.id, {"id": "other"})

    def test_update_missing_user(self) -> None:
        with self.assertRaises(LookupError):
            self.repo.update("missing", {"name": "B"})

    def test_delete(self) -> None:
        user = self._create()
        self.repo.delete(user.id)
        self.assertIsNone(self.repo.find_by_id(user.id))

    def test_list_all_filters_by_role(self) -> None:
        self._create("u@example.com", Role.USER)
        self._create("a@example.com", Role.ADMIN)
        self._create("s@example.com", Role.SUPER_ADMIN)
        self.assertEqual(len(self.repo.list_all()), 3)
        emails = {u.email for u in self.repo.list_all(roles=[Role.USER, Role.ADMIN])}
        self.assertEqual(emails, {"u@example.com", "a@example.com"})

    def test_integrity_error_triggers_rollback(self) -> None:
        session = MagicMock()
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("unique"))
        repo = SqlAlchemyUserRepository(session)
        with self.assertRaises(DuplicateUserError):
            repo.create(email="a@example.com", name="A", password_hash="hash", role=Role.USER)
        session.rollback.assert_called_once()


if __name__ == "__main__":
    unittest.main()
