"""API tests for auth and user routes via FastAPI's TestClient on in-memory SQLite."""

import unittest

from fastapi.testclient import TestClient

from app.api.deps import get_password_hasher, get_token_issuer
from app.core.config import get_settings
from app.core.database import SessionLocal, engine
from app.core.roles import Role
from app.main import app
from app.models import Base
from app.repositories.users import SqlAlchemyUserRepository

PREFIX = get_settings().API_V1_PREFIX
PASSWORD = "Password123!"


class ApiTestCase(unittest.TestCase):
    """Fresh schema per test; seeds a SUPER_ADMIN, two ADMINs and a USER."""

    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.client = TestClient(app)
        db = SessionLocal()
        try:
            repo = SqlAlchemyUserRepository(db)
            hasher = get_password_hasher()
            self.ids = {}
            for key, email, role in (
                ("root", "root@example.com", Role.SUPER_ADMIN),
                ("admin", "admin@example.com", Role.ADMIN),
                ("admin2", "admin2@example.com", Role.ADMIN),
                ("user", "user@example.com", Role.USER),
            ):
                user = repo.create(email=email, name=key, password_hash=hasher.hash(PASSWORD), role=role)
                self.ids[key] = user.id
        finally:
            db.close()

    def tearDown(self) -> None:
        Base.metadata.drop_all(engine)

    def _login(self, email: str, password: str = PASSWORD) -> dict:
        response = self.client.post(f"{PREFIX}/auth/login", json={"email": email, "password": password})
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def _headers(self, email: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._login(email)['access_token']}"}


class TestAuthRoutes(ApiTestCase):
    def test_signup_returns_tokens_and_user(self) -> None:
        response = self.client.post(
            f"{PREFIX}/auth/signup",
            json={"email": "new@example.com", "password": PASSWORD, "name": "New"},
        )
        self.assertEqual(response.status_code, 201, response.text)
        body = response.json()
        self.assertEqual(body["token_type"], "bearer")
        self.assertEqual(body["user"]["email"], "new@example.com")
        self.assertEqual(body["user"]["role"], "USER")
        self.assertNotIn("password_hash", body["user"])

    def test_signup_then_login_issues_tokens_for_new_user(self) -> None:
        signup = self.client.post(
            f"{PREFIX}/auth/signup",
            json={"email": "fresh@example.com", "password": PASSWORD, "name": "Fresh"},
        )
        self.assertEqual(signup.status_code, 201, signup.text)
        created_id = signup.json()["user"]["id"]

        login = self._login("fresh@example.com")
        self.assertEqual(get_token_issuer().decode(login["access_token"]).user_id, created_id)
        self.assertEqual(login["user"]["id"], created_id)

    def test_signup_duplicate_email(self) -> None:
        response = self.client.post(
            f"{PREFIX}/auth/signup",
            json={"email": "user@example.com", "password": PASSWORD, "name": "Dup"},
        )
        self.assertEqual(response.status_code, 409)

    def test_signup_validates_input(self) -> None:
        response = self.client.post(
            f"{PREFIX}/auth/signup",
            json={"email": "not-an-email", "password": "short", "name": ""},
        )
        self.assertEqual(response.status_code, 422)

    def test_signup_rejects_password_bcrypt_would_truncate(self) -> None:
        # 40 characters but 80 UTF-8 bytes.
        response = self.client.post(
            f"{PREFIX}/auth/signup",
            json={"email": "long@example.com", "password": "é" * 40, "name": "Long"},
        )
        self.assertEqual(response.status_code, 422)

    def test_login_does_not_reveal_which_part_was_wrong(self) -> None:
        unknown = self.client.post(
            f"{PREFIX}/auth/login", json={"email": "nobody@example.com", "password": PASSWORD}
        )
        wrong = self.client.post(
            f"{PREFIX}/auth/login", json={"email": "user@example.com", "password": "WrongPassword1"}
        )
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.json(), wrong.json())

    def test_refresh(self) -> None:
        tokens = self._login("user@example.com")
        response = self.client.post(f"{PREFIX}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["user"]["id"], self.ids["user"])

    def test_refresh_with_access_token_rejected(self) -> None:
        tokens = self._login("user@example.com")
        response = self.client.post(f"{PREFIX}/auth/refresh", json={"refresh_token": tokens["access_token"]})
        self.assertEqual(response.status_code, 401)


class TestCurrentUser(ApiTestCase):
    def test_me(self) -> None:
        response = self.client.get(f"{PREFIX}/users/me", headers=self._headers("admin@example.com"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["id"], self.ids["admin"])

    def test_missing_token(self) -> None:
        self.assertEqual(self.client.get(f"{PREFIX}/users/me").status_code, 401)

    def test_refresh_token_is_not_accepted_as_bearer(self) -> None:
        tokens = self._login("user@example.com")
        response = self.client.get(
            f"{PREFIX}/users/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"}
        )
        self.assertEqual(response.status_code, 401)

    def test_deleted_user_token_is_unauthenticated(self) -> None:
        headers = self._headers("user@example.com")
        self.client.delete(f"{PREFIX}/users/{self.ids['user']}", headers=self._headers("admin@example.com"))
        self.assertEqual(self.client.get(f"{PREFIX}/users/me", headers=headers).status_code, 401)


class TestUserRoutes(ApiTestCase):
    def test_list_users_as_admin_hides_super_admins(self) -> None:
        response = self.client.get(f"{PREFIX}/users", headers=self._headers("admin@example.com"))
        self.assertEqual(response.status_code, 200)
        roles = {u["role"] for u in response.json()["users"]}
        self.assertNotIn("SUPER_ADMIN", roles)

    def test_list_users_as_super_admin(self) -> None:
        response = self.client.get(f"{PREFIX}/users", headers=self._headers("root@example.com"))
        self.assertEqual(len(response.json()["users"]), 4)

    def test_list_users_forbidden_for_user(self) -> None:
        response = self.client.get(f"{PREFIX}/users", headers=self._headers("user@example.com"))
        self.assertEqual(response.status_code, 403)

    def test_update_me(self) -> None:
        response = self.client.patch(
            f"{PREFIX}/users/me", json={"name": "Renamed"}, headers=self._headers("user@example.com")
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Renamed")

    def test_update_own_role_forbidden(self) -> None:
        response = self.client.patch(
            f"{PREFIX}/users/me", json={"role": "SUPER_ADMIN"}, headers=self._headers("user@example.com")
        )
        self.assertEqual(response.status_code, 403)

    def test_admin_cannot_update_other_admin(self) -> None:
        response = self.client.patch(
            f"{PREFIX}/users/{self.ids['admin2']}",
            json={"name": "x"},
            headers=self._headers("admin@example.com"),
        )
        self.assertEqual(response.status_code, 403)

    def test_super_admin_demotes_admin(self) -> None:
        response = self.client.patch(
            f"{PREFIX}/users/{self.ids['admin2']}",
            json={"role": "USER"},
            headers=self._headers("root@example.com"),
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["role"], "USER")

    def test_update_missing_user(self) -> None:
        response = self.client.patch(
            f"{PREFIX}/users/missing", json={"name": "x"}, headers=self._headers("root@example.com")
        )
        self.assertEqual(response.status_code, 404)

    def test_change_password(self) -> None:
        headers = self._headers("user@example.com")
        response = self.client.post(
            f"{PREFIX}/users/me/password",
            json={"old_password": PASSWORD, "new_password": "NewPassword1"},
            headers=headers,
        )
        self.assertEqual(response.status_code, 200, response.text)
        self._login("user@example.com", "NewPassword1")

    def test_change_password_unchanged(self) -> None:
        response = self.client.post(
            f"{PREFIX}/users/me/password",
            json={"old_password": PASSWORD, "new_password": PASSWORD},
            headers=self._headers("user@example.com"),
        )
        self.assertEqual(response.status_code, 400)

    def test_delete_self_forbidden(self) -> None:
        response = self.client.delete(
            f"{PREFIX}/users/{self.ids['root']}", headers=self._headers("root@example.com")
        )
        self.assertEqual(response.status_code, 403)

    def test_super_admin_deletes_admin(self) -> None:
        response = self.client.delete(
            f"{PREFIX}/users/{self.ids['admin']}", headers=self._headers("root@example.com")
        )
        self.assertEqual(response.status_code, 204)

    def test_admin_cannot_delete_admin(self) -> None:
        response = self.client.delete(
            f"{PREFIX}/users/{self.ids['admin2']}", headers=self._headers("admin@example.com")
        )
        self.assertEqual(response.status_code, 403)

    def test_user_cannot_delete(self) -> None:
        response = self.client.delete(
            f"{PREFIX}/users/{self.ids['admin']}", headers=self._headers("user@example.com")
        )
        self.assertEqual(response.status_code, 403)


if __name__ == "__main__":
    unittest.main()
