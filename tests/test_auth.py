from __future__ import annotations

import unittest

from productivity_api.blueprints.wrapper import run_async
from tests.helpers import USER_PAYLOAD, make_app, register


class TestAuthApi(unittest.TestCase):
    def setUp(self) -> None:
        self.app = make_app()
        self.client = self.app.test_client()

    def assertRedacted(self, body) -> None:
        users = body if isinstance(body, list) else [body]
        for user in users:
            self.assertNotIn("passwordHash", user)
            self.assertNotIn("password", user)

    def test_register_binds_session_and_redacts_hash(self) -> None:
        response = register(self.client)
        self.assertEqual(201, response.status_code)
        user = response.get_json()
        self.assertRedacted(user)
        self.assertEqual("ada", user["username"])
        self.assertEqual("user", user["role"])
        self.assertIsNone(user["lastLogin"])

        current = self.client.get("/api/auth/current-user")
        self.assertEqual(200, current.status_code)
        self.assertEqual(user["id"], current.get_json()["id"])
        self.assertRedacted(current.get_json())

    def test_every_user_route_is_redacted(self) -> None:
        user = register(self.client).get_json()
        self.assertRedacted(self.client.get("/api/users").get_json())
        self.assertRedacted(self.client.get(f"/api/users/{user['id']}").get_json())
        self.assertRedacted(self.client.put(f"/api/users/{user['id']}", json={"name": "Ada L."}).get_json())
        login = self.client.post("/api/users/login", json={"email": "ada@analytical.org", "password": "analytical-engine"})
        self.assertRedacted(login.get_json())
        self.assertNotIn(b"passwordHash", self.client.get("/api/users").data)

    def test_registration_validation(self) -> None:
        response = register(self.client, confirmPassword="something-else")
        self.assertEqual(400, response.status_code)
        errors = response.get_json()["errors"]
        self.assertEqual(["confirmPassword"], errors[0]["path"])
        self.assertIn("Passwords do not match", errors[0]["message"])

        response = register(self.client, password="short", confirmPassword="short")
        self.assertEqual(400, response.status_code)

        response = register(self.client, email="not-an-email")
        self.assertEqual(400, response.status_code)

    def test_duplicate_email_or_username_is_400(self) -> None:
        self.assertEqual(201, self.client.post("/api/users/register", json=USER_PAYLOAD).status_code)

        response = register(self.client, username="other")
        self.assertEqual(400, response.status_code)
        self.assertIn("email", response.get_json()["message"])

        response = register(self.client, email="other@analytical.org")
        self.assertEqual(400, response.status_code)
        self.assertIn("username", response.get_json()["message"])

    def test_login_and_logout(self) -> None:
        self.client.post("/api/users/register", json=USER_PAYLOAD)
        self.assertEqual(401, self.client.get("/api/auth/current-user").status_code)

        response = self.client.post("/api/auth/login", json={"email": "ada@analytical.org", "password": "analytical-engine"})
        self.assertEqual(200, response.status_code)
        self.assertIsNotNone(response.get_json()["lastLogin"])
        self.assertEqual(200, self.client.get("/api/auth/current-user").status_code)

        self.assertEqual(200, self.client.post("/api/auth/logout").status_code)
        self.assertEqual(200, self.client.post("/api/auth/logout").status_code)
        response = self.client.get("/api/auth/current-user")
        self.assertEqual(401, response.status_code)
        self.assertEqual({"message": "Unauthorized"}, response.get_json())

    def test_bad_credentials_are_generic_401(self) -> None:
        self.client.post("/api/users/register", json=USER_PAYLOAD)
        wrong_password = self.client.post("/api/auth/login", json={"email": "ada@analytical.org", "password": "nope-nope"})
        unknown_email = self.client.post("/api/auth/login", json={"email": "bob@analytical.org", "password": "nope-nope"})
        self.assertEqual(401, wrong_password.status_code)
        self.assertEqual(401, unknown_email.status_code)
        self.assertEqual(wrong_password.get_json(), unknown_email.get_json())

    def test_password_update_is_rehashed(self) -> None:
        user = register(self.client).get_json()
        response = self.client.put(f"/api/users/{user['id']}", json={
            "password": "a-brand-new-secret",
            "passwordHash": "plain",
        })
        self.assertEqual(200, response.status_code)
        old = self.client.post("/api/users/login", json={"email": "ada@analytical.org", "password": "analytical-engine"})
        self.assertEqual(401, old.status_code)
        new = self.client.post("/api/users/login", json={"email": "ada@analytical.org", "password": "a-brand-new-secret"})
        self.assertEqual(200, new.status_code)

    def test_protected_route_requires_session(self) -> None:
        response = self.client.post("/api/teams", json={"name": "Core"})
        self.assertEqual(401, response.status_code)
        self.assertEqual({"message": "Unauthorized"}, response.get_json())
        self.assertEqual(401, self.client.get("/api/teams").status_code)
        self.assertEqual(401, self.client.post("/api/activity-logs", json={"action": "x"}).status_code)

        self.client.post("/api/users/register", json=USER_PAYLOAD)
        self.client.post("/api/auth/login", json={"email": "ada@analytical.org", "password": "analytical-engine"})
        self.assertEqual(201, self.client.post("/api/teams", json={"name": "Core"}).status_code)
        self.assertEqual(200, self.client.get("/api/teams").status_code)

    def test_stale_session_user_is_cleared(self) -> None:
        user = register(self.client).get_json()
        storage = self.app.extensions["storage"]
        self.assertTrue(run_async(storage.delete_user(user["id"])))

        self.assertEqual(401, self.client.get("/api/auth/current-user").status_code)
        # Сессия очищена, поэтому защищенные маршруты тоже закрыты
        self.assertEqual(401, self.client.get("/api/teams").status_code)

    def test_missing_user_is_404(self) -> None:
        self.assertEqual({"message": "User not found"}, self.client.get("/api/users/5").get_json())
        register(self.client)
        self.assertEqual(404, self.client.put("/api/users/5", json={"name": "Nobody"}).status_code)

    def test_profile_update_needs_own_session(self) -> None:
        user = register(self.client).get_json()
        path = f"/api/users/{user['id']}"

        other = self.app.test_client()
        response = other.put(path, json={"password": "stolen-password"})
        self.assertEqual(401, response.status_code)

        register(other, username="bob", email="bob@analytical.org")
        response = other.put(path, json={"password": "stolen-password"})
        self.assertEqual(403, response.status_code)
        self.assertEqual({"message": "Forbidden"}, response.get_json())

        stolen = other.post("/api/auth/login", json={"email": "ada@analytical.org", "password": "stolen-password"})
        self.assertEqual(401, stolen.status_code)
        own = self.client.post("/api/users/login", json={"email": "ada@analytical.org", "password": "analytical-engine"})
        self.assertEqual(200, own.status_code)

    def test_login_with_registration_email_casing(self) -> None:
        user = register(self.client, email="Ada@Analytical.ORG").get_json()
        self.assertEqual("Ada@analytical.org", user["email"])
        self.client.post("/api/auth/logout")

        response = self.client.post("/api/auth/login", json={"email": "Ada@Analytical.ORG", "password": "analytical-engine"})
        self.assertEqual(200, response.status_code)
        self.assertEqual(user["id"], response.get_json()["id"])
        response = self.client.post("/api/users/login", json={"email": "Ada@Analytical.ORG", "password": "analytical-engine"})
        self.assertEqual(200, response.status_code)


if __name__ == "__main__":
    unittest.main()
