"""End-to-end tests for the auth and favorites endpoints through FastAPI's TestClient."""

import unittest
from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient
from support import make_session_factory

from atlas.core.config import settings
from atlas.core.database import get_db
from atlas.core.security import create_access_token
from atlas.main import app

PREFIX = settings.API_V1_PREFIX
FRANCE = {"countryCode": "FRA", "countryName": "France", "flagUrl": "https://flagcdn.com/w320/fr.png"}
GERMANY = {"countryCode": "DEU", "countryName": "Germany", "flagUrl": "https://flagcdn.com/w320/de.png"}


class ApiTestCase(unittest.TestCase):
    """Fresh database and client per test; get_db is overridden to use it."""

    def setUp(self) -> None:
        factory = make_session_factory()

        def override_get_db():
            db = factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def signup(self, username: str = "alice", email: str | None = None, **extra: object):
        body = {
            "username": username,
            "email": email or f"{username}@example.com",
            "password": "secret1",
            **extra,
        }
        return self.client.post(f"{PREFIX}/auth/signup", json=body)

    def signin(self, username: str = "alice", password: str = "secret1"):
        return self.client.post(
            f"{PREFIX}/auth/signin", json={"username": username, "password": password}
        )

    def bearer(self, username: str = "alice") -> dict[str, str]:
        token = self.signin(username).json()["accessToken"]
        self.client.cookies.clear()
        return {"Authorization": f"Bearer {token}"}


class TestSignup(ApiTestCase):
    def test_success(self) -> None:
        resp = self.signup()
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json(), {"message": "User was registered successfully!"})

    def test_duplicate_username(self) -> None:
        self.signup()
        resp = self.signup(email="different@example.com")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Username is already in use!")

    def test_duplicate_email(self) -> None:
        self.signup()
        resp = self.signup(username="alice2", email="alice@example.com")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Email is already in use!")

    def test_invalid_role(self) -> None:
        resp = self.signup(roles=["user", "wizard"])
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Role wizard does not exist!")
        self.assertEqual(self.signin().status_code, 404)

    def test_invalid_email_is_rejected(self) -> None:
        resp = self.client.post(
            f"{PREFIX}/auth/signup",
            json={"username": "alice", "email": "not-an-email", "password": "secret1"},
        )
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()["message"], "Invalid request.")

    def test_short_password_is_rejected(self) -> None:
        resp = self.client.post(
            f"{PREFIX}/auth/signup",
            json={"username": "alice", "email": "alice@example.com", "password": "123"},
        )
        self.assertEqual(resp.status_code, 422)

    def test_blank_username_is_rejected(self) -> None:
        resp = self.signup(username="   ", email="blank@example.com")
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()["message"], "Invalid request.")


class TestSignin(ApiTestCase):
    def test_success_returns_identity_and_sets_cookie(self) -> None:
        self.signup(roles=["admin", "user"])
        resp = self.signin()
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["username"], "alice")
        self.assertEqual(data["email"], "alice@example.com")
        self.assertEqual(data["roles"], ["ROLE_ADMIN", "ROLE_USER"])
        self.assertIsInstance(data["id"], int)
        self.assertTrue(data["accessToken"])
        self.assertNotIn("password", data)
        self.assertNotIn("password_hash", data)
        self.assertEqual(resp.cookies.get(settings.SESSION_COOKIE_NAME), data["accessToken"])

    def test_default_role_label(self) -> None:
        self.signup()
        self.assertEqual(self.signin().json()["roles"], ["ROLE_USER"])

    def test_padded_username_round_trip(self) -> None:
        self.assertEqual(self.signup(" bob ", email="bob@example.com").status_code, 201)
        for attempt in (" bob ", "bob"):
            resp = self.signin(attempt)
            self.assertEqual(resp.status_code, 200)
            self.assertEqual(resp.json()["username"], "bob")

    def test_unknown_user(self) -> None:
        resp = self.signin("ghost")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"message": "User Not found."})

    def test_wrong_password(self) -> None:
        self.signup()
        resp = self.signin(password="wrong-password")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"message": "Invalid Password!"})


class TestSignout(ApiTestCase):
    def test_signout_clears_session_cookie(self) -> None:
        self.signup()
        self.signin()
        self.assertEqual(self.client.get(f"{PREFIX}/favorites").status_code, 200)
        resp = self.client.post(f"{PREFIX}/auth/signout")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "You've been signed out!"})
        self.assertEqual(self.client.get(f"{PREFIX}/favorites").status_code, 401)

    def test_signout_without_session_is_not_an_error(self) -> None:
        for _ in range(2):
            resp = self.client.post(f"{PREFIX}/auth/signout")
            self.assertEqual(resp.status_code, 200)


class TestFavoritesApi(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.signup()
        self.headers = self.bearer()

    def test_requires_token(self) -> None:
        resp = self.client.get(f"{PREFIX}/favorites")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"message": "No token provided!"})
        self.assertEqual(self.client.put(f"{PREFIX}/favorites/toggle", json=FRANCE).status_code, 401)

    def test_invalid_and_expired_tokens_are_rejected(self) -> None:
        resp = self.client.get(f"{PREFIX}/favorites", headers={"Authorization": "Bearer garbage"})
        self.assertEqual(resp.status_code, 401)
        expired = create_access_token(sub=1, now=datetime.now(UTC) - timedelta(days=2))
        resp = self.client.get(f"{PREFIX}/favorites", headers={"x-access-token": expired})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid or expired token")

    def test_token_for_deleted_user_is_rejected(self) -> None:
        token = create_access_token(sub=999)
        resp = self.client.get(f"{PREFIX}/favorites", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 401)

    def test_empty_list_for_new_user(self) -> None:
        resp = self.client.get(f"{PREFIX}/favorites", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"favoriteCountries": []})

    def test_toggle_round_trip(self) -> None:
        resp = self.client.put(f"{PREFIX}/favorites/toggle", json=FRANCE, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {"favoriteCountries": [{"code": "FRA", "name": "France", "flag": FRANCE["flagUrl"]}]},
        )
        resp = self.client.put(f"{PREFIX}/favorites/toggle", json=FRANCE, headers=self.headers)
        self.assertEqual(resp.json(), {"favoriteCountries": []})

    def test_two_codes_then_retrieval(self) -> None:
        self.client.put(f"{PREFIX}/favorites/toggle", json=FRANCE, headers=self.headers)
        self.client.put(f"{PREFIX}/favorites/toggle", json=GERMANY, headers=self.headers)
        resp = self.client.get(f"{PREFIX}/favorites", headers=self.headers)
        codes = [e["code"] for e in resp.json()["favoriteCountries"]]
        self.assertEqual(codes, ["FRA", "DEU"])

    def test_x_access_token_header_is_accepted(self) -> None:
        token = self.headers["Authorization"].removeprefix("Bearer ")
        resp = self.client.put(
            f"{PREFIX}/favorites/toggle", json=FRANCE, headers={"x-access-token": token}
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.json()["favoriteCountries"]), 1)

    def test_removal_with_code_only(self) -> None:
        self.client.put(f"{PREFIX}/favorites/toggle", json=FRANCE, headers=self.headers)
        resp = self.client.put(
            f"{PREFIX}/favorites/toggle", json={"countryCode": "fra"}, headers=self.headers
        )
        self.assertEqual(resp.json(), {"favoriteCountries": []})

    def test_malformed_country_code_is_rejected(self) -> None:
        resp = self.client.put(
            f"{PREFIX}/favorites/toggle", json={"countryCode": "FRANCE"}, headers=self.headers
        )
        self.assertEqual(resp.status_code, 422)


class TestStaffList(ApiTestCase):
    def test_plain_user_is_forbidden(self) -> None:
        self.signup()
        resp = self.client.get(f"{PREFIX}/auth/users", headers=self.bearer())
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json(), {"message": "Require Admin or Moderator Role!"})

    def test_moderator_sees_all_users(self) -> None:
        self.signup()
        self.signup("mod", roles=["moderator"])
        resp = self.client.get(f"{PREFIX}/auth/users", headers=self.bearer("mod"))
        self.assertEqual(resp.status_code, 200)
        users = resp.json()["users"]
        self.assertEqual([u["username"] for u in users], ["alice", "mod"])
        self.assertEqual(users[1]["roles"], ["ROLE_MODERATOR"])
        self.assertNotIn("password_hash", users[0])


class TestHealth(ApiTestCase):
    def test_health_reports_database(self) -> None:
        resp = self.client.get(f"{PREFIX}/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["database"], "connected")
        self.assertEqual(resp.json()["status"], "ok")


if __name__ == "__main__":
    unittest.main()
