# tests/test_auth.py

"""
Tests for authentication endpoints.
"""

from fastapi.testclient import TestClient
from unittest.mock import Mock, patch

from dependencies.auth import get_optional_auth


def _auth_response(user_id="new-user", with_session=True):
    user = Mock()
    user.id = user_id
    session = None
    if with_session:
        session = Mock()
        session.access_token = "test-token"
        session.refresh_token = "refresh-token"
        session.expires_in = 3600
    return Mock(user=user, session=session)


def test_signup_creates_profile(client: TestClient, fake_db):
    fake_db.auth.sign_up.return_value = _auth_response()

    response = client.post(
        "/auth/signup",
        json={
            "email": "New@Example.com",
            "password": "secret1",
            "full_name": "New Owner",
            "role": "landowner",
            "phone": "0808 555 0100",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "new-user"
    assert data["needs_confirmation"] is False
    assert data["session"]["access_token"] == "test-token"
    assert data["session"]["profile"]["role"] == "landowner"

    profile = fake_db.find("profiles", "new-user")
    assert profile["email"] == "new@example.com"
    assert profile["phone"] == "0808 555 0100"

    sent = fake_db.auth.sign_up.call_args[0][0]
    assert sent["options"]["data"] == {"full_name": "New Owner", "role": "landowner"}


def test_signup_pending_confirmation(client: TestClient, fake_db):
    fake_db.auth.sign_up.return_value = _auth_response(with_session=False)

    response = client.post(
        "/auth/signup",
        json={"email": "new@example.com", "password": "secret1", "full_name": "New Person"},
    )

    assert response.status_code == 200
    assert response.json()["needs_confirmation"] is True
    assert response.json()["session"] is None
    assert fake_db.find("profiles", "new-user")["role"] == "public"


def test_signup_error_is_verbatim(client: TestClient, fake_db):
    fake_db.auth.sign_up.side_effect = Exception("User already registered")

    response = client.post(
        "/auth/signup",
        json={"email": "dup@example.com", "password": "secret1", "full_name": "Dup"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "User already registered"
    assert fake_db.rows("profiles") == []


def test_signup_rejects_unknown_role(client: TestClient, fake_db):
    response = client.post(
        "/auth/signup",
        json={"email": "x@example.com", "password": "secret1", "full_name": "X", "role": "superuser"},
    )
    assert response.status_code == 422


def test_signup_cannot_self_assign_admin(client: TestClient, fake_db):
    response = client.post(
        "/auth/signup",
        json={"email": "boss@example.com", "password": "secret1", "full_name": "Boss", "role": "admin"},
    )

    assert response.status_code == 422
    fake_db.auth.sign_up.assert_not_called()
    assert fake_db.rows("profiles") == []


def test_signup_rate_limiting(client: TestClient, fake_db):
    fake_db.auth.sign_up.side_effect = Exception("User already registered")

    with patch("routers.auth.settings") as settings:
        settings.SIGNUP_RATE_LIMIT = 2
        settings.SIGNUP_RATE_WINDOW_SECONDS = 60
        codes = [
            client.post(
                "/auth/signup",
                json={"email": "x@example.com", "password": "secret1", "full_name": "X"},
            ).status_code
            for _ in range(3)
        ]

    assert codes == [400, 400, 429]


def test_login_success(client: TestClient, seeded_profiles):
    fake_db = seeded_profiles
    fake_db.auth.sign_in_with_password.return_value = _auth_response(user_id="00000000-0000-0000-0000-00000000000b")

    response = client.post("/auth/login", json={"email": "owner@example.com", "password": "password123"})

    assert response.status_code == 200
    data = response.json()
    assert data["access_token"] == "test-token"
    assert data["profile"]["role"] == "landowner"


def test_login_invalid_credentials(client: TestClient, fake_db):
    fake_db.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

    response = client.post("/auth/login", json={"email": "test@example.com", "password": "wrongpassword"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid login credentials"


def test_logout_revokes_token(client: TestClient, fake_db, login_as, landowner_user):
    login_as(landowner_user)

    response = client.post("/auth/logout")

    assert response.status_code == 200
    fake_db.auth.admin.sign_out.assert_called_once_with("owner-token")


def test_me_and_update(client: TestClient, seeded_profiles, login_as, public_user):
    login_as(public_user)

    assert client.get("/auth/me").json()["full_name"] == "Pat Public"

    response = client.patch("/auth/me", json={"phone": " 808-555-0199 "})
    assert response.status_code == 200
    assert response.json()["phone"] == "808-555-0199"
    assert seeded_profiles.find("profiles", public_user.id)["phone"] == "808-555-0199"


def test_me_ignores_role_changes(client: TestClient, seeded_profiles, login_as, public_user):
    login_as(public_user)

    response = client.patch("/auth/me", json={"role": "admin"})

    assert response.status_code == 200
    assert seeded_profiles.find("profiles", public_user.id)["role"] == "public"


def test_route_for_anonymous(client: TestClient, app):
    app.dependency_overrides[get_optional_auth] = lambda: None
    assert client.get("/auth/route").json() == {"route": "auth", "role": None}


def test_route_for_roles(client: TestClient, app, admin_user, landowner_user):
    app.dependency_overrides[get_optional_auth] = lambda: admin_user
    assert client.get("/auth/route").json()["route"] == "admin"

    app.dependency_overrides[get_optional_auth] = lambda: landowner_user
    assert client.get("/auth/route").json()["route"] == "landowner"
