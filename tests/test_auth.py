"""Tests for registration, login, token refresh and logout."""

from datetime import UTC, datetime, timedelta

from jose import jwt

from larder.models.refresh_token import RefreshToken
from larder.models.user import User
from larder.services import auth as auth_service


def test_register_returns_user_and_tokens(client, db):
    response = client.post(
        "/auth/register",
        json={"email": "New@Example.com", "password": "secret123", "fullName": "New User"},
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["user"]["email"] == "new@example.com"
    assert data["user"]["fullName"] == "New User"
    assert data["tokens"]["accessToken"]
    assert data["tokens"]["refreshToken"]
    assert "passwordHash" not in data["user"]

    user = db.query(User).filter(User.email == "new@example.com").one()
    assert user.password_hash != "secret123"


def test_register_duplicate_email_is_conflict(client, auth_headers):
    response = client.post(
        "/auth/register",
        json={"email": "TEST@example.com", "password": "testpass123"},
    )
    assert response.status_code == 409
    assert response.json()["error"] == {"code": "CONFLICT", "message": "Email already registered"}


def test_register_rejects_invalid_email(client):
    response = client.post("/auth/register", json={"email": "nope", "password": "testpass123"})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"].startswith("email:")


def test_register_rejects_short_password(client):
    response = client.post(
        "/auth/register", json={"email": "short@example.com", "password": "1234567"}
    )
    assert response.status_code == 400
    assert "password" in response.json()["error"]["message"]


def test_login(client, auth_headers):
    response = client.post(
        "/auth/login", json={"email": "test@example.com", "password": "testpass123"}
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["id"] == auth_headers.user_id
    assert data["tokens"]["accessToken"]


def test_login_failures_look_the_same(client, auth_headers):
    wrong_password = client.post(
        "/auth/login", json={"email": "test@example.com", "password": "wrongpass"}
    )
    unknown_email = client.post(
        "/auth/login", json={"email": "ghost@example.com", "password": "testpass123"}
    )
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["error"]["message"] == "Invalid credentials"


def test_me(client, auth_headers):
    response = client.get("/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"] == {
        "id": auth_headers.user_id,
        "email": "test@example.com",
        "fullName": "Test User",
    }


def test_refresh_issues_new_pair(client, auth_headers):
    response = client.post("/auth/refresh", json={"refreshToken": auth_headers.refresh_token})
    assert response.status_code == 200
    tokens = response.json()["data"]["tokens"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {tokens['accessToken']}"})
    assert me.status_code == 200


def test_refresh_rejects_access_token(client, auth_headers):
    access_token = auth_headers["Authorization"].removeprefix("Bearer ")
    response = client.post("/auth/refresh", json={"refreshToken": access_token})
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid refresh token"


def test_access_endpoints_reject_refresh_token(client, auth_headers):
    response = client.get(
        "/auth/me", headers={"Authorization": f"Bearer {auth_headers.refresh_token}"}
    )
    assert response.status_code == 401


def test_refresh_rejects_wrong_secret(client, auth_headers):
    forged = jwt.encode(
        {
            "sub": str(auth_headers.user_id),
            "type": "refresh",
            "exp": datetime.now(UTC) + timedelta(days=1),
        },
        "some-other-secret",
        algorithm="HS256",
    )
    response = client.post("/auth/refresh", json={"refreshToken": forged})
    assert response.status_code == 401


def test_refresh_rejects_expired_token(client, settings, auth_headers):
    expired = jwt.encode(
        {
            "sub": str(auth_headers.user_id),
            "type": "refresh",
            "exp": datetime.now(UTC) - timedelta(minutes=1),
        },
        settings.jwt_refresh_secret,
        algorithm="HS256",
    )
    response = client.post("/auth/refresh", json={"refreshToken": expired})
    assert response.status_code == 401


def test_refresh_for_deleted_user(client, db, auth_headers):
    db.query(User).filter(User.id == auth_headers.user_id).delete()
    db.commit()

    response = client.post("/auth/refresh", json={"refreshToken": auth_headers.refresh_token})
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "User not found"


def test_logout_revokes_refresh_token(client, db, auth_headers):
    response = client.post(
        "/auth/logout", json={"refreshToken": auth_headers.refresh_token}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json() == {"data": {"revoked": True}}
    assert db.query(RefreshToken).count() == 1

    response = client.post("/auth/refresh", json={"refreshToken": auth_headers.refresh_token})
    assert response.status_code == 401

    # Revoking again is a no-op
    response = client.post(
        "/auth/logout", json={"refreshToken": auth_headers.refresh_token}, headers=auth_headers
    )
    assert response.status_code == 200
    assert db.query(RefreshToken).count() == 1


def test_logout_rejects_someone_elses_token(client, auth_headers, other_auth_headers):
    response = client.post(
        "/auth/logout",
        json={"refreshToken": other_auth_headers.refresh_token},
        headers=auth_headers,
    )
    assert response.status_code == 401


def test_login_with_unknown_email_still_checks_a_password(client, monkeypatch, auth_headers):
    checked = []
    real_verify = auth_service.verify_password

    def counting_verify(plain_password, hashed_password):
        checked.append(hashed_password)
        return real_verify(plain_password, hashed_password)

    monkeypatch.setattr(auth_service, "verify_password", counting_verify)

    response = client.post(
        "/auth/login", json={"email": "ghost@example.com", "password": "testpass123"}
    )
    assert response.status_code == 401
    assert len(checked) == 1
    assert checked[0].startswith("$2b$04$")
