"""Authentication flow tests."""

from __future__ import annotations

from skillswap.config import TestingConfig
from skillswap.app import create_app
from skillswap.data_access import users_dao
from skillswap.data_access.db import get_db, init_db

from conftest import login


def test_register_login_and_access_protected(client):
    """Register a new user, then reach a protected route with the session."""

    response = client.post(
        "/api/register",
        json={
            "username": "frank",
            "email": "frank@example.com",
            "password": "Password123!",
            "firstName": "Frank",
        },
    )
    assert response.status_code == 201
    body = response.get_json()
    assert body["username"] == "frank"
    assert body["firstName"] == "Frank"
    assert body["rating"] == 0
    assert body["totalRatings"] == 0
    assert "passwordHash" not in body and "password_hash" not in body

    me = client.get("/api/user")
    assert me.status_code == 200
    assert me.get_json()["username"] == "frank"

    client.post("/api/logout")
    assert client.get("/api/user").status_code == 401

    assert login(client, "frank").status_code == 200
    assert client.get("/api/user").status_code == 200


def test_register_rejects_duplicates_and_bad_input(client):
    duplicate = client.post(
        "/api/register",
        json={"username": "alice", "email": "alice@skillswap.dev", "password": "Password123!"},
    )
    assert duplicate.status_code == 400
    errors = duplicate.get_json()["errors"]
    assert "username" in errors
    assert "email" in errors

    invalid = client.post("/api/register", json={"username": "zz", "email": "nope", "password": "short"})
    assert invalid.status_code == 400
    assert set(invalid.get_json()["errors"]) >= {"username", "email", "password"}


def test_invalid_credentials_fail(client):
    response = login(client, "alice", "WrongPassword!")
    assert response.status_code == 401
    assert response.get_json()["message"] == "Invalid username or password."


def test_protected_routes_require_login(client):
    response = client.get("/api/swap-requests/user")
    assert response.status_code == 401
    assert response.get_json() == {"message": "Unauthorized"}


def test_banned_user_cannot_login(client):
    """Seeded erin is banned."""

    response = login(client, "erin")
    assert response.status_code == 403
    assert "banned" in response.get_json()["message"]


def test_ban_ends_existing_session(app, client_for, user_ids):
    alice = client_for("alice")
    assert alice.get("/api/user").status_code == 200

    with app.app_context():
        users_dao.ban_user(get_db(), user_ids["alice"])

    assert alice.get("/api/user").status_code == 401


def test_non_json_body_is_rejected(client):
    response = client.post("/api/login", json=["alice", "Password123!"])
    assert response.status_code == 400
    assert response.get_json()["message"] == "Request body must be a JSON object."


def test_csrf_enforced_when_enabled(tmp_path):
    """Outside the testing config, writes need the token from /api/csrf-token."""

    class _CsrfConfig(TestingConfig):
        DATABASE_URL = f"sqlite:///{tmp_path / 'csrf.db'}"
        WTF_CSRF_ENABLED = True

    application = create_app(_CsrfConfig)
    init_db(application)
    client = application.test_client()

    rejected = client.post("/api/login", json={"username": "x", "password": "y"})
    assert rejected.status_code == 400
    assert "message" in rejected.get_json()

    token = client.get("/api/csrf-token").get_json()["csrfToken"]
    # an HTTPS request without a Referer header still passes on the token alone
    accepted = client.post(
        "/api/register",
        base_url="https://localhost",
        json={"username": "grace", "email": "grace@example.com", "password": "Password123!"},
        headers={"X-CSRFToken": token},
    )
    assert accepted.status_code == 201
