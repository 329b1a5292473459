"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Callable, Generator

import pytest
from flask import Flask
from flask.testing import FlaskClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from skillswap.app import create_app
from skillswap.config import TestingConfig
from skillswap.data_access import seed, users_dao
from skillswap.data_access.db import get_db, init_db

PASSWORD = seed.SEED_PASSWORD


class _TestConfig(TestingConfig):
    DATABASE_URL: str = ""


def login(client: FlaskClient, username: str, password: str = PASSWORD):
    return client.post("/api/login", json={"username": username, "password": password})


@pytest.fixture()
def app(tmp_path: Path) -> Generator[Flask, None, None]:
    """Configure a Flask application for testing with a temp SQLite database."""

    db_path = tmp_path / "test.db"
    _TestConfig.DATABASE_URL = f"sqlite:///{db_path}"
    application = create_app(_TestConfig)
    init_db(application)
    with application.app_context():
        seed.seed(get_db())
    yield application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Anonymous Flask test client."""

    return app.test_client()


@pytest.fixture()
def runner(app: Flask):
    """Flask CLI runner."""

    return app.test_cli_runner()


@pytest.fixture()
def db(app: Flask):
    """Provide a database connection for direct DAO calls.

    Do not combine with HTTP requests: the test client would reuse this
    application context and its cached login state.
    """

    with app.app_context():
        yield get_db()


@pytest.fixture()
def client_for(app: Flask) -> Callable[[str], FlaskClient]:
    """Return a factory producing a test client signed in as ``username``."""

    def _make(username: str) -> FlaskClient:
        signed_in = app.test_client()
        response = login(signed_in, username)
        assert response.status_code == 200, response.get_json()
        return signed_in

    return _make


@pytest.fixture()
def user_ids(app: Flask) -> dict[str, int]:
    """Seeded usernames mapped to their ids."""

    with app.app_context():
        db = get_db()
        return {
            username: users_dao.get_user_by_username(db, username).user_id
            for username in ("admin", "alice", "bob", "carol", "dave", "erin")
        }


@pytest.fixture()
def skill_ids(app: Flask) -> dict[tuple[str, str], int]:
    """Seeded ``(owner username, skill name)`` pairs mapped to skill ids."""

    with app.app_context():
        rows = get_db().execute(
            "SELECT u.username, s.name, s.skill_id FROM skills s JOIN users u ON u.user_id = s.user_id"
        ).fetchall()
        return {(row["username"], row["name"]): row["skill_id"] for row in rows}
