"""SQLite connection management utilities."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

import click
from flask import Flask, current_app, g

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "schema.sql"


def connect(database_url: str) -> sqlite3.Connection:
    """Instantiate a SQLite connection for the provided URL."""

    if database_url == "sqlite:///:memory:":
        db_path = ":memory:"
    elif database_url.startswith("sqlite:///"):
        db_path = database_url.replace("sqlite:///", "", 1)
    elif database_url.startswith("sqlite://"):
        db_path = database_url.replace("sqlite://", "", 1)
    else:
        raise ValueError("Only sqlite database URLs are supported in this implementation.")

    connection = sqlite3.connect(db_path, detect_types=sqlite3.PARSE_DECLTYPES, check_same_thread=False)
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON")
    # SQLite's lower() only folds ASCII
    connection.create_function("py_lower", 1, _py_lower, deterministic=True)
    return connection


def _py_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def get_db() -> sqlite3.Connection:
    """Return the connection owned by the current application context.

    The connection is opened lazily on first use and closed by ``close_db``
    when the context tears down. Request handlers fetch it once and hand it to
    the DAO functions explicitly.
    """

    if "db_conn" not in g:
        database_url = current_app.config["DATABASE_URL"]
        g.db_conn = connect(database_url)
    return g.db_conn  # type: ignore[return-value]


def close_db(exception: BaseException | None = None) -> None:
    """Close the stored connection at the end of the request."""

    connection = g.pop("db_conn", None)
    if connection is not None:
        connection.close()


def execute(db: sqlite3.Connection, query: str, params: Sequence[Any] | None = None) -> sqlite3.Cursor:
    """Execute a write query and commit immediately."""

    cursor = db.execute(query, params or [])
    db.commit()
    return cursor


def query_all(db: sqlite3.Connection, query: str, params: Sequence[Any] | None = None) -> list[sqlite3.Row]:
    """Execute a read query returning multiple rows."""

    cursor = db.execute(query, params or [])
    return cursor.fetchall()


def query_one(db: sqlite3.Connection, query: str, params: Sequence[Any] | None = None) -> sqlite3.Row | None:
    """Execute a read query returning a single row."""

    cursor = db.execute(query, params or [])
    return cursor.fetchone()


def parse_timestamp(value: Any) -> datetime:
    """Convert SQLite ``CURRENT_TIMESTAMP`` text into a datetime."""

    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace(" ", "T"))


def init_db(app: Flask | None = None) -> None:
    """Initialize the database schema by executing the SQL script."""

    app = app or current_app
    with app.app_context():
        db = get_db()
        with SCHEMA_PATH.open("r", encoding="utf-8") as sql_file:
            db.executescript(sql_file.read())
        db.commit()


def init_app(app: Flask) -> None:
    """Wire database helpers and CLI commands into the Flask app."""

    app.teardown_appcontext(close_db)

    @app.cli.command("init-db")
    def init_db_command() -> None:
        """Clear existing data and create new tables."""

        init_db(app)
        click.echo("Initialized the database.")

    @app.cli.command("seed-db")
    def seed_db_command() -> None:
        """Populate the database with demo users, skills and swaps."""

        from . import seed  # pylint: disable=import-outside-toplevel

        seed.seed(get_db())
        click.echo("Seed data applied.")

    @app.cli.command("promote-admin")
    @click.argument("username")
    def promote_admin_command(username: str) -> None:
        """Grant the admin flag to an existing account."""

        from . import users_dao  # pylint: disable=import-outside-toplevel

        db = get_db()
        user = users_dao.get_user_by_username(db, username)
        if user is None:
            raise click.ClickException(f"No user named '{username}'.")
        users_dao.set_admin(db, user.user_id, True)
        click.echo(f"{username} is now an admin.")
