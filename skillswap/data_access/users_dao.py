"""Data access helpers for the users table."""

from __future__ import annotations

import sqlite3
from typing import Optional

import bcrypt

from ..models.entities import Skill, User
from .db import execute, parse_timestamp, query_all, query_one
from .skills_dao import row_to_skill

PROFILE_FIELDS = {
    "first_name",
    "last_name",
    "profile_image_url",
    "location",
    "bio",
    "is_public",
}

# Columns an identity provider may overwrite on upsert.
UPSERT_FIELDS = PROFILE_FIELDS | {"username", "email", "password_hash"}
INSERT_REQUIRED_FIELDS = ("username", "email", "password_hash")


def row_to_user(row) -> User:
    return User(
        user_id=row["user_id"],
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        profile_image_url=row["profile_image_url"],
        location=row["location"],
        bio=row["bio"],
        is_public=bool(row["is_public"]),
        is_admin=bool(row["is_admin"]),
        is_banned=bool(row["is_banned"]),
        rating=float(row["rating"] or 0),
        total_ratings=int(row["total_ratings"] or 0),
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
    )


def hash_password(password: str) -> str:
    """Return a bcrypt hash suitable for the ``password_hash`` column."""

    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(stored_hash: str, candidate: str) -> bool:
    """Compare a stored hash against a candidate password."""

    if not stored_hash:
        return False
    return bcrypt.checkpw(candidate.encode("utf-8"), stored_hash.encode("utf-8"))


def create_user(
    db: sqlite3.Connection,
    username: str,
    email: str,
    password_hash: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    is_admin: bool = False,
) -> User:
    """Insert a new user and return the persisted entity."""

    cursor = execute(
        db,
        """
        INSERT INTO users (username, email, password_hash, first_name, last_name, is_admin)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (username, email, password_hash, first_name, last_name, int(is_admin)),
    )
    return get_user_by_id(db, cursor.lastrowid)


def get_user_by_id(db: sqlite3.Connection, user_id: int) -> User | None:
    """Fetch a user by primary key."""

    row = query_one(db, "SELECT * FROM users WHERE user_id = ?", (user_id,))
    return row_to_user(row) if row else None


def get_user_by_username(db: sqlite3.Connection, username: str) -> User | None:
    """Fetch a user by unique username."""

    row = query_one(db, "SELECT * FROM users WHERE username = ?", (username,))
    return row_to_user(row) if row else None


def get_user_by_email(db: sqlite3.Connection, email: str) -> User | None:
    """Fetch a user by unique email address."""

    row = query_one(db, "SELECT * FROM users WHERE email = ?", (email,))
    return row_to_user(row) if row else None


def _set_clause(updates: dict) -> tuple[str, list]:
    columns = ", ".join(f"{key} = ?" for key in updates)
    params = [int(value) if isinstance(value, bool) else value for value in updates.values()]
    return columns, params


def update_user(db: sqlite3.Connection, user_id: int, **fields) -> User | None:
    """Update whitelisted profile fields and return the fresh record."""

    updates = {key: value for key, value in fields.items() if key in PROFILE_FIELDS}
    if updates:
        columns, params = _set_clause(updates)
        execute(
            db,
            f"UPDATE users SET {columns}, updated_at = CURRENT_TIMESTAMP WHERE user_id = ?",
            params + [user_id],
        )
    return get_user_by_id(db, user_id)


def upsert_user(db: sqlite3.Connection, user_id: int, **fields) -> User:
    """Insert the user with an explicit id, or update it when it already exists.

    Inserting requires ``username``, ``email`` and ``password_hash``; raises
    ``ValueError`` when any of them is missing.
    """

    values = {key: value for key, value in fields.items() if key in UPSERT_FIELDS}
    if get_user_by_id(db, user_id) is None:
        missing = [name for name in INSERT_REQUIRED_FIELDS if values.get(name) is None]
        if missing:
            raise ValueError(f"Cannot insert user {user_id} without {', '.join(missing)}.")
        columns = ["user_id", *values.keys()]
        placeholders = ", ".join("?" for _ in columns)
        _, params = _set_clause(values)
        execute(
            db,
            f"INSERT INTO users ({', '.join(columns)}) VALUES ({placeholders})",
            [user_id, *params],
        )
    elif values:
        columns, params = _set_clause(values)
        execute(
            db,
            f"UPDATE users SET {columns}, updated_at = CURRENT_TIMESTAMP WHERE user_id = ?",
            params + [user_id],
        )
    return get_user_by_id(db, user_id)


def list_users(db: sqlite3.Connection) -> list[User]:
    """Return every user, newest accounts first."""

    rows = query_all(db, "SELECT * FROM users ORDER BY created_at DESC, user_id DESC")
    return [row_to_user(row) for row in rows]


def list_users_with_skills(db: sqlite3.Connection) -> list[tuple[User, list[Skill]]]:
    """Public, non-banned users ordered by rating, each with all of their skills.

    Skills are attached regardless of their own active/approved flags; callers
    decide what to display.
    """

    users = [
        row_to_user(row)
        for row in query_all(
            db,
            """
            SELECT * FROM users
            WHERE is_public = 1 AND is_banned = 0
            ORDER BY rating DESC, user_id ASC
            """,
        )
    ]
    if not users:
        return []

    placeholders = ", ".join("?" for _ in users)
    skill_rows = query_all(
        db,
        f"SELECT * FROM skills WHERE user_id IN ({placeholders}) ORDER BY skill_id ASC",
        [user.user_id for user in users],
    )
    skills_by_user: dict[int, list[Skill]] = {user.user_id: [] for user in users}
    for row in skill_rows:
        skills_by_user[row["user_id"]].append(row_to_skill(row))
    return [(user, skills_by_user[user.user_id]) for user in users]


def set_admin(db: sqlite3.Connection, user_id: int, is_admin: bool) -> None:
    """Grant or revoke the admin flag."""

    execute(
        db,
        "UPDATE users SET is_admin = ?, updated_at = CURRENT_TIMESTAMP WHERE user_id = ?",
        (int(is_admin), user_id),
    )


def ban_user(db: sqlite3.Connection, user_id: int) -> None:
    """Flag a user as banned; existing skills and requests are left untouched."""

    execute(
        db,
        "UPDATE users SET is_banned = 1, updated_at = CURRENT_TIMESTAMP WHERE user_id = ?",
        (user_id,),
    )


def unban_user(db: sqlite3.Connection, user_id: int) -> None:
    """Lift a ban."""

    execute(
        db,
        "UPDATE users SET is_banned = 0, updated_at = CURRENT_TIMESTAMP WHERE user_id = ?",
        (user_id,),
    )
