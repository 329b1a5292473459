"""Data access helpers for admin broadcast messages."""

from __future__ import annotations

import sqlite3

from ..models.entities import AdminMessage
from .db import execute, parse_timestamp, query_all, query_one


def _row_to_message(row) -> AdminMessage:
    return AdminMessage(
        message_id=row["message_id"],
        admin_id=row["admin_id"],
        title=row["title"],
        content=row["content"],
        type=row["type"],
        is_active=bool(row["is_active"]),
        created_at=parse_timestamp(row["created_at"]),
    )


def create_admin_message(
    db: sqlite3.Connection,
    admin_id: int,
    title: str,
    content: str,
    message_type: str,
    is_active: bool = True,
) -> AdminMessage:
    """Publish a new broadcast."""

    cursor = execute(
        db,
        """
        INSERT INTO admin_messages (admin_id, title, content, type, is_active)
        VALUES (?, ?, ?, ?, ?)
        """,
        (admin_id, title, content, message_type, int(is_active)),
    )
    return get_admin_message_by_id(db, cursor.lastrowid)


def get_admin_message_by_id(db: sqlite3.Connection, message_id: int) -> AdminMessage | None:
    row = query_one(db, "SELECT * FROM admin_messages WHERE message_id = ?", (message_id,))
    return _row_to_message(row) if row else None


def list_active_admin_messages(db: sqlite3.Connection) -> list[AdminMessage]:
    """Active broadcasts, newest first."""

    rows = query_all(
        db,
        """
        SELECT * FROM admin_messages
        WHERE is_active = 1
        ORDER BY created_at DESC, message_id DESC
        """,
    )
    return [_row_to_message(row) for row in rows]


def deactivate_admin_message(db: sqlite3.Connection, message_id: int) -> AdminMessage | None:
    """Hide a broadcast from the public feed."""

    execute(db, "UPDATE admin_messages SET is_active = 0 WHERE message_id = ?", (message_id,))
    return get_admin_message_by_id(db, message_id)
