"""Data access helpers for post-swap ratings and user rating aggregates."""

from __future__ import annotations

import sqlite3
from typing import Optional

from ..models.entities import Rating
from .db import execute, parse_timestamp, query_all, query_one


def _row_to_rating(row) -> Rating:
    return Rating(
        rating_id=row["rating_id"],
        rater_id=row["rater_id"],
        ratee_id=row["ratee_id"],
        swap_request_id=row["swap_request_id"],
        rating=row["rating"],
        comment=row["comment"],
        created_at=parse_timestamp(row["created_at"]),
    )


def create_rating(
    db: sqlite3.Connection,
    rater_id: int,
    ratee_id: int,
    swap_request_id: int,
    rating: int,
    comment: Optional[str] = None,
) -> Rating:
    """Insert a rating, then recompute the ratee's aggregate.

    The two writes commit separately. If the refresh never runs the aggregate
    is stale until the ratee's next rating, which recomputes from scratch.
    """

    cursor = execute(
        db,
        """
        INSERT INTO ratings (rater_id, ratee_id, swap_request_id, rating, comment)
        VALUES (?, ?, ?, ?, ?)
        """,
        (rater_id, ratee_id, swap_request_id, rating, comment),
    )
    refresh_user_rating(db, ratee_id)
    return get_rating_by_id(db, cursor.lastrowid)


def get_rating_by_id(db: sqlite3.Connection, rating_id: int) -> Rating | None:
    """Fetch a rating by primary key."""

    row = query_one(db, "SELECT * FROM ratings WHERE rating_id = ?", (rating_id,))
    return _row_to_rating(row) if row else None


def list_ratings_for_user(db: sqlite3.Connection, user_id: int) -> list[Rating]:
    """Ratings received by a user, newest first."""

    rows = query_all(
        db,
        """
        SELECT * FROM ratings
        WHERE ratee_id = ?
        ORDER BY created_at DESC, rating_id DESC
        """,
        (user_id,),
    )
    return [_row_to_rating(row) for row in rows]


def list_ratings_for_swap(db: sqlite3.Connection, swap_request_id: int) -> list[Rating]:
    rows = query_all(
        db,
        "SELECT * FROM ratings WHERE swap_request_id = ? ORDER BY rating_id ASC",
        (swap_request_id,),
    )
    return [_row_to_rating(row) for row in rows]


def refresh_user_rating(db: sqlite3.Connection, user_id: int) -> tuple[float, int] | None:
    """Store the mean and count of every rating the user has received.

    Returns ``(average, count)``, or ``None`` when the user has no ratings, in
    which case the stored aggregate is left as is.
    """

    row = query_one(
        db,
        "SELECT AVG(rating) AS avg_rating, COUNT(*) AS total FROM ratings WHERE ratee_id = ?",
        (user_id,),
    )
    if not row or not row["total"]:
        return None
    average, total = float(row["avg_rating"]), int(row["total"])
    execute(
        db,
        """
        UPDATE users
        SET rating = ?, total_ratings = ?, updated_at = CURRENT_TIMESTAMP
        WHERE user_id = ?
        """,
        (average, total, user_id),
    )
    return average, total
