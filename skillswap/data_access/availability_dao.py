"""Data access helpers for weekly availability slots."""

from __future__ import annotations

import sqlite3

from ..models.entities import Availability
from .db import execute, parse_timestamp, query_all, query_one


def _row_to_availability(row) -> Availability:
    return Availability(
        availability_id=row["availability_id"],
        user_id=row["user_id"],
        day_of_week=row["day_of_week"],
        time_slot=row["time_slot"],
        is_available=bool(row["is_available"]),
        created_at=parse_timestamp(row["created_at"]),
    )


def get_availability(
    db: sqlite3.Connection, user_id: int, day_of_week: str, time_slot: str
) -> Availability | None:
    """Fetch the single row for a (user, day, slot) triple."""

    row = query_one(
        db,
        """
        SELECT * FROM availability
        WHERE user_id = ? AND day_of_week = ? AND time_slot = ?
        """,
        (user_id, day_of_week, time_slot),
    )
    return _row_to_availability(row) if row else None


def get_availability_by_id(db: sqlite3.Connection, availability_id: int) -> Availability | None:
    row = query_one(db, "SELECT * FROM availability WHERE availability_id = ?", (availability_id,))
    return _row_to_availability(row) if row else None


def upsert_availability(
    db: sqlite3.Connection,
    user_id: int,
    day_of_week: str,
    time_slot: str,
    is_available: bool = True,
) -> Availability:
    """Update the existing slot for the triple, or insert a new one."""

    existing = get_availability(db, user_id, day_of_week, time_slot)
    if existing:
        execute(
            db,
            "UPDATE availability SET is_available = ? WHERE availability_id = ?",
            (int(is_available), existing.availability_id),
        )
        return get_availability_by_id(db, existing.availability_id)

    cursor = execute(
        db,
        """
        INSERT INTO availability (user_id, day_of_week, time_slot, is_available)
        VALUES (?, ?, ?, ?)
        """,
        (user_id, day_of_week, time_slot, int(is_available)),
    )
    return get_availability_by_id(db, cursor.lastrowid)


def list_availability_for_user(db: sqlite3.Connection, user_id: int) -> list[Availability]:
    """Slots in calendar order: Monday to Sunday, morning to evening."""

    rows = query_all(
        db,
        """
        SELECT * FROM availability
        WHERE user_id = ?
        ORDER BY
            CASE day_of_week
                WHEN 'monday' THEN 1
                WHEN 'tuesday' THEN 2
                WHEN 'wednesday' THEN 3
                WHEN 'thursday' THEN 4
                WHEN 'friday' THEN 5
                WHEN 'saturday' THEN 6
                WHEN 'sunday' THEN 7
                ELSE 8
            END,
            CASE time_slot
                WHEN 'morning' THEN 1
                WHEN 'afternoon' THEN 2
                WHEN 'evening' THEN 3
                ELSE 4
            END
        """,
        (user_id,),
    )
    return [_row_to_availability(row) for row in rows]
