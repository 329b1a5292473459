"""Data access helpers for swap requests.

The storage layer stores whatever status it is given; the lifecycle rules
live in the swap request blueprint.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Iterable, Optional

from ..models.entities import SwapRequest, SwapRequestDetails
from . import skills_dao, users_dao
from .db import execute, parse_timestamp, query_all, query_one


def _row_to_swap_request(row) -> SwapRequest:
    return SwapRequest(
        request_id=row["request_id"],
        requester_id=row["requester_id"],
        provider_id=row["provider_id"],
        offered_skill_id=row["offered_skill_id"],
        requested_skill_id=row["requested_skill_id"],
        message=row["message"],
        status=row["status"],
        preferred_times=json.loads(row["preferred_times"]) if row["preferred_times"] else [],
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
    )


def create_swap_request(
    db: sqlite3.Connection,
    requester_id: int,
    provider_id: int,
    offered_skill_id: int,
    requested_skill_id: int,
    message: Optional[str] = None,
    preferred_times: Optional[Iterable[str]] = None,
    status: Optional[str] = None,
) -> SwapRequest:
    """Insert a new swap request; status defaults to ``pending``."""

    cursor = execute(
        db,
        """
        INSERT INTO swap_requests (
            requester_id, provider_id, offered_skill_id, requested_skill_id,
            message, preferred_times, status
        )
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            requester_id,
            provider_id,
            offered_skill_id,
            requested_skill_id,
            message,
            json.dumps(list(preferred_times or [])),
            status or "pending",
        ),
    )
    return get_swap_request_by_id(db, cursor.lastrowid)


def get_swap_request_by_id(db: sqlite3.Connection, request_id: int) -> SwapRequest | None:
    """Fetch a bare swap request."""

    row = query_one(db, "SELECT * FROM swap_requests WHERE request_id = ?", (request_id,))
    return _row_to_swap_request(row) if row else None


def _with_details(db: sqlite3.Connection, request: SwapRequest) -> SwapRequestDetails:
    return SwapRequestDetails(
        request=request,
        requester=users_dao.get_user_by_id(db, request.requester_id),
        provider=users_dao.get_user_by_id(db, request.provider_id),
        offered_skill=skills_dao.get_skill_by_id(db, request.offered_skill_id),
        requested_skill=skills_dao.get_skill_by_id(db, request.requested_skill_id),
    )


def get_swap_request_details(db: sqlite3.Connection, request_id: int) -> SwapRequestDetails | None:
    """Fetch a swap request with both parties and both skills."""

    request = get_swap_request_by_id(db, request_id)
    return _with_details(db, request) if request else None


def list_swap_requests_for_user(db: sqlite3.Connection, user_id: int) -> list[SwapRequestDetails]:
    """Requests the user sent or received, newest first."""

    rows = query_all(
        db,
        """
        SELECT * FROM swap_requests
        WHERE requester_id = ? OR provider_id = ?
        ORDER BY created_at DESC, request_id DESC
        """,
        (user_id, user_id),
    )
    return [_with_details(db, _row_to_swap_request(row)) for row in rows]


def update_swap_request_status(db: sqlite3.Connection, request_id: int, status: str) -> SwapRequest | None:
    """Set the status and stamp ``updated_at``."""

    execute(
        db,
        """
        UPDATE swap_requests
        SET status = ?, updated_at = CURRENT_TIMESTAMP
        WHERE request_id = ?
        """,
        (status, request_id),
    )
    return get_swap_request_by_id(db, request_id)


def delete_swap_request(db: sqlite3.Connection, request_id: int) -> None:
    """Hard delete; this is how a pending request is cancelled."""

    execute(db, "DELETE FROM swap_requests WHERE request_id = ?", (request_id,))


def count_by_status(db: sqlite3.Connection, user_id: int) -> dict[str, int]:
    """Per-status counts of the user's sent and received requests."""

    rows = query_all(
        db,
        """
        SELECT status, COUNT(*) AS total
        FROM swap_requests
        WHERE requester_id = ? OR provider_id = ?
        GROUP BY status
        """,
        (user_id, user_id),
    )
    return {row["status"]: row["total"] for row in rows}
