"""Data access helpers for moderation reports."""

from __future__ import annotations

import sqlite3
from typing import Optional

from ..models.entities import Report, ReportDetails
from . import skills_dao, swap_requests_dao, users_dao
from .db import execute, parse_timestamp, query_all, query_one


def _row_to_report(row) -> Report:
    return Report(
        report_id=row["report_id"],
        reporter_id=row["reporter_id"],
        reported_user_id=row["reported_user_id"],
        reported_skill_id=row["reported_skill_id"],
        reported_request_id=row["reported_request_id"],
        reason=row["reason"],
        description=row["description"],
        status=row["status"],
        created_at=parse_timestamp(row["created_at"]),
    )


def create_report(
    db: sqlite3.Connection,
    reporter_id: int,
    reason: str,
    description: Optional[str] = None,
    reported_user_id: Optional[int] = None,
    reported_skill_id: Optional[int] = None,
    reported_request_id: Optional[int] = None,
) -> Report:
    """File a new report; status starts as ``pending``."""

    cursor = execute(
        db,
        """
        INSERT INTO reports (
            reporter_id, reported_user_id, reported_skill_id, reported_request_id,
            reason, description
        )
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (
            reporter_id,
            reported_user_id,
            reported_skill_id,
            reported_request_id,
            reason,
            description,
        ),
    )
    return get_report_by_id(db, cursor.lastrowid)


def get_report_by_id(db: sqlite3.Connection, report_id: int) -> Report | None:
    row = query_one(db, "SELECT * FROM reports WHERE report_id = ?", (report_id,))
    return _row_to_report(row) if row else None


def list_reports(db: sqlite3.Connection) -> list[ReportDetails]:
    """All reports, newest first, with their targets resolved."""

    rows = query_all(db, "SELECT * FROM reports ORDER BY created_at DESC, report_id DESC")
    details = []
    for row in rows:
        report = _row_to_report(row)
        details.append(
            ReportDetails(
                report=report,
                reporter=users_dao.get_user_by_id(db, report.reporter_id),
                reported_user=(
                    users_dao.get_user_by_id(db, report.reported_user_id)
                    if report.reported_user_id
                    else None
                ),
                reported_skill=(
                    skills_dao.get_skill_by_id(db, report.reported_skill_id)
                    if report.reported_skill_id
                    else None
                ),
                reported_request=(
                    swap_requests_dao.get_swap_request_by_id(db, report.reported_request_id)
                    if report.reported_request_id
                    else None
                ),
            )
        )
    return details


def update_report_status(db: sqlite3.Connection, report_id: int, status: str) -> Report | None:
    """Move a report through pending / reviewed / resolved."""

    execute(db, "UPDATE reports SET status = ? WHERE report_id = ?", (status, report_id))
    return get_report_by_id(db, report_id)
