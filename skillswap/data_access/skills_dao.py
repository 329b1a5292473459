"""Data access helpers for skills."""

from __future__ import annotations

import json
import sqlite3
from typing import Iterable, Optional

from ..models.entities import Skill, User
from .db import execute, parse_timestamp, query_all, query_one

MUTABLE_FIELDS = {
    "name",
    "description",
    "category",
    "level",
    "type",
    "tags",
    "is_active",
    "is_approved",
}


def _dump_list(values: Optional[Iterable[str]]) -> str:
    return json.dumps(list(values or []))


def _load_list(raw: Optional[str]) -> list[str]:
    return list(json.loads(raw)) if raw else []


def row_to_skill(row) -> Skill:
    return Skill(
        skill_id=row["skill_id"],
        user_id=row["user_id"],
        name=row["name"],
        description=row["description"],
        category=row["category"],
        level=row["level"],
        type=row["type"],
        tags=_load_list(row["tags"]),
        is_active=bool(row["is_active"]),
        is_approved=bool(row["is_approved"]),
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
    )


def create_skill(
    db: sqlite3.Connection,
    user_id: int,
    name: str,
    category: str,
    level: str,
    type: str,  # pylint: disable=redefined-builtin
    description: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
    is_active: bool = True,
    is_approved: bool = True,
) -> Skill:
    """Insert a new skill owned by ``user_id``."""

    cursor = execute(
        db,
        """
        INSERT INTO skills (
            user_id, name, description, category, level, type, tags, is_active, is_approved
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            name,
            description,
            category,
            level,
            type,
            _dump_list(tags),
            int(is_active),
            int(is_approved),
        ),
    )
    return get_skill_by_id(db, cursor.lastrowid)


def get_skill_by_id(db: sqlite3.Connection, skill_id: int) -> Skill | None:
    """Fetch a skill regardless of its visibility flags."""

    row = query_one(db, "SELECT * FROM skills WHERE skill_id = ?", (skill_id,))
    return row_to_skill(row) if row else None


def list_skills_for_user(db: sqlite3.Connection, user_id: int) -> list[Skill]:
    """Active skills owned by a user, newest first."""

    rows = query_all(
        db,
        """
        SELECT * FROM skills
        WHERE user_id = ? AND is_active = 1
        ORDER BY created_at DESC, skill_id DESC
        """,
        (user_id,),
    )
    return [row_to_skill(row) for row in rows]


def list_skills_by_type(db: sqlite3.Connection, skill_type: str) -> list[Skill]:
    """Active and approved skills of one type, newest first."""

    rows = query_all(
        db,
        """
        SELECT * FROM skills
        WHERE type = ? AND is_active = 1 AND is_approved = 1
        ORDER BY created_at DESC, skill_id DESC
        """,
        (skill_type,),
    )
    return [row_to_skill(row) for row in rows]


def search_skills(
    db: sqlite3.Connection,
    keyword: Optional[str] = None,
    category: Optional[str] = None,
) -> list[tuple[Skill, User]]:
    """Search visible skills by name or description, best-rated owners first."""

    from .users_dao import get_user_by_id  # pylint: disable=import-outside-toplevel

    query = """
        SELECT s.*
        FROM skills s
        JOIN users u ON u.user_id = s.user_id
        WHERE s.is_active = 1 AND s.is_approved = 1
    """
    params: list = []
    if keyword:
        query += " AND (py_lower(s.name) LIKE ? OR py_lower(coalesce(s.description, '')) LIKE ?)"
        like_term = f"%{keyword.lower()}%"
        params.extend([like_term, like_term])
    if category:
        query += " AND s.category = ?"
        params.append(category)
    query += " ORDER BY u.rating DESC, s.skill_id ASC"

    results = []
    owners: dict[int, User] = {}
    for row in query_all(db, query, params):
        skill = row_to_skill(row)
        if skill.user_id not in owners:
            owners[skill.user_id] = get_user_by_id(db, skill.user_id)
        results.append((skill, owners[skill.user_id]))
    return results


def update_skill(db: sqlite3.Connection, skill_id: int, **fields) -> Skill | None:
    """Update mutable fields for a skill; owner and id never change."""

    updates = {key: value for key, value in fields.items() if key in MUTABLE_FIELDS}
    if updates:
        if "tags" in updates:
            updates["tags"] = _dump_list(updates["tags"])
        columns = ", ".join(f"{key} = ?" for key in updates)
        params = [int(value) if isinstance(value, bool) else value for value in updates.values()]
        execute(
            db,
            f"UPDATE skills SET {columns}, updated_at = CURRENT_TIMESTAMP WHERE skill_id = ?",
            params + [skill_id],
        )
    return get_skill_by_id(db, skill_id)


def skill_in_use(db: sqlite3.Connection, skill_id: int) -> bool:
    """Return True when any swap request references the skill."""

    row = query_one(
        db,
        """
        SELECT 1 FROM swap_requests
        WHERE offered_skill_id = ? OR requested_skill_id = ?
        """,
        (skill_id, skill_id),
    )
    return row is not None


def delete_skill(db: sqlite3.Connection, skill_id: int) -> None:
    """Remove a skill. Fails with ``IntegrityError`` while swap requests reference it."""

    execute(db, "DELETE FROM skills WHERE skill_id = ?", (skill_id,))


def list_categories(db: sqlite3.Connection) -> list[str]:
    """Distinct categories of visible skills, for filter chips."""

    rows = query_all(
        db,
        """
        SELECT DISTINCT category FROM skills
        WHERE is_active = 1 AND is_approved = 1
        ORDER BY category ASC
        """,
    )
    return [row["category"] for row in rows if row["category"]]
