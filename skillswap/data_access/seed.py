"""Deterministic seed data for Skill Swap."""

from __future__ import annotations

import sqlite3

from . import (
    admin_messages_dao,
    availability_dao,
    ratings_dao,
    reports_dao,
    skills_dao,
    swap_requests_dao,
    users_dao,
)
from .db import execute, query_one

SEED_PASSWORD = "Password123!"


def seed(db: sqlite3.Connection) -> None:
    """Populate the database with representative demo records.

    Running it twice is a no-op: the second run finds the seed admin and stops.
    """

    if users_dao.get_user_by_username(db, "admin"):
        return

    password_hash = users_dao.hash_password(SEED_PASSWORD)

    users = [
        # username, email, first, last, location, public, admin, banned
        ("admin", "admin@skillswap.dev", "Ada", "Admin", None, True, True, False),
        ("alice", "alice@skillswap.dev", "Alice", "Nguyen", "Portland, OR", True, False, False),
        ("bob", "bob@skillswap.dev", "Bob", "Okafor", "Austin, TX", True, False, False),
        ("carol", "carol@skillswap.dev", "Carol", "Diaz", "Denver, CO", True, False, False),
        ("dave", "dave@skillswap.dev", "Dave", "Kim", "Seattle, WA", False, False, False),
        ("erin", "erin@skillswap.dev", "Erin", "Walsh", "Boston, MA", True, False, True),
    ]

    for username, email, first_name, last_name, location, is_public, is_admin, is_banned in users:
        execute(
            db,
            """
            INSERT OR IGNORE INTO users (
                username, email, password_hash, first_name, last_name,
                location, is_public, is_admin, is_banned
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                username,
                email,
                password_hash,
                first_name,
                last_name,
                location,
                int(is_public),
                int(is_admin),
                int(is_banned),
            ),
        )

    def _user_id(username: str) -> int:
        row = query_one(db, "SELECT user_id FROM users WHERE username = ?", (username,))
        if not row:
            raise ValueError(f"Expected seed user {username} to exist.")
        return row["user_id"]

    skills = [
        {
            "owner": "alice",
            "name": "Guitar",
            "description": "Acoustic guitar basics: chords, strumming and simple songs.",
            "category": "Music",
            "level": "intermediate",
            "type": "offered",
            "tags": ["acoustic", "chords"],
        },
        {
            "owner": "alice",
            "name": "Spanish",
            "description": "Conversational Spanish for travel.",
            "category": "Languages",
            "level": "beginner",
            "type": "wanted",
            "tags": ["conversation"],
        },
        {
            "owner": "bob",
            "name": "Excel",
            "description": "Formulas, pivot tables and dashboards.",
            "category": "Technology",
            "level": "advanced",
            "type": "offered",
            "tags": ["spreadsheets", "pivot tables"],
        },
        {
            "owner": "bob",
            "name": "Guitar",
            "description": "Want to learn to play a few songs.",
            "category": "Music",
            "level": "beginner",
            "type": "wanted",
            "tags": [],
        },
        {
            "owner": "carol",
            "name": "Photography",
            "description": "Portrait lighting and photo editing.",
            "category": "Arts",
            "level": "expert",
            "type": "offered",
            "tags": ["lightroom", "portraits"],
        },
        {
            "owner": "carol",
            "name": "Python Programming",
            "description": "Scripting and data analysis with pandas.",
            "category": "Technology",
            "level": "intermediate",
            "type": "offered",
            "tags": ["pandas"],
            "is_approved": False,
        },
        {
            "owner": "dave",
            "name": "Spanish",
            "description": "Native speaker, happy to tutor.",
            "category": "Languages",
            "level": "expert",
            "type": "offered",
            "tags": [],
        },
        {
            "owner": "erin",
            "name": "Woodworking",
            "description": "Hand tools and joinery.",
            "category": "Crafts",
            "level": "advanced",
            "type": "offered",
            "tags": [],
        },
    ]

    created = {}
    for skill in skills:
        record = skills_dao.create_skill(
            db,
            user_id=_user_id(skill["owner"]),
            name=skill["name"],
            description=skill["description"],
            category=skill["category"],
            level=skill["level"],
            type=skill["type"],
            tags=skill["tags"],
            is_approved=skill.get("is_approved", True),
        )
        created[(skill["owner"], skill["name"])] = record

    availability = [
        ("alice", "saturday", "morning"),
        ("alice", "wednesday", "evening"),
        ("bob", "saturday", "morning"),
        ("carol", "sunday", "afternoon"),
    ]
    for username, day, slot in availability:
        availability_dao.upsert_availability(db, _user_id(username), day, slot)

    # carol and bob already finished a swap and rated each other
    completed = swap_requests_dao.create_swap_request(
        db,
        requester_id=_user_id("carol"),
        provider_id=_user_id("bob"),
        offered_skill_id=created[("carol", "Photography")].skill_id,
        requested_skill_id=created[("bob", "Excel")].skill_id,
        message="Headshots for a spreadsheet crash course?",
        preferred_times=["sunday afternoon"],
        status="completed",
    )
    ratings_dao.create_rating(
        db,
        rater_id=_user_id("carol"),
        ratee_id=_user_id("bob"),
        swap_request_id=completed.request_id,
        rating=5,
        comment="Patient and clear.",
    )
    ratings_dao.create_rating(
        db,
        rater_id=_user_id("bob"),
        ratee_id=_user_id("carol"),
        swap_request_id=completed.request_id,
        rating=4,
        comment="Great photos.",
    )

    swap_requests_dao.create_swap_request(
        db,
        requester_id=_user_id("carol"),
        provider_id=_user_id("alice"),
        offered_skill_id=created[("carol", "Photography")].skill_id,
        requested_skill_id=created[("alice", "Guitar")].skill_id,
        message="Would love a few guitar lessons.",
    )

    admin_messages_dao.create_admin_message(
        db,
        admin_id=_user_id("admin"),
        title="Welcome to Skill Swap",
        content="Post a skill you can teach and one you want to learn to get started.",
        message_type="announcement",
    )

    reports_dao.create_report(
        db,
        reporter_id=_user_id("alice"),
        reason="Spam",
        description="Repeated unsolicited requests.",
        reported_user_id=_user_id("erin"),
    )


if __name__ == "__main__":
    from ..app import create_app
    from .db import get_db

    # expects the schema from `flask --app skillswap.app init-db`
    app = create_app()
    with app.app_context():
        seed(get_db())
    print("Seed data applied.")
