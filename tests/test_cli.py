"""Flask CLI command tests."""

from __future__ import annotations

from skillswap.data_access import users_dao
from skillswap.data_access.db import get_db


def test_promote_admin(app, runner):
    result = runner.invoke(args=["promote-admin", "alice"])
    assert result.exit_code == 0
    assert "alice is now an admin." in result.output

    with app.app_context():
        assert users_dao.get_user_by_username(get_db(), "alice").is_admin is True


def test_promote_unknown_user_fails(runner):
    result = runner.invoke(args=["promote-admin", "nobody"])
    assert result.exit_code != 0
    assert "No user named 'nobody'" in result.output


def test_init_and_seed_commands(app, runner):
    assert runner.invoke(args=["init-db"]).exit_code == 0
    with app.app_context():
        assert users_dao.list_users(get_db()) == []

    result = runner.invoke(args=["seed-db"])
    assert result.exit_code == 0
    assert "Seed data applied." in result.output

    # seeding twice leaves the data as is
    runner.invoke(args=["seed-db"])
    with app.app_context():
        assert len(users_dao.list_users(get_db())) == 6
