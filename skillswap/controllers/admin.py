"""Administrative moderation routes."""

from __future__ import annotations

from flask import Blueprint, abort, current_app, jsonify
from flask_login import current_user

from ..data_access import admin_messages_dao, skills_dao, users_dao
from ..data_access.db import get_db, query_one
from .auth import admin_required
from .forms import AdminMessageForm
from .responses import handles_failures, message_response

bp = Blueprint("admin", __name__, url_prefix="/api/admin")


def _user_or_abort(user_id: int):
    user = users_dao.get_user_by_id(get_db(), user_id)
    if not user:
        abort(404, description="User not found.")
    return user


@bp.route("/messages", methods=["POST"])
@admin_required
@handles_failures("Failed to create admin message")
def create_message():
    """Publish a broadcast announcement."""

    form = AdminMessageForm.from_json().validate_or_abort()
    message = admin_messages_dao.create_admin_message(
        get_db(),
        admin_id=current_user.user_id,
        title=form.title.data,
        content=form.content.data,
        message_type=form.type.data,
    )
    current_app.logger.info("Admin %s published message %s", current_user.user_id, message.message_id)
    return jsonify(message.to_dict()), 201


@bp.route("/messages")
@handles_failures("Failed to fetch admin messages")
def list_messages():
    """Active broadcasts; readable by anyone."""

    messages = admin_messages_dao.list_active_admin_messages(get_db())
    return jsonify([message.to_dict() for message in messages])


@bp.route("/messages/<int:message_id>/deactivate", methods=["POST"])
@admin_required
@handles_failures("Failed to deactivate admin message")
def deactivate_message(message_id: int):
    db = get_db()
    if not admin_messages_dao.get_admin_message_by_id(db, message_id):
        abort(404, description="Message not found.")
    message = admin_messages_dao.deactivate_admin_message(db, message_id)
    return jsonify(message.to_dict())


@bp.route("/users")
@admin_required
@handles_failures("Failed to fetch users")
def users():
    """List all users for management."""

    return jsonify([user.to_dict() for user in users_dao.list_users(get_db())])


@bp.route("/ban/<int:user_id>", methods=["POST"])
@admin_required
@handles_failures("Failed to ban user")
def ban_user(user_id: int):
    """Ban a user. Their skills and requests stay as they are."""

    _user_or_abort(user_id)
    if user_id == current_user.user_id:
        abort(400, description="You cannot ban your own account.")
    users_dao.ban_user(get_db(), user_id)
    current_app.logger.info("Admin %s banned user %s", current_user.user_id, user_id)
    return message_response("User banned successfully")


@bp.route("/unban/<int:user_id>", methods=["POST"])
@admin_required
@handles_failures("Failed to unban user")
def unban_user(user_id: int):
    _user_or_abort(user_id)
    users_dao.unban_user(get_db(), user_id)
    current_app.logger.info("Admin %s unbanned user %s", current_user.user_id, user_id)
    return message_response("User unbanned successfully")


@bp.route("/skills/<int:skill_id>/approve", methods=["POST"])
@admin_required
@handles_failures("Failed to approve skill")
def approve_skill(skill_id: int):
    """Make a skill eligible for public type listings and search."""

    return _set_skill_approval(skill_id, True)


@bp.route("/skills/<int:skill_id>/unapprove", methods=["POST"])
@admin_required
@handles_failures("Failed to unapprove skill")
def unapprove_skill(skill_id: int):
    """Hide a skill from public type listings and search."""

    return _set_skill_approval(skill_id, False)


def _set_skill_approval(skill_id: int, approved: bool):
    db = get_db()
    if not skills_dao.get_skill_by_id(db, skill_id):
        abort(404, description="Skill not found.")
    skill = skills_dao.update_skill(db, skill_id, is_approved=approved)
    current_app.logger.info(
        "Admin %s set skill %s approved=%s", current_user.user_id, skill_id, approved
    )
    return jsonify(skill.to_dict())


@bp.route("/stats")
@admin_required
@handles_failures("Failed to fetch stats")
def stats():
    """Headline counts for the admin dashboard."""

    db = get_db()
    return jsonify(
        {
            "totalUsers": query_one(db, "SELECT COUNT(*) AS total FROM users")["total"],
            "bannedUsers": query_one(db, "SELECT COUNT(*) AS total FROM users WHERE is_banned = 1")["total"],
            "activeSkills": query_one(db, "SELECT COUNT(*) AS total FROM skills WHERE is_active = 1")["total"],
            "pendingRequests": query_one(
                db, "SELECT COUNT(*) AS total FROM swap_requests WHERE status = 'pending'"
            )["total"],
            "completedSwaps": query_one(
                db, "SELECT COUNT(*) AS total FROM swap_requests WHERE status = 'completed'"
            )["total"],
            "pendingReports": query_one(
                db, "SELECT COUNT(*) AS total FROM reports WHERE status = 'pending'"
            )["total"],
        }
    )
