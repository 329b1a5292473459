"""Profile and directory routes."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from ..data_access import users_dao
from ..data_access.db import get_db
from .forms import ProfileForm
from .responses import handles_failures

bp = Blueprint("users", __name__, url_prefix="/api/users")


@bp.route("/profile", methods=["PUT"])
@login_required
@handles_failures("Failed to update profile")
def update_profile():
    """Update the caller's own profile with whichever fields were sent."""

    form = ProfileForm.from_json().validate_or_abort()
    user = users_dao.update_user(get_db(), current_user.user_id, **form.submitted_data())
    return jsonify(user.to_dict())


@bp.route("/with-skills")
@handles_failures("Failed to fetch users")
def with_skills():
    """Public, non-banned users with their skills attached."""

    payload = []
    for user, skills in users_dao.list_users_with_skills(get_db()):
        entry = user.to_public_dict()
        entry["skills"] = [skill.to_dict() for skill in skills]
        payload.append(entry)
    return jsonify(payload)
