"""Skill listing, search and management routes."""

from __future__ import annotations

from flask import Blueprint, abort, current_app, jsonify, request
from flask_login import current_user, login_required

from ..data_access import skills_dao
from ..data_access.db import get_db
from ..models.entities import SKILL_TYPES, Skill
from .forms import SkillForm, SkillUpdateForm
from .responses import handles_failures, message_response

bp = Blueprint("skills", __name__, url_prefix="/api/skills")


def _owned_skill_or_abort(skill_id: int) -> Skill:
    skill = skills_dao.get_skill_by_id(get_db(), skill_id)
    if not skill:
        abort(404, description="Skill not found.")
    if skill.user_id != current_user.user_id:
        abort(403, description="You can only change your own skills.")
    return skill


@bp.route("", methods=["POST"])
@login_required
@handles_failures("Failed to create skill")
def create():
    """Create a skill owned by the caller."""

    form = SkillForm.from_json().validate_or_abort()
    skill = skills_dao.create_skill(
        get_db(),
        user_id=current_user.user_id,
        name=form.name.data,
        description=form.description.data or None,
        category=form.category.data,
        level=form.level.data,
        type=form.type.data,
        tags=form.tags.data,
        is_active=form.is_active.data,
    )
    return jsonify(skill.to_dict()), 201


@bp.route("/user/<int:user_id>")
@handles_failures("Failed to fetch skills")
def for_user(user_id: int):
    """Active skills owned by a user."""

    skills = skills_dao.list_skills_for_user(get_db(), user_id)
    return jsonify([skill.to_dict() for skill in skills])


@bp.route("/type/<skill_type>")
@handles_failures("Failed to fetch skills")
def by_type(skill_type: str):
    """Active, approved skills that are offered or wanted."""

    if skill_type not in SKILL_TYPES:
        abort(400, description=f"Skill type must be one of: {', '.join(SKILL_TYPES)}.")
    skills = skills_dao.list_skills_by_type(get_db(), skill_type)
    return jsonify([skill.to_dict() for skill in skills])


@bp.route("/search")
@handles_failures("Failed to search skills")
def search():
    """Keyword search over name and description, optionally within a category."""

    keyword = (request.args.get("q") or "").strip()
    category = (request.args.get("category") or "").strip()
    results = skills_dao.search_skills(get_db(), keyword=keyword or None, category=category or None)
    return jsonify([{"skill": skill.to_dict(), "user": owner.to_public_dict()} for skill, owner in results])


@bp.route("/categories")
@handles_failures("Failed to fetch categories")
def categories():
    return jsonify(skills_dao.list_categories(get_db()))


@bp.route("/<int:skill_id>", methods=["PUT"])
@login_required
@handles_failures("Failed to update skill")
def update(skill_id: int):
    """Update the caller's skill with whichever fields were sent."""

    _owned_skill_or_abort(skill_id)
    form = SkillUpdateForm.from_json().validate_or_abort()
    skill = skills_dao.update_skill(get_db(), skill_id, **form.submitted_data())
    return jsonify(skill.to_dict())


@bp.route("/<int:skill_id>", methods=["DELETE"])
@login_required
@handles_failures("Failed to delete skill")
def delete(skill_id: int):
    """Delete the caller's skill unless a swap request still points at it."""

    _owned_skill_or_abort(skill_id)
    db = get_db()
    if skills_dao.skill_in_use(db, skill_id):
        abort(409, description="Skill is part of a swap request; deactivate it instead.")
    skills_dao.delete_skill(db, skill_id)
    current_app.logger.info("User %s deleted skill %s", current_user.user_id, skill_id)
    return message_response("Skill deleted successfully")
