"""Weekly availability routes."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from ..data_access import availability_dao
from ..data_access.db import get_db
from .forms import AvailabilityForm
from .responses import handles_failures

bp = Blueprint("availability", __name__, url_prefix="/api/availability")


@bp.route("", methods=["POST"])
@login_required
@handles_failures("Failed to update availability")
def upsert():
    """Set one (day, time slot) entry for the caller."""

    form = AvailabilityForm.from_json().validate_or_abort()
    slot = availability_dao.upsert_availability(
        get_db(),
        user_id=current_user.user_id,
        day_of_week=form.day_of_week.data,
        time_slot=form.time_slot.data,
        is_available=form.is_available.data,
    )
    return jsonify(slot.to_dict())


@bp.route("/<int:user_id>")
@handles_failures("Failed to fetch availability")
def for_user(user_id: int):
    slots = availability_dao.list_availability_for_user(get_db(), user_id)
    return jsonify([slot.to_dict() for slot in slots])
