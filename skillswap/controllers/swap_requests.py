"""Swap request workflow blueprint.

Lifecycle::

    pending --(provider)--> accepted --(either party)--> completed
    pending --(provider)--> rejected
    pending --(requester deletes)--> gone

The storage layer accepts any status; the rules above are enforced here.
"""

from __future__ import annotations

from flask import Blueprint, abort, current_app, jsonify
from flask_login import current_user, login_required

from ..data_access import skills_dao, swap_requests_dao
from ..data_access.db import get_db
from ..models.entities import SwapRequest
from .forms import StatusForm, SwapRequestForm, ValidationFailed
from .responses import handles_failures, message_response

bp = Blueprint("swap_requests", __name__, url_prefix="/api/swap-requests")

PROVIDER = "provider"
EITHER_PARTY = "either"

# (current status, requested status) -> who may make the move
TRANSITIONS = {
    ("pending", "accepted"): PROVIDER,
    ("pending", "rejected"): PROVIDER,
    ("accepted", "completed"): EITHER_PARTY,
}


def check_transition(swap: SwapRequest, new_status: str, actor_id: int) -> None:
    """Abort unless ``actor_id`` may move ``swap`` to ``new_status``."""

    allowed = TRANSITIONS.get((swap.status, new_status))
    if allowed is None:
        abort(409, description=f"Cannot change a {swap.status} request to {new_status}.")
    if allowed == PROVIDER and actor_id != swap.provider_id:
        abort(403, description=f"Only the provider can mark a request as {new_status}.")
    if allowed == EITHER_PARTY and not swap.involves(actor_id):
        abort(403, description="Only the requester or provider can update this request.")


def _swap_or_abort(request_id: int) -> SwapRequest:
    swap = swap_requests_dao.get_swap_request_by_id(get_db(), request_id)
    if not swap:
        abort(404, description="Swap request not found.")
    return swap


def _ensure_party_or_admin(swap: SwapRequest) -> None:
    if not swap.involves(current_user.user_id) and not current_user.is_admin:
        abort(403, description="You are not part of this swap request.")


@bp.route("", methods=["POST"])
@login_required
@handles_failures("Failed to create swap request")
def create():
    """Propose swapping one of the caller's skills for someone else's."""

    form = SwapRequestForm.from_json().validate_or_abort()
    db = get_db()
    offered = skills_dao.get_skill_by_id(db, form.offered_skill_id.data)
    requested = skills_dao.get_skill_by_id(db, form.requested_skill_id.data)

    errors = {}
    if not offered:
        errors["offered_skill_id"] = ["Skill not found."]
    elif offered.user_id != current_user.user_id:
        errors["offered_skill_id"] = ["You can only offer your own skills."]
    if not requested or not requested.is_active:
        errors["requested_skill_id"] = ["Skill not found."]
    elif requested.user_id == current_user.user_id:
        errors["requested_skill_id"] = ["You cannot request your own skill."]
    elif form.provider_id.data is not None and form.provider_id.data != requested.user_id:
        errors["provider_id"] = ["Provider does not own the requested skill."]
    if errors:
        raise ValidationFailed(errors)

    swap = swap_requests_dao.create_swap_request(
        db,
        requester_id=current_user.user_id,
        provider_id=requested.user_id,
        offered_skill_id=offered.skill_id,
        requested_skill_id=requested.skill_id,
        message=form.message.data or None,
        preferred_times=form.preferred_times.data,
    )
    current_app.logger.info(
        "Swap request %s created: user %s offers skill %s for skill %s of user %s",
        swap.request_id,
        swap.requester_id,
        swap.offered_skill_id,
        swap.requested_skill_id,
        swap.provider_id,
    )
    return jsonify(swap.to_dict()), 201


@bp.route("/user")
@login_required
@handles_failures("Failed to fetch swap requests")
def for_current_user():
    """Requests the caller sent or received."""

    details = swap_requests_dao.list_swap_requests_for_user(get_db(), current_user.user_id)
    return jsonify([item.to_dict() for item in details])


@bp.route("/stats")
@login_required
@handles_failures("Failed to fetch swap request stats")
def stats():
    """Per-status counts for the caller's dashboard."""

    counts = swap_requests_dao.count_by_status(get_db(), current_user.user_id)
    return jsonify({status: counts.get(status, 0) for status in ("pending", "accepted", "rejected", "completed")})


@bp.route("/<int:request_id>")
@login_required
@handles_failures("Failed to fetch swap request")
def detail(request_id: int):
    swap = _swap_or_abort(request_id)
    _ensure_party_or_admin(swap)
    return jsonify(swap_requests_dao.get_swap_request_details(get_db(), request_id).to_dict())


@bp.route("/<int:request_id>/status", methods=["PUT"])
@login_required
@handles_failures("Failed to update swap request status")
def update_status(request_id: int):
    """Accept, reject or complete a request."""

    swap = _swap_or_abort(request_id)
    if not swap.involves(current_user.user_id):
        abort(403, description="You are not part of this swap request.")
    form = StatusForm.from_json().validate_or_abort()
    check_transition(swap, form.status.data, current_user.user_id)

    updated = swap_requests_dao.update_swap_request_status(get_db(), request_id, form.status.data)
    current_app.logger.info(
        "Swap request %s moved %s -> %s by user %s",
        request_id,
        swap.status,
        updated.status,
        current_user.user_id,
    )
    return jsonify(updated.to_dict())


@bp.route("/<int:request_id>", methods=["DELETE"])
@login_required
@handles_failures("Failed to delete swap request")
def cancel(request_id: int):
    """Let the requester withdraw a request that is still pending."""

    swap = _swap_or_abort(request_id)
    if swap.requester_id != current_user.user_id:
        abort(403, description="Only the requester can cancel a swap request.")
    if swap.status != "pending":
        abort(409, description="Only pending swap requests can be cancelled.")
    swap_requests_dao.delete_swap_request(get_db(), request_id)
    current_app.logger.info("Swap request %s cancelled by user %s", request_id, current_user.user_id)
    return message_response("Swap request deleted successfully")
