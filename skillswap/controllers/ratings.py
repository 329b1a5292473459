"""Ratings blueprint for feedback after completed swaps."""

from __future__ import annotations

from flask import Blueprint, abort, current_app, jsonify
from flask_login import current_user, login_required

from ..data_access import ratings_dao, swap_requests_dao, users_dao
from ..data_access.db import get_db
from .forms import RatingForm, ValidationFailed
from .responses import handles_failures

bp = Blueprint("ratings", __name__, url_prefix="/api/ratings")


@bp.route("", methods=["POST"])
@login_required
@handles_failures("Failed to create rating")
def create():
    """Rate the other party of a completed swap.

    Repeat ratings for the same swap are accepted; each one counts toward the
    ratee's average.
    """

    form = RatingForm.from_json().validate_or_abort()
    db = get_db()
    swap = swap_requests_dao.get_swap_request_by_id(db, form.swap_request_id.data)
    if not swap:
        raise ValidationFailed({"swap_request_id": ["Swap request not found."]})
    if not swap.involves(current_user.user_id):
        abort(403, description="You can only rate swaps you took part in.")
    if swap.status != "completed":
        abort(409, description="You can only rate a swap after it is completed.")

    ratee_id = swap.provider_id if current_user.user_id == swap.requester_id else swap.requester_id
    if form.ratee_id.data is not None and form.ratee_id.data != ratee_id:
        raise ValidationFailed({"ratee_id": ["Ratee must be the other party of the swap."]})

    rating = ratings_dao.create_rating(
        db,
        rater_id=current_user.user_id,
        ratee_id=ratee_id,
        swap_request_id=swap.request_id,
        rating=form.rating.data,
        comment=form.comment.data or None,
    )
    ratee = users_dao.get_user_by_id(db, ratee_id)
    current_app.logger.info(
        "User %s rated user %s %s/5 for swap %s; average now %.2f over %s",
        rating.rater_id,
        ratee_id,
        rating.rating,
        swap.request_id,
        ratee.rating,
        ratee.total_ratings,
    )
    return jsonify(rating.to_dict()), 201


@bp.route("/user/<int:user_id>")
@handles_failures("Failed to fetch ratings")
def for_user(user_id: int):
    """Ratings a user has received, newest first."""

    ratings = ratings_dao.list_ratings_for_user(get_db(), user_id)
    return jsonify([rating.to_dict() for rating in ratings])
