"""User-filed moderation reports."""

from __future__ import annotations

from flask import Blueprint, abort, current_app, jsonify
from flask_login import current_user, login_required

from ..data_access import reports_dao, skills_dao, swap_requests_dao, users_dao
from ..data_access.db import get_db
from .auth import admin_required
from .forms import ReportForm, ReportStatusForm, ValidationFailed
from .responses import handles_failures

bp = Blueprint("reports", __name__, url_prefix="/api/reports")

# reports only move forward; resolved is final
REPORT_TRANSITIONS = {
    ("pending", "reviewed"),
    ("pending", "resolved"),
    ("reviewed", "resolved"),
}


@bp.route("", methods=["POST"])
@login_required
@handles_failures("Failed to create report")
def create():
    """File a report against a user, a skill or a swap request."""

    form = ReportForm.from_json().validate_or_abort()
    db = get_db()
    errors = {}
    if form.reported_user_id.data is not None and not users_dao.get_user_by_id(db, form.reported_user_id.data):
        errors["reported_user_id"] = ["User not found."]
    if form.reported_skill_id.data is not None and not skills_dao.get_skill_by_id(db, form.reported_skill_id.data):
        errors["reported_skill_id"] = ["Skill not found."]
    if form.reported_request_id.data is not None and not swap_requests_dao.get_swap_request_by_id(
        db, form.reported_request_id.data
    ):
        errors["reported_request_id"] = ["Swap request not found."]
    if errors:
        raise ValidationFailed(errors)

    report = reports_dao.create_report(
        db,
        reporter_id=current_user.user_id,
        reason=form.reason.data,
        description=form.description.data or None,
        reported_user_id=form.reported_user_id.data,
        reported_skill_id=form.reported_skill_id.data,
        reported_request_id=form.reported_request_id.data,
    )
    current_app.logger.info("User %s filed report %s", current_user.user_id, report.report_id)
    return jsonify(report.to_dict()), 201


@bp.route("")
@admin_required
@handles_failures("Failed to fetch reports")
def list_reports():
    return jsonify([item.to_dict() for item in reports_dao.list_reports(get_db())])


@bp.route("/<int:report_id>/status", methods=["PUT"])
@admin_required
@handles_failures("Failed to update report status")
def update_status(report_id: int):
    """Mark a report reviewed or resolved."""

    db = get_db()
    report = reports_dao.get_report_by_id(db, report_id)
    if not report:
        abort(404, description="Report not found.")
    form = ReportStatusForm.from_json().validate_or_abort()
    if (report.status, form.status.data) not in REPORT_TRANSITIONS:
        abort(409, description=f"Cannot change a {report.status} report to {form.status.data}.")
    updated = reports_dao.update_report_status(db, report_id, form.status.data)
    current_app.logger.info(
        "Admin %s moved report %s %s -> %s", current_user.user_id, report_id, report.status, updated.status
    )
    return jsonify(updated.to_dict())
