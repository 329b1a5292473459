"""Authentication blueprint handling registration, login, and logout."""

from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import Blueprint, abort, current_app, jsonify
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf

from ..data_access import users_dao
from ..data_access.db import get_db
from .forms import LoginForm, RegistrationForm, ValidationFailed
from .responses import handles_failures, message_response

bp = Blueprint("auth", __name__, url_prefix="/api")


def admin_required(view: Callable) -> Callable:
    """Decorator restricting a view to signed-in admins."""

    @wraps(view)
    @login_required
    def wrapped(*args, **kwargs):
        if not current_user.is_admin:
            abort(403, description="Admin access required.")
        return view(*args, **kwargs)

    return wrapped


@bp.route("/register", methods=["POST"])
@handles_failures("Failed to register")
def register():
    """Create an account and sign it in."""

    form = RegistrationForm.from_json().validate_or_abort()
    db = get_db()
    errors = {}
    if users_dao.get_user_by_username(db, form.username.data):
        errors["username"] = ["Username already exists."]
    if users_dao.get_user_by_email(db, form.email.data):
        errors["email"] = ["An account with that email already exists."]
    if errors:
        raise ValidationFailed(errors)

    user = users_dao.create_user(
        db,
        username=form.username.data,
        email=form.email.data,
        password_hash=users_dao.hash_password(form.password.data),
        first_name=form.first_name.data or None,
        last_name=form.last_name.data or None,
    )
    login_user(user)
    current_app.logger.info("Registered user %s (%s)", user.user_id, user.username)
    return jsonify(user.to_dict()), 201


@bp.route("/login", methods=["POST"])
@handles_failures("Failed to log in")
def login():
    """Authenticate an existing user."""

    form = LoginForm.from_json().validate_or_abort()
    user = users_dao.get_user_by_username(get_db(), form.username.data)
    if not user or not users_dao.verify_password(user.password_hash, form.password.data):
        abort(401, description="Invalid username or password.")
    if user.is_banned:
        abort(403, description="This account has been banned.")
    login_user(user)
    return jsonify(user.to_dict())


@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    """Log out the current user."""

    logout_user()
    return message_response("Logged out")


@bp.route("/user")
@login_required
def me():
    """Return the signed-in user."""

    return jsonify(current_user.to_dict())


@bp.route("/csrf-token")
def csrf_token():
    """Hand out a token for clients to echo in the X-CSRFToken header."""

    return jsonify(csrfToken=generate_csrf())
