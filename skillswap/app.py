"""Application factory for the Skill Swap API."""

from __future__ import annotations

from flask import Flask, jsonify
from flask_login import LoginManager
from flask_wtf import CSRFProtect
from werkzeug.exceptions import HTTPException

from .config import BaseConfig, get_config
from .data_access import users_dao
from .data_access.db import get_db, init_app as init_db_app
from .models.entities import User

csrf = CSRFProtect()
login_manager = LoginManager()


@login_manager.user_loader
def load_user(user_id: str) -> User | None:
    """Look up a user for Flask-Login session handling.

    Banned accounts resolve to no user, which ends any session they still hold.
    """
    if not user_id:
        return None
    user = users_dao.get_user_by_id(get_db(), int(user_id))
    if user is None or user.is_banned:
        return None
    return user


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify(message="Unauthorized"), 401


def create_app(config_object: type[BaseConfig] | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__)

    config_cls = config_object or get_config()
    app.config.from_object(config_cls)
    app.json.sort_keys = False
    app.logger.setLevel(app.config["LOG_LEVEL"])

    csrf.init_app(app)
    login_manager.init_app(app)
    init_db_app(app)

    register_blueprints(app)
    register_error_handlers(app)

    @app.route("/api/health")
    def health():
        """Liveness probe."""

        return jsonify(status="ok")

    return app


def register_blueprints(app: Flask) -> None:
    """Import and register application blueprints."""

    from .controllers import (  # pylint: disable=import-outside-toplevel
        admin,
        auth,
        availability,
        ratings,
        reports,
        skills,
        swap_requests,
        users,
    )

    app.register_blueprint(auth.bp)
    app.register_blueprint(users.bp)
    app.register_blueprint(skills.bp)
    app.register_blueprint(availability.bp)
    app.register_blueprint(swap_requests.bp)
    app.register_blueprint(ratings.bp)
    app.register_blueprint(admin.bp)
    app.register_blueprint(reports.bp)


def register_error_handlers(app: Flask) -> None:
    """Render every error as a JSON body with a ``message`` key."""

    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException):
        body = {"message": error.description}
        errors = getattr(error, "errors", None)
        if errors:
            body["errors"] = errors
        return jsonify(body), error.code

    @app.errorhandler(Exception)
    def server_error(error: Exception):
        app.logger.exception("Unhandled error: %s", error)
        return jsonify(message="Internal server error"), 500
