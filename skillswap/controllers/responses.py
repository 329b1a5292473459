"""JSON response helpers shared by the API blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException


def handles_failures(message: str) -> Callable:
    """Turn unexpected errors into a logged 500 with a per-endpoint message.

    ``HTTPException`` (validation, auth, not found, conflicts) passes through
    to the app-level handlers untouched.
    """

    def decorator(view: Callable) -> Callable:
        @wraps(view)
        def wrapped(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except HTTPException:
                raise
            except Exception:  # pylint: disable=broad-except
                current_app.logger.exception("%s (%s)", message, view.__name__)
                return jsonify(message=message), 500

        return wrapped

    return decorator


def message_response(message: str, status: int = 200):
    return jsonify(message=message), status
