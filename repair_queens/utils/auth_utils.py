# repair_queens/utils/auth_utils.py
from functools import wraps

from flask import current_app, jsonify
from flask_login import current_user


def unauthorized():
    """JSON answer for requests without a signed-in user."""
    return jsonify({"success": False, "message": "Authentication required."}), 401


def roles_required(config_key: str):
    """
    Restrict a view to the roles listed in ``app.config[config_key]``.

    Use below ``@login_required``.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            allowed = current_app.config.get(config_key) or ()
            if current_user.role not in allowed:
                return (
                    jsonify({"success": False, "message": "Access denied."}),
                    403,
                )
            return view(*args, **kwargs)

        return wrapper

    return decorator
