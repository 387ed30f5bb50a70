# repair_queens/routes/auth_routes/login.py
import logging

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user

from repair_queens.models.user import clear_session_user, store_session_user
from repair_queens.utils.api_client import BackendError, backend_client

logger = logging.getLogger(__name__)

login_bp = Blueprint("login_bp", __name__)


@login_bp.route("/login", methods=["POST"])
def login():
    """
    Sign in against the backend (POST /api/auth/login) and keep the issued
    token in the session.
    """
    payload = request.get_json(silent=True)
    if payload is None:
        payload = request.form
    elif not isinstance(payload, dict):
        return jsonify({"success": False, "message": "Please fill in all fields."}), 400
    email = (payload.get("email") or payload.get("username") or "").strip()
    password = payload.get("password") or ""

    if not email or not password:
        return jsonify({"success": False, "message": "Please fill in all fields."}), 400

    try:
        response = backend_client(token="").post(
            "/api/auth/login", {"email": email, "password": password}
        )
    except BackendError as e:
        logger.error(f"[AUTH] Login unavailable: {e}")
        return jsonify({"success": False, "message": "Login service unavailable."}), 502

    body = response.body if isinstance(response.body, dict) else {}
    token = body.get("token")
    user = body.get("user") or {}
    if not response.ok or not response.success or not token or user.get("id") is None:
        message = response.message or "Invalid email or password."
        return jsonify({"success": False, "message": message}), 401

    login_user(store_session_user(user, token))
    logger.info(f"[AUTH] {email} signed in as {user.get('role') or 'client'}")
    return jsonify({"success": True, "user": user}), 200


@login_bp.route("/logout")
@login_required
def logout():
    logout_user()
    clear_session_user()
    return jsonify({"success": True}), 200


@login_bp.route("/me")
@login_required
def me():
    return jsonify({"success": True, "user": current_user.user}), 200
