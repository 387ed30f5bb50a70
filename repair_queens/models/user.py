# repair_queens/models/user.py
"""Signed-in user kept in the Flask session.

The backend issues the token; the console only stores it next to the user
object returned by ``POST /api/auth/login`` and sends it back as a bearer
credential.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import session
from flask_login import UserMixin

SESSION_KEY = "repair_queens_auth"


class SessionUser(UserMixin):
    def __init__(self, user: Dict[str, Any], token: str):
        self.user = dict(user or {})
        self.token = token

    def get_id(self) -> str:
        return str(self.user.get("id"))

    @property
    def role(self) -> str:
        return str(self.user.get("role") or "").lower()

    @property
    def display_name(self) -> str:
        for key in ("name", "username", "email"):
            if self.user.get(key):
                return str(self.user[key])
        return self.get_id()


def store_session_user(user: Dict[str, Any], token: str) -> SessionUser:
    session[SESSION_KEY] = {"user": dict(user or {}), "token": token}
    return SessionUser(user, token)


def clear_session_user() -> None:
    session.pop(SESSION_KEY, None)


def load_session_user(user_id: str) -> Optional[SessionUser]:
    """Flask-Login user loader: rebuilds the user from the session."""
    data = session.get(SESSION_KEY) or {}
    token = data.get("token")
    user = data.get("user") or {}
    if not token or str(user.get("id")) != str(user_id):
        return None
    return SessionUser(user, token)
