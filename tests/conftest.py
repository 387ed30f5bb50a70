"""
Pytest configuration and fixtures.

The backend is never contacted: ``FakeBackend`` stands in for the
``requests.Session`` used by ``BackendClient`` and answers from a table of
canned responses.
"""
from urllib.parse import urlsplit

import pytest
import requests

from repair_queens import create_app
from repair_queens.models.user import SESSION_KEY
from repair_queens.utils import api_client

BACKEND_URL = "http://backend.test"


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeBackend:
    """Minimal ``requests.Session`` replacement keyed by (method, path)."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, body=None, status=200):
        self.routes[(method.upper(), path)] = (status, body)
        return self

    def fail(self, method, path, exc=None):
        self.routes[(method.upper(), path)] = exc or requests.exceptions.ConnectionError("refused")
        return self

    def request(self, method, url, json=None, params=None, headers=None, timeout=None):
        path = urlsplit(url).path
        self.calls.append(
            {"method": method.upper(), "path": path, "json": json, "params": params, "headers": headers}
        )
        answer = self.routes.get((method.upper(), path))
        if answer is None:
            return FakeResponse(404, {"success": False, "message": "Not found"})
        if isinstance(answer, Exception):
            raise answer
        status, body = answer
        return FakeResponse(status, body)

    def paths(self, method="GET"):
        return [c["path"] for c in self.calls if c["method"] == method]


@pytest.fixture
def backend(monkeypatch):
    fake = FakeBackend()
    monkeypatch.setattr(api_client, "_new_session", lambda: fake)
    return fake


@pytest.fixture
def client_for(backend):
    """``BackendClient`` wired to the fake backend."""

    def factory(token="test-token"):
        return api_client.BackendClient(BACKEND_URL, token=token, session=backend)

    return factory


@pytest.fixture
def app():
    """Create Flask application for testing"""
    app = create_app()
    app.config["TESTING"] = True
    app.config["REPAIR_QUEENS_API_URL"] = BACKEND_URL
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Create Flask test client"""
    return app.test_client()


def sign_in(client, role="admin", token="test-token"):
    """Put a signed-in backend user in the test client's session."""
    with client.session_transaction() as sess:
        sess[SESSION_KEY] = {"user": {"id": 7, "role": role, "name": "Tester"}, "token": token}
        sess["_user_id"] = "7"
        sess["_fresh"] = True
    return client


@pytest.fixture
def authenticated_client(client):
    return sign_in(client)


def make_part(part_id=1, name="Brake pad", category="Brakes", stock=0, minimum=4, price=10.0, **extra):
    row = {
        "id": part_id,
        "name": name,
        "partNumber": extra.get("partNumber", f"BP-{part_id:03d}"),
        "category": category,
        "price": price,
        "stockQuantity": stock,
        "minimumStockLevel": minimum,
        "supplier": extra.get("supplier", {"id": 3, "name": "Auto Parts SRL"}),
    }
    return row
