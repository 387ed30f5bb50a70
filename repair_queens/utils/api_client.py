"""
Client for the Repair Queens REST backend.

Every call carries the signed-in user's bearer token and JSON headers.
Transport problems (connection refused, timeouts) are logged and wrapped
in :class:`BackendError`; HTTP error statuses are NOT raised here, the
caller decides what a non-2xx response means.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests
from flask import current_app
from flask_login import current_user

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class BackendError(Exception):
    """Raised when the backend could not be reached or answered garbage."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


@dataclass
class ApiResponse:
    status: int
    body: Any = field(default=None)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def success(self) -> bool:
        """Logical success flag; bodies without one count as successful."""
        if isinstance(self.body, dict):
            return self.body.get("success") is not False
        return True

    @property
    def message(self) -> str:
        if isinstance(self.body, dict):
            return str(self.body.get("message") or "")
        return ""


def _new_session() -> requests.Session:
    return requests.Session()


class BackendClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or _new_session()

    def _headers(self) -> Dict[str, str]:
        """Default headers for backend requests."""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {self.token or ''}",
        }

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        """
        Issue a request against the backend.

        Args:
            method: HTTP verb
            path: path below the base URL (e.g. "/admin/api/export/parts")
            json: request body
            params: query string

        Returns:
            ApiResponse with the status and the decoded JSON body

        Raises:
            BackendError: transport failure or a body that is not JSON
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"[API] {method} {path} failed: {e}")
            raise BackendError(f"Could not reach the server: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            logger.error(
                f"[API] {method} {path} returned a non-JSON body (HTTP {response.status_code})"
            )
            raise BackendError(
                f"Invalid response from server ({response.status_code})",
                status=response.status_code,
            ) from e

        return ApiResponse(status=response.status_code, body=body)

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.request("GET", path, params=params)

    def post(self, path: str, payload: Dict[str, Any]) -> ApiResponse:
        return self.request("POST", path, json=payload)

    def put(self, path: str, payload: Dict[str, Any]) -> ApiResponse:
        return self.request("PUT", path, json=payload)


def backend_client(token: Optional[str] = None) -> BackendClient:
    """Client for the current request, authenticated as the signed-in user."""
    if token is None and current_user.is_authenticated:
        token = current_user.token
    return BackendClient(
        current_app.config["REPAIR_QUEENS_API_URL"],
        token=token,
        timeout=current_app.config.get("REPAIR_QUEENS_API_TIMEOUT", DEFAULT_TIMEOUT),
    )
