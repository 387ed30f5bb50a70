# repair_queens/services/export_service.py
"""
Multi-resource export.

The pipeline collects the selected resource types from the backend, either
with one bulk call (when more than one type is selected) or one call per
type, and serialises the result into files for a download sink.

Nothing is returned or downloaded when a fetch fails: the partial bundle
is discarded and the failure is raised as an :class:`ExportError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Protocol

from repair_queens.models.export_models import ExportBundle, ExportRequest
from repair_queens.utils.api_client import ApiResponse, BackendClient, BackendError
from repair_queens.utils.export_utils import serialize_bundle

logger = logging.getLogger(__name__)

BULK_EXPORT_ENDPOINT = "/admin/api/export/all"
EXPORT_ENDPOINTS: Dict[str, str] = {
    "appointments": "/admin/api/export/appointments",
    "parts": "/admin/api/export/parts",
    "suppliers": "/admin/api/export/suppliers",
    "orders": "/admin/api/export/orders",
}

# Keys a per-resource response may carry its records under, in order
DATA_ALIASES = ("data", "appointments", "parts", "suppliers", "orders")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ExportError(Exception):
    """Hard export failure; ``reason`` is shown to the user."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class NoSelection(ExportError):
    def __init__(self):
        super().__init__("Please select at least one data type to export.")


class FetchFailed(ExportError):
    def __init__(self, resource_type: str, http_status: Optional[int], detail: str = ""):
        status = http_status if http_status is not None else "no response"
        reason = f"Failed to fetch {resource_type}: {status}"
        if detail:
            reason = f"{reason} ({detail})"
        super().__init__(reason)
        self.resource_type = resource_type
        self.http_status = http_status


class LogicalFailure(ExportError):
    def __init__(self, resource_type: str, message: Optional[str] = None):
        super().__init__(message or f"Failed to fetch {resource_type}")
        self.resource_type = resource_type
        self.message = message


@dataclass
class BulkOutcome:
    """Result of the bulk fetch: either data or a reason it is unavailable."""

    available: bool
    data: Dict[str, Any] = field(default_factory=dict)
    reason: str = ""

    @classmethod
    def success(cls, data: Dict[str, Any]) -> "BulkOutcome":
        return cls(available=True, data=data)

    @classmethod
    def unavailable(cls, reason: str) -> "BulkOutcome":
        return cls(available=False, reason=reason)


class DownloadSink(Protocol):
    def __call__(self, content: Any, filename: str, mime_type: str) -> None: ...


ProgressCallback = Callable[[float, str], None]


def _ignore_progress(percent: float, message: str) -> None:
    return None


def _ignore_download(content: Any, filename: str, mime_type: str) -> None:
    return None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def unwrap_records(body: Any) -> List[Dict[str, Any]]:
    """Records of a per-resource response, wherever the backend put them."""
    data = body
    if isinstance(body, dict):
        for alias in DATA_ALIASES:
            if body.get(alias) is not None:
                data = body[alias]
                break
    return data if isinstance(data, list) else []


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class ExportPipeline:
    def __init__(
        self,
        client: BackendClient,
        sink: Optional[DownloadSink] = None,
        on_progress: Optional[ProgressCallback] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.client = client
        self.sink = sink or _ignore_download
        self.on_progress = on_progress or _ignore_progress
        self.clock = clock or datetime.now

    def execute(self, request: ExportRequest) -> ExportBundle:
        """
        Fetch, serialise and download the selected resources.

        Returns:
            The bundle that was exported

        Raises:
            ExportError: nothing selected or one of the fetches failed
        """
        bundle = self.fetch_bundle(request)

        self.on_progress(100, "Processing export...")
        files = serialize_bundle(bundle, request.export_format, self.clock())
        for export_file in files:
            self.sink(export_file.content, export_file.filename, export_file.mime_type)

        logger.info(
            f"[EXPORT] {request.export_format} export finished: "
            f"{', '.join(bundle)} -> {len(files)} file(s)"
        )
        return bundle

    def fetch_bundle(self, request: ExportRequest) -> ExportBundle:
        if request.is_empty:
            raise NoSelection()

        if len(request.resource_types) > 1:
            outcome = self.fetch_bulk()
            if outcome.available:
                return {
                    tag: unwrap_records(outcome.data[tag])
                    for tag in request.resource_types
                    if outcome.data.get(tag) is not None
                }
            logger.info(
                f"[EXPORT] Bulk export not available ({outcome.reason}), using individual requests"
            )

        return self.fetch_each(request)

    def fetch_bulk(self) -> BulkOutcome:
        try:
            response = self.client.get(BULK_EXPORT_ENDPOINT)
        except BackendError as e:
            return BulkOutcome.unavailable(str(e))

        if not response.ok:
            return BulkOutcome.unavailable(f"HTTP {response.status}")
        body = response.body if isinstance(response.body, dict) else {}
        if not body.get("success"):
            return BulkOutcome.unavailable(response.message or "unsuccessful response")
        data = body.get("data")
        if not isinstance(data, dict) or not data:
            return BulkOutcome.unavailable("empty response")
        return BulkOutcome.success(data)

    def fetch_each(self, request: ExportRequest) -> ExportBundle:
        bundle: ExportBundle = {}
        total = len(request.resource_types)

        for completed, resource_type in enumerate(request.resource_types):
            self.on_progress(completed / total * 100, f"Fetching {resource_type}...")

            records = self.fetch_resource(resource_type)
            bundle[resource_type] = records

            self.on_progress(
                (completed + 1) / total * 100,
                f"Fetched {len(records)} {resource_type} records",
            )

        return bundle

    def fetch_resource(self, resource_type: str) -> List[Dict[str, Any]]:
        endpoint = EXPORT_ENDPOINTS[resource_type]
        try:
            response: ApiResponse = self.client.get(endpoint)
        except BackendError as e:
            logger.error(f"[EXPORT] Fetching {resource_type} failed: {e}")
            raise FetchFailed(resource_type, e.status, str(e)) from e

        if not response.ok:
            logger.error(f"[EXPORT] Fetching {resource_type} failed: HTTP {response.status}")
            raise FetchFailed(resource_type, response.status)
        if not response.success:
            logger.error(
                f"[EXPORT] Backend refused {resource_type}: {response.message or '-'}"
            )
            raise LogicalFailure(resource_type, response.message or None)

        return unwrap_records(response.body)
