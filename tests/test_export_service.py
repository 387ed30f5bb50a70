from datetime import datetime

import pytest

from repair_queens.models.export_models import ExportRequest
from repair_queens.services.export_service import (
    ExportPipeline,
    FetchFailed,
    LogicalFailure,
    NoSelection,
    unwrap_records,
)

NOW = datetime(2025, 3, 7, 9, 5)


class Downloads:
    def __init__(self):
        self.files = []

    def __call__(self, content, filename, mime_type):
        self.files.append((filename, mime_type, content))


@pytest.fixture
def downloads():
    return Downloads()


@pytest.fixture
def pipeline(client_for, downloads):
    progress = []
    p = ExportPipeline(
        client_for(),
        sink=downloads,
        on_progress=lambda pct, msg: progress.append((pct, msg)),
        clock=lambda: NOW,
    )
    p.progress = progress
    return p


def test_single_type_uses_only_its_endpoint(backend, pipeline, downloads):
    backend.add("GET", "/admin/api/export/all", {"success": True, "data": {"parts": [{"id": 99}]}})
    backend.add("GET", "/admin/api/export/parts", {"success": True, "parts": [{"id": 1, "name": "Pad"}]})

    bundle = pipeline.execute(ExportRequest.from_selection(["parts"], "csv"))

    assert backend.paths() == ["/admin/api/export/parts"]
    assert list(bundle) == ["parts"]
    assert bundle["parts"] == [{"id": 1, "name": "Pad"}]
    assert downloads.files[0][0] == "parts_20250307_0905.csv"


def test_bulk_response_is_sliced_and_skips_per_type_calls(backend, pipeline):
    backend.add(
        "GET",
        "/admin/api/export/all",
        {
            "success": True,
            "data": {
                "parts": [{"id": 1}],
                "suppliers": [{"id": 2}],
                "orders": [{"id": 3}],
            },
        },
    )

    bundle = pipeline.execute(ExportRequest.from_selection(["parts", "suppliers"], "json"))

    assert backend.paths() == ["/admin/api/export/all"]
    assert bundle == {"parts": [{"id": 1}], "suppliers": [{"id": 2}]}


def test_unavailable_bulk_falls_back_to_sequential_fetches(backend, pipeline, downloads):
    backend.add("GET", "/admin/api/export/all", {"success": False, "message": "disabled"}, status=200)
    backend.add("GET", "/admin/api/export/parts", {"success": True, "data": [{"id": 1}]})
    backend.add("GET", "/admin/api/export/orders", {"success": True, "orders": [{"id": 5}, {"id": 6}]})

    bundle = pipeline.execute(ExportRequest.from_selection(["parts", "orders"], "json"))

    assert backend.paths() == [
        "/admin/api/export/all",
        "/admin/api/export/parts",
        "/admin/api/export/orders",
    ]
    assert bundle == {"parts": [{"id": 1}], "orders": [{"id": 5}, {"id": 6}]}
    assert [f[0] for f in downloads.files] == [
        "parts_20250307_0905.json",
        "orders_20250307_0905.json",
    ]
    assert (50.0, "Fetched 1 parts records") in pipeline.progress
    assert (100.0, "Fetched 2 orders records") in pipeline.progress
    assert pipeline.progress[-1] == (100, "Processing export...")


def test_bulk_transport_error_falls_back(backend, pipeline):
    backend.fail("GET", "/admin/api/export/all")
    backend.add("GET", "/admin/api/export/parts", [{"id": 1}])
    backend.add("GET", "/admin/api/export/suppliers", {"success": True, "suppliers": []})

    bundle = pipeline.execute(ExportRequest.from_selection(["parts", "suppliers"], "csv"))

    assert bundle == {"parts": [{"id": 1}], "suppliers": []}


def test_empty_selection_fails_before_any_call(backend, pipeline, downloads):
    with pytest.raises(NoSelection):
        pipeline.execute(ExportRequest.from_selection([], "csv"))
    assert backend.calls == []
    assert downloads.files == []


def test_http_failure_aborts_without_download(backend, pipeline, downloads):
    backend.add("GET", "/admin/api/export/all", {}, status=404)
    backend.add("GET", "/admin/api/export/parts", {"success": True, "data": [{"id": 1}]})
    backend.add("GET", "/admin/api/export/suppliers", {"success": False}, status=500)

    with pytest.raises(FetchFailed) as exc:
        pipeline.execute(ExportRequest.from_selection(["parts", "suppliers"], "csv"))

    assert exc.value.resource_type == "suppliers"
    assert exc.value.http_status == 500
    assert downloads.files == []


def test_connection_error_is_a_fetch_failure(backend, pipeline):
    backend.fail("GET", "/admin/api/export/orders")
    with pytest.raises(FetchFailed) as exc:
        pipeline.execute(ExportRequest.from_selection(["orders"], "pdf"))
    assert exc.value.http_status is None


def test_logical_failure_carries_backend_message(backend, pipeline, downloads):
    backend.add("GET", "/admin/api/export/appointments", {"success": False, "message": "Access denied"})

    with pytest.raises(LogicalFailure) as exc:
        pipeline.execute(ExportRequest.from_selection(["appointments"], "json"))

    assert exc.value.reason == "Access denied"
    assert downloads.files == []


def test_logical_failure_without_message_names_the_type(backend, pipeline, downloads):
    backend.add("GET", "/admin/api/export/parts", {"success": False})

    with pytest.raises(LogicalFailure) as exc:
        pipeline.execute(ExportRequest.from_selection(["parts"], "csv"))

    assert exc.value.reason == "Failed to fetch parts"
    assert downloads.files == []


def test_pdf_export_is_one_html_document(backend, pipeline, downloads):
    backend.add("GET", "/admin/api/export/parts", {"success": True, "data": [{"id": 1}]})
    pipeline.execute(ExportRequest.from_selection(["parts"], "pdf"))
    assert [(f[0], f[1]) for f in downloads.files] == [
        ("repair_queens_report_20250307_0905.html", "text/html")
    ]


@pytest.mark.parametrize(
    "body, expected",
    [
        ({"data": [{"id": 1}]}, [{"id": 1}]),
        ({"success": True, "suppliers": [{"id": 2}]}, [{"id": 2}]),
        ([{"id": 3}], [{"id": 3}]),
        ({"success": True, "data": {"not": "a list"}}, []),
        ({"success": True}, []),
        (None, []),
    ],
)
def test_unwrap_records(body, expected):
    assert unwrap_records(body) == expected
