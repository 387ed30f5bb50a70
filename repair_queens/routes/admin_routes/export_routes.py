# repair_queens/routes/admin_routes/export_routes.py
from __future__ import annotations

import io
import logging
import zipfile
from datetime import datetime
from typing import Any, List

from flask import Blueprint, Response, jsonify, request
from flask_login import login_required

from repair_queens.models.export_models import ExportRequest
from repair_queens.services.export_service import (
    ExportError,
    ExportPipeline,
    NoSelection,
)
from repair_queens.utils.api_client import backend_client
from repair_queens.utils.auth_utils import roles_required
from repair_queens.utils.export_utils import ExportFile, timestamp

logger = logging.getLogger(__name__)

export_bp = Blueprint(
    "export_bp",
    __name__,
    url_prefix="/admin",
)


class _DownloadCollector:
    """Download sink that keeps the files for a single HTTP response."""

    def __init__(self):
        self.files: List[ExportFile] = []

    def __call__(self, content: Any, filename: str, mime_type: str) -> None:
        self.files.append(ExportFile(content, filename, mime_type))

    def to_response(self) -> Response:
        if len(self.files) == 1:
            export_file = self.files[0]
            return Response(
                export_file.content,
                mimetype=export_file.mime_type,
                headers={
                    "Content-Disposition": f"attachment; filename={export_file.filename}"
                },
            )

        output = io.BytesIO()
        with zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as archive:
            for export_file in self.files:
                archive.writestr(export_file.filename, export_file.content)
        output.seek(0)
        filename = f"repair_queens_export_{timestamp(datetime.now())}.zip"
        return Response(
            output.getvalue(),
            mimetype="application/zip",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )


def _log_progress(percent: float, message: str) -> None:
    logger.debug(f"[EXPORT] {round(percent)}% complete - {message}")


@export_bp.route("/export", methods=["POST"])
@login_required
@roles_required("EXPORT_ROLES")
def start_export():
    """
    Export the selected data types.

    Body: {"resources": ["parts", "suppliers"], "format": "csv" | "json" | "pdf"}
    One file is returned as-is, several files come back zipped.
    """
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"success": False, "message": "Request body must be a JSON object"}), 400
    try:
        export_request = ExportRequest.from_selection(
            payload.get("resources") or [], payload.get("format") or "csv"
        )
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400

    collector = _DownloadCollector()
    pipeline = ExportPipeline(backend_client(), sink=collector, on_progress=_log_progress)
    try:
        pipeline.execute(export_request)
    except NoSelection as e:
        return jsonify({"success": False, "message": e.reason}), 400
    except ExportError as e:
        logger.error(f"[EXPORT] Export failed: {e.reason}")
        return jsonify({"success": False, "message": f"Export failed: {e.reason}"}), 502

    if not collector.files:
        return jsonify({"success": True, "message": "No data to export.", "files": []}), 200
    return collector.to_response()
