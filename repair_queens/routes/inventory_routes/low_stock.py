# repair_queens/routes/inventory_routes/low_stock.py
from __future__ import annotations

import logging

from flask import Blueprint, Response, jsonify, request
from flask_login import login_required

from repair_queens.services.inventory_service import (
    InventoryError,
    load_categories,
    load_low_stock_parts,
)
from repair_queens.services.triage_service import (
    FilterCriteria,
    build_triage_view,
    filter_parts,
    needs_restock,
    sort_parts,
)
from repair_queens.utils import export_utils
from repair_queens.utils.api_client import backend_client

logger = logging.getLogger(__name__)

low_stock_bp = Blueprint(
    "low_stock_bp",
    __name__,
    url_prefix="/inventory/api",
)


@low_stock_bp.route("/low-stock", methods=["GET"])
@login_required
def low_stock():
    """
    Low-stock working set with urgency tiers, summary cards and the current
    filter/sort applied (?urgency=&category=&sort=).
    """
    criteria = FilterCriteria.from_args(request.args)
    try:
        parts = load_low_stock_parts(backend_client())
    except InventoryError as e:
        logger.error(f"[INVENTORY] {e}")
        return jsonify({"success": False, "message": str(e)}), 502

    view = build_triage_view(parts, criteria)
    return jsonify({"success": True, **view}), 200


@low_stock_bp.route("/low-stock/report", methods=["GET"])
@login_required
def low_stock_report():
    """Download the filtered low-stock list as CSV (default) or Excel."""
    criteria = FilterCriteria.from_args(request.args)
    report_format = (request.args.get("format") or "csv").lower()
    if report_format not in ("csv", "xlsx"):
        return jsonify({"success": False, "message": "Invalid format. Allowed: csv, xlsx"}), 400

    try:
        parts = load_low_stock_parts(backend_client())
    except InventoryError as e:
        logger.error(f"[INVENTORY] {e}")
        return jsonify({"success": False, "message": str(e)}), 502

    working = [p for p in parts if needs_restock(p)]
    visible = sort_parts(
        filter_parts(working, criteria.urgency, criteria.category), criteria.sort_by
    )

    try:
        if report_format == "xlsx":
            content = export_utils.generate_low_stock_excel(visible)
            mimetype = export_utils.XLSX_MIME
        else:
            content = export_utils.generate_low_stock_csv(visible)
            mimetype = "text/csv; charset=utf-8"
    except Exception as e:
        logger.error(f"[INVENTORY] Low-stock report failed: {e}")
        return jsonify({"success": False, "message": "Error generating report"}), 500

    filename = export_utils.low_stock_report_filename(report_format)
    logger.info(f"[INVENTORY] Exported {len(visible)} low stock items to {filename}")
    return Response(
        content,
        mimetype=mimetype,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@low_stock_bp.route("/categories", methods=["GET"])
@login_required
def categories():
    try:
        names = load_categories(backend_client())
    except InventoryError as e:
        logger.error(f"[INVENTORY] {e}")
        return jsonify({"success": False, "message": str(e)}), 502
    return jsonify({"success": True, "categories": names}), 200
