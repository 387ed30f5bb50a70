# repair_queens/routes/inventory_routes/stock_update.py
import logging

from flask import Blueprint, jsonify, request
from flask_login import login_required

from repair_queens.services.inventory_service import (
    InventoryError,
    find_part,
    load_low_stock_parts,
)
from repair_queens.services.stock_service import (
    StockUpdateError,
    build_stock_update,
    restock_defaults,
    update_part_stock,
)
from repair_queens.utils.api_client import backend_client

logger = logging.getLogger(__name__)

stock_update_bp = Blueprint(
    "stock_update_bp",
    __name__,
    url_prefix="/inventory/api/parts",
)


@stock_update_bp.route("/<part_id>/restock-defaults", methods=["GET"])
@login_required
def restock_form(part_id):
    """Pre-filled restock form (suggested quantity, operation, reason)."""
    try:
        parts = load_low_stock_parts(backend_client())
    except InventoryError as e:
        return jsonify({"success": False, "message": str(e)}), 502
    try:
        part = find_part(parts, part_id)
    except InventoryError as e:
        return jsonify({"success": False, "message": str(e)}), 404

    return jsonify({"success": True, "part": part.as_dict(), **restock_defaults(part).as_payload()}), 200


@stock_update_bp.route("/<part_id>/stock", methods=["PUT"])
@login_required
def update_stock(part_id):
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"success": False, "message": "Request body must be a JSON object"}), 400
    try:
        update = build_stock_update(
            payload.get("quantity"), payload.get("operation"), payload.get("reason")
        )
    except StockUpdateError as e:
        return jsonify({"success": False, "message": str(e)}), 400

    try:
        message = update_part_stock(backend_client(), part_id, update)
    except StockUpdateError as e:
        return jsonify({"success": False, "message": str(e)}), 502

    return jsonify({"success": True, "message": message}), 200
