# repair_queens/routes/schedule_routes/calendar.py
from datetime import date

from flask import Blueprint, jsonify, request
from flask_login import login_required

from repair_queens.services.calendar_service import (
    CalendarError,
    build_month_grid,
    fetch_available_slots,
)
from repair_queens.utils.api_client import backend_client

calendar_bp = Blueprint(
    "calendar_bp",
    __name__,
    url_prefix="/schedule/api",
)


@calendar_bp.route("/calendar", methods=["GET"])
@login_required
def month_grid():
    """Booking calendar for ?year=&month= (defaults to the current month)."""
    today = date.today()
    try:
        year = int(request.args.get("year") or today.year)
        month = int(request.args.get("month") or today.month)
        grid = build_month_grid(year, month, today)
    except (ValueError, CalendarError) as e:
        return jsonify({"success": False, "message": str(e)}), 400
    return jsonify({"success": True, **grid}), 200


@calendar_bp.route("/slots", methods=["GET"])
@login_required
def available_slots():
    raw = (request.args.get("date") or "").strip()
    try:
        day = date.fromisoformat(raw)
    except ValueError:
        return jsonify({"success": False, "message": "Invalid date, expected YYYY-MM-DD"}), 400

    try:
        slots = fetch_available_slots(backend_client(), day)
    except CalendarError as e:
        return jsonify({"success": False, "message": str(e)}), 502
    return jsonify({"success": True, "date": day.isoformat(), "availableSlots": slots}), 200
