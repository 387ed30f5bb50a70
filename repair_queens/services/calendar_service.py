# repair_queens/services/calendar_service.py
from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from repair_queens.utils.api_client import BackendClient, BackendError

logger = logging.getLogger(__name__)

SATURDAY = 5
SUNDAY = 6


class CalendarError(Exception):
    pass


# --- Helpers --------------------------------------------------------------

def is_day_disabled(day: date, today: date) -> bool:
    # past days and weekends cannot be booked
    return day < today or day.weekday() in (SATURDAY, SUNDAY)


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


# --- Public API -----------------------------------------------------------

def build_month_grid(year: int, month: int, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Monday-first month grid for the booking calendar.

    ``leading_blanks`` is the number of empty cells before day 1.
    """
    if not 1 <= month <= 12:
        raise CalendarError(f"Invalid month: {month}")
    today = today or date.today()

    first_weekday, days_in_month = calendar.monthrange(year, month)
    days: List[Dict[str, Any]] = []
    for number in range(1, days_in_month + 1):
        current = date(year, month, number)
        days.append(
            {
                "day": number,
                "date": current.isoformat(),
                "disabled": is_day_disabled(current, today),
                "today": current == today,
            }
        )

    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)
    return {
        "year": year,
        "month": month,
        "title": f"{calendar.month_name[month]} {year}",
        "leading_blanks": first_weekday,
        "days": days,
        "previous": {"year": prev_year, "month": prev_month},
        "next": {"year": next_year, "month": next_month},
    }


def fetch_available_slots(client: BackendClient, day: date) -> List[Dict[str, Any]]:
    try:
        response = client.get(
            "/api/calendar/available-slots", params={"date": day.isoformat()}
        )
    except BackendError as e:
        raise CalendarError("Error loading available slots") from e

    if not response.ok or not response.success:
        raise CalendarError(response.message or "Error loading available slots")

    body = response.body if isinstance(response.body, dict) else {}
    slots = body.get("availableSlots")
    if not isinstance(slots, list):
        logger.warning(f"[CALENDAR] No slot list in the response for {day}")
        return []
    return slots
