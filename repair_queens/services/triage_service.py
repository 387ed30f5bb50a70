from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from repair_queens.models.inventory_models import Part

logger = logging.getLogger(__name__)

CRITICAL = "critical"
HIGH = "high"
MEDIUM = "medium"

URGENCY_ORDER: Dict[str, int] = {CRITICAL: 0, HIGH: 1, MEDIUM: 2}

ALL = "all"
SORT_KEYS = ("urgency", "name", "stockQuantity", "price")

RESTOCK_BUFFER = 5
DEFAULT_RESTOCK_REASON = "Restocking low inventory"


@dataclass(frozen=True)
class FilterCriteria:
    urgency: str = ALL
    category: str = ALL
    sort_by: str = "urgency"

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "FilterCriteria":
        """Build from query-string style arguments; blanks mean "all"."""
        urgency = str(args.get("urgency") or ALL).strip().lower()
        category = str(args.get("category") or ALL).strip()
        sort_by = str(args.get("sort") or args.get("sort_by") or "urgency").strip()
        return cls(urgency=urgency, category=category or ALL, sort_by=sort_by)


@dataclass(frozen=True)
class TriageSummary:
    critical_count: int = 0
    low_stock_count: int = 0
    lost_value: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "criticalCount": self.critical_count,
            "lowStockCount": self.low_stock_count,
            "lostValue": round(self.lost_value, 2),
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _collation_key(text: str) -> tuple:
    # accents and case only break ties, like a locale-aware compare
    base = "".join(
        ch
        for ch in unicodedata.normalize("NFKD", text or "")
        if not unicodedata.combining(ch)
    )
    return (base.casefold(), (text or "").casefold(), text or "")


_SORTERS: Dict[str, Callable[[Part], Any]] = {
    "urgency": lambda p: URGENCY_ORDER[classify(p)],
    "name": lambda p: _collation_key(p.name),
    "stockQuantity": lambda p: p.stock_quantity,
    # higher price first
    "price": lambda p: -p.price,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def classify(part: Part) -> str:
    """Urgency tier of a part that is already known to be below minimum."""
    if part.stock_quantity == 0:
        return CRITICAL
    if part.stock_quantity <= part.minimum_stock_level // 2:
        return HIGH
    return MEDIUM


def needs_restock(part: Part) -> bool:
    """True when the part is at or below its reorder threshold."""
    return part.minimum_stock_level > 0 and part.stock_quantity <= part.minimum_stock_level


def filter_parts(
    parts: Iterable[Part], urgency: str = ALL, category: str = ALL
) -> List[Part]:
    out = list(parts)
    if urgency != ALL:
        out = [p for p in out if classify(p) == urgency]
    if category != ALL:
        out = [p for p in out if p.category == category]
    return out


def sort_parts(parts: Iterable[Part], key: str) -> List[Part]:
    """Sort a working set; an unknown key keeps the incoming order."""
    sorter = _SORTERS.get(key)
    if sorter is None:
        return list(parts)
    return sorted(parts, key=sorter)


def summarize(parts: Iterable[Part]) -> TriageSummary:
    critical_count = 0
    low_stock_count = 0
    lost_value = 0.0
    for part in parts:
        if part.stock_quantity == 0:
            critical_count += 1
            lost_value += part.price * part.minimum_stock_level
        elif part.stock_quantity <= part.minimum_stock_level:
            low_stock_count += 1
    return TriageSummary(
        critical_count=critical_count,
        low_stock_count=low_stock_count,
        lost_value=lost_value,
    )


def suggest_restock_quantity(part: Part) -> int:
    if part.stock_quantity == 0:
        suggested = part.minimum_stock_level * 2
    else:
        suggested = part.minimum_stock_level - part.stock_quantity + RESTOCK_BUFFER
    return max(suggested, 1)


def restock_value(part: Part) -> float:
    return part.price * part.minimum_stock_level


def stock_percentage(part: Part) -> float:
    if part.minimum_stock_level <= 0:
        return 0.0
    return min(part.stock_quantity / part.minimum_stock_level * 100, 100.0)


def list_categories(parts: Iterable[Part]) -> List[str]:
    return sorted({p.category for p in parts if p.category}, key=_collation_key)


def describe_part(part: Part) -> Dict[str, Any]:
    row = part.as_dict()
    row.update(
        {
            "urgency": classify(part),
            "restockValue": round(restock_value(part), 2),
            "stockPercentage": round(stock_percentage(part), 1),
            "suggestedRestock": suggest_restock_quantity(part),
        }
    )
    return row


def build_triage_view(
    parts: Iterable[Part], criteria: Optional[FilterCriteria] = None
) -> Dict[str, Any]:
    """
    Everything the low-stock page shows for one filter selection.

    Parts that are not below their minimum are dropped first, the summary
    cards are computed over that working set and the list is filtered and
    sorted afterwards.
    """
    criteria = criteria or FilterCriteria()
    parts = list(parts)
    working = [p for p in parts if needs_restock(p)]
    if len(working) != len(parts):
        logger.info(
            f"[TRIAGE] Ignored {len(parts) - len(working)} part(s) that are not below minimum"
        )

    visible = sort_parts(
        filter_parts(working, criteria.urgency, criteria.category), criteria.sort_by
    )

    empty_message = None
    if not working:
        empty_message = "All parts are well stocked."
    elif not visible:
        empty_message = "No parts match your current filters."

    return {
        "parts": [describe_part(p) for p in visible],
        "summary": summarize(working).as_dict(),
        "categories": list_categories(working),
        "total": len(working),
        "emptyMessage": empty_message,
    }
