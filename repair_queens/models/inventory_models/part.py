"""Part model definitions.

The :class:`Part` dataclass represents one inventory item as returned by
the backend's parts endpoints (``/inventory/api/parts/...``). The wire
format uses camelCase keys; :meth:`Part.from_api` maps them onto the
snake_case fields used everywhere in the console and clamps the stock
fields so they are never negative.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .supplier import Supplier


def _coalesce_int(value: Any, default: int = 0) -> int:
    try:
        return max(0, int(value)) if value is not None else default
    except (TypeError, ValueError):
        return default


def _coalesce_float(value: Any, default: float = 0.0) -> float:
    try:
        return max(0.0, float(value)) if value is not None else default
    except (TypeError, ValueError):
        return default


@dataclass
class Part:
    """Represents a part in inventory."""

    id: Optional[Any] = field(default=None)
    name: str = field(default="")
    category: str = field(default="")
    stock_quantity: int = field(default=0)
    minimum_stock_level: int = field(default=0)
    price: float = field(default=0.0)
    part_number: Optional[str] = field(default=None)
    supplier: Optional[Supplier] = field(default=None)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Part":
        return cls(
            id=payload.get("id"),
            name=str(payload.get("name") or ""),
            category=str(payload.get("category") or ""),
            stock_quantity=_coalesce_int(payload.get("stockQuantity")),
            minimum_stock_level=_coalesce_int(payload.get("minimumStockLevel")),
            price=_coalesce_float(payload.get("price")),
            part_number=payload.get("partNumber") or None,
            supplier=Supplier.from_api(payload.get("supplier")),
        )

    @property
    def supplier_name(self) -> str:
        return self.supplier.name if self.supplier else ""

    def as_dict(self) -> Dict[str, Any]:
        """Serialise back to the backend's camelCase shape."""
        return {
            "id": self.id,
            "name": self.name,
            "partNumber": self.part_number,
            "category": self.category,
            "price": self.price,
            "stockQuantity": self.stock_quantity,
            "minimumStockLevel": self.minimum_stock_level,
            "supplier": self.supplier.as_dict() if self.supplier else None,
        }

    def __repr__(self) -> str:
        return f"<Part {self.part_number or self.id}>"
