# repair_queens/services/stock_service.py

import logging
from dataclasses import dataclass
from typing import Any, Dict

from repair_queens.models.inventory_models import Part
from repair_queens.services.triage_service import (
    DEFAULT_RESTOCK_REASON,
    suggest_restock_quantity,
)
from repair_queens.utils.api_client import BackendClient, BackendError

logger = logging.getLogger(__name__)

STOCK_OPERATIONS = ("add", "subtract", "set")


class StockUpdateError(Exception):
    """Invalid stock form or a refused update; the message is user-facing."""


@dataclass(frozen=True)
class StockUpdate:
    quantity: int
    operation: str
    reason: str

    def as_payload(self) -> Dict[str, Any]:
        return {
            "quantity": self.quantity,
            "operation": self.operation,
            "reason": self.reason,
        }


def build_stock_update(quantity: Any, operation: Any, reason: Any) -> StockUpdate:
    """
    Validate the stock form before anything is sent to the backend.

    Raises:
        StockUpdateError: quantity is not a positive integer, the operation is
        unknown or the reason is blank
    """
    try:
        qty = int(str(quantity).strip())
    except (TypeError, ValueError):
        qty = 0
    if qty <= 0:
        raise StockUpdateError("Please enter a valid quantity")

    op = str(operation or "add").strip().lower()
    if op not in STOCK_OPERATIONS:
        raise StockUpdateError(
            f"Invalid operation. Allowed: {', '.join(STOCK_OPERATIONS)}"
        )

    text = str(reason or "").strip()
    if not text:
        raise StockUpdateError("Please provide a reason for the stock update")

    return StockUpdate(quantity=qty, operation=op, reason=text)


def restock_defaults(part: Part) -> StockUpdate:
    """Pre-filled restock form for a low-stock part."""
    return StockUpdate(
        quantity=suggest_restock_quantity(part),
        operation="add",
        reason=DEFAULT_RESTOCK_REASON,
    )


def update_part_stock(client: BackendClient, part_id: Any, update: StockUpdate) -> str:
    """
    Send a stock mutation to the backend.

    Returns:
        The backend's confirmation message
    """
    try:
        response = client.put(f"/inventory/api/parts/{part_id}/stock", update.as_payload())
    except BackendError as e:
        raise StockUpdateError("Error updating stock") from e

    if not response.ok or not response.success:
        message = response.message or "Error updating stock"
        logger.warning(
            f"[STOCK] Update refused for part {part_id} (HTTP {response.status}): {message}"
        )
        raise StockUpdateError(message)

    logger.info(
        f"[STOCK] Part {part_id}: {update.operation} {update.quantity} ({update.reason})"
    )
    return response.message or "Stock updated successfully"
