# repair_queens/services/inventory_service.py

import logging
from typing import List

from repair_queens.models.inventory_models import Part
from repair_queens.utils.api_client import BackendClient, BackendError

logger = logging.getLogger(__name__)

LOW_STOCK_ENDPOINT = "/inventory/api/parts/low-stock"
CATEGORIES_ENDPOINT = "/inventory/api/parts/categories"


class InventoryError(Exception):
    pass


def load_low_stock_parts(client: BackendClient) -> List[Part]:
    """Parts at or below their minimum, as reported by the backend."""
    try:
        response = client.get(LOW_STOCK_ENDPOINT)
    except BackendError as e:
        raise InventoryError("Error loading low stock data") from e

    if not response.ok or not response.success:
        raise InventoryError(response.message or "Error loading low stock data")

    body = response.body if isinstance(response.body, dict) else {}
    rows = body.get("parts")
    if not isinstance(rows, list):
        rows = []
    parts = [Part.from_api(row) for row in rows if isinstance(row, dict)]
    logger.info(f"[INVENTORY] Loaded {len(parts)} low-stock part(s)")
    return parts


def find_part(parts: List[Part], part_id) -> Part:
    for part in parts:
        if str(part.id) == str(part_id):
            return part
    raise InventoryError(f"Part {part_id} is not in the low-stock list")


def load_categories(client: BackendClient) -> List[str]:
    try:
        response = client.get(CATEGORIES_ENDPOINT)
    except BackendError as e:
        raise InventoryError("Error loading categories") from e

    if not response.ok or not response.success:
        raise InventoryError(response.message or "Error loading categories")
    body = response.body if isinstance(response.body, dict) else {}
    categories = body.get("categories")
    if not isinstance(categories, list):
        return []
    return [str(c) for c in categories]
