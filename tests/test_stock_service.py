import pytest

from repair_queens.models.inventory_models import Part
from repair_queens.services.stock_service import (
    StockUpdate,
    StockUpdateError,
    build_stock_update,
    restock_defaults,
    update_part_stock,
)


@pytest.mark.parametrize("quantity", [0, -2, "", None, "abc"])
def test_rejects_invalid_quantity(quantity):
    with pytest.raises(StockUpdateError, match="valid quantity"):
        build_stock_update(quantity, "add", "Delivery")


def test_rejects_blank_reason_and_unknown_operation():
    with pytest.raises(StockUpdateError, match="reason"):
        build_stock_update(3, "add", "   ")
    with pytest.raises(StockUpdateError, match="Invalid operation"):
        build_stock_update(3, "multiply", "Delivery")


def test_builds_normalised_update():
    update = build_stock_update("12", "SET", "  Inventory count ")
    assert update == StockUpdate(quantity=12, operation="set", reason="Inventory count")


def test_restock_defaults_use_suggestion():
    update = restock_defaults(Part(stock_quantity=0, minimum_stock_level=8))
    assert update.as_payload() == {"quantity": 16, "operation": "add", "reason": "Restocking low inventory"}


def test_update_part_stock_sends_put(backend, client_for):
    backend.add("PUT", "/inventory/api/parts/5/stock", {"success": True, "message": "Stock updated"})
    message = update_part_stock(client_for(), 5, StockUpdate(4, "add", "Delivery"))

    assert message == "Stock updated"
    call = backend.calls[0]
    assert call["json"] == {"quantity": 4, "operation": "add", "reason": "Delivery"}
    assert call["headers"]["Authorization"] == "Bearer test-token"


def test_update_part_stock_surfaces_backend_refusal(backend, client_for):
    backend.add(
        "PUT", "/inventory/api/parts/5/stock", {"success": False, "message": "Insufficient stock"}, status=400
    )
    with pytest.raises(StockUpdateError, match="Insufficient stock"):
        update_part_stock(client_for(), 5, StockUpdate(40, "subtract", "Used in repair"))
