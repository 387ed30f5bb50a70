import pytest

from repair_queens.models.export_models import ExportRequest
from repair_queens.models.inventory_models import Part

from conftest import make_part


def test_part_from_api_maps_wire_fields():
    p = Part.from_api(make_part(part_id=9, stock=2, minimum=6, price="19.90"))
    assert p.id == 9
    assert p.stock_quantity == 2
    assert p.minimum_stock_level == 6
    assert p.price == pytest.approx(19.9)
    assert p.part_number == "BP-009"
    assert p.supplier_name == "Auto Parts SRL"


def test_part_from_api_clamps_and_defaults():
    p = Part.from_api({"id": 1, "name": "Hose", "stockQuantity": -3, "minimumStockLevel": None, "supplier": {}})
    assert p.stock_quantity == 0
    assert p.minimum_stock_level == 0
    assert p.price == 0.0
    assert p.supplier is None
    assert p.supplier_name == ""


def test_part_round_trips_to_wire_shape():
    row = make_part(part_id=4, stock=1, minimum=3, price=7.5)
    out = Part.from_api(row).as_dict()
    assert out["stockQuantity"] == 1
    assert out["minimumStockLevel"] == 3
    assert out["supplier"]["name"] == "Auto Parts SRL"


def test_export_request_normalises_selection():
    req = ExportRequest.from_selection([" Parts", "suppliers", "parts"], "JSON")
    assert req.resource_types == ("parts", "suppliers")
    assert req.export_format == "json"
    assert not req.is_empty


def test_export_request_rejects_unknown_values():
    with pytest.raises(ValueError):
        ExportRequest.from_selection(["vehicles"], "csv")
    with pytest.raises(ValueError):
        ExportRequest.from_selection(["parts"], "xml")


def test_empty_export_request_is_allowed():
    assert ExportRequest.from_selection([], "pdf").is_empty
