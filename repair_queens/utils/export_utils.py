"""
Serialisation of export bundles and the low-stock report.

Each ``bundle_to_*`` function returns a list of :class:`ExportFile` objects
ready to be handed to a download sink.
"""

import csv
import io
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
from jinja2 import Environment, PackageLoader, select_autoescape

from repair_queens.models.export_models import ExportBundle, ExportRecord
from repair_queens.models.inventory_models import Part
from repair_queens.services.triage_service import classify, restock_value

logger = logging.getLogger(__name__)

PDF_ROW_LIMIT = 50
REPORT_BASENAME = "repair_queens_report"

CSV_MIME = "text/csv"
JSON_MIME = "application/json"
HTML_MIME = "text/html"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

RESOURCE_TITLES: Dict[str, str] = {
    "appointments": "Appointments",
    "parts": "Parts Inventory",
    "suppliers": "Suppliers",
    "orders": "Orders",
}

LOW_STOCK_HEADERS = [
    "Name",
    "Part Number",
    "Category",
    "Current Stock",
    "Minimum Level",
    "Urgency",
    "Unit Price",
    "Restock Value",
    "Supplier",
]

_jinja_env = Environment(
    loader=PackageLoader("repair_queens", "templates"),
    autoescape=select_autoescape(["html"]),
)


@dataclass
class ExportFile:
    content: Any
    filename: str
    mime_type: str


# ------------------------------------------------------------
# Naming
# ------------------------------------------------------------
def timestamp(now: datetime) -> str:
    return now.strftime("%Y%m%d_%H%M")


def export_filename(resource_type: str, extension: str, now: datetime) -> str:
    return f"{resource_type}_{timestamp(now)}.{extension}"


def resource_title(resource_type: str) -> str:
    return RESOURCE_TITLES.get(resource_type, resource_type)


def format_header_name(header: str) -> str:
    """``stock_quantity`` -> ``Stock Quantity``."""
    return " ".join(word[:1].upper() + word[1:] for word in str(header).split("_"))


# ------------------------------------------------------------
# CSV
# ------------------------------------------------------------
def _literal(value: Any) -> Any:
    """Booleans and numbers written the way the JSON payload spells them."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


def _csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (bool, int, float)):
        return _literal(value)
    if not isinstance(value, str):
        value = json.dumps(value, ensure_ascii=False, default=str)
    cleaned = value.replace('"', '""').replace("\r\n", " ").replace("\n", " ")
    return f'"{cleaned}"'


def convert_to_csv(records: List[ExportRecord]) -> str:
    """Header from the first record's keys; strings quoted, the rest literal."""
    if not records:
        return ""
    headers = list(records[0].keys())
    lines = [",".join(headers)]
    for row in records:
        lines.append(",".join(_csv_value(row.get(h)) for h in headers))
    return "\n".join(lines)


def bundle_to_csv(bundle: ExportBundle, now: datetime) -> List[ExportFile]:
    files = []
    for resource_type, records in bundle.items():
        if not records:
            logger.info(f"[EXPORT] No {resource_type} records; CSV skipped")
            continue
        files.append(
            ExportFile(
                convert_to_csv(records),
                export_filename(resource_type, "csv", now),
                CSV_MIME,
            )
        )
    return files


# ------------------------------------------------------------
# JSON
# ------------------------------------------------------------
def convert_to_json(records: List[ExportRecord]) -> str:
    return json.dumps(records, indent=2, ensure_ascii=False, default=str)


def bundle_to_json(bundle: ExportBundle, now: datetime) -> List[ExportFile]:
    return [
        ExportFile(
            convert_to_json(records),
            export_filename(resource_type, "json", now),
            JSON_MIME,
        )
        for resource_type, records in bundle.items()
    ]


# ------------------------------------------------------------
# PDF (HTML report, printed to PDF by the browser)
# ------------------------------------------------------------
def _report_sections(bundle: ExportBundle) -> List[Dict[str, Any]]:
    sections = []
    for resource_type, records in bundle.items():
        section: Dict[str, Any] = {
            "title": resource_title(resource_type),
            "count": len(records),
            "headers": [],
            "rows": [],
            "omitted": 0,
        }
        if records:
            keys = list(records[0].keys())
            section["headers"] = [format_header_name(k) for k in keys]
            section["rows"] = [
                ["" if row.get(k) is None else _literal(row.get(k)) for k in keys]
                for row in records[:PDF_ROW_LIMIT]
            ]
            section["omitted"] = max(len(records) - PDF_ROW_LIMIT, 0)
        sections.append(section)
    return sections


def generate_report_html(bundle: ExportBundle, now: datetime) -> str:
    template = _jinja_env.get_template("export_templates/report.html")
    return template.render(
        generated_on=now.strftime("%d.%m.%Y, %H:%M:%S"),
        sections=_report_sections(bundle),
    )


def bundle_to_pdf(bundle: ExportBundle, now: datetime) -> List[ExportFile]:
    return [
        ExportFile(
            generate_report_html(bundle, now),
            f"{REPORT_BASENAME}_{timestamp(now)}.html",
            HTML_MIME,
        )
    ]


SERIALIZERS = {
    "csv": bundle_to_csv,
    "json": bundle_to_json,
    "pdf": bundle_to_pdf,
}


def serialize_bundle(
    bundle: ExportBundle, export_format: str, now: Optional[datetime] = None
) -> List[ExportFile]:
    serializer = SERIALIZERS.get(export_format)
    if serializer is None:
        raise ValueError(f"Invalid format: {export_format}")
    return serializer(bundle, now or datetime.now())


# ------------------------------------------------------------
# Low-stock report
# ------------------------------------------------------------
def _low_stock_rows(parts: Iterable[Part]) -> List[List[Any]]:
    return [
        [
            part.name,
            part.part_number or "",
            part.category,
            part.stock_quantity,
            part.minimum_stock_level,
            classify(part),
            part.price,
            f"{restock_value(part):.2f}",
            part.supplier_name,
        ]
        for part in parts
    ]


def generate_low_stock_csv(parts: Iterable[Part]) -> str:
    """Fixed-column low-stock report; every field is quoted."""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(LOW_STOCK_HEADERS)
    writer.writerows(_low_stock_rows(parts))
    return output.getvalue().rstrip("\n")


def generate_low_stock_excel(parts: Iterable[Part]) -> bytes:
    """
    Low-stock report as an Excel workbook.

    Returns:
        Bytes of the .xlsx file
    """
    try:
        df = pd.DataFrame(_low_stock_rows(parts), columns=LOW_STOCK_HEADERS)
        df["Restock Value"] = df["Restock Value"].astype(float)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Low Stock", index=False)

        output.seek(0)
        return output.getvalue()

    except Exception as e:
        logger.error(f"[EXPORT] Failed to build the low-stock workbook: {e}")
        raise


def low_stock_report_filename(extension: str, now: Optional[datetime] = None) -> str:
    return f"low_stock_report_{(now or datetime.now()).strftime('%Y-%m-%d')}.{extension}"
