"""Top-level package for the console's models.

Everything here is a plain in-memory structure built from backend
responses; nothing is persisted by the console itself.
"""

# Inventory models
from .inventory_models.part import Part  # noqa: F401
from .inventory_models.supplier import Supplier  # noqa: F401

# Export models
from .export_models import (  # noqa: F401
    EXPORT_FORMATS,
    RESOURCE_TYPES,
    ExportBundle,
    ExportRequest,
)

# Session user
from .user import SessionUser  # noqa: F401

__all__ = [
    # Inventory
    "Part",
    "Supplier",
    # Export
    "EXPORT_FORMATS",
    "RESOURCE_TYPES",
    "ExportBundle",
    "ExportRequest",
    # Session
    "SessionUser",
]
