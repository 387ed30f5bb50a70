"""Inventory models package.

Dataclass models for the inventory domain: parts (``Part``) and their
suppliers (``Supplier``).
"""

from .part import Part  # noqa: F401
from .supplier import Supplier  # noqa: F401

__all__ = ["Part", "Supplier"]
