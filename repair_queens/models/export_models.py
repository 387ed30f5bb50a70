"""Export request and bundle definitions.

An :class:`ExportRequest` is assembled from the user's selection when the
export is started, consumed once by the export pipeline and discarded.
The pipeline builds an :data:`ExportBundle` from it: a mapping from
resource type to the list of flat records fetched for that type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

RESOURCE_TYPES: Tuple[str, ...] = ("appointments", "parts", "suppliers", "orders")
EXPORT_FORMATS: Tuple[str, ...] = ("csv", "json", "pdf")

ExportRecord = Dict[str, Any]
ExportBundle = Dict[str, List[ExportRecord]]


@dataclass(frozen=True)
class ExportRequest:
    """Selected resource types plus exactly one target format."""

    resource_types: Tuple[str, ...] = ()
    export_format: str = "csv"

    def __post_init__(self) -> None:
        unknown = [t for t in self.resource_types if t not in RESOURCE_TYPES]
        if unknown:
            raise ValueError(f"Unknown data type: {', '.join(unknown)}")
        if self.export_format not in EXPORT_FORMATS:
            raise ValueError(
                f"Invalid format: {self.export_format}. Allowed: {', '.join(EXPORT_FORMATS)}"
            )

    @classmethod
    def from_selection(
        cls, selected: Iterable[str], export_format: str = "csv"
    ) -> "ExportRequest":
        """Normalise a raw selection: trims, lowercases and drops duplicates."""
        ordered: List[str] = []
        for tag in selected or ():
            tag = str(tag or "").strip().lower()
            if tag and tag not in ordered:
                ordered.append(tag)
        fmt = str(export_format or "csv").strip().lower()
        return cls(resource_types=tuple(ordered), export_format=fmt)

    @property
    def is_empty(self) -> bool:
        return not self.resource_types
