"""Supplier model definitions.

The :class:`Supplier` dataclass mirrors the ``supplier`` object the
backend nests inside every part. Only the name is needed for display and
export; the contact fields are carried along when present.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class Supplier:
    """Represents a parts supplier."""

    id: Optional[Any] = field(default=None)
    name: str = field(default="")
    contact: Optional[str] = field(default=None)
    phone: Optional[str] = field(default=None)
    email: Optional[str] = field(default=None)

    @classmethod
    def from_api(cls, payload: Optional[Dict[str, Any]]) -> Optional["Supplier"]:
        """Build from the backend shape; ``None`` when there is no supplier."""
        if not isinstance(payload, dict):
            return None
        if payload.get("id") is None and not payload.get("name"):
            return None
        return cls(
            id=payload.get("id"),
            name=str(payload.get("name") or ""),
            contact=payload.get("contact"),
            phone=payload.get("phone"),
            email=payload.get("email"),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "contact": self.contact,
            "phone": self.phone,
            "email": self.email,
        }

    def __repr__(self) -> str:
        return f"<Supplier {self.name or self.id}>"
