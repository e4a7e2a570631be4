"""
Payment method domain model.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class PaymentMethodDomain:
    """
    Payment method offered by a shop.

    Attributes:
        id: Payment method UUID
        name: Display name
        code: Machine code, e.g. bank_transfer
        description: Optional description
        active: Whether the method itself is enabled
    """

    id: str
    name: str
    code: str
    description: str | None = None
    active: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert payment method to its public representation."""
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "description": self.description,
            "active": self.active,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PaymentMethodDomain":
        """Create payment method from a store row."""
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            code=data.get("code", ""),
            description=data.get("description"),
            active=bool(data.get("active", True)),
        )
