"""
Order token domain model.

An order token captures a priced cart for one shop. It is created once,
never mutated, and stops being usable when the wall clock passes its expiry.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


def _as_aware(value: datetime) -> datetime:
    """Treat naive timestamps coming from the store as UTC."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


@dataclass
class OrderTokenDomain:
    """
    Domain model representing a checkout token.

    Attributes:
        token: Prefixed token string (unique)
        shop_id: Shop the cart belongs to
        product: Product name
        liters: Quantity in liters
        price_per_liter: Unit price
        delivery_fee: Delivery fee
        total_amount: Quoted total, authoritative for the order
        vat_rate: VAT rate applied when the token was issued
        vat_amount: VAT included in the total
        expires_at: Expiry timestamp
        created_at: Creation timestamp
    """

    token: str
    shop_id: str
    product: str
    liters: float
    price_per_liter: float
    delivery_fee: float
    total_amount: float
    expires_at: datetime
    vat_rate: float = 0.0
    vat_amount: float = 0.0
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate token data after initialization."""
        if not self.token:
            raise ValueError("Token is required")
        self.expires_at = _as_aware(self.expires_at)
        self.created_at = _as_aware(self.created_at)

    def is_expired(self, now: datetime | None = None) -> bool:
        """
        Check whether the token is past its expiry.

        Expiry is strict: a token is still valid at exactly ``expires_at``.

        Args:
            now: Reference time (defaults to the current UTC time)

        Returns:
            bool: True if ``now`` is after ``expires_at``
        """
        now = _as_aware(now) if now is not None else datetime.now(UTC)
        return now > self.expires_at

    def cart(self) -> dict[str, Any]:
        """Priced cart snapshot."""
        return {
            "product": self.product,
            "liters": self.liters,
            "price_per_liter": self.price_per_liter,
            "delivery_fee": self.delivery_fee,
            "total_amount": self.total_amount,
            "vat_rate": self.vat_rate,
            "vat_amount": self.vat_amount,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert token to dictionary for persistence."""
        return {
            "token": self.token,
            "shop_id": self.shop_id,
            **self.cart(),
            "expires_at": self.expires_at,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderTokenDomain":
        """Create token from a store row."""
        return cls(
            token=data["token"],
            shop_id=str(data["shop_id"]),
            product=data["product"],
            liters=float(data["liters"]),
            price_per_liter=float(data["price_per_liter"]),
            delivery_fee=float(data["delivery_fee"]),
            total_amount=float(data["total_amount"]),
            vat_rate=float(data.get("vat_rate") or 0),
            vat_amount=float(data.get("vat_amount") or 0),
            expires_at=data["expires_at"],
            created_at=data.get("created_at") or datetime.now(UTC),
        )
