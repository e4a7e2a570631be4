"""
Order domain model (Aggregate Root).

Represents a persisted checkout order with its customer, delivery and
billing data, priced line, status and invoice flags.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .enums import BANK_TRANSFER_PAYMENT_METHOD, CheckoutMode, OrderStatus

_FLOAT_FIELDS = (
    "liters",
    "price_per_liter",
    "base_price",
    "delivery_fee",
    "total_amount",
    "amount",
    "eur_amount",
    "exchange_rate",
)
_STR_ID_FIELDS = ("id", "shop_id", "selected_bank_account_id")


@dataclass
class OrderDomain:
    """
    Domain model representing an order.

    Attributes:
        order_number: Human-readable number, e.g. ORD-1718000000000-K3J9Q2XZA
        shop_id: Owning shop
        customer_*: Customer identity
        delivery_*: Delivery contact and address
        use_same_address: True when no distinct billing address is stored
        billing_*: Billing contact and address (only when distinct)
        product, liters, price_per_liter, base_price, delivery_fee: Priced line
        total_amount: liters * price_per_liter + delivery_fee, computed once
        amount: Copy of total_amount for downstream consumers
        payment_method: Payment method code, e.g. bank_transfer
        status: Current status
        processing_mode: Shop checkout mode frozen at creation
        invoice_*: Invoice number, PDF flags and sent flag
        bank_details_shown: Whether bank details were revealed to the customer
        selected_bank_account_id: Bank account attached in the manual path
        temp_order_number: Temporary number used in the manual path
        order_token: Token the order was redeemed from, if any
        currency, exchange_rate, eur_amount: Currency data
        id: Order UUID (None for new orders)
    """

    order_number: str
    shop_id: str
    customer_name: str
    customer_email: str
    delivery_first_name: str
    delivery_last_name: str
    delivery_street: str
    delivery_postcode: str
    delivery_city: str
    product: str
    liters: float
    price_per_liter: float
    base_price: float
    delivery_fee: float
    total_amount: float
    payment_method: str
    status: OrderStatus
    processing_mode: CheckoutMode
    customer_phone: str | None = None
    delivery_phone: str | None = None
    use_same_address: bool = True
    billing_first_name: str | None = None
    billing_last_name: str | None = None
    billing_street: str | None = None
    billing_postcode: str | None = None
    billing_city: str | None = None
    amount: float | None = None
    invoice_number: str | None = None
    invoice_pdf_generated: bool = False
    invoice_pdf_url: str | None = None
    invoice_sent: bool = False
    bank_details_shown: bool = False
    selected_bank_account_id: str | None = None
    temp_order_number: str | None = None
    order_token: str | None = None
    currency: str = "EUR"
    exchange_rate: float = 1.0
    eur_amount: float | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    id: str | None = None

    def __post_init__(self) -> None:
        """Validate order data after initialization."""
        if not self.order_number:
            raise ValueError("Order number is required")

        if not isinstance(self.status, OrderStatus):
            self.status = OrderStatus(self.status)
        if not isinstance(self.processing_mode, CheckoutMode):
            self.processing_mode = CheckoutMode(self.processing_mode)

        if self.amount is None:
            self.amount = self.total_amount
        if self.eur_amount is None:
            self.eur_amount = self.total_amount * self.exchange_rate

    @property
    def is_manual(self) -> bool:
        """True when the order goes through human review."""
        return self.processing_mode == CheckoutMode.MANUAL

    @property
    def is_bank_transfer(self) -> bool:
        """True when the customer pays by bank transfer."""
        return self.payment_method == BANK_TRANSFER_PAYMENT_METHOD

    def invoice_summary(self) -> dict[str, Any]:
        """Invoice sub-object exposed to polling clients."""
        return {
            "generated": self.invoice_pdf_generated,
            "number": self.invoice_number,
            "url": self.invoice_pdf_url,
            "sent": self.invoice_sent,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert order to dictionary for persistence."""
        return {
            "id": self.id,
            "order_number": self.order_number,
            "shop_id": self.shop_id,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "delivery_first_name": self.delivery_first_name,
            "delivery_last_name": self.delivery_last_name,
            "delivery_street": self.delivery_street,
            "delivery_postcode": self.delivery_postcode,
            "delivery_city": self.delivery_city,
            "delivery_phone": self.delivery_phone,
            "use_same_address": self.use_same_address,
            "billing_first_name": self.billing_first_name,
            "billing_last_name": self.billing_last_name,
            "billing_street": self.billing_street,
            "billing_postcode": self.billing_postcode,
            "billing_city": self.billing_city,
            "product": self.product,
            "liters": self.liters,
            "price_per_liter": self.price_per_liter,
            "base_price": self.base_price,
            "delivery_fee": self.delivery_fee,
            "total_amount": self.total_amount,
            "amount": self.amount,
            "payment_method": self.payment_method,
            "status": self.status.value,
            "processing_mode": self.processing_mode.value,
            "invoice_number": self.invoice_number,
            "invoice_pdf_generated": self.invoice_pdf_generated,
            "invoice_pdf_url": self.invoice_pdf_url,
            "invoice_sent": self.invoice_sent,
            "bank_details_shown": self.bank_details_shown,
            "selected_bank_account_id": self.selected_bank_account_id,
            "temp_order_number": self.temp_order_number,
            "order_token": self.order_token,
            "currency": self.currency,
            "exchange_rate": self.exchange_rate,
            "eur_amount": self.eur_amount,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderDomain":
        """Create order from a store row."""
        known = set(cls.__dataclass_fields__)
        values = {key: value for key, value in data.items() if key in known}

        for name in _FLOAT_FIELDS:
            if values.get(name) is not None:
                values[name] = float(values[name])
        for name in _STR_ID_FIELDS:
            if values.get(name) is not None:
                values[name] = str(values[name])
        for name in ("use_same_address", "invoice_pdf_generated", "invoice_sent", "bank_details_shown"):
            if name in values:
                values[name] = bool(values[name])

        # Orders created before processing modes existed default to manual review
        values["processing_mode"] = values.get("processing_mode") or CheckoutMode.MANUAL.value
        if values.get("created_at") is None:
            values.pop("created_at", None)
        return cls(**values)
