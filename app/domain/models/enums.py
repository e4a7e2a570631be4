"""
Enumerations shared by the checkout domain models.
"""

from enum import Enum


class CheckoutMode(str, Enum):
    """Per-shop checkout mode, frozen onto each order as its processing mode."""

    INSTANT = "instant"
    MANUAL = "manual"


class OrderStatus(str, Enum):
    """
    Order status state machine.

    pending -> confirmed -> paid -> delivered, with cancelled reachable from
    any non-terminal state. invoice_sent marks completion of the instant path.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PAID = "paid"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    INVOICE_SENT = "invoice_sent"

    @classmethod
    def initial_for(cls, checkout_mode: "CheckoutMode | str | None") -> "OrderStatus":
        """Initial status of a new order for the given shop checkout mode."""
        if checkout_mode == CheckoutMode.INSTANT:
            return cls.CONFIRMED
        return cls.PENDING


BANK_TRANSFER_PAYMENT_METHOD = "bank_transfer"
