"""
Domain models for business entities.

These models represent core checkout concepts and contain
business logic and invariants.
"""

from .bank_account import BankAccountDomain
from .email_config import EmailConfigDomain
from .enums import BANK_TRANSFER_PAYMENT_METHOD, CheckoutMode, OrderStatus
from .order import OrderDomain
from .order_token import OrderTokenDomain
from .payment_method import PaymentMethodDomain
from .shop import ShopDomain

__all__ = [
    "BANK_TRANSFER_PAYMENT_METHOD",
    "BankAccountDomain",
    "CheckoutMode",
    "EmailConfigDomain",
    "OrderDomain",
    "OrderStatus",
    "OrderTokenDomain",
    "PaymentMethodDomain",
    "ShopDomain",
]
