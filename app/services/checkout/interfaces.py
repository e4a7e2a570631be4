"""
Interfaces/Protocols for checkout services (Dependency Inversion Principle).

Services depend on these contracts rather than on the SQL repositories and
HTTP clients, so tests can pass in-memory fakes.
"""

from typing import Any, Optional, Protocol

from app.domain.models import (
    BankAccountDomain,
    EmailConfigDomain,
    OrderDomain,
    OrderStatus,
    OrderTokenDomain,
    PaymentMethodDomain,
    ShopDomain,
)


class IShopRepository(Protocol):
    """Protocol for shop lookups."""

    async def get_by_id(self, shop_id: str) -> Optional[ShopDomain]:
        ...


class IOrderTokenRepository(Protocol):
    """Protocol for checkout token persistence."""

    async def create(self, token: OrderTokenDomain) -> OrderTokenDomain:
        ...

    async def get_by_token(self, token: str) -> Optional[OrderTokenDomain]:
        ...


class IOrderRepository(Protocol):
    """Protocol for order persistence."""

    async def create(self, order: OrderDomain) -> OrderDomain:
        ...

    async def get_by_id(self, order_id: str) -> Optional[OrderDomain]:
        ...

    async def update_metadata(self, order_id: str, fields: dict[str, Any]) -> int:
        ...

    async def update_status_if(
        self,
        order_id: str,
        expected_status: OrderStatus,
        new_status: OrderStatus,
        invoice_sent: Optional[bool] = None,
    ) -> bool:
        ...

    async def count_recent_by_email(self, email: str, window_seconds: int) -> int:
        ...


class IBankAccountRepository(Protocol):
    """Protocol for bank account lookups."""

    async def get_by_id(self, bank_account_id: str) -> Optional[BankAccountDomain]:
        ...


class IEmailConfigRepository(Protocol):
    """Protocol for email configuration lookups."""

    async def get_active(self, config_id: Optional[str]) -> Optional[EmailConfigDomain]:
        ...


class IPaymentMethodRepository(Protocol):
    """Protocol for payment method lookups."""

    async def list_active_for_shop(self, shop_id: str) -> list[PaymentMethodDomain]:
        ...


class IBlockedEmailRepository(Protocol):
    """Protocol for the persistent e-mail blocklist."""

    async def is_blocked(self, email: str) -> bool:
        ...

    async def block(self, email: str, reason: str, notes: Optional[str] = None) -> None:
        ...


class IInvoiceClient(Protocol):
    """Protocol for the invoice generation collaborator."""

    async def generate_invoice(self, order_id: str) -> dict[str, Any]:
        ...


class IEmailClient(Protocol):
    """Protocol for the confirmation email collaborator."""

    async def send_order_confirmation(self, order_id: str, include_invoice: bool, email_type: str) -> dict[str, Any]:
        ...
