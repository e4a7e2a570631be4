"""In-memory fakes and builders for the checkout tests."""

import uuid
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any, Optional

from app.domain.models import (
    BankAccountDomain,
    CheckoutMode,
    EmailConfigDomain,
    OrderDomain,
    OrderStatus,
    OrderTokenDomain,
    PaymentMethodDomain,
    ShopDomain,
)
from app.utils.error_handler import StoreException

SHOP_ID = "6f1c2a9e-3b4d-4c5e-8f70-112233445566"
BANK_ACCOUNT_ID = "0a1b2c3d-4e5f-4a6b-9c7d-8e9f00112233"
EMAIL_CONFIG_ID = "9d8c7b6a-5f4e-4d3c-8b2a-100908070605"
UNKNOWN_ID = "11111111-2222-4333-8444-555555555555"


def make_shop(**overrides) -> ShopDomain:
    values: dict[str, Any] = {
        "id": SHOP_ID,
        "name": "S1",
        "active": True,
        "checkout_mode": CheckoutMode.MANUAL,
        "vat_rate": 19.0,
        "currency": "EUR",
        "bank_account_id": BANK_ACCOUNT_ID,
        "resend_config_id": EMAIL_CONFIG_ID,
        "company_name": "Heizöl Nord GmbH",
        "company_address": "Hafenstraße 1",
        "company_postcode": "20457",
        "company_city": "Hamburg",
    }
    values.update(overrides)
    return ShopDomain(**values)


def make_order(**overrides) -> OrderDomain:
    values: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "order_number": "ORD-1718000000000-K3J9Q2XZA",
        "shop_id": SHOP_ID,
        "customer_name": "Erika Mustermann",
        "customer_email": "erika@example.com",
        "delivery_first_name": "Erika",
        "delivery_last_name": "Mustermann",
        "delivery_street": "Lindenweg 5",
        "delivery_postcode": "20095",
        "delivery_city": "Hamburg",
        "product": "Heizöl EL",
        "liters": 100.0,
        "price_per_liter": 1.0,
        "base_price": 100.0,
        "delivery_fee": 10.0,
        "total_amount": 110.0,
        "payment_method": "bank_transfer",
        "status": OrderStatus.PENDING,
        "processing_mode": CheckoutMode.MANUAL,
    }
    values.update(overrides)
    return OrderDomain(**values)


def make_token(**overrides) -> OrderTokenDomain:
    now = datetime.now(UTC)
    values: dict[str, Any] = {
        "token": "tok_0123456789abcdef",
        "shop_id": SHOP_ID,
        "product": "Heizöl EL",
        "liters": 100.0,
        "price_per_liter": 1.0,
        "delivery_fee": 10.0,
        "total_amount": 110.0,
        "vat_rate": 19.0,
        "vat_amount": 110.0 * 19 / 119,
        "expires_at": now + timedelta(hours=1),
        "created_at": now,
    }
    values.update(overrides)
    return OrderTokenDomain(**values)


def make_bank_account(**overrides) -> BankAccountDomain:
    values: dict[str, Any] = {
        "id": BANK_ACCOUNT_ID,
        "account_name": "Main account",
        "account_holder": "Heizöl Nord GmbH",
        "bank_name": "Hamburger Sparkasse",
        "iban": "DE89370400440532013000",
        "bic": "HASPDEHHXXX",
        "currency": "EUR",
        "active": True,
    }
    values.update(overrides)
    return BankAccountDomain(**values)


def make_email_config(**overrides) -> EmailConfigDomain:
    values: dict[str, Any] = {
        "id": EMAIL_CONFIG_ID,
        "api_key": "re_test_key",
        "from_email": "orders@heizoel-nord.de",
        "from_name": "Heizöl Nord",
        "active": True,
    }
    values.update(overrides)
    return EmailConfigDomain(**values)


def store_error(operation: str = "query") -> StoreException:
    return StoreException(message="Database query failed", operation=operation)


# === FAKE REPOSITORIES ===


class FakeShopRepository:
    def __init__(self, *shops: ShopDomain):
        self.shops = {shop.id: shop for shop in shops}

    async def get_by_id(self, shop_id: str) -> Optional[ShopDomain]:
        return self.shops.get(shop_id)


class FakeOrderTokenRepository:
    def __init__(self, *tokens: OrderTokenDomain):
        self.tokens = {token.token: token for token in tokens}

    async def create(self, token: OrderTokenDomain) -> OrderTokenDomain:
        if token.token in self.tokens:
            raise StoreException(message="Duplicate token", operation="create", table="order_tokens")
        self.tokens[token.token] = token
        return token

    async def get_by_token(self, token: str) -> Optional[OrderTokenDomain]:
        return self.tokens.get(token)


class FakeOrderRepository:
    def __init__(self, *orders: OrderDomain):
        self.orders = {order.id: order for order in orders}
        self.recent_count: Optional[int] = None

    async def create(self, order: OrderDomain) -> OrderDomain:
        created = replace(order, id=str(uuid.uuid4()))
        self.orders[created.id] = created
        return created

    async def get_by_id(self, order_id: str) -> Optional[OrderDomain]:
        return self.orders.get(order_id)

    async def update_metadata(self, order_id: str, fields: dict[str, Any]) -> int:
        order = self.orders.get(order_id)
        if order is None:
            return 0
        self.orders[order_id] = replace(order, **fields)
        return 1

    async def update_status_if(
        self,
        order_id: str,
        expected_status: OrderStatus,
        new_status: OrderStatus,
        invoice_sent: Optional[bool] = None,
    ) -> bool:
        order = self.orders.get(order_id)
        if order is None or order.status != expected_status:
            return False
        changes: dict[str, Any] = {"status": new_status}
        if invoice_sent is not None:
            changes["invoice_sent"] = invoice_sent
        self.orders[order_id] = replace(order, **changes)
        return True

    async def count_recent_by_email(self, email: str, window_seconds: int) -> int:
        if self.recent_count is not None:
            return self.recent_count
        since = datetime.now(UTC) - timedelta(seconds=window_seconds)
        return sum(
            1
            for order in self.orders.values()
            if order.customer_email.lower() == email and order.created_at >= since
        )


class FakeBankAccountRepository:
    def __init__(self, *accounts: BankAccountDomain):
        self.accounts = {account.id: account for account in accounts}

    async def get_by_id(self, account_id: str) -> Optional[BankAccountDomain]:
        return self.accounts.get(account_id)


class FakeEmailConfigRepository:
    def __init__(self, *configs: EmailConfigDomain):
        self.configs = {config.id: config for config in configs}

    async def get_active(self, config_id: str) -> Optional[EmailConfigDomain]:
        config = self.configs.get(config_id)
        return config if config is not None and config.active else None


class FakePaymentMethodRepository:
    def __init__(self, *methods: PaymentMethodDomain):
        self.methods = list(methods)

    async def list_active_for_shop(self, shop_id: str) -> list[PaymentMethodDomain]:
        return [method for method in self.methods if method.active]


class FakeBlockedEmailRepository:
    def __init__(self, *emails: str):
        self.blocked: dict[str, str] = {email: "manual" for email in emails}

    async def is_blocked(self, email: str) -> bool:
        return email in self.blocked

    async def block(self, email: str, reason: str, notes: Optional[str] = None) -> None:
        self.blocked.setdefault(email, reason)
