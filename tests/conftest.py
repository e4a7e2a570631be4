"""Fixtures shared by the checkout tests."""

from unittest.mock import AsyncMock

import pytest

from app.core.config import Settings
from app.domain.models import ShopDomain
from tests.fakes import (
    FakeBankAccountRepository,
    FakeBlockedEmailRepository,
    FakeEmailConfigRepository,
    FakeOrderRepository,
    FakeOrderTokenRepository,
    FakeShopRepository,
    make_bank_account,
    make_email_config,
    make_shop,
)


# === FIXTURES ===


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ENVIRONMENT="testing",
        LOG_FILE_PATH=None,
        ORDER_RATE_LIMIT_ENABLED=True,
        ORDER_RATE_LIMIT_MAX_ORDERS=3,
        ORDER_RATE_LIMIT_WINDOW_SECONDS=60,
        STATIC_BLOCKED_EMAILS="spam@example.com",
    )


@pytest.fixture
def shop() -> ShopDomain:
    return make_shop()


@pytest.fixture
def shop_repo(shop) -> FakeShopRepository:
    return FakeShopRepository(shop)


@pytest.fixture
def token_repo() -> FakeOrderTokenRepository:
    return FakeOrderTokenRepository()


@pytest.fixture
def order_repo() -> FakeOrderRepository:
    return FakeOrderRepository()


@pytest.fixture
def bank_account_repo() -> FakeBankAccountRepository:
    return FakeBankAccountRepository(make_bank_account())


@pytest.fixture
def email_config_repo() -> FakeEmailConfigRepository:
    return FakeEmailConfigRepository(make_email_config())


@pytest.fixture
def blocked_email_repo() -> FakeBlockedEmailRepository:
    return FakeBlockedEmailRepository()


@pytest.fixture
def invoice_client() -> AsyncMock:
    client = AsyncMock()
    client.generate_invoice.return_value = {"success": True}
    return client


@pytest.fixture
def email_client() -> AsyncMock:
    client = AsyncMock()
    client.send_order_confirmation.return_value = {"success": True}
    return client
