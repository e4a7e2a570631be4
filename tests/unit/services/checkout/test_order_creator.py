"""Unit tests for OrderCreator, including token redemption."""

from datetime import UTC, datetime, timedelta

import pytest

from app.api.v1.schemas.checkout_schemas import CreateOrderRequest
from app.domain.models import CheckoutMode, OrderStatus
from app.services.checkout.managers import OrderCreator, TokenResolver
from app.services.checkout.validators import OrderSpamGuard
from app.utils.error_handler import (
    ExpiredException,
    InactiveException,
    NotFoundException,
    OrdersBlockedException,
)
from tests.fakes import (
    SHOP_ID,
    UNKNOWN_ID,
    FakeBlockedEmailRepository,
    FakeOrderRepository,
    FakeOrderTokenRepository,
    FakeShopRepository,
    make_shop,
    make_token,
)


def direct_request(**overrides) -> CreateOrderRequest:
    values = {
        "shop_id": SHOP_ID,
        "customer_name": "Erika Mustermann",
        "customer_email": "Erika@Example.com",
        "customer_phone": "+49 40 123456",
        "delivery_first_name": "Erika",
        "delivery_last_name": "Mustermann",
        "delivery_street": "Lindenweg 5",
        "delivery_postcode": "20095",
        "delivery_city": "Hamburg",
        "product": "Heizöl EL",
        "liters": 100,
        "price_per_liter": 1.0,
        "delivery_fee": 10,
        "payment_method": "bank_transfer",
    }
    values.update(overrides)
    return CreateOrderRequest(**values)


def token_request(token: str, **overrides) -> CreateOrderRequest:
    values = {
        "token": token,
        "customer_name": "Max Peter Mustermann",
        "customer_email": "max@example.com",
        "customer_phone": "+49 40 654321",
        "delivery_street": "Lindenweg 5",
        "delivery_postcode": "20095",
        "delivery_city": "Hamburg",
        "payment_method": "bank_transfer",
    }
    values.update(overrides)
    return CreateOrderRequest(**values)


def build_creator(shop_repo, order_repo, settings, token_repo=None, blocked_email_repo=None) -> OrderCreator:
    token_repo = token_repo or FakeOrderTokenRepository()
    return OrderCreator(
        shop_repo=shop_repo,
        order_repo=order_repo,
        token_resolver=TokenResolver(token_repo, shop_repo),
        spam_guard=OrderSpamGuard(order_repo, blocked_email_repo or FakeBlockedEmailRepository(), settings),
        settings=settings,
    )


class TestDirectOrders:
    """Orders submitted with the cart in the request."""

    @pytest.mark.asyncio
    async def test_manual_shop_creates_pending_order(self, shop_repo, order_repo, settings):
        creator = build_creator(shop_repo, order_repo, settings)

        result = await creator.create(direct_request())

        assert result["status"] == "pending"
        assert result["checkout_mode"] == "manual"
        assert result["total_amount"] == pytest.approx(110.0)
        stored = order_repo.orders[result["order_id"]]
        assert stored.processing_mode == CheckoutMode.MANUAL
        assert stored.order_number == result["order_number"]

    @pytest.mark.asyncio
    async def test_instant_shop_creates_confirmed_order(self, order_repo, settings):
        shop_repo = FakeShopRepository(make_shop(checkout_mode=CheckoutMode.INSTANT))
        creator = build_creator(shop_repo, order_repo, settings)

        result = await creator.create(direct_request())

        assert result["status"] == "confirmed"
        assert result["checkout_mode"] == "instant"
        assert order_repo.orders[result["order_id"]].status == OrderStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_totals_are_computed_once(self, shop_repo, order_repo, settings):
        creator = build_creator(shop_repo, order_repo, settings)

        result = await creator.create(direct_request(liters=1234.5, price_per_liter=0.987, delivery_fee=29.9))
        stored = order_repo.orders[result["order_id"]]

        assert abs(stored.total_amount - (1234.5 * 0.987 + 29.9)) < 1e-6
        assert stored.base_price == pytest.approx(1234.5 * 0.987)
        assert stored.amount == stored.total_amount

    @pytest.mark.asyncio
    async def test_order_number_format(self, shop_repo, order_repo, settings):
        creator = build_creator(shop_repo, order_repo, settings)

        result = await creator.create(direct_request())

        prefix, millis, suffix = result["order_number"].split("-")
        assert prefix == "ORD"
        assert millis.isdigit()
        assert len(suffix) == 9

    @pytest.mark.asyncio
    async def test_currency_data_comes_from_shop(self, order_repo, settings):
        shop_repo = FakeShopRepository(make_shop(currency="PLN"))
        creator = build_creator(shop_repo, order_repo, settings)

        result = await creator.create(direct_request())
        stored = order_repo.orders[result["order_id"]]

        assert stored.currency == "PLN"
        assert stored.exchange_rate == 0.233
        assert stored.eur_amount == pytest.approx(110.0 * 0.233)

    @pytest.mark.asyncio
    async def test_unknown_shop_is_not_found(self, shop_repo, order_repo, settings):
        creator = build_creator(shop_repo, order_repo, settings)

        with pytest.raises(NotFoundException) as exc_info:
            await creator.create(direct_request(shop_id=UNKNOWN_ID))

        assert exc_info.value.status_code == 404
        assert order_repo.orders == {}

    @pytest.mark.asyncio
    async def test_inactive_shop_is_404(self, order_repo, settings):
        shop_repo = FakeShopRepository(make_shop(active=False))
        creator = build_creator(shop_repo, order_repo, settings)

        with pytest.raises(InactiveException) as exc_info:
            await creator.create(direct_request())

        assert exc_info.value.status_code == 404
        assert order_repo.orders == {}

    @pytest.mark.asyncio
    async def test_billing_address_kept_as_submitted(self, shop_repo, order_repo, settings):
        creator = build_creator(shop_repo, order_repo, settings)
        request = direct_request(
            use_same_address=False,
            billing_first_name="Hans",
            billing_last_name="Mustermann",
            billing_street="Rathausmarkt 1",
            billing_postcode="20095",
            billing_city="Hamburg",
        )

        result = await creator.create(request)
        stored = order_repo.orders[result["order_id"]]

        assert stored.use_same_address is False
        assert stored.billing_first_name == "Hans"
        assert stored.billing_street == "Rathausmarkt 1"


class TestTokenOrders:
    """Orders redeemed from a checkout token."""

    @pytest.mark.asyncio
    async def test_cart_comes_from_token(self, shop_repo, order_repo, settings):
        token_repo = FakeOrderTokenRepository(
            make_token(token="tok_cart", liters=3000, price_per_liter=0.95, delivery_fee=0, total_amount=2850)
        )
        creator = build_creator(shop_repo, order_repo, settings, token_repo=token_repo)

        result = await creator.create(token_request("tok_cart"))
        stored = order_repo.orders[result["order_id"]]

        assert stored.liters == 3000.0
        assert stored.price_per_liter == 0.95
        assert stored.total_amount == pytest.approx(2850.0)
        assert stored.shop_id == SHOP_ID
        assert stored.order_token == "tok_cart"

    @pytest.mark.asyncio
    async def test_customer_name_is_split_for_delivery(self, shop_repo, order_repo, settings):
        token_repo = FakeOrderTokenRepository(make_token(token="tok_name"))
        creator = build_creator(shop_repo, order_repo, settings, token_repo=token_repo)

        result = await creator.create(token_request("tok_name"))
        stored = order_repo.orders[result["order_id"]]

        assert stored.delivery_first_name == "Max"
        assert stored.delivery_last_name == "Peter Mustermann"
        assert stored.delivery_phone == "+49 40 654321"

    @pytest.mark.asyncio
    async def test_identical_billing_address_is_not_stored(self, shop_repo, order_repo, settings):
        token_repo = FakeOrderTokenRepository(make_token(token="tok_same"))
        creator = build_creator(shop_repo, order_repo, settings, token_repo=token_repo)
        request = token_request(
            "tok_same",
            billing_street="Lindenweg 5",
            billing_postcode="20095",
            billing_city="Hamburg",
        )

        result = await creator.create(request)
        stored = order_repo.orders[result["order_id"]]

        assert stored.use_same_address is True
        assert stored.billing_street is None

    @pytest.mark.asyncio
    async def test_different_billing_address_is_stored(self, shop_repo, order_repo, settings):
        token_repo = FakeOrderTokenRepository(make_token(token="tok_diff"))
        creator = build_creator(shop_repo, order_repo, settings, token_repo=token_repo)
        request = token_request(
            "tok_diff",
            billing_street="Rathausmarkt 1",
            billing_postcode="20095",
            billing_city="Hamburg",
        )

        result = await creator.create(request)
        stored = order_repo.orders[result["order_id"]]

        assert stored.use_same_address is False
        assert stored.billing_first_name == "Max"
        assert stored.billing_street == "Rathausmarkt 1"

    @pytest.mark.asyncio
    async def test_expired_token_is_rejected(self, shop_repo, order_repo, settings):
        expires_at = datetime(2025, 1, 15, 13, 0, tzinfo=UTC)
        token_repo = FakeOrderTokenRepository(make_token(token="tok_old", expires_at=expires_at))
        creator = build_creator(shop_repo, order_repo, settings, token_repo=token_repo)

        with pytest.raises(ExpiredException):
            await creator.create(token_request("tok_old"), now=expires_at + timedelta(minutes=1))

        assert order_repo.orders == {}

    @pytest.mark.asyncio
    async def test_unknown_token_is_not_found(self, shop_repo, order_repo, settings):
        creator = build_creator(shop_repo, order_repo, settings)

        with pytest.raises(NotFoundException):
            await creator.create(token_request("tok_missing"))


class TestAntiSpam:
    """The spam guard runs before anything is written."""

    @pytest.mark.asyncio
    async def test_fourth_order_within_window_is_blocked(self, shop_repo, settings):
        order_repo = FakeOrderRepository()
        blocked_email_repo = FakeBlockedEmailRepository()
        creator = build_creator(shop_repo, order_repo, settings, blocked_email_repo=blocked_email_repo)

        for _ in range(3):
            await creator.create(direct_request())

        with pytest.raises(OrdersBlockedException) as exc_info:
            await creator.create(direct_request())

        assert exc_info.value.status_code == 503
        assert len(order_repo.orders) == 3
        assert "erika@example.com" in blocked_email_repo.blocked

    @pytest.mark.asyncio
    async def test_blocklisted_email_is_rejected(self, shop_repo, order_repo, settings):
        creator = build_creator(
            shop_repo,
            order_repo,
            settings,
            blocked_email_repo=FakeBlockedEmailRepository("erika@example.com"),
        )

        with pytest.raises(OrdersBlockedException):
            await creator.create(direct_request())

        assert order_repo.orders == {}


class TestConcreteScenario:
    """Shop S1: active, manual checkout, 19% VAT."""

    @pytest.mark.asyncio
    async def test_order_from_equivalent_data_is_pending_manual(self, order_repo, settings):
        shop_repo = FakeShopRepository(make_shop(name="S1", checkout_mode=CheckoutMode.MANUAL, vat_rate=19))
        creator = build_creator(shop_repo, order_repo, settings)

        result = await creator.create(direct_request(liters=100, price_per_liter=1.00, delivery_fee=10))
        stored = order_repo.orders[result["order_id"]]

        assert stored.status == OrderStatus.PENDING
        assert stored.processing_mode == CheckoutMode.MANUAL
        assert stored.total_amount == pytest.approx(110.0)
