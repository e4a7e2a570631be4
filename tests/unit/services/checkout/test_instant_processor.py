"""Unit tests for InstantOrderProcessor."""

from unittest.mock import AsyncMock

import pytest

from app.db.function_clients import INSTANT_CONFIRMATION
from app.domain.models import CheckoutMode, OrderStatus
from app.services.checkout.processors import InstantOrderProcessor
from app.utils.error_handler import NotFoundException, UpstreamException
from tests.fakes import (
    UNKNOWN_ID,
    FakeEmailConfigRepository,
    FakeOrderRepository,
    FakeShopRepository,
    make_order,
    make_shop,
    store_error,
)


@pytest.fixture
def instant_shop_repo():
    return FakeShopRepository(make_shop(checkout_mode=CheckoutMode.INSTANT))


@pytest.fixture
def confirmed_order():
    return make_order(status=OrderStatus.CONFIRMED, processing_mode=CheckoutMode.INSTANT)


def build_processor(order_repo, shop_repo, email_config_repo, invoice_client, email_client):
    return InstantOrderProcessor(
        order_repo=order_repo,
        shop_repo=shop_repo,
        email_config_repo=email_config_repo,
        invoice_client=invoice_client,
        email_client=email_client,
    )


class TestInstantOrderProcessor:
    """Invoice, email and status pipeline."""

    @pytest.mark.asyncio
    async def test_success_marks_invoice_sent(
        self, confirmed_order, instant_shop_repo, email_config_repo, invoice_client, email_client
    ):
        order_repo = FakeOrderRepository(confirmed_order)
        processor = build_processor(order_repo, instant_shop_repo, email_config_repo, invoice_client, email_client)

        result = await processor.process(confirmed_order.id)

        assert result.invoice_generated is True
        assert result.email_sent is True
        assert result.status_step.succeeded is True
        stored = order_repo.orders[confirmed_order.id]
        assert stored.status == OrderStatus.INVOICE_SENT
        assert stored.invoice_sent is True
        invoice_client.generate_invoice.assert_awaited_once_with(confirmed_order.id)
        email_client.send_order_confirmation.assert_awaited_once_with(
            order_id=confirmed_order.id, include_invoice=True, email_type=INSTANT_CONFIRMATION
        )

    @pytest.mark.asyncio
    async def test_response_payload(
        self, confirmed_order, instant_shop_repo, email_config_repo, invoice_client, email_client
    ):
        processor = build_processor(
            FakeOrderRepository(confirmed_order), instant_shop_repo, email_config_repo, invoice_client, email_client
        )

        payload = (await processor.process(confirmed_order.id)).to_dict()

        assert payload["success"] is True
        assert payload["order_number"] == confirmed_order.order_number
        assert payload["invoice_generated"] is True
        assert payload["email_sent"] is True
        assert [step["step"] for step in payload["soft_steps"]] == ["send_email", "update_status"]

    @pytest.mark.asyncio
    async def test_email_failure_still_updates_status(
        self, confirmed_order, instant_shop_repo, email_config_repo, invoice_client
    ):
        email_client = AsyncMock()
        email_client.send_order_confirmation.side_effect = RuntimeError("connection reset")
        order_repo = FakeOrderRepository(confirmed_order)
        processor = build_processor(order_repo, instant_shop_repo, email_config_repo, invoice_client, email_client)

        result = await processor.process(confirmed_order.id)

        assert result.invoice_generated is True
        assert result.email_sent is False
        assert result.email_step.attempted is True
        assert result.email_step.error == "Unexpected error sending email"
        assert order_repo.orders[confirmed_order.id].status == OrderStatus.INVOICE_SENT

    @pytest.mark.asyncio
    async def test_invoice_failure_aborts_without_status_change(
        self, confirmed_order, instant_shop_repo, email_config_repo, email_client
    ):
        invoice_client = AsyncMock()
        invoice_client.generate_invoice.side_effect = RuntimeError("invoice service down")
        order_repo = FakeOrderRepository(confirmed_order)
        processor = build_processor(order_repo, instant_shop_repo, email_config_repo, invoice_client, email_client)

        with pytest.raises(UpstreamException) as exc_info:
            await processor.process(confirmed_order.id)

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Failed to generate invoice"
        assert order_repo.orders[confirmed_order.id].status == OrderStatus.CONFIRMED
        assert order_repo.orders[confirmed_order.id].invoice_sent is False
        email_client.send_order_confirmation.assert_not_called()

    @pytest.mark.asyncio
    async def test_status_changed_concurrently_is_not_overwritten(
        self, confirmed_order, instant_shop_repo, email_config_repo, email_client
    ):
        order_repo = FakeOrderRepository(confirmed_order)

        async def cancel_while_invoicing(order_id):
            await order_repo.update_status_if(order_id, OrderStatus.CONFIRMED, OrderStatus.CANCELLED)
            return {"success": True}

        invoice_client = AsyncMock()
        invoice_client.generate_invoice.side_effect = cancel_while_invoicing
        processor = build_processor(order_repo, instant_shop_repo, email_config_repo, invoice_client, email_client)

        result = await processor.process(confirmed_order.id)

        assert result.status_step.attempted is True
        assert result.status_step.succeeded is False
        assert order_repo.orders[confirmed_order.id].status == OrderStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_status_update_error_is_soft(
        self, confirmed_order, instant_shop_repo, email_config_repo, invoice_client, email_client
    ):
        order_repo = FakeOrderRepository(confirmed_order)
        order_repo.update_status_if = AsyncMock(side_effect=store_error("update_status_if"))
        processor = build_processor(order_repo, instant_shop_repo, email_config_repo, invoice_client, email_client)

        result = await processor.process(confirmed_order.id)

        assert result.status_step.succeeded is False
        assert result.status_step.error == "Failed to update order status"

    @pytest.mark.asyncio
    async def test_without_email_config_email_is_skipped(
        self, confirmed_order, instant_shop_repo, invoice_client, email_client
    ):
        order_repo = FakeOrderRepository(confirmed_order)
        processor = build_processor(
            order_repo, instant_shop_repo, FakeEmailConfigRepository(), invoice_client, email_client
        )

        result = await processor.process(confirmed_order.id)

        assert result.email_sent is False
        assert result.email_step.attempted is False
        email_client.send_order_confirmation.assert_not_called()
        assert order_repo.orders[confirmed_order.id].status == OrderStatus.INVOICE_SENT

    @pytest.mark.asyncio
    async def test_unknown_order_is_not_found(
        self, instant_shop_repo, email_config_repo, invoice_client, email_client
    ):
        processor = build_processor(
            FakeOrderRepository(), instant_shop_repo, email_config_repo, invoice_client, email_client
        )

        with pytest.raises(NotFoundException):
            await processor.process(UNKNOWN_ID)

        invoice_client.generate_invoice.assert_not_called()
