"""Unit tests for OrderSpamGuard."""

from unittest.mock import AsyncMock

import pytest

from app.services.checkout.validators import OrderSpamGuard
from app.services.checkout.validators.spam_guard import RATE_LIMIT_REASON
from app.utils.error_handler import ErrorCode, OrdersBlockedException
from tests.fakes import FakeBlockedEmailRepository, FakeOrderRepository, store_error

GENERIC_MESSAGE = "Orders are currently not possible. Please try again later."


class TestOrderSpamGuard:
    """Blocklist, static list and rate limit."""

    @pytest.mark.asyncio
    async def test_clean_email_passes(self, order_repo, blocked_email_repo, settings):
        guard = OrderSpamGuard(order_repo, blocked_email_repo, settings)

        await guard.check("erika@example.com")

    @pytest.mark.asyncio
    async def test_blocklisted_email_is_rejected(self, order_repo, settings):
        guard = OrderSpamGuard(order_repo, FakeBlockedEmailRepository("erika@example.com"), settings)

        with pytest.raises(OrdersBlockedException) as exc_info:
            await guard.check("  Erika@Example.COM ")

        assert exc_info.value.status_code == 503
        assert exc_info.value.error_code == ErrorCode.ORDERS_BLOCKED
        assert exc_info.value.reason == "blocklisted"

    @pytest.mark.asyncio
    async def test_static_blocklist_is_rejected(self, order_repo, blocked_email_repo, settings):
        guard = OrderSpamGuard(order_repo, blocked_email_repo, settings)

        with pytest.raises(OrdersBlockedException) as exc_info:
            await guard.check("SPAM@example.com")

        assert exc_info.value.reason == "static_blocklist"

    @pytest.mark.asyncio
    async def test_rate_limit_blocks_and_blocklists(self, blocked_email_repo, settings):
        order_repo = FakeOrderRepository()
        order_repo.recent_count = 3
        guard = OrderSpamGuard(order_repo, blocked_email_repo, settings)

        with pytest.raises(OrdersBlockedException) as exc_info:
            await guard.check("flood@example.com")

        assert exc_info.value.reason == RATE_LIMIT_REASON
        assert exc_info.value.details["recent_orders"] == 3
        assert blocked_email_repo.blocked["flood@example.com"] == RATE_LIMIT_REASON

    @pytest.mark.asyncio
    async def test_below_rate_limit_passes(self, blocked_email_repo, settings):
        order_repo = FakeOrderRepository()
        order_repo.recent_count = 2
        guard = OrderSpamGuard(order_repo, blocked_email_repo, settings)

        await guard.check("erika@example.com")

        assert blocked_email_repo.blocked == {}

    @pytest.mark.asyncio
    async def test_rate_limit_disabled(self, blocked_email_repo, settings):
        settings.ORDER_RATE_LIMIT_ENABLED = False
        order_repo = FakeOrderRepository()
        order_repo.recent_count = 50
        guard = OrderSpamGuard(order_repo, blocked_email_repo, settings)

        await guard.check("erika@example.com")

    @pytest.mark.asyncio
    async def test_failed_blocklist_insert_still_rejects(self, settings):
        order_repo = FakeOrderRepository()
        order_repo.recent_count = 5
        blocked_email_repo = AsyncMock()
        blocked_email_repo.is_blocked.return_value = False
        blocked_email_repo.block.side_effect = store_error("block")
        guard = OrderSpamGuard(order_repo, blocked_email_repo, settings)

        with pytest.raises(OrdersBlockedException) as exc_info:
            await guard.check("flood@example.com")

        assert exc_info.value.details["blocklist_insert"]["succeeded"] is False

    @pytest.mark.asyncio
    async def test_lookup_failures_do_not_block(self, settings):
        order_repo = AsyncMock()
        order_repo.count_recent_by_email.side_effect = store_error("count_recent_by_email")
        blocked_email_repo = AsyncMock()
        blocked_email_repo.is_blocked.side_effect = store_error("is_blocked")
        guard = OrderSpamGuard(order_repo, blocked_email_repo, settings)

        await guard.check("erika@example.com")

        blocked_email_repo.block.assert_not_called()

    @pytest.mark.asyncio
    async def test_every_rejection_uses_the_same_message(self, settings):
        flooding_repo = FakeOrderRepository()
        flooding_repo.recent_count = 3
        cases = [
            (FakeOrderRepository(), FakeBlockedEmailRepository("a@example.com"), "a@example.com"),
            (FakeOrderRepository(), FakeBlockedEmailRepository(), "spam@example.com"),
            (flooding_repo, FakeBlockedEmailRepository(), "b@example.com"),
        ]

        messages = set()
        for order_repo, blocked_email_repo, email in cases:
            guard = OrderSpamGuard(order_repo, blocked_email_repo, settings)
            with pytest.raises(OrdersBlockedException) as exc_info:
                await guard.check(email)
            messages.add(exc_info.value.message)

        assert messages == {GENERIC_MESSAGE}
