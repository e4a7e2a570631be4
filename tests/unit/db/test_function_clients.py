"""Unit tests for the invoice and email function clients."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.config import Settings
from app.db.function_clients import MANUAL_CONFIRMATION, EmailClient, InvoiceClient
from app.utils.error_handler import UpstreamException


def mock_session(status: int = 200, body=None, error: Exception = None) -> MagicMock:
    """aiohttp-like session whose ``post`` answers with ``status`` and ``body``."""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=body if body is not None else {"success": True})

    post_cm = MagicMock()
    post_cm.__aenter__ = AsyncMock(side_effect=error) if error else AsyncMock(return_value=response)
    post_cm.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.post.return_value = post_cm
    return session


@pytest.fixture
def client_settings() -> Settings:
    return Settings(FUNCTIONS_BASE_URL="https://functions.example.com/v1/", LOG_FILE_PATH=None)


class TestInvoiceClient:
    @pytest.mark.asyncio
    async def test_generate_invoice_posts_order_id(self, client_settings):
        client = InvoiceClient(client_settings)
        client.session = mock_session(body={"success": True, "invoice_number": "RE-1"})

        result = await client.generate_invoice("order-1")

        assert result["invoice_number"] == "RE-1"
        url = client.session.post.call_args.args[0]
        assert url == "https://functions.example.com/v1/generate-invoice"
        assert client.session.post.call_args.kwargs["json"] == {"order_id": "order-1"}

    @pytest.mark.asyncio
    async def test_http_error_raises_upstream(self, client_settings):
        client = InvoiceClient(client_settings)
        client.session = mock_session(status=502, body={"error": "bad gateway"})

        with pytest.raises(UpstreamException) as exc_info:
            await client.generate_invoice("order-1")

        assert exc_info.value.response_code == 502

    @pytest.mark.asyncio
    async def test_timeout_raises_upstream(self, client_settings):
        client = InvoiceClient(client_settings)
        client.session = mock_session(error=asyncio.TimeoutError())

        with pytest.raises(UpstreamException):
            await client.generate_invoice("order-1")


class TestEmailClient:
    @pytest.mark.asyncio
    async def test_send_order_confirmation_payload(self, client_settings):
        client = EmailClient(client_settings)
        client.session = mock_session()

        await client.send_order_confirmation("order-1", include_invoice=False, email_type=MANUAL_CONFIRMATION)

        assert client.session.post.call_args.kwargs["json"] == {
            "order_id": "order-1",
            "include_invoice": False,
            "email_type": MANUAL_CONFIRMATION,
        }

    @pytest.mark.asyncio
    async def test_close_releases_session(self, client_settings):
        client = EmailClient(client_settings)
        session = mock_session()
        session.close = AsyncMock()
        client.session = session

        await client.close()

        session.close.assert_awaited_once()
        assert client.session is None
