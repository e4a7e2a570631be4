"""
Client for the invoice generation function.
"""

import logging
from typing import Any, Dict, Optional

from app.core.config import Settings, get_settings
from app.db.function_clients.base_client import BaseFunctionsClient

logger = logging.getLogger(__name__)


class InvoiceClient(BaseFunctionsClient):
    """Generates invoice PDFs for orders."""

    SERVICE_NAME = "invoice"

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        super().__init__(settings=settings, timeout_seconds=settings.INVOICE_TIMEOUT_SECONDS)

    async def generate_invoice(self, order_id: str) -> Dict[str, Any]:
        """
        Generate the invoice of an order.

        Args:
            order_id: Order UUID

        Returns:
            Dict: Function response

        Raises:
            UpstreamException: If the invoice could not be generated
        """
        logger.info(f"Requesting invoice generation for order {order_id}")
        return await self._post("generate-invoice", {"order_id": order_id}, operation="generate_invoice")
