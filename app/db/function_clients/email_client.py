"""
Client for the order confirmation email function.
"""

import logging
from typing import Any, Dict, Optional

from app.core.config import Settings, get_settings
from app.db.function_clients.base_client import BaseFunctionsClient

logger = logging.getLogger(__name__)

INSTANT_CONFIRMATION = "instant_confirmation"
MANUAL_CONFIRMATION = "manual_confirmation"


class EmailClient(BaseFunctionsClient):
    """Sends order confirmation emails."""

    SERVICE_NAME = "email"

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        super().__init__(settings=settings, timeout_seconds=settings.EMAIL_TIMEOUT_SECONDS)

    async def send_order_confirmation(
        self,
        order_id: str,
        include_invoice: bool,
        email_type: str,
    ) -> Dict[str, Any]:
        """
        Send a confirmation email for an order.

        Args:
            order_id: Order UUID
            include_invoice: Attach the invoice PDF
            email_type: instant_confirmation or manual_confirmation

        Returns:
            Dict: Function response

        Raises:
            UpstreamException: If the email could not be sent
        """
        logger.info(f"Requesting {email_type} email for order {order_id} (invoice={include_invoice})")
        return await self._post(
            "send-order-confirmation",
            {"order_id": order_id, "include_invoice": include_invoice, "email_type": email_type},
            operation="send_order_confirmation",
        )
