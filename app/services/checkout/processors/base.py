"""
Shared plumbing of the order processors.

Both processors load an order together with its shop and the shop's active
email configuration, and both send a confirmation email as a soft step.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from app.domain.models import EmailConfigDomain, OrderDomain, ShopDomain
from app.services.checkout.interfaces import (
    IEmailClient,
    IEmailConfigRepository,
    IOrderRepository,
    IShopRepository,
)
from app.services.checkout.results import SoftStepResult
from app.utils.error_handler import AppException, NotFoundException, log_error

logger = logging.getLogger(__name__)

EMAIL_STEP = "send_email"


@dataclass
class OrderContext:
    """An order joined with its shop and active email configuration."""

    order: OrderDomain
    shop: Optional[ShopDomain] = None
    email_config: Optional[EmailConfigDomain] = None

    @property
    def can_send_email(self) -> bool:
        """True when the shop has a usable email credential."""
        return self.email_config is not None and self.email_config.is_usable


class BaseOrderProcessor:
    """Base class of the instant and manual processors."""

    def __init__(
        self,
        order_repo: IOrderRepository,
        shop_repo: IShopRepository,
        email_config_repo: IEmailConfigRepository,
        email_client: IEmailClient,
    ):
        self.order_repo = order_repo
        self.shop_repo = shop_repo
        self.email_config_repo = email_config_repo
        self.email_client = email_client

    async def _load_context(self, order_id: str) -> OrderContext:
        """
        Load an order with its shop and email configuration.

        Raises:
            NotFoundException: If the order does not exist
        """
        order = await self.order_repo.get_by_id(order_id)
        if order is None:
            logger.warning(f"Order not found: {order_id}")
            raise NotFoundException(message="Order not found", entity="order", entity_id=order_id)

        shop = await self.shop_repo.get_by_id(order.shop_id)
        email_config = None
        if shop is not None and shop.resend_config_id:
            email_config = await self.email_config_repo.get_active(shop.resend_config_id)

        return OrderContext(order=order, shop=shop, email_config=email_config)

    async def _send_confirmation(
        self,
        context: OrderContext,
        include_invoice: bool,
        email_type: str,
    ) -> SoftStepResult:
        """
        Send the confirmation email as a soft step.

        Returns:
            SoftStepResult: skipped without a usable email configuration,
            failed when the collaborator call fails, ok otherwise
        """
        order = context.order
        if not context.can_send_email:
            logger.info(f"No email configuration found for shop {order.shop_id}, skipping email")
            return SoftStepResult.skipped(EMAIL_STEP)

        try:
            await self.email_client.send_order_confirmation(
                order_id=order.id,
                include_invoice=include_invoice,
                email_type=email_type,
            )
        except Exception as e:
            log_error(e, {"step": EMAIL_STEP, "order_id": order.id, "email_type": email_type})
            message = e.message if isinstance(e, AppException) else "Unexpected error sending email"
            return SoftStepResult.failed(EMAIL_STEP, message)

        logger.info(f"Confirmation email ({email_type}) sent for order {order.order_number}")
        return SoftStepResult.ok(EMAIL_STEP)
