"""
InstantOrderProcessor - invoice, email and status pipeline for auto-approved orders.

The pipeline has a clear hard/soft boundary:
1. Generate the invoice (hard: failure aborts, status untouched)
2. Send the confirmation email with the invoice (soft)
3. Move the order to invoice_sent (soft, compare-and-swap on the loaded status)
"""

import logging
from datetime import UTC, datetime

from app.db.function_clients import INSTANT_CONFIRMATION
from app.domain.models import OrderDomain, OrderStatus
from app.services.checkout.interfaces import (
    IEmailClient,
    IEmailConfigRepository,
    IInvoiceClient,
    IOrderRepository,
    IShopRepository,
)
from app.services.checkout.processors.base import BaseOrderProcessor
from app.services.checkout.results import InstantProcessingResult, SoftStepResult
from app.utils.error_handler import UpstreamException, log_error

logger = logging.getLogger(__name__)

STATUS_STEP = "update_status"


class InstantOrderProcessor(BaseOrderProcessor):
    """Processes orders of shops in instant checkout mode."""

    def __init__(
        self,
        order_repo: IOrderRepository,
        shop_repo: IShopRepository,
        email_config_repo: IEmailConfigRepository,
        invoice_client: IInvoiceClient,
        email_client: IEmailClient,
    ):
        super().__init__(
            order_repo=order_repo,
            shop_repo=shop_repo,
            email_config_repo=email_config_repo,
            email_client=email_client,
        )
        self.invoice_client = invoice_client

    async def process(self, order_id: str) -> InstantProcessingResult:
        """
        Run the instant pipeline for an order.

        Args:
            order_id: Order UUID

        Returns:
            InstantProcessingResult: Outcome including every soft step

        Raises:
            NotFoundException: If the order does not exist
            UpstreamException: If the invoice could not be generated
        """
        logger.info(f"Processing instant order: {order_id}")
        context = await self._load_context(order_id)
        order = context.order
        observed_status = order.status

        await self._generate_invoice(order)

        email_step = await self._send_confirmation(context, include_invoice=True, email_type=INSTANT_CONFIRMATION)
        status_step = await self._mark_invoice_sent(order, observed_status)

        logger.info(
            f"Instant order processing completed for: {order.order_number} "
            f"(email_sent={email_step.succeeded}, status_updated={status_step.succeeded})"
        )
        return InstantProcessingResult(
            order_number=order.order_number,
            invoice_generated=True,
            email_sent=email_step.succeeded,
            processed_at=datetime.now(UTC),
            email_step=email_step,
            status_step=status_step,
        )

    async def _generate_invoice(self, order: OrderDomain) -> None:
        try:
            await self.invoice_client.generate_invoice(order.id)
        except Exception as e:
            log_error(e, {"step": "generate_invoice", "order_id": order.id})
            raise UpstreamException(
                message="Failed to generate invoice",
                service="invoice",
                operation="generate_invoice",
                response_code=getattr(e, "response_code", None),
            ) from e

        logger.info(f"Invoice generated successfully for order {order.order_number}")

    async def _mark_invoice_sent(self, order: OrderDomain, observed_status: OrderStatus) -> SoftStepResult:
        try:
            updated = await self.order_repo.update_status_if(
                order.id,
                expected_status=observed_status,
                new_status=OrderStatus.INVOICE_SENT,
                invoice_sent=True,
            )
        except Exception as e:
            log_error(e, {"step": STATUS_STEP, "order_id": order.id})
            return SoftStepResult.failed(STATUS_STEP, "Failed to update order status")

        if not updated:
            logger.error(
                f"Order {order.order_number} left status {observed_status.value} during processing, "
                f"status not updated"
            )
            return SoftStepResult.failed(STATUS_STEP, "Order status changed during processing")

        return SoftStepResult.ok(STATUS_STEP)
