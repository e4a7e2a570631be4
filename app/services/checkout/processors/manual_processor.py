"""
ManualOrderProcessor - confirmation pipeline for orders held for human review.

The order status is never changed here: manual orders stay pending until an
operator handles them.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from app.api.v1.schemas.checkout_schemas import ProcessManualOrderRequest
from app.db.function_clients import MANUAL_CONFIRMATION
from app.services.checkout.processors.base import BaseOrderProcessor
from app.services.checkout.results import ManualProcessingResult, SoftStepResult
from app.utils.error_handler import log_error

logger = logging.getLogger(__name__)

METADATA_STEP = "update_metadata"


class ManualOrderProcessor(BaseOrderProcessor):
    """Processes orders of shops in manual checkout mode."""

    async def process(self, request: ProcessManualOrderRequest) -> ManualProcessingResult:
        """
        Run the manual pipeline for an order.

        Args:
            request: Order id plus optional temporary number and bank account

        Returns:
            ManualProcessingResult: Outcome including every soft step

        Raises:
            NotFoundException: If the order does not exist
        """
        logger.info(
            f"Processing manual order: {request.order_id} with temp order number: "
            f"{request.temp_order_number} and bank account: {request.bank_account_id}"
        )

        metadata_step = await self._attach_metadata(request)
        context = await self._load_context(request.order_id)
        order = context.order

        email_step = await self._send_confirmation(context, include_invoice=False, email_type=MANUAL_CONFIRMATION)

        logger.info(f"Manual order processing completed for: {order.order_number}")
        return ManualProcessingResult(
            order_number=order.order_number,
            temp_order_number=request.temp_order_number or order.order_number,
            email_sent=email_step.succeeded,
            processed_at=datetime.now(UTC),
            metadata_step=metadata_step,
            email_step=email_step,
        )

    async def _attach_metadata(self, request: ProcessManualOrderRequest) -> SoftStepResult:
        fields: dict[str, Any] = {}
        if request.temp_order_number:
            fields["temp_order_number"] = request.temp_order_number
        if request.bank_account_id:
            fields["selected_bank_account_id"] = request.bank_account_id

        if not fields:
            return SoftStepResult.skipped(METADATA_STEP)

        try:
            updated = await self.order_repo.update_metadata(request.order_id, fields)
        except Exception as e:
            log_error(e, {"step": METADATA_STEP, "order_id": request.order_id})
            return SoftStepResult.failed(METADATA_STEP, "Failed to update order")

        if not updated:
            return SoftStepResult.failed(METADATA_STEP, "Order not found")

        logger.info(f"Updated order {request.order_id} with: {sorted(fields)}")
        return SoftStepResult.ok(METADATA_STEP)
