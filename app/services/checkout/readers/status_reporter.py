"""
OrderStatusReporter - status projection polled by storefront clients.

``derive_next_steps`` is a pure function of the persisted order. It never
marks bank details as shown; that belongs to whoever reveals them.
"""

import logging
from typing import Any

from app.domain.models import OrderDomain, OrderStatus
from app.services.checkout.interfaces import IOrderRepository, IShopRepository
from app.utils.error_handler import NotFoundException, ValidationException

logger = logging.getLogger(__name__)

NEXT_STEP_MANUAL_REVIEW = "Your order is being reviewed manually"
NEXT_STEP_EMAIL_CONFIRMATION = "You will receive a confirmation by e-mail"
NEXT_STEP_AUTOMATIC_PROCESSING = "Your order is being processed automatically"
NEXT_STEP_BANK_TRANSFER = "Transfer the amount to the bank details provided"
NEXT_STEP_INVOICE_PENDING = "Your invoice is being prepared"
NEXT_STEP_PAYMENT_RECEIVED = "Payment received"
NEXT_STEP_PREPARING_DELIVERY = "Delivery is being prepared"
NEXT_STEP_ORDER_COMPLETE = "Order complete"
NEXT_STEP_ORDER_CANCELLED = "Order cancelled"


def derive_next_steps(order: OrderDomain) -> tuple[list[str], bool]:
    """
    Derive the customer-facing next steps of an order.

    Args:
        order: Persisted order

    Returns:
        tuple: (next_steps, can_show_bank_details)
    """
    next_steps: list[str] = []
    can_show_bank_details = False

    if order.status == OrderStatus.PENDING:
        if order.is_manual:
            next_steps.append(NEXT_STEP_MANUAL_REVIEW)
            next_steps.append(NEXT_STEP_EMAIL_CONFIRMATION)
        else:
            next_steps.append(NEXT_STEP_AUTOMATIC_PROCESSING)

    elif order.status == OrderStatus.CONFIRMED:
        if order.is_bank_transfer and not order.bank_details_shown:
            can_show_bank_details = True
            next_steps.append(NEXT_STEP_BANK_TRANSFER)
        if not order.invoice_pdf_generated:
            next_steps.append(NEXT_STEP_INVOICE_PENDING)

    elif order.status == OrderStatus.PAID:
        next_steps.append(NEXT_STEP_PAYMENT_RECEIVED)
        next_steps.append(NEXT_STEP_PREPARING_DELIVERY)

    elif order.status == OrderStatus.DELIVERED:
        next_steps.append(NEXT_STEP_ORDER_COMPLETE)

    elif order.status == OrderStatus.CANCELLED:
        next_steps.append(NEXT_STEP_ORDER_CANCELLED)

    return next_steps, can_show_bank_details


class OrderStatusReporter:
    """Builds the status projection of an order."""

    def __init__(self, order_repo: IOrderRepository, shop_repo: IShopRepository):
        self.order_repo = order_repo
        self.shop_repo = shop_repo

    async def report(self, order_id: str) -> dict[str, Any]:
        """
        Report the status of an order.

        Args:
            order_id: Order UUID

        Returns:
            dict: Order, invoice and status projection with next steps

        Raises:
            ValidationException: If the order id is missing
            NotFoundException: If the order does not exist
        """
        if not order_id:
            raise ValidationException(message="Order ID is required", field="order_id")

        order = await self.order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundException(message="Order not found", entity="order", entity_id=order_id)

        shop = await self.shop_repo.get_by_id(order.shop_id)
        next_steps, can_show_bank_details = derive_next_steps(order)

        logger.debug(f"Order status retrieved: {order.order_number} ({order.status.value})")
        return {
            "order_id": order.id,
            "order_number": order.order_number,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "total_amount": order.total_amount,
            "payment_method": order.payment_method,
            "processing_mode": order.processing_mode.value,
            "checkout_mode": shop.checkout_mode.value if shop else None,
            "invoice": order.invoice_summary(),
            "next_steps": next_steps,
            "can_show_bank_details": can_show_bank_details,
            "bank_details_shown": order.bank_details_shown,
        }
