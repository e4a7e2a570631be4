"""
Order endpoints: creation, processing and status polling.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, status

from app.api.deps import get_instant_processor, get_manual_processor, get_order_creator, get_status_reporter
from app.api.v1.schemas.checkout_schemas import (
    CreateOrderRequest,
    ProcessInstantOrderRequest,
    ProcessManualOrderRequest,
)
from app.services.checkout.managers import OrderCreator
from app.services.checkout.processors import InstantOrderProcessor, ManualOrderProcessor
from app.services.checkout.readers import OrderStatusReporter

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create an order")
async def create_order(
    request: CreateOrderRequest,
    creator: OrderCreator = Depends(get_order_creator),
) -> dict[str, Any]:
    """
    Persist an order from a direct submission or a redeemed token.

    The caller picks the processor to run next from ``checkout_mode``.
    """
    return await creator.create(request)


@router.post("/process-instant", status_code=status.HTTP_200_OK, summary="Process an instant order")
async def process_instant_order(
    request: ProcessInstantOrderRequest,
    processor: InstantOrderProcessor = Depends(get_instant_processor),
) -> dict[str, Any]:
    """
    Generate the invoice, send the confirmation and mark the invoice as sent.

    Only a failing invoice fails the call.
    """
    result = await processor.process(request.order_id)
    return result.to_dict()


@router.post("/process-manual", status_code=status.HTTP_200_OK, summary="Process a manual order")
async def process_manual_order(
    request: ProcessManualOrderRequest,
    processor: ManualOrderProcessor = Depends(get_manual_processor),
) -> dict[str, Any]:
    """
    Attach manual metadata and send a confirmation without invoice.

    The order status is left unchanged.
    """
    result = await processor.process(request)
    return result.to_dict()


@router.get("/{order_id}/status", status_code=status.HTTP_200_OK, summary="Order status")
async def get_order_status(
    order_id: str,
    reporter: OrderStatusReporter = Depends(get_status_reporter),
) -> dict[str, Any]:
    """Status projection with next steps for the customer."""
    return await reporter.report(order_id)
