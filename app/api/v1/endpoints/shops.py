"""
Storefront shop endpoints.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, status

from app.api.deps import get_shop_reader
from app.services.checkout.readers import ShopReader

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{shop_id}/bank-data", status_code=status.HTTP_200_OK, summary="Shop bank data")
async def get_shop_bank_data(
    shop_id: str,
    reader: ShopReader = Depends(get_shop_reader),
) -> dict[str, Any]:
    """Bank account the customer transfers to."""
    return await reader.get_bank_data(shop_id)


@router.get("/{shop_id}/config", status_code=status.HTTP_200_OK, summary="Shop public configuration")
async def get_shop_config(
    shop_id: str,
    reader: ShopReader = Depends(get_shop_reader),
) -> dict[str, Any]:
    """Public shop configuration and the payment methods it offers."""
    return await reader.get_config(shop_id)
