"""
ShopReader - read-only storefront projections of a shop.
"""

import logging
from typing import Any, Optional

from app.domain.models import PaymentMethodDomain, ShopDomain
from app.services.checkout.interfaces import (
    IBankAccountRepository,
    IPaymentMethodRepository,
    IShopRepository,
)
from app.utils.error_handler import (
    InactiveException,
    NotFoundException,
    StoreException,
    ValidationException,
    log_error,
)
from app.utils.id_utils import is_valid_uuid

logger = logging.getLogger(__name__)


class ShopReader:
    """Reads shop bank data and public configuration for the storefront."""

    def __init__(
        self,
        shop_repo: IShopRepository,
        bank_account_repo: IBankAccountRepository,
        payment_method_repo: IPaymentMethodRepository,
    ):
        self.shop_repo = shop_repo
        self.bank_account_repo = bank_account_repo
        self.payment_method_repo = payment_method_repo

    async def _get_active_shop(self, shop_id: str) -> ShopDomain:
        shop = await self.shop_repo.get_by_id(shop_id)
        if shop is None:
            raise NotFoundException(message="Shop not found or inactive", entity="shop", entity_id=shop_id)
        if not shop.active:
            raise InactiveException(message="Shop not found or inactive", entity="shop", entity_id=shop_id)
        return shop

    async def get_bank_data(self, shop_id: Optional[str]) -> dict[str, Any]:
        """
        Bank account a customer transfers to.

        Args:
            shop_id: Shop UUID

        Returns:
            dict: {"shop_name", "bank_data": {...}}

        Raises:
            ValidationException: If the shop id is missing or not a UUID
            NotFoundException: If the shop or its bank account does not exist
            InactiveException: If the shop or its bank account is inactive
        """
        if not shop_id:
            raise ValidationException(message="Shop ID is required", field="shop_id")
        if not is_valid_uuid(shop_id):
            logger.warning(f"Invalid shop ID format: {shop_id}")
            raise ValidationException(
                message="Invalid shop ID format",
                field="shop_id",
                invalid_value=shop_id,
                expected_format="UUID",
            )

        shop = await self._get_active_shop(shop_id)

        if not shop.bank_account_id:
            logger.warning(f"No bank account configured for shop: {shop_id}")
            raise NotFoundException(
                message="No bank account configured for this shop", entity="bank_account", entity_id=None
            )

        account = await self.bank_account_repo.get_by_id(shop.bank_account_id)
        if account is None:
            raise NotFoundException(
                message="Bank account not found or inactive",
                entity="bank_account",
                entity_id=shop.bank_account_id,
            )
        if not account.active:
            raise InactiveException(
                message="Bank account not found or inactive",
                entity="bank_account",
                entity_id=shop.bank_account_id,
            )

        logger.info(f"Bank data retrieved for shop: {shop_id}")
        return {"shop_name": shop.company_name, "bank_data": account.public_data()}

    async def get_config(self, shop_id: str) -> dict[str, Any]:
        """
        Public shop configuration and the payment methods it offers.

        A failing payment-method lookup yields an empty list.

        Raises:
            NotFoundException: If the shop does not exist
            InactiveException: If the shop is inactive
        """
        shop = await self._get_active_shop(shop_id)

        payment_methods: list[PaymentMethodDomain] = []
        try:
            payment_methods = await self.payment_method_repo.list_active_for_shop(shop.id)
        except StoreException as e:
            log_error(e, {"step": "payment_methods_lookup", "shop_id": shop.id})

        return {
            "shop": shop.public_config(),
            "payment_methods": [method.to_dict() for method in payment_methods if method.active],
        }
