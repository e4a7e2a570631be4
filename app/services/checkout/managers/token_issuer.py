"""
TokenIssuer service for minting checkout tokens.

A token captures a priced cart for one active shop. Only the token string is
returned; the cart is read back through the TokenResolver.
"""

import logging
from datetime import datetime
from typing import Optional

from app.api.v1.schemas.checkout_schemas import IssueTokenRequest
from app.core.config import Settings, get_settings
from app.services.checkout.factories import OrderFactory
from app.services.checkout.interfaces import IOrderTokenRepository, IShopRepository
from app.utils.error_handler import InactiveException
from app.utils.id_utils import generate_order_token

logger = logging.getLogger(__name__)


class TokenIssuer:
    """
    Issues checkout tokens.

    Responsibilities:
    - Check that the shop exists and is active
    - Extract VAT from the quoted total using the shop's rate
    - Persist the token with its expiry
    """

    def __init__(
        self,
        shop_repo: IShopRepository,
        token_repo: IOrderTokenRepository,
        settings: Optional[Settings] = None,
    ):
        self.shop_repo = shop_repo
        self.token_repo = token_repo
        self.settings = settings or get_settings()

    async def issue(self, request: IssueTokenRequest, now: Optional[datetime] = None) -> dict[str, str]:
        """
        Issue a token for a priced cart.

        Args:
            request: Priced cart
            now: Issue time (defaults to the current UTC time)

        Returns:
            dict: {"token": <token string>}

        Raises:
            InactiveException: If the shop is missing or inactive (HTTP 400)
            StoreException: If the token could not be persisted
        """
        shop = await self.shop_repo.get_by_id(request.shop_id)
        if shop is None or not shop.active:
            logger.warning(f"Token requested for invalid or inactive shop: {request.shop_id}")
            raise InactiveException(
                message="Invalid or inactive shop",
                entity="shop",
                entity_id=request.shop_id,
                status_code=400,
            )

        token = OrderFactory.create_token(
            shop=shop,
            request=request,
            token=generate_order_token(self.settings.ORDER_TOKEN_PREFIX),
            ttl_minutes=self.settings.ORDER_TOKEN_TTL_MINUTES,
            now=now,
        )
        await self.token_repo.create(token)

        logger.info(f"Order token created: {token.token} for shop: {shop.id}")
        return {"token": token.token}
