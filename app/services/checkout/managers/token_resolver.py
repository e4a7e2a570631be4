"""
TokenResolver service for reading checkout tokens back.

Resolution is a pure read: it never consumes or extends a token, so a token
can be resolved any number of times until it expires.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from app.domain.models import OrderTokenDomain
from app.services.checkout.interfaces import IOrderTokenRepository, IShopRepository
from app.utils.error_handler import ExpiredException, NotFoundException, ValidationException

logger = logging.getLogger(__name__)


class TokenResolver:
    """Resolves checkout tokens into their cart and shop summary."""

    def __init__(self, token_repo: IOrderTokenRepository, shop_repo: IShopRepository):
        self.token_repo = token_repo
        self.shop_repo = shop_repo

    async def load_valid(self, token: str, now: Optional[datetime] = None) -> OrderTokenDomain:
        """
        Load a token and check its expiry.

        Args:
            token: Token string
            now: Reference time (defaults to the current UTC time)

        Returns:
            OrderTokenDomain: The unexpired token

        Raises:
            NotFoundException: If no token matches
            ExpiredException: If the token is past its expiry
        """
        order_token = await self.token_repo.get_by_token(token)
        if order_token is None:
            logger.info(f"Token not found: {token}")
            raise NotFoundException(message="Token not found", entity="order_token", entity_id=token)

        if order_token.is_expired(now):
            logger.info(f"Token expired: {token}, expired at: {order_token.expires_at.isoformat()}")
            raise ExpiredException(message="Token has expired", token=token, expires_at=order_token.expires_at)

        return order_token

    async def resolve(self, token: Optional[str], now: Optional[datetime] = None) -> dict[str, Any]:
        """
        Resolve a token for storefront display.

        Args:
            token: Token string from the query string
            now: Reference time (defaults to the current UTC time)

        Returns:
            dict: Token, cart snapshot, expiry and shop summary

        Raises:
            ValidationException: If the token is missing
            NotFoundException: If the token or its shop does not exist
            ExpiredException: If the token is past its expiry
        """
        if not token:
            raise ValidationException(message="Token parameter is required", field="token")

        order_token = await self.load_valid(token, now)

        shop = await self.shop_repo.get_by_id(order_token.shop_id)
        if shop is None:
            logger.error(f"Token {token} references unknown shop {order_token.shop_id}")
            raise NotFoundException(message="Token not found", entity="order_token", entity_id=token)

        logger.info(f"Token found and valid: {token}")
        return {
            "token": order_token.token,
            "shop_id": order_token.shop_id,
            **order_token.cart(),
            "expires_at": order_token.expires_at.isoformat(),
            "shop": shop.summary(),
        }
