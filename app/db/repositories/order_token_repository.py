"""
OrderTokenRepository: persistence of checkout tokens.

Tokens are inserted once and only read afterwards. ``order_tokens.token``
is unique, so a colliding insert fails instead of overwriting a quote.
"""

import logging
from typing import Optional

from app.db.repositories.base import BaseRepository, log_operation, with_retry
from app.domain.models import OrderTokenDomain

logger = logging.getLogger(__name__)


class OrderTokenRepository(BaseRepository):
    """Repository for order tokens."""

    TABLE_NAME = "order_tokens"

    @log_operation()
    async def create(self, token: OrderTokenDomain) -> OrderTokenDomain:
        """
        Insert a token.

        Args:
            token: Token to persist

        Returns:
            OrderTokenDomain: The persisted token
        """
        await self.execute(
            """
            INSERT INTO order_tokens (
                token, shop_id, product, liters, price_per_liter, delivery_fee,
                total_amount, vat_rate, vat_amount, expires_at, created_at
            )
            VALUES (
                :token, CAST(:shop_id AS uuid), :product, :liters, :price_per_liter, :delivery_fee,
                :total_amount, :vat_rate, :vat_amount, :expires_at, :created_at
            )
            """,
            token.to_dict(),
        )
        logger.info(f"Stored order token {token.token} for shop {token.shop_id}")
        return token

    @with_retry(max_attempts=3)
    @log_operation()
    async def get_by_token(self, token: str) -> Optional[OrderTokenDomain]:
        """
        Fetch a token by its string value.

        Returns:
            OrderTokenDomain or None if unknown
        """
        row = await self.fetch_one("SELECT * FROM order_tokens WHERE token = :token", {"token": token})
        return OrderTokenDomain.from_dict(row) if row else None
