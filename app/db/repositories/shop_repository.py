"""
ShopRepository: read access to shops.
"""

import logging
from typing import Optional

from app.db.repositories.base import BaseRepository, log_operation, with_retry
from app.domain.models import ShopDomain
from app.utils.id_utils import is_valid_uuid

logger = logging.getLogger(__name__)


class ShopRepository(BaseRepository):
    """Repository for shop lookups."""

    TABLE_NAME = "shops"

    @with_retry(max_attempts=3)
    @log_operation()
    async def get_by_id(self, shop_id: str) -> Optional[ShopDomain]:
        """
        Fetch a shop regardless of its activation flag.

        Args:
            shop_id: Shop UUID

        Returns:
            ShopDomain or None if it does not exist
        """
        # Shop ids are UUIDs; anything else cannot match a row
        if not is_valid_uuid(shop_id):
            logger.debug(f"Shop id is not a UUID: {shop_id!r}")
            return None

        row = await self.fetch_one("SELECT * FROM shops WHERE id = CAST(:shop_id AS uuid)", {"shop_id": shop_id})
        return ShopDomain.from_dict(row) if row else None
