"""
PaymentMethodRepository: payment methods offered by a shop.
"""

from typing import List

from app.db.repositories.base import BaseRepository, log_operation, with_retry
from app.domain.models import PaymentMethodDomain


class PaymentMethodRepository(BaseRepository):
    """Repository for ``payment_methods`` and ``shop_payment_methods``."""

    TABLE_NAME = "shop_payment_methods"

    @with_retry(max_attempts=3)
    @log_operation()
    async def list_active_for_shop(self, shop_id: str) -> List[PaymentMethodDomain]:
        """
        List the payment methods a shop currently offers.

        A method is offered when both the shop link and the method itself
        are active.

        Args:
            shop_id: Shop UUID

        Returns:
            List[PaymentMethodDomain]: Active payment methods
        """
        rows = await self.fetch_all(
            """
            SELECT pm.id, pm.name, pm.code, pm.description, pm.active
            FROM shop_payment_methods spm
            JOIN payment_methods pm ON pm.id = spm.payment_method_id
            WHERE spm.shop_id = CAST(:shop_id AS uuid)
              AND spm.active = TRUE
              AND pm.active = TRUE
            ORDER BY pm.name
            """,
            {"shop_id": shop_id},
        )
        return [PaymentMethodDomain.from_dict(row) for row in rows]
