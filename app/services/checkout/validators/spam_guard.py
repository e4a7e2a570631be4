"""
OrderSpamGuard service for rejecting abusive order submissions.

The guard runs before an order is written. Every rejection carries the same
generic message so a sender cannot tell which rule matched.
"""

import logging
from typing import Optional

from app.core.config import Settings, get_settings
from app.services.checkout.interfaces import IBlockedEmailRepository, IOrderRepository
from app.services.checkout.results import SoftStepResult
from app.utils.error_handler import OrdersBlockedException, StoreException, log_error

logger = logging.getLogger(__name__)

RATE_LIMIT_REASON = "rate_limit_exceeded"


class OrderSpamGuard:
    """
    Blocks orders from blocklisted or flooding e-mail addresses.

    Rules, in order:
    - the address is on the persistent blocklist
    - the address placed too many orders within the rate-limit window
      (the address is then blocklisted, best-effort)
    - the address is on the static blocklist from configuration
    """

    def __init__(
        self,
        order_repo: IOrderRepository,
        blocked_email_repo: IBlockedEmailRepository,
        settings: Optional[Settings] = None,
    ):
        self.order_repo = order_repo
        self.blocked_email_repo = blocked_email_repo
        self.settings = settings or get_settings()

    @staticmethod
    def normalize_email(email: Optional[str]) -> str:
        """Lowercase and trim an e-mail address."""
        return (email or "").strip().lower()

    async def check(self, email: Optional[str]) -> None:
        """
        Check whether an order from ``email`` may be created.

        Args:
            email: Customer e-mail as submitted

        Raises:
            OrdersBlockedException: If the address must not place orders
        """
        email = self.normalize_email(email)
        if not email:
            return

        if await self._is_blocklisted(email):
            logger.warning(f"Blocked persistent spam email: {email}")
            raise OrdersBlockedException(reason="blocklisted")

        if self.settings.ORDER_RATE_LIMIT_ENABLED:
            recent_orders = await self._count_recent_orders(email)
            if recent_orders is not None and recent_orders >= self.settings.ORDER_RATE_LIMIT_MAX_ORDERS:
                logger.warning(
                    f"Rate limit exceeded for {email}: {recent_orders} orders in last "
                    f"{self.settings.ORDER_RATE_LIMIT_WINDOW_SECONDS}s"
                )
                block_step = await self._auto_block(email, recent_orders)
                raise OrdersBlockedException(
                    reason=RATE_LIMIT_REASON,
                    details={"recent_orders": recent_orders, "blocklist_insert": block_step.to_dict()},
                )

        if email in self.settings.static_blocked_emails_list:
            logger.warning(f"Blocked static spam email: {email}")
            raise OrdersBlockedException(reason="static_blocklist")

    async def _is_blocklisted(self, email: str) -> bool:
        try:
            return await self.blocked_email_repo.is_blocked(email)
        except StoreException as e:
            log_error(e, {"step": "blocklist_lookup", "email": email})
            return False

    async def _count_recent_orders(self, email: str) -> Optional[int]:
        # A failed lookup must not block legitimate customers
        try:
            return await self.order_repo.count_recent_by_email(
                email, self.settings.ORDER_RATE_LIMIT_WINDOW_SECONDS
            )
        except StoreException as e:
            log_error(e, {"step": "rate_limit_lookup", "email": email})
            return None

    async def _auto_block(self, email: str, recent_orders: int) -> SoftStepResult:
        step = "blocklist_insert"
        try:
            await self.blocked_email_repo.block(
                email,
                reason=RATE_LIMIT_REASON,
                notes=(
                    f"Auto-blocked: {recent_orders} orders in "
                    f"{self.settings.ORDER_RATE_LIMIT_WINDOW_SECONDS} seconds"
                ),
            )
        except StoreException as e:
            log_error(e, {"step": step, "email": email})
            return SoftStepResult.failed(step, e.message)

        logger.info(f"Email automatically added to blocklist: {email}")
        return SoftStepResult.ok(step)
