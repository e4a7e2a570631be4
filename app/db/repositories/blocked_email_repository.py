"""
BlockedEmailRepository: persistent blocklist used by the order anti-spam guard.
"""

import logging
from typing import Optional

from app.db.repositories.base import BaseRepository, log_operation, with_retry

logger = logging.getLogger(__name__)


class BlockedEmailRepository(BaseRepository):
    """Repository for ``blocked_emails``."""

    TABLE_NAME = "blocked_emails"

    @with_retry(max_attempts=3)
    @log_operation()
    async def is_blocked(self, email: str) -> bool:
        """Check whether a normalized e-mail is on the blocklist."""
        row = await self.fetch_one("SELECT email FROM blocked_emails WHERE email = :email", {"email": email})
        return row is not None

    @log_operation()
    async def block(self, email: str, reason: str, notes: Optional[str] = None) -> None:
        """
        Add an e-mail to the blocklist.

        Adding an address that is already blocked is a no-op.
        """
        await self.execute(
            """
            INSERT INTO blocked_emails (email, reason, notes)
            VALUES (:email, :reason, :notes)
            ON CONFLICT (email) DO NOTHING
            """,
            {"email": email, "reason": reason, "notes": notes},
        )
        logger.info(f"Email added to blocklist ({reason}): {email}")
