"""
EmailConfigRepository: read access to per-shop email configurations.
"""

from typing import Optional

from app.db.repositories.base import BaseRepository, log_operation, with_retry
from app.domain.models import EmailConfigDomain
from app.utils.id_utils import is_valid_uuid


class EmailConfigRepository(BaseRepository):
    """Repository for ``resend_configs``."""

    TABLE_NAME = "resend_configs"

    @with_retry(max_attempts=3)
    @log_operation()
    async def get_active(self, config_id: Optional[str]) -> Optional[EmailConfigDomain]:
        """
        Fetch an active email configuration.

        Args:
            config_id: Configuration UUID referenced by the shop

        Returns:
            EmailConfigDomain or None if missing or inactive
        """
        if not is_valid_uuid(config_id):
            return None

        row = await self.fetch_one(
            "SELECT * FROM resend_configs WHERE id = CAST(:config_id AS uuid) AND active = TRUE",
            {"config_id": config_id},
        )
        return EmailConfigDomain.from_dict(row) if row else None
