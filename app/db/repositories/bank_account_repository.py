"""
BankAccountRepository: read access to bank accounts.
"""

from typing import Optional

from app.db.repositories.base import BaseRepository, log_operation, with_retry
from app.domain.models import BankAccountDomain
from app.utils.id_utils import is_valid_uuid


class BankAccountRepository(BaseRepository):
    """Repository for bank accounts."""

    TABLE_NAME = "bank_accounts"

    @with_retry(max_attempts=3)
    @log_operation()
    async def get_by_id(self, bank_account_id: str) -> Optional[BankAccountDomain]:
        """Fetch a bank account regardless of its activation flag."""
        if not is_valid_uuid(bank_account_id):
            return None

        row = await self.fetch_one(
            "SELECT * FROM bank_accounts WHERE id = CAST(:bank_account_id AS uuid)",
            {"bank_account_id": bank_account_id},
        )
        return BankAccountDomain.from_dict(row) if row else None
