"""
Bank account domain model.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class BankAccountDomain:
    """
    Bank account shown to customers paying by bank transfer.

    Attributes:
        id: Bank account UUID
        account_name: Internal label
        account_holder: Holder printed on transfers
        bank_name: Bank name
        iban: IBAN
        bic: BIC, optional
        currency: Account currency
        active: Whether the account may be shown
    """

    id: str
    account_name: str
    account_holder: str
    bank_name: str
    iban: str
    bic: str | None = None
    currency: str = "EUR"
    active: bool = False

    def public_data(self) -> dict[str, Any]:
        """Bank fields exposed to the storefront."""
        return {
            "account_name": self.account_name,
            "account_holder": self.account_holder,
            "bank_name": self.bank_name,
            "iban": self.iban,
            "bic": self.bic,
            "currency": self.currency,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BankAccountDomain":
        """Create bank account from a store row."""
        return cls(
            id=str(data["id"]),
            account_name=data.get("account_name", ""),
            account_holder=data.get("account_holder", ""),
            bank_name=data.get("bank_name", ""),
            iban=data.get("iban", ""),
            bic=data.get("bic"),
            currency=data.get("currency") or "EUR",
            active=bool(data.get("active", False)),
        )
