"""
Shop domain model.

A shop is read-only to the checkout pipeline: it gates token issuance and
order creation through its activation flag and decides the processing path
through its checkout mode.
"""

from dataclasses import dataclass
from typing import Any

from .enums import CheckoutMode

DEFAULT_CURRENCY = "EUR"

# UUID columns, normalized to strings when read from the store
_STR_ID_FIELDS = ("id", "bank_account_id", "resend_config_id")

# Public fields returned by the storefront config reader
PUBLIC_CONFIG_FIELDS = (
    "id",
    "name",
    "company_name",
    "company_email",
    "company_phone",
    "company_website",
    "company_address",
    "company_city",
    "company_postcode",
    "country_code",
    "currency",
    "language",
    "checkout_mode",
    "vat_rate",
    "logo_url",
    "accent_color",
    "support_phone",
    "vat_number",
    "business_owner",
    "court_name",
    "registration_number",
)


@dataclass
class ShopDomain:
    """
    Domain model representing a shop (tenant).

    Attributes:
        id: Shop UUID
        name: Internal shop name
        active: Whether the shop accepts checkouts
        checkout_mode: instant or manual
        vat_rate: VAT percentage, None when not configured
        currency: ISO currency code
        bank_account_id: Bank account shown for bank transfers
        resend_config_id: Email configuration used for confirmations
        company_*: Legal identity and address shown on the storefront
    """

    id: str
    name: str = ""
    active: bool = False
    checkout_mode: CheckoutMode = CheckoutMode.MANUAL
    vat_rate: float | None = None
    currency: str = DEFAULT_CURRENCY
    bank_account_id: str | None = None
    resend_config_id: str | None = None
    company_name: str = ""
    company_email: str | None = None
    company_phone: str | None = None
    company_website: str | None = None
    company_address: str | None = None
    company_city: str | None = None
    company_postcode: str | None = None
    country_code: str | None = None
    language: str | None = None
    logo_url: str | None = None
    accent_color: str | None = None
    support_phone: str | None = None
    vat_number: str | None = None
    business_owner: str | None = None
    court_name: str | None = None
    registration_number: str | None = None

    def __post_init__(self) -> None:
        """Normalize enum and currency values."""
        if not isinstance(self.checkout_mode, CheckoutMode):
            self.checkout_mode = CheckoutMode(self.checkout_mode or CheckoutMode.MANUAL.value)
        self.currency = (self.currency or DEFAULT_CURRENCY).upper()

    @property
    def effective_vat_rate(self) -> float:
        """VAT rate used in calculations (0 when unset)."""
        return float(self.vat_rate or 0)

    @property
    def is_instant(self) -> bool:
        """True when orders are auto-approved."""
        return self.checkout_mode == CheckoutMode.INSTANT

    def summary(self) -> dict[str, Any]:
        """Shop summary joined onto a resolved order token."""
        return {
            "id": self.id,
            "name": self.name,
            "company_name": self.company_name,
            "company_address": self.company_address,
            "company_postcode": self.company_postcode,
            "company_city": self.company_city,
            "company_phone": self.company_phone,
            "company_email": self.company_email,
            "vat_rate": self.vat_rate,
            "currency": self.currency,
        }

    def public_config(self) -> dict[str, Any]:
        """Public storefront configuration."""
        config = {name: getattr(self, name) for name in PUBLIC_CONFIG_FIELDS}
        config["checkout_mode"] = self.checkout_mode.value
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShopDomain":
        """Create a shop from a store row."""
        known = set(cls.__dataclass_fields__)
        values = {key: value for key, value in data.items() if key in known}
        for name in _STR_ID_FIELDS:
            if values.get(name) is not None:
                values[name] = str(values[name])
        if values.get("vat_rate") is not None:
            values["vat_rate"] = float(values["vat_rate"])
        values["active"] = bool(values.get("active", False))
        return cls(**values)
