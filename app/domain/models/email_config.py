"""
Email configuration domain model.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class EmailConfigDomain:
    """
    Per-shop email sender configuration.

    Attributes:
        id: Configuration UUID
        api_key: Credential of the email provider
        from_email: Sender address
        from_name: Sender display name
        active: Whether the configuration may be used
    """

    id: str
    api_key: str | None = None
    from_email: str = ""
    from_name: str = ""
    active: bool = True

    @property
    def is_usable(self) -> bool:
        """True when confirmations can be sent with this configuration."""
        return self.active and bool(self.api_key)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmailConfigDomain":
        """Create email configuration from a ``resend_configs`` row."""
        return cls(
            id=str(data["id"]),
            api_key=data.get("resend_api_key") or data.get("api_key"),
            from_email=data.get("from_email", ""),
            from_name=data.get("from_name", ""),
            active=bool(data.get("active", True)),
        )
