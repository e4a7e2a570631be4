"""Manager services for checkout operations."""

from .order_creator import OrderCreator
from .token_issuer import TokenIssuer
from .token_resolver import TokenResolver

__all__ = ["OrderCreator", "TokenIssuer", "TokenResolver"]
