"""
Repositories for the checkout store.

Each repository receives the ConnDB created by the application lifespan.
"""

from app.db.repositories.bank_account_repository import BankAccountRepository
from app.db.repositories.base import BaseRepository, log_operation, with_retry
from app.db.repositories.blocked_email_repository import BlockedEmailRepository
from app.db.repositories.email_config_repository import EmailConfigRepository
from app.db.repositories.order_repository import OrderRepository
from app.db.repositories.order_token_repository import OrderTokenRepository
from app.db.repositories.payment_method_repository import PaymentMethodRepository
from app.db.repositories.shop_repository import ShopRepository

__all__ = [
    "BankAccountRepository",
    "BaseRepository",
    "BlockedEmailRepository",
    "EmailConfigRepository",
    "OrderRepository",
    "OrderTokenRepository",
    "PaymentMethodRepository",
    "ShopRepository",
    "log_operation",
    "with_retry",
]
