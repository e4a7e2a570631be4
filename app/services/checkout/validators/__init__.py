"""
Validator services guarding order creation.
"""

from .spam_guard import OrderSpamGuard

__all__ = ["OrderSpamGuard"]
