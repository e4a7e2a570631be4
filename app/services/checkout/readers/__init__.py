"""Read-only checkout projections."""

from .shop_reader import ShopReader
from .status_reporter import OrderStatusReporter, derive_next_steps

__all__ = ["OrderStatusReporter", "ShopReader", "derive_next_steps"]
