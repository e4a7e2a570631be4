"""Order processors for the instant and manual checkout paths."""

from .base import BaseOrderProcessor, OrderContext
from .instant_processor import InstantOrderProcessor
from .manual_processor import ManualOrderProcessor

__all__ = ["BaseOrderProcessor", "InstantOrderProcessor", "ManualOrderProcessor", "OrderContext"]
