"""
Identifier generation and validation utilities for the checkout pipeline.

This module produces the two externally visible identifiers of the service:
- Order tokens: prefix + 16 hex characters, e.g. "tok_9f86d081884c7d65"
- Order numbers: prefix + epoch millis + 9 uppercase alphanumerics,
  e.g. "ORD-1718000000000-K3J9Q2XZA"
"""

import logging
import re
import secrets
import string
import time
import uuid
from typing import Optional, Union

from app.core.config import get_settings

logger = logging.getLogger(__name__)

ORDER_NUMBER_SUFFIX_LENGTH = 9
ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits
TOKEN_SUFFIX_LENGTH = 16

_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def generate_order_token(prefix: Optional[str] = None) -> str:
    """
    Generate a checkout token.

    Args:
        prefix: Token prefix (defaults to ORDER_TOKEN_PREFIX)

    Returns:
        Token string, e.g. "tok_9f86d081884c7d65"
    """
    prefix = prefix if prefix is not None else get_settings().ORDER_TOKEN_PREFIX
    # token_hex(n) yields 2n characters
    return f"{prefix}{secrets.token_hex(TOKEN_SUFFIX_LENGTH // 2)}"


def generate_order_number(prefix: Optional[str] = None, now_ms: Optional[int] = None) -> str:
    """
    Generate a human-readable order number.

    Args:
        prefix: Order number prefix (defaults to ORDER_NUMBER_PREFIX)
        now_ms: Epoch milliseconds to embed (defaults to the current time)

    Returns:
        Order number, e.g. "ORD-1718000000000-K3J9Q2XZA"
    """
    prefix = prefix if prefix is not None else get_settings().ORDER_NUMBER_PREFIX
    if now_ms is None:
        now_ms = int(time.time() * 1000)

    suffix = "".join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(ORDER_NUMBER_SUFFIX_LENGTH))
    order_number = f"{prefix}-{now_ms}-{suffix}"
    logger.debug(f"Generated order number: {order_number}")
    return order_number


def is_valid_uuid(value: Optional[Union[str, uuid.UUID]]) -> bool:
    """
    Check whether a value is a canonical RFC 4122 UUID (versions 1-5).

    Accepts strings and the ``uuid.UUID`` objects the database driver returns.

    Args:
        value: Candidate identifier

    Returns:
        True if the value is a well-formed UUID
    """
    if isinstance(value, uuid.UUID):
        value = str(value)
    if not value or not isinstance(value, str):
        return False

    if not _UUID_PATTERN.match(value):
        return False

    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True
