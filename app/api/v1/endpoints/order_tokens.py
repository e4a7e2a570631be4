"""
Checkout token endpoints.

The storefront issues a token for a priced cart and later reads the cart
back with it.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_token_issuer, get_token_resolver
from app.api.v1.schemas.checkout_schemas import IssueTokenRequest
from app.services.checkout.managers import TokenIssuer, TokenResolver

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_QUERY_TOKEN = Query(default=None, description="Checkout token")


@router.post("", status_code=status.HTTP_200_OK, summary="Issue a checkout token")
async def issue_order_token(
    request: IssueTokenRequest,
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> dict[str, str]:
    """
    Issue an expiring checkout token for a priced cart.

    Returns:
        Dict with the token string only
    """
    return await issuer.issue(request)


@router.get("", status_code=status.HTTP_200_OK, summary="Resolve a checkout token")
async def resolve_order_token(
    token: Optional[str] = DEFAULT_QUERY_TOKEN,
    resolver: TokenResolver = Depends(get_token_resolver),
) -> dict[str, Any]:
    """
    Return the cart stored under a token together with a shop summary.

    Resolving never consumes or extends the token.
    """
    return await resolver.resolve(token)
