"""OrderCreator service - turns a submission or a redeemed token into an order."""

import logging
from datetime import datetime
from typing import Any, Optional

from app.api.v1.schemas.checkout_schemas import CreateOrderRequest
from app.core.config import Settings, get_settings
from app.domain.models import ShopDomain
from app.services.checkout.factories import OrderFactory
from app.services.checkout.interfaces import IOrderRepository, IShopRepository
from app.services.checkout.managers.token_resolver import TokenResolver
from app.services.checkout.validators.spam_guard import OrderSpamGuard
from app.utils.error_handler import InactiveException, NotFoundException
from app.utils.id_utils import generate_order_number

logger = logging.getLogger(__name__)


class OrderCreator:
    """
    Creates orders (SRP: order creation only).

    The creator never triggers invoicing or email. The caller picks the
    processor to run next from the returned ``checkout_mode``.
    """

    def __init__(
        self,
        shop_repo: IShopRepository,
        order_repo: IOrderRepository,
        token_resolver: TokenResolver,
        spam_guard: OrderSpamGuard,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize with injected dependencies (DIP).

        Args:
            shop_repo: Repository for shop lookups
            order_repo: Repository for order persistence
            token_resolver: Resolver used to redeem checkout tokens
            spam_guard: Anti-spam guard run before anything is written
            settings: Application settings
        """
        self.shop_repo = shop_repo
        self.order_repo = order_repo
        self.token_resolver = token_resolver
        self.spam_guard = spam_guard
        self.settings = settings or get_settings()

    async def create(self, request: CreateOrderRequest, now: Optional[datetime] = None) -> dict[str, Any]:
        """
        Create an order.

        Args:
            request: Direct submission or token redemption
            now: Reference time for token expiry (defaults to the current UTC time)

        Returns:
            dict: order_id, order_number, status, total_amount and checkout_mode

        Raises:
            OrdersBlockedException: If the anti-spam guard rejects the e-mail
            NotFoundException: If the token or the shop does not exist
            ExpiredException: If the token is past its expiry
            InactiveException: If the shop is inactive
            StoreException: If the order could not be persisted
        """
        await self.spam_guard.check(request.customer_email)

        if request.is_token_order:
            logger.info(f"Processing token-based order with token: {request.token}")
            order_token = await self.token_resolver.load_valid(request.token, now)
            shop_id = order_token.shop_id
            cart = {
                "product": order_token.product,
                "liters": order_token.liters,
                "price_per_liter": order_token.price_per_liter,
                "delivery_fee": order_token.delivery_fee,
            }
            contact = OrderFactory.resolve_token_order_contact(request)
        else:
            shop_id = request.shop_id
            cart = {
                "product": request.product,
                "liters": request.liters,
                "price_per_liter": request.price_per_liter,
                "delivery_fee": request.delivery_fee,
            }
            contact = OrderFactory.resolve_direct_order_contact(request)

        shop = await self._get_active_shop(shop_id)

        order = OrderFactory.create_order(
            shop=shop,
            request=request,
            order_number=generate_order_number(self.settings.ORDER_NUMBER_PREFIX),
            cart=cart,
            contact=contact,
            order_token=request.token or None,
        )
        logger.info(
            f"Order currency: {order.currency}, Amount: {order.total_amount}, "
            f"Exchange rate: {order.exchange_rate}, EUR amount: {order.eur_amount}"
        )

        created = await self.order_repo.create(order)
        logger.info(
            f"Order {created.order_number} created for shop {shop.id} "
            f"(status={created.status.value}, mode={created.processing_mode.value})"
        )

        return {
            "order_id": created.id,
            "order_number": created.order_number,
            "status": created.status.value,
            "total_amount": created.total_amount,
            "checkout_mode": shop.checkout_mode.value,
        }

    async def _get_active_shop(self, shop_id: Optional[str]) -> ShopDomain:
        shop = await self.shop_repo.get_by_id(shop_id) if shop_id else None
        if shop is None:
            logger.warning(f"Shop not found: {shop_id}")
            raise NotFoundException(message="Shop not found or inactive", entity="shop", entity_id=shop_id)
        if not shop.active:
            logger.warning(f"Shop inactive: {shop_id}")
            raise InactiveException(message="Shop not found or inactive", entity="shop", entity_id=shop_id)
        return shop
