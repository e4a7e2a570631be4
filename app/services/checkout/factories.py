"""
Factories for checkout domain objects and services.

OrderFactory encapsulates how tokens and orders are built from requests.
The ``create_*`` functions wire services to their repositories and clients.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, Optional

from app.api.v1.schemas.checkout_schemas import CreateOrderRequest, IssueTokenRequest
from app.core.config import Settings, get_settings
from app.db.connection import ConnDB
from app.db.repositories import (
    BankAccountRepository,
    BlockedEmailRepository,
    EmailConfigRepository,
    OrderRepository,
    OrderTokenRepository,
    PaymentMethodRepository,
    ShopRepository,
)
from app.domain.models import OrderDomain, OrderStatus, OrderTokenDomain, ShopDomain
from app.domain.pricing import calculate_order_totals, calculate_vat_amount, get_exchange_rate
from app.services.checkout.interfaces import IEmailClient, IInvoiceClient


class OrderFactory:
    """Factory for creating checkout domain objects with proper defaults."""

    @staticmethod
    def create_token(
        shop: ShopDomain,
        request: IssueTokenRequest,
        token: str,
        ttl_minutes: int,
        now: Optional[datetime] = None,
    ) -> OrderTokenDomain:
        """
        Build a checkout token for a priced cart.

        Args:
            shop: Active shop the cart belongs to
            request: Priced cart
            token: Generated token string
            ttl_minutes: Token lifetime
            now: Creation time (defaults to the current UTC time)

        Returns:
            OrderTokenDomain: Token with VAT extracted from the total
        """
        now = now or datetime.now(UTC)
        vat_rate = shop.effective_vat_rate

        return OrderTokenDomain(
            token=token,
            shop_id=shop.id,
            product=request.product,
            liters=float(request.liters),
            price_per_liter=float(request.price_per_liter),
            delivery_fee=float(request.delivery_fee),
            total_amount=float(request.total_amount),
            vat_rate=vat_rate,
            vat_amount=calculate_vat_amount(request.total_amount, vat_rate),
            expires_at=now + timedelta(minutes=ttl_minutes),
            created_at=now,
        )

    @staticmethod
    def split_customer_name(full_name: str) -> tuple[str, str]:
        """Split "First Middle Last" into ("First", "Middle Last")."""
        parts = (full_name or "").split()
        if not parts:
            return "", ""
        return parts[0], " ".join(parts[1:])

    @staticmethod
    def resolve_token_order_contact(request: CreateOrderRequest) -> dict[str, Any]:
        """
        Delivery and billing contact of a token order.

        The customer's name is used for both contacts. A billing address is
        kept only when it is complete and differs from the delivery address.
        """
        first_name, last_name = OrderFactory.split_customer_name(request.customer_name)

        has_billing_address = bool(request.billing_street and request.billing_postcode and request.billing_city)
        is_different_billing_address = has_billing_address and (
            request.billing_street != request.delivery_street
            or request.billing_postcode != request.delivery_postcode
            or request.billing_city != request.delivery_city
        )

        contact = {
            "delivery_first_name": first_name,
            "delivery_last_name": last_name,
            "delivery_phone": request.customer_phone,
            "use_same_address": not is_different_billing_address,
            "billing_first_name": None,
            "billing_last_name": None,
            "billing_street": None,
            "billing_postcode": None,
            "billing_city": None,
        }
        if is_different_billing_address:
            contact.update(
                {
                    "billing_first_name": first_name,
                    "billing_last_name": last_name,
                    "billing_street": request.billing_street,
                    "billing_postcode": request.billing_postcode,
                    "billing_city": request.billing_city,
                }
            )
        return contact

    @staticmethod
    def resolve_direct_order_contact(request: CreateOrderRequest) -> dict[str, Any]:
        """Delivery and billing contact of a direct order, taken as submitted."""
        return {
            "delivery_first_name": request.delivery_first_name,
            "delivery_last_name": request.delivery_last_name,
            "delivery_phone": request.delivery_phone,
            "use_same_address": request.use_same_address,
            "billing_first_name": request.billing_first_name,
            "billing_last_name": request.billing_last_name,
            "billing_street": request.billing_street,
            "billing_postcode": request.billing_postcode,
            "billing_city": request.billing_city,
        }

    @staticmethod
    def create_order(
        shop: ShopDomain,
        request: CreateOrderRequest,
        order_number: str,
        cart: dict[str, Any],
        contact: dict[str, Any],
        order_token: Optional[str] = None,
    ) -> OrderDomain:
        """
        Build a new order.

        Totals are computed once here. The processing mode is the shop's
        checkout mode at this moment and never changes afterwards.

        Args:
            shop: Active shop
            request: Order submission
            order_number: Generated order number
            cart: product, liters, price_per_liter and delivery_fee
            contact: Delivery and billing contact fields
            order_token: Redeemed token, if any

        Returns:
            OrderDomain: Order ready to be persisted
        """
        base_price, total_amount = calculate_order_totals(
            cart["liters"], cart["price_per_liter"], cart["delivery_fee"]
        )
        currency = shop.currency
        exchange_rate = get_exchange_rate(currency)

        return OrderDomain(
            order_number=order_number,
            shop_id=shop.id,
            customer_name=request.customer_name,
            customer_email=request.customer_email,
            customer_phone=request.customer_phone,
            delivery_street=request.delivery_street,
            delivery_postcode=request.delivery_postcode,
            delivery_city=request.delivery_city,
            product=cart["product"],
            liters=float(cart["liters"]),
            price_per_liter=float(cart["price_per_liter"]),
            base_price=base_price,
            delivery_fee=float(cart["delivery_fee"]),
            total_amount=total_amount,
            amount=total_amount,
            payment_method=request.payment_method,
            status=OrderStatus.initial_for(shop.checkout_mode),
            processing_mode=shop.checkout_mode,
            order_token=order_token,
            currency=currency,
            exchange_rate=exchange_rate,
            eur_amount=total_amount * exchange_rate,
            **contact,
        )


# === SERVICE FACTORIES ===


def create_token_issuer(conn_db: ConnDB, settings: Optional[Settings] = None):
    """Create a TokenIssuer backed by the store."""
    from app.services.checkout.managers import TokenIssuer

    return TokenIssuer(
        shop_repo=ShopRepository(conn_db),
        token_repo=OrderTokenRepository(conn_db),
        settings=settings or get_settings(),
    )


def create_token_resolver(conn_db: ConnDB):
    """Create a TokenResolver backed by the store."""
    from app.services.checkout.managers import TokenResolver

    return TokenResolver(token_repo=OrderTokenRepository(conn_db), shop_repo=ShopRepository(conn_db))


def create_order_creator(conn_db: ConnDB, settings: Optional[Settings] = None):
    """Create an OrderCreator with its token resolver and anti-spam guard."""
    from app.services.checkout.managers import OrderCreator
    from app.services.checkout.validators import OrderSpamGuard

    settings = settings or get_settings()
    order_repo = OrderRepository(conn_db)

    return OrderCreator(
        shop_repo=ShopRepository(conn_db),
        order_repo=order_repo,
        token_resolver=create_token_resolver(conn_db),
        spam_guard=OrderSpamGuard(
            order_repo=order_repo,
            blocked_email_repo=BlockedEmailRepository(conn_db),
            settings=settings,
        ),
        settings=settings,
    )


def create_instant_processor(conn_db: ConnDB, invoice_client: IInvoiceClient, email_client: IEmailClient):
    """Create an InstantOrderProcessor."""
    from app.services.checkout.processors import InstantOrderProcessor

    return InstantOrderProcessor(
        order_repo=OrderRepository(conn_db),
        shop_repo=ShopRepository(conn_db),
        email_config_repo=EmailConfigRepository(conn_db),
        invoice_client=invoice_client,
        email_client=email_client,
    )


def create_manual_processor(conn_db: ConnDB, email_client: IEmailClient):
    """Create a ManualOrderProcessor."""
    from app.services.checkout.processors import ManualOrderProcessor

    return ManualOrderProcessor(
        order_repo=OrderRepository(conn_db),
        shop_repo=ShopRepository(conn_db),
        email_config_repo=EmailConfigRepository(conn_db),
        email_client=email_client,
    )


def create_status_reporter(conn_db: ConnDB):
    """Create an OrderStatusReporter."""
    from app.services.checkout.readers import OrderStatusReporter

    return OrderStatusReporter(order_repo=OrderRepository(conn_db), shop_repo=ShopRepository(conn_db))


def create_shop_reader(conn_db: ConnDB):
    """Create a ShopReader."""
    from app.services.checkout.readers import ShopReader

    return ShopReader(
        shop_repo=ShopRepository(conn_db),
        bank_account_repo=BankAccountRepository(conn_db),
        payment_method_repo=PaymentMethodRepository(conn_db),
    )
