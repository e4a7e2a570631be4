"""
FastAPI dependency providers.

Shared resources live on ``app.state`` (created by the lifespan); services
are built per request around them. Tests replace any provider through
``app.dependency_overrides``.
"""

from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.db.connection import ConnDB
from app.db.function_clients import EmailClient, InvoiceClient
from app.services.checkout.factories import (
    create_instant_processor,
    create_manual_processor,
    create_order_creator,
    create_shop_reader,
    create_status_reporter,
    create_token_issuer,
    create_token_resolver,
)
from app.services.checkout.managers import OrderCreator, TokenIssuer, TokenResolver
from app.services.checkout.processors import InstantOrderProcessor, ManualOrderProcessor
from app.services.checkout.readers import OrderStatusReporter, ShopReader
from app.utils.error_handler import StoreException, UpstreamException


def get_conn_db(request: Request) -> ConnDB:
    """Store connection created at startup."""
    conn_db = getattr(request.app.state, "conn_db", None)
    if conn_db is None:
        raise StoreException(message="Store connection not initialized", operation="get_connection")
    return conn_db


def get_invoice_client(request: Request) -> InvoiceClient:
    """Invoice collaborator client created at startup."""
    client = getattr(request.app.state, "invoice_client", None)
    if client is None:
        raise UpstreamException(
            message="Invoice client not initialized", service="invoice", operation="get_client"
        )
    return client


def get_email_client(request: Request) -> EmailClient:
    """E-mail collaborator client created at startup."""
    client = getattr(request.app.state, "email_client", None)
    if client is None:
        raise UpstreamException(message="Email client not initialized", service="email", operation="get_client")
    return client


def get_token_issuer(
    conn_db: ConnDB = Depends(get_conn_db), settings: Settings = Depends(get_settings)
) -> TokenIssuer:
    return create_token_issuer(conn_db, settings)


def get_token_resolver(conn_db: ConnDB = Depends(get_conn_db)) -> TokenResolver:
    return create_token_resolver(conn_db)


def get_order_creator(
    conn_db: ConnDB = Depends(get_conn_db), settings: Settings = Depends(get_settings)
) -> OrderCreator:
    return create_order_creator(conn_db, settings)


def get_instant_processor(
    conn_db: ConnDB = Depends(get_conn_db),
    invoice_client: InvoiceClient = Depends(get_invoice_client),
    email_client: EmailClient = Depends(get_email_client),
) -> InstantOrderProcessor:
    return create_instant_processor(conn_db, invoice_client, email_client)


def get_manual_processor(
    conn_db: ConnDB = Depends(get_conn_db), email_client: EmailClient = Depends(get_email_client)
) -> ManualOrderProcessor:
    return create_manual_processor(conn_db, email_client)


def get_status_reporter(conn_db: ConnDB = Depends(get_conn_db)) -> OrderStatusReporter:
    return create_status_reporter(conn_db)


def get_shop_reader(conn_db: ConnDB = Depends(get_conn_db)) -> ShopReader:
    return create_shop_reader(conn_db)
