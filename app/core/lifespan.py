"""
Application lifecycle.

Startup creates the store connection and the collaborator clients and keeps
them on ``app.state``; shutdown closes them. Request handlers reach them
through the dependency providers in ``app.api.deps``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import Settings, get_settings
from app.core.logging_config import setup_logging
from app.db.connection import ConnDB
from app.db.function_clients import EmailClient, InvoiceClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Start and stop the application's shared resources.

    Args:
        app: FastAPI instance
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(f"🚀 Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")

    try:
        verify_configuration(settings)
        await startup_initialize_resources(app, settings)
    except Exception as e:
        logger.error(f"❌ Error during startup: {e}")
        await shutdown_close_resources(app)
        raise

    logger.info("🎉 Application started")

    yield

    logger.info(f"🛑 Stopping {settings.APP_NAME}...")
    await shutdown_close_resources(app)
    logger.info("👋 Application stopped")


def verify_configuration(settings: Settings) -> None:
    """
    Check configuration that would only fail later at request time.

    Raises:
        ValueError: If a required setting is missing
    """
    missing = [name for name in ("DATABASE_URL", "FUNCTIONS_BASE_URL") if not getattr(settings, name, None)]
    if missing:
        raise ValueError(f"Missing configuration variables: {missing}")

    if not settings.FUNCTIONS_SERVICE_KEY:
        logger.warning("⚠️ FUNCTIONS_SERVICE_KEY is not set, collaborator calls are unauthenticated")

    logger.info("✅ Configuration verified")


async def startup_initialize_resources(app: FastAPI, settings: Settings) -> None:
    """
    Create the store connection and the collaborator clients.

    Args:
        app: FastAPI instance
        settings: Configuration
    """
    conn_db = ConnDB(settings)
    app.state.conn_db = conn_db
    await conn_db.initialize()
    logger.info("✅ Store connection ready")

    invoice_client = InvoiceClient(settings)
    email_client = EmailClient(settings)
    app.state.invoice_client = invoice_client
    app.state.email_client = email_client
    await invoice_client.initialize()
    await email_client.initialize()
    logger.info("✅ Collaborator clients ready")


async def shutdown_close_resources(app: FastAPI) -> None:
    """
    Close whatever startup managed to create.

    Args:
        app: FastAPI instance
    """
    for name in ("email_client", "invoice_client", "conn_db"):
        resource = getattr(app.state, name, None)
        if resource is None:
            continue
        try:
            await resource.close()
        except Exception as e:
            logger.error(f"❌ Error closing {name}: {e}")
        setattr(app.state, name, None)
