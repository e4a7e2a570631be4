"""
Router registration for the FastAPI application.

Registers the root and health endpoints and the API v1 routers.
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.v1.endpoints.order_tokens import router as order_tokens_router
from app.api.v1.endpoints.orders import router as orders_router
from app.api.v1.endpoints.shops import router as shops_router
from app.core.config import get_settings
from app.core.health import get_health_status

logger = logging.getLogger(__name__)


def create_root_endpoints(app: FastAPI) -> None:
    """
    Root endpoints.

    Args:
        app: FastAPI instance
    """
    settings = get_settings()

    @app.get("/", tags=["Root"], summary="API Info")
    async def root():
        """Basic API information."""
        return {
            "message": f"{settings.APP_NAME} API",
            "version": settings.APP_VERSION,
            "status": "running",
            "documentation": "/docs" if (settings.DEBUG or settings.ENABLE_DOCS) else "disabled",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": {
                "health": "/health",
                "order_tokens": "/api/v1/order-tokens",
                "orders": "/api/v1/orders",
                "shops": "/api/v1/shops",
            },
        }

    @app.get("/ping", tags=["Root"], summary="Simple Ping")
    async def ping():
        """Liveness check that touches nothing."""
        return {"message": "pong", "timestamp": datetime.now(timezone.utc).isoformat()}


def create_health_endpoints(app: FastAPI) -> None:
    """
    Health endpoints.

    Args:
        app: FastAPI instance
    """
    settings = get_settings()

    @app.get("/health", tags=["Health"], summary="Health Check")
    async def health_check(request: Request):
        """
        Store connectivity and host health.

        Returns:
            200 when the store answers, 503 otherwise
        """
        try:
            health_status = await get_health_status(getattr(request.app.state, "conn_db", None))
        except Exception as e:
            logger.error(f"Error in health check: {e}")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "version": settings.APP_VERSION,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                },
            )

        return JSONResponse(
            status_code=200 if health_status["overall"] else 503,
            content={
                "status": "healthy" if health_status["overall"] else "unhealthy",
                "version": settings.APP_VERSION,
                "environment": settings.ENVIRONMENT,
                "timestamp": health_status["timestamp"],
                "uptime": health_status["uptime"],
                "services": health_status["services"],
            },
        )


def configure_api_v1_routers(app: FastAPI) -> None:
    """
    Register the API v1 routers.

    Args:
        app: FastAPI instance
    """
    logger.info("🔧 Configuring API v1 routers...")

    app.include_router(
        order_tokens_router,
        prefix="/api/v1/order-tokens",
        tags=["Order Tokens"],
        responses={
            400: {"description": "Invalid request or inactive shop"},
            404: {"description": "Token not found"},
            410: {"description": "Token expired"},
        },
    )
    app.include_router(
        orders_router,
        prefix="/api/v1/orders",
        tags=["Orders"],
        responses={
            400: {"description": "Invalid request"},
            404: {"description": "Order or shop not found"},
            500: {"description": "Store or collaborator error"},
            503: {"description": "Orders temporarily not possible"},
        },
    )
    app.include_router(
        shops_router,
        prefix="/api/v1/shops",
        tags=["Shops"],
        responses={404: {"description": "Shop or bank account not found"}},
    )

    logger.info("✅ API v1 routers configured")


def configure_all_routers(app: FastAPI) -> None:
    """
    Register every router.

    Args:
        app: FastAPI instance
    """
    create_root_endpoints(app)
    create_health_endpoints(app)
    configure_api_v1_routers(app)
