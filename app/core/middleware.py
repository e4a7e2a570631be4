"""
Middleware configuration for the FastAPI application.

- CORS for the storefront origins
- request logging with request id and processing time
- security headers
"""

import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.exception_handlers import global_exception_handler
from app.core.logging_config import request_id_var

logger = logging.getLogger(__name__)


def configure_cors_middleware(app: FastAPI) -> None:
    """
    Allow the storefront to call the API cross-origin.

    Args:
        app: FastAPI instance
    """
    allowed_origins = get_settings().allowed_origins_list

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        # Credentials cannot be combined with a wildcard origin
        allow_credentials="*" not in allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Accept",
            "Accept-Language",
            "Content-Language",
            "Content-Type",
            "Authorization",
            "X-Client-Info",
            "X-Request-ID",
        ],
        expose_headers=["X-Process-Time", "X-Request-ID"],
    )

    logger.info(f"✅ CORS configured - Allowed origins: {allowed_origins}")


def configure_request_logging_middleware(app: FastAPI) -> None:
    """
    Log every request and response.

    Args:
        app: FastAPI instance
    """

    @app.middleware("http")
    async def log_requests_middleware(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        token = request_id_var.set(request_id)

        start_time = time.time()
        logger.info(f"📨 {request.method} {request.url.path} - Client: {get_client_ip(request)}")

        try:
            try:
                response = await call_next(request)
            except Exception as e:
                process_time = time.time() - start_time
                logger.error(f"❌ {request.method} {request.url.path} - Error: {str(e)} - Time: {process_time:.3f}s")
                # Rendered here so the 500 still carries the request headers
                response = await global_exception_handler(request, e)

            process_time = time.time() - start_time
            logger.info(
                f"{get_status_emoji(response.status_code)} [{request_id}] {request.method} {request.url.path} - "
                f"Status: {response.status_code} - Time: {process_time:.3f}s"
            )

            response.headers["X-Process-Time"] = f"{process_time:.3f}"
            response.headers["X-Request-ID"] = request_id

            threshold = get_settings().SLOW_REQUEST_THRESHOLD
            if process_time > threshold:
                logger.warning(f"🐌 [{request_id}] Slow request detected: {process_time:.3f}s > {threshold}s")

            return response
        finally:
            request_id_var.reset(token)


def configure_security_headers_middleware(app: FastAPI) -> None:
    """
    Add security headers to every response.

    Args:
        app: FastAPI instance
    """

    @app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        response = await call_next(request)

        security_headers = {
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "DENY",
            "Referrer-Policy": "strict-origin-when-cross-origin",
        }
        if get_settings().is_production and request.url.scheme == "https":
            security_headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        for header, value in security_headers.items():
            response.headers[header] = value

        return response


def configure_all_middleware(app: FastAPI) -> None:
    """
    Register every middleware.

    Middlewares run in reverse order of registration.

    Args:
        app: FastAPI instance
    """
    logger.info("🔧 Configuring middleware...")

    configure_security_headers_middleware(app)
    configure_request_logging_middleware(app)

    # Added last so it runs first and answers preflight requests
    configure_cors_middleware(app)

    logger.info("✅ Middleware configured")


def generate_request_id() -> str:
    """
    Generate a short request id.

    Returns:
        str: 8-character id
    """
    return str(uuid.uuid4())[:8]


def get_client_ip(request: Request) -> str:
    """
    Client IP, honoring proxy headers.

    Args:
        request: FastAPI request

    Returns:
        str: Client IP
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


def get_status_emoji(status_code: int) -> str:
    """
    Emoji for an HTTP status code.
    """
    if 200 <= status_code < 300:
        return "✅"
    elif 300 <= status_code < 400:
        return "↩️"
    elif 400 <= status_code < 500:
        return "⚠️"
    else:
        return "❌"
