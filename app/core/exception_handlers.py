"""
Centralized exception handlers for the FastAPI application.

Every error is rendered with the same envelope. Application exceptions carry
their own HTTP status; request-body validation failures are mapped to 400 and
anything unhandled becomes a 500 without internal detail outside DEBUG.
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.core.logging_config import request_id_var
from app.utils.error_handler import AppException, ErrorCode, ErrorSeverity, ValidationException

logger = logging.getLogger(__name__)


def _error_content(
    request: Request,
    message: str,
    error_type: str,
    error_code: Optional[str] = None,
    details: Any = None,
) -> Dict[str, Any]:
    """Build the error envelope shared by every handler."""
    return {
        "error": True,
        "message": message,
        "error_type": error_type,
        "error_code": error_code,
        "details": details if get_settings().DEBUG else None,
        "path": str(request.url.path),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id_var.get(),
    }


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handler for application exceptions.

    Args:
        request: FastAPI request
        exc: Application exception

    Returns:
        JSONResponse: Error envelope with the exception's status code
    """
    log_level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    if exc.severity == ErrorSeverity.CRITICAL:
        log_level = logging.CRITICAL

    logger.log(
        log_level,
        f"App Exception: {exc.message} - "
        f"Code: {exc.error_code.value} - "
        f"URL: {request.url} - "
        f"Details: {exc.details}",
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(
            request,
            message=exc.message,
            error_type=type(exc).__name__,
            error_code=exc.error_code.value,
            details=exc.details,
        ),
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handler for request-body validation failures.

    FastAPI reports these as 422; the checkout API answers 400.
    """
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body") or None
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"

    logger.warning(f"Request validation failed: {message} - URL: {request.url}")

    return JSONResponse(
        status_code=400,
        content=_error_content(
            request,
            message=message,
            error_type=ValidationException.__name__,
            error_code=ErrorCode.VALIDATION_ERROR.value,
            details=[{"loc": list(err.get("loc", ())), "msg": err.get("msg")} for err in errors],
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handler for Starlette HTTP exceptions (unknown routes, wrong methods)."""
    logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail} - URL: {request.url}")

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(request, message=str(exc.detail), error_type="http_error"),
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler for uncaught exceptions.

    Args:
        request: FastAPI request
        exc: Unhandled exception

    Returns:
        JSONResponse: Generic 500 error envelope
    """
    logger.error(
        f"Unhandled Exception: {str(exc)} - "
        f"Type: {type(exc).__name__} - "
        f"URL: {request.url} - "
        f"Traceback: {traceback.format_exc()}"
    )

    error_message = "Internal server error"
    if get_settings().DEBUG:
        error_message = f"{type(exc).__name__}: {str(exc)}"

    return JSONResponse(
        status_code=500,
        content=_error_content(
            request,
            message=error_message,
            error_type="internal_server_error",
            error_code=ErrorCode.UNKNOWN_ERROR.value,
            details={"traceback": traceback.format_exc()},
        ),
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """
    Register every exception handler on the application.

    Args:
        app: FastAPI instance
    """
    logger.info("🔧 Configuring exception handlers...")

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Must be last
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("✅ Exception handlers configured")
