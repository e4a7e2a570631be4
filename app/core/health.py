"""
Health checks for monitoring.

The store is the only critical dependency: the collaborator functions are
called best-effort (e-mail) or surface their own errors (invoice), so they
are not probed here.
"""

import asyncio
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

import psutil

from app.db.connection import ConnDB

logger = logging.getLogger(__name__)

_app_start_time = datetime.now(timezone.utc)

MEMORY_USAGE_LIMIT_PERCENT = 95.0
STORE_CHECK_TIMEOUT_SECONDS = 5.0


async def run_health_check_with_timeout(
    service_name: str, check_func: Callable[[], Awaitable[bool]], timeout: float
) -> Dict[str, Any]:
    """
    Run a single health check with a timeout and measure its latency.

    Args:
        service_name: Name reported in logs
        check_func: Coroutine function returning True when healthy
        timeout: Timeout in seconds

    Returns:
        Dict: status, latency_ms and error (if any)
    """
    start_time = time.time()

    try:
        result = await asyncio.wait_for(check_func(), timeout=timeout)
        return {
            "status": "healthy" if result else "unhealthy",
            "latency_ms": round((time.time() - start_time) * 1000, 2),
        }

    except asyncio.TimeoutError:
        logger.warning(f"Health check timeout for {service_name} after {timeout}s")
        return {
            "status": "timeout",
            "error": f"Health check timeout after {timeout}s",
            "latency_ms": round((time.time() - start_time) * 1000, 2),
        }

    except Exception as e:
        logger.error(f"Health check failed for {service_name}: {e}")
        return {
            "status": "unhealthy",
            "error": str(e),
            "latency_ms": round((time.time() - start_time) * 1000, 2),
        }


async def check_memory_usage() -> bool:
    """True while memory usage is below the limit."""
    return psutil.virtual_memory().percent < MEMORY_USAGE_LIMIT_PERCENT


async def get_health_status(conn_db: Optional[ConnDB]) -> Dict[str, Any]:
    """
    Health of the store and the host.

    Args:
        conn_db: Store connection (None when startup did not create one)

    Returns:
        Dict: overall flag, per-service results and uptime
    """
    services: Dict[str, Any] = {}

    if conn_db is None:
        services["store"] = {"status": "unhealthy", "error": "Store connection not initialized", "latency_ms": None}
    else:
        services["store"] = await run_health_check_with_timeout(
            "store", conn_db.test_connection, STORE_CHECK_TIMEOUT_SECONDS
        )
        services["store"]["pool"] = conn_db.pool_status()

    services["memory"] = await run_health_check_with_timeout("memory", check_memory_usage, 1.0)

    return {
        # Memory pressure is reported but does not make the service unhealthy
        "overall": services["store"]["status"] == "healthy",
        "services": services,
        "uptime": get_uptime_info(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def get_uptime_info() -> Dict[str, Any]:
    """
    Application uptime.

    Returns:
        Dict: Start time and uptime
    """
    uptime_delta = datetime.now(timezone.utc) - _app_start_time

    return {
        "start_time": _app_start_time.isoformat(),
        "uptime_seconds": int(uptime_delta.total_seconds()),
        "uptime_human": format_uptime(uptime_delta),
    }


def format_uptime(uptime_delta: timedelta) -> str:
    """
    Format an uptime as "1d 2h 3m 4s".

    Args:
        uptime_delta: Uptime

    Returns:
        str: Human-readable uptime
    """
    days = uptime_delta.days
    hours, remainder = divmod(uptime_delta.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds or not parts:
        parts.append(f"{seconds}s")

    return " ".join(parts)
