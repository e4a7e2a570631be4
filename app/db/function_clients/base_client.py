"""
Base client for the invoice and email functions.

Both collaborators are HTTP functions that accept a JSON body and answer with
a JSON body. This module provides session management and the single POST
helper they share.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientTimeout

from app.core.config import Settings, get_settings
from app.utils.error_handler import UpstreamException

logger = logging.getLogger(__name__)


class BaseFunctionsClient:
    """
    Base client for collaborator functions.

    Calls are not retried: invoice generation and email sending are not
    idempotent, so a failure is reported to the caller instead.
    """

    SERVICE_NAME = "functions"

    def __init__(self, settings: Optional[Settings] = None, timeout_seconds: Optional[float] = None):
        """
        Initialize the client.

        Args:
            settings: Application settings (defaults to the cached settings)
            timeout_seconds: Total timeout of a single call
        """
        self.settings = settings or get_settings()
        self.base_url = self.settings.FUNCTIONS_BASE_URL.rstrip("/")
        self.timeout = ClientTimeout(total=timeout_seconds or 30, connect=10)
        self.session: Optional[aiohttp.ClientSession] = None

        logger.info(f"Initialized {self.SERVICE_NAME} client for {self.base_url}")

    async def initialize(self):
        """Create the HTTP session."""
        if self.session is not None:
            return

        connector = aiohttp.TCPConnector(limit=50, limit_per_host=20)
        self.session = aiohttp.ClientSession(
            timeout=self.timeout,
            connector=connector,
            headers=self.settings.get_functions_headers(),
        )
        logger.info(f"✅ {self.SERVICE_NAME} client session opened")

    async def close(self):
        """Close the HTTP session and clean up resources."""
        if self.session:
            await self.session.close()
            self.session = None
            logger.info(f"{self.SERVICE_NAME} client closed")

    async def _post(self, path: str, payload: Dict[str, Any], operation: str) -> Dict[str, Any]:
        """
        POST a JSON payload to a function.

        Args:
            path: Function path, e.g. "generate-invoice"
            payload: JSON body
            operation: Operation name used in errors and logs

        Returns:
            Dict: Decoded JSON response (empty when the body is not JSON)

        Raises:
            UpstreamException: On non-2xx responses, transport errors or timeouts
        """
        if self.session is None:
            await self.initialize()

        url = f"{self.base_url}/{path.lstrip('/')}"

        try:
            async with self.session.post(url, json=payload) as response:
                try:
                    response_data = await response.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError):
                    response_data = {}

                if not 200 <= response.status < 300:
                    logger.error(
                        f"{self.SERVICE_NAME} {operation} failed with HTTP {response.status}: "
                        f"{(response_data or {}).get('error', 'Unknown error')}"
                    )
                    raise UpstreamException(
                        message=f"{self.SERVICE_NAME} {operation} failed",
                        service=self.SERVICE_NAME,
                        operation=operation,
                        response_code=response.status,
                        details={"response": response_data},
                    )

                return response_data if isinstance(response_data, dict) else {"data": response_data}

        except UpstreamException:
            raise
        except asyncio.TimeoutError as e:
            logger.error(f"{self.SERVICE_NAME} {operation} timed out after {self.timeout.total}s")
            raise UpstreamException(
                message=f"{self.SERVICE_NAME} {operation} timed out",
                service=self.SERVICE_NAME,
                operation=operation,
            ) from e
        except aiohttp.ClientError as e:
            logger.error(f"{self.SERVICE_NAME} {operation} network error: {e}")
            raise UpstreamException(
                message=f"{self.SERVICE_NAME} {operation} network error",
                service=self.SERVICE_NAME,
                operation=operation,
                details={"error": str(e)},
            ) from e
