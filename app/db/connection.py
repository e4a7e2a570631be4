# app/db/connection.py
"""
Store connection for the checkout service.

``ConnDB`` owns the async engine and the session factory of the PostgreSQL
store. The application lifespan creates one instance, keeps it on
``app.state`` and hands it to the repositories.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings, get_settings
from app.utils.error_handler import StoreException

logger = logging.getLogger(__name__)

# Tables the checkout pipeline cannot run without
REQUIRED_TABLES = ("shops", "order_tokens", "orders")


class ConnDB:
    """Engine and session factory of the checkout store."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None
        self._verified = False

    @property
    def is_ready(self) -> bool:
        """True once the engine exists and the startup check passed."""
        return self.engine is not None and self.session_factory is not None and self._verified

    async def initialize(self) -> None:
        """
        Open the pool and verify the store.

        Raises:
            StoreException: If the store is unreachable or misses a checkout table
        """
        if self.engine is not None:
            return

        logger.info("🔌 Connecting to checkout store...")
        self.engine = create_async_engine(
            self.settings.DATABASE_URL,
            pool_size=self.settings.DB_POOL_SIZE,
            max_overflow=self.settings.DB_MAX_OVERFLOW,
            pool_timeout=self.settings.DB_POOL_TIMEOUT,
            pool_pre_ping=True,
            pool_recycle=1800,
            echo=self.settings.DB_ECHO,
            connect_args={"server_settings": {"application_name": self.settings.APP_NAME}},
        )
        self.session_factory = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

        try:
            await self._verify_store()
        except Exception as e:
            await self._reset()
            if isinstance(e, StoreException):
                raise
            raise StoreException(
                message="Checkout store is not reachable",
                operation="initialize",
                details={"error": str(e)},
            ) from e

        logger.info("✅ Checkout store connected")

    async def _verify_store(self) -> None:
        async with self.session_factory() as session:
            for table in REQUIRED_TABLES:
                result = await session.execute(text("SELECT to_regclass(:table_name)"), {"table_name": table})
                if result.scalar() is None:
                    raise StoreException(
                        message=f"Checkout table '{table}' is missing",
                        operation="initialize",
                        table=table,
                    )

            shops = (await session.execute(text("SELECT COUNT(*) FROM shops WHERE active"))).scalar()
            logger.info(f"Checkout store verified, {shops} active shops")

        self._verified = True

    async def _reset(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
        self.engine = None
        self.session_factory = None
        self._verified = False

    def get_session(self) -> AsyncSession:
        """
        New session, usable as an async context manager.

        Raises:
            StoreException: If ``initialize`` has not completed
        """
        if not self.is_ready:
            raise StoreException(message="Store connection not initialized", operation="get_session")
        return self.session_factory()

    async def test_connection(self) -> bool:
        """Ping the store. Never raises."""
        if not self.is_ready:
            return False
        try:
            async with self.get_session() as session:
                return (await session.execute(text("SELECT 1"))).scalar() == 1
        except Exception as e:
            logger.error(f"Store ping failed: {e}")
            return False

    def pool_status(self) -> Dict[str, Any]:
        """Connection pool counters for the health endpoint."""
        if self.engine is None:
            return {"status": "not_initialized"}

        pool = self.engine.pool
        return {
            "status": "initialized",
            "size": getattr(pool, "size", lambda: 0)(),
            "checked_out": getattr(pool, "checkedout", lambda: 0)(),
            "overflow": getattr(pool, "overflow", lambda: 0)(),
        }

    async def close(self) -> None:
        """Dispose the engine and every pooled connection."""
        if self.engine is None:
            return
        await self._reset()
        logger.info("Checkout store connection closed")

    def __repr__(self) -> str:
        return f"ConnDB(ready={self.is_ready})"
