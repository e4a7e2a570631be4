"""
Base Repository for checkout store operations.

This module provides the base class of every repository: session handling,
raw-SQL execution through ``sqlalchemy.text`` and uniform error wrapping into
``StoreException``. It also provides the retry and logging decorators used by
the concrete repositories.
"""

import asyncio
import functools
import logging
import time
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.connection import ConnDB
from app.utils.error_handler import StoreException

logger = logging.getLogger(__name__)


def with_retry(
    max_attempts: int = 3,
    delay: float = 0.2,
    backoff: float = 2.0,
    exceptions: tuple = (StoreException,),
) -> Callable:
    """
    Retry a read-only store operation with exponential backoff.

    Writes are never wrapped: a retried insert could create a second order
    or token.

    Args:
        max_attempts: Total number of attempts
        delay: Pause before the second attempt in seconds
        backoff: Factor applied to the pause after each failure
        exceptions: Exception types that are retried

    Returns:
        Decorator
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            pause = delay
            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_attempts:
                        logger.error(f"{func.__qualname__} gave up after {max_attempts} attempts: {e}")
                        raise
                    logger.warning(
                        f"{func.__qualname__} attempt {attempt}/{max_attempts} failed ({e}), "
                        f"retrying in {pause:.2f}s"
                    )
                    await asyncio.sleep(pause)
                    pause *= backoff

        return wrapper

    return decorator


def log_operation(operation_name: Optional[str] = None) -> Callable:
    """
    Log the duration and the failure of a repository method.

    Args:
        operation_name: Name used in the log lines (defaults to Class.method)
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            name = operation_name or f"{type(self).__name__}.{func.__name__}"
            started = time.perf_counter()
            try:
                result = await func(self, *args, **kwargs)
            except Exception as e:
                logger.error(f"❌ {name} failed after {(time.perf_counter() - started) * 1000:.1f}ms: {e}")
                raise
            logger.debug(f"{name} took {(time.perf_counter() - started) * 1000:.1f}ms")
            return result

        return wrapper

    return decorator


class BaseRepository:
    """
    Base repository for the checkout store.

    Derived repositories set ``TABLE_NAME`` and implement their domain
    operations on top of ``fetch_one``, ``fetch_all`` and ``execute``.
    """

    TABLE_NAME: str = ""

    def __init__(self, conn_db: ConnDB):
        """
        Initialize the repository.

        Args:
            conn_db: Store connection created by the application lifespan
        """
        self.conn_db = conn_db
        self._repository_name: str = self.__class__.__name__

    def get_session(self) -> AsyncSession:
        """
        Get a session from the connection pool.

        Returns:
            AsyncSession: Session usable as an async context manager
        """
        return self.conn_db.get_session()

    def _store_error(self, operation: str, error: Exception) -> StoreException:
        logger.error(f"{self._repository_name}.{operation} failed: {error}")
        return StoreException(
            message=f"Store operation '{operation}' failed",
            operation=operation,
            table=self.TABLE_NAME or None,
            details={"error": str(error)},
        )

    async def fetch_one(self, query: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        Run a read query and return the first row.

        Args:
            query: SQL query string
            params: Query parameters

        Returns:
            Row as a dict, or None when nothing matched

        Raises:
            StoreException: If the query fails
        """
        try:
            async with self.get_session() as session:
                result = await session.execute(text(query), params or {})
                row = result.mappings().first()
                return dict(row) if row is not None else None
        except StoreException:
            raise
        except Exception as e:
            raise self._store_error("fetch_one", e) from e

    async def fetch_all(self, query: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Run a read query and return every row.

        Raises:
            StoreException: If the query fails
        """
        try:
            async with self.get_session() as session:
                result = await session.execute(text(query), params or {})
                return [dict(row) for row in result.mappings().all()]
        except StoreException:
            raise
        except Exception as e:
            raise self._store_error("fetch_all", e) from e

    async def execute(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None,
        returning: bool = False,
    ) -> Any:
        """
        Run a write query and commit it.

        Args:
            query: SQL statement
            params: Statement parameters
            returning: When True, return the first row of a RETURNING clause

        Returns:
            The returned row as a dict when ``returning`` is set, otherwise the
            number of affected rows

        Raises:
            StoreException: If the statement fails
        """
        try:
            async with self.get_session() as session:
                result = await session.execute(text(query), params or {})
                value = None
                if returning:
                    row = result.mappings().first()
                    value = dict(row) if row is not None else None
                else:
                    value = result.rowcount
                await session.commit()
                return value
        except StoreException:
            raise
        except Exception as e:
            raise self._store_error("execute", e) from e

    def __repr__(self) -> str:
        return f"<{self._repository_name}(table={self.TABLE_NAME})>"
