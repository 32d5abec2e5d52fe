"""
PostgresService - shared PostgreSQL connection handle.

Wraps a bounded asyncpg pool. One instance is created by the caller (CLI,
HTTP layer, tests) and handed to every persistence operation; userkit keeps
no global connection state.

Key Features:
- Bounded admission: at most pool_max_size concurrent connections, excess
  callers wait up to pool_timeout seconds, then fail as StorageUnavailable
- Driver failures mapped onto the userkit exception taxonomy
- Statements shielded from caller cancellation: a cancelled caller discards
  the result, the statement itself still completes
"""

import asyncio
from typing import Any, Optional

import asyncpg
from asyncpg.exceptions._base import DataError as ArgumentDataError
from loguru import logger

from ...exceptions import InvalidInput, StorageError, StorageUnavailable
from ...settings import settings

# Failures of the path to the database rather than of the statement
UNAVAILABLE_ERRORS: tuple[type[BaseException], ...] = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.InterfaceError,
    asyncpg.TooManyConnectionsError,
    asyncpg.CannotConnectNowError,
    asyncpg.PostgresConnectionError,
)


class PostgresService:
    """
    PostgreSQL connection pool service.

    Usage:
        async with PostgresService() as db:
            user = await UserRepository.find_by_pk(user_id, db)
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        pool_min_size: Optional[int] = None,
        pool_max_size: Optional[int] = None,
        pool_timeout: Optional[float] = None,
        statement_timeout: Optional[int] = None,
    ):
        """
        Initialize PostgreSQL service.

        Args:
            connection_string: PostgreSQL connection string
            pool_min_size: Minimum pool size
            pool_max_size: Maximum concurrent connections
            pool_timeout: Seconds to wait for a free connection
            statement_timeout: Statement timeout in milliseconds

        Unset arguments fall back to POSTGRES__* settings.
        """
        pg = settings.postgres
        self.connection_string = connection_string or pg.connection_string
        self.pool_min_size = pool_min_size if pool_min_size is not None else pg.pool_min_size
        self.pool_max_size = pool_max_size or pg.pool_max_size
        self.pool_timeout = pool_timeout or pg.pool_timeout
        self.statement_timeout = statement_timeout or pg.statement_timeout
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self) -> None:
        """Establish database connection pool."""
        logger.info(
            f"Connecting to PostgreSQL with pool size {self.pool_min_size}-{self.pool_max_size}"
        )
        try:
            self.pool = await asyncpg.create_pool(
                self.connection_string,
                min_size=self.pool_min_size,
                max_size=self.pool_max_size,
                server_settings={"statement_timeout": str(self.statement_timeout)},
            )
        except UNAVAILABLE_ERRORS as e:
            logger.error(f"Could not connect to PostgreSQL: {e}")
            raise StorageUnavailable("connect", str(e), e) from e
        logger.info("PostgreSQL connection pool established")

    async def disconnect(self) -> None:
        """Close database connection pool."""
        if self.pool:
            logger.info("Closing PostgreSQL connection pool")
            await self.pool.close()
            self.pool = None
            logger.info("PostgreSQL connection pool closed")

    async def __aenter__(self) -> "PostgresService":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.disconnect()

    async def fetchrow(self, query: str, *params: Any) -> Optional[dict[str, Any]]:
        """
        Execute a query and return its first row.

        Args:
            query: SQL with $n placeholders
            params: Values bound to the placeholders

        Returns:
            First row as a dict, or None if the query returned no rows

        Raises:
            StorageUnavailable: Pool not connected, acquire timeout, connection lost
            StorageError: Any other failure reported by PostgreSQL
        """
        row = await self._run("fetchrow", query, params)
        return dict(row) if row is not None else None

    async def execute(self, query: str, *params: Any) -> str:
        """Execute a statement and return its status string."""
        return await self._run("execute", query, params)

    async def health_check(self) -> bool:
        """Check that a connection can be acquired and used."""
        try:
            await self.fetchrow("SELECT 1")
            return True
        except StorageError as e:
            logger.error(f"Database health check failed: {e}")
            return False

    async def _run(self, method: str, query: str, params: tuple) -> Any:
        if not self.pool:
            raise StorageUnavailable(method, "PostgreSQL pool not connected. Call connect() first.")

        # the statement keeps running if the awaiting caller is cancelled
        statement = asyncio.ensure_future(self._acquire_and_run(method, query, params))
        try:
            return await asyncio.shield(statement)
        except asyncio.CancelledError:
            statement.add_done_callback(_drain_abandoned)
            raise

    async def _acquire_and_run(self, method: str, query: str, params: tuple) -> Any:
        try:
            async with self.pool.acquire(timeout=self.pool_timeout) as conn:
                return await getattr(conn, method)(query, *params)
        except ArgumentDataError as e:
            # raised client-side while encoding bind parameters
            logger.warning(f"PostgreSQL {method} rejected its arguments: {e}")
            raise InvalidInput(str(e)) from e
        except UNAVAILABLE_ERRORS as e:
            logger.error(f"PostgreSQL unavailable during {method}: {type(e).__name__}: {e}")
            raise StorageUnavailable(method, str(e), e) from e
        except asyncpg.PostgresError as e:
            logger.error(f"PostgreSQL {method} failed: {type(e).__name__}: {e}")
            logger.debug(f"SQL: {query}")
            raise StorageError(method, str(e), e) from e

    def get_pool_status(self) -> dict[str, int]:
        """Current pool usage, for monitoring."""
        if not self.pool:
            return {"size": 0, "idle": 0, "max_size": self.pool_max_size}
        return {
            "size": self.pool.get_size(),
            "idle": self.pool.get_idle_size(),
            "max_size": self.pool_max_size,
        }


def _drain_abandoned(statement: "asyncio.Future[Any]") -> None:
    """Retrieve the outcome of a statement whose caller was cancelled."""
    if statement.cancelled():
        return
    error = statement.exception()
    if error is not None:
        logger.warning(f"Statement abandoned by a cancelled caller failed: {error}")
