"""Connection provider contract and the SQLAlchemy-backed pool implementation."""

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.exc import DBAPIError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from redshift_mcp.errors import DatabaseError, ResourceError
from redshift_mcp.models.config import DatabaseConfig

logger = logging.getLogger(__name__)


class ConnectionProvider(ABC):
    """Hands out pooled connections and takes them back.

    Components never touch the pool directly; they borrow a connection for
    the lifetime of one request through ``get_connection``.
    """

    @abstractmethod
    async def acquire(self) -> AsyncConnection:
        """
        Check a connection out of the pool.

        Raises:
            ResourceError: If no connection could be obtained
        """
        ...

    @abstractmethod
    async def release(self, conn: AsyncConnection) -> None:
        """Return a connection to the pool."""
        ...

    @asynccontextmanager
    async def get_connection(self) -> AsyncIterator[AsyncConnection]:
        """
        Borrow one connection for the duration of the block.

        The connection is released exactly once however the block exits.
        Driver errors raised inside the block surface as DatabaseError.

        Yields:
            AsyncConnection for executing statements
        """
        conn = await self.acquire()
        try:
            yield conn
        except DBAPIError as e:
            raise DatabaseError.from_dbapi(e) from e
        finally:
            await self.release(conn)


class DatabaseConnection(ConnectionProvider):
    """Manages the SQLAlchemy async engine and its connection pool."""

    def __init__(self, config: DatabaseConfig):
        """
        Initialize database connection.

        Args:
            config: Database configuration with endpoint and pool settings
        """
        self.config = config
        self.engine: Optional[AsyncEngine] = None

    async def initialize(self) -> None:
        """Create the async engine. Connections are opened lazily on acquire."""
        if self.engine is not None:
            return

        self.engine = create_async_engine(
            self.config.url,
            pool_size=self.config.pool_size,
            max_overflow=self.config.max_overflow,
            pool_timeout=self.config.pool_timeout,
            pool_pre_ping=True,
            echo=self.config.echo_sql,
        )
        logger.info(f"Connection pool created for {self.config.safe_url}")

    async def dispose(self) -> None:
        """Dispose of the connection pool and cleanup resources."""
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None

    async def acquire(self) -> AsyncConnection:
        if self.engine is None:
            raise RuntimeError(
                "DatabaseConnection not initialized. Call initialize() first."
            )

        try:
            conn = await self.engine.connect()
        except PoolTimeoutError as e:
            raise ResourceError(
                f"Connection pool exhausted: {e}", original_error=e
            ) from e
        except (DBAPIError, OSError) as e:
            raise ResourceError(
                f"Could not acquire a database connection: {e}", original_error=e
            ) from e

        logger.debug(f"Connection acquired ({self.checked_out} checked out)")
        return conn

    async def release(self, conn: AsyncConnection) -> None:
        await conn.close()
        logger.debug(f"Connection released ({self.checked_out} checked out)")

    @property
    def checked_out(self) -> int:
        """Number of connections currently lent out by the pool."""
        if self.engine is None:
            return 0
        return self.engine.pool.checkedout()  # type: ignore[attr-defined]

    @property
    def is_initialized(self) -> bool:
        """Check if engine is initialized."""
        return self.engine is not None

    async def __aenter__(self) -> "DatabaseConnection":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.dispose()
