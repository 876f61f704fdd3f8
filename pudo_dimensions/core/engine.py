"""
Presto connection pool module for analytics engine connectivity.

This module provides a bounded pool of Presto DB-API connections, implementing
a process-wide singleton for use from the FastAPI backend.

Key Components:
- EnginePool: bounded connection source (asyncio.Semaphore + idle list)
- init_engine(): Create the pool at application startup
- get_engine_pool(): Get the pool instance (initializes if needed)
- close_engine(): Close idle connections at application shutdown

Presto connections are HTTP sessions; opening one does no network I/O. The
first request to the coordinator happens when a query is submitted, which is
where connection failures surface (see services.gateway).

Connection Pool Configuration:
- max_size: Settings.engine_max_connections (concurrent engine calls)
- request_timeout: Settings.engine_request_timeout (per HTTP request)
- max_attempts: 1 (the client never retries a request on its own)

Usage:
    # At application startup (in FastAPI lifespan)
    await init_engine()

    # In services
    pool = await get_engine_pool()
    async with pool.acquire() as conn:
        cursor = conn.cursor()

    # At application shutdown
    await close_engine()
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from prestodb import auth as presto_auth
from prestodb import dbapi as presto_dbapi

from pudo_dimensions.core.config import Settings, get_settings


logger = logging.getLogger(__name__)

# A failed request surfaces as a failed call instead of being retried
ENGINE_MAX_ATTEMPTS = 1


# =============================================================================
# Connection Pool
# =============================================================================

class EnginePool:
    """
    Bounded source of authenticated Presto connections.

    At most ``max_size`` connections are checked out at once; callers beyond
    that wait for a free slot. Connections returned after a successful call
    are kept for reuse; connections whose call failed are closed.

    Args:
        settings: Engine host, credentials and limits.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._slots = asyncio.Semaphore(settings.engine_max_connections)
        self._idle: List[presto_dbapi.Connection] = []
        self._closed = False

    @property
    def max_size(self) -> int:
        return self._settings.engine_max_connections

    @property
    def idle_count(self) -> int:
        return len(self._idle)

    def _connect(self) -> presto_dbapi.Connection:
        settings = self._settings
        return presto_dbapi.connect(
            host=settings.presto_host,
            port=settings.presto_port,
            user=settings.presto_username,
            catalog=settings.presto_catalog,
            schema=settings.presto_schema,
            source=settings.engine_source,
            http_scheme=settings.presto_protocol,
            auth=presto_auth.BasicAuthentication(
                settings.presto_username,
                settings.presto_password.get_secret_value(),
            ),
            request_timeout=settings.engine_request_timeout,
            max_attempts=ENGINE_MAX_ATTEMPTS,
        )

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[presto_dbapi.Connection]:
        """
        Check out a connection for the duration of one engine call.

        Raises:
            RuntimeError: If the pool has been closed.
        """
        if self._closed:
            raise RuntimeError("Engine pool is closed")

        async with self._slots:
            conn = self._idle.pop() if self._idle else await asyncio.to_thread(self._connect)
            try:
                yield conn
            except BaseException:
                conn.close()
                raise
            if self._closed:
                conn.close()
            else:
                self._idle.append(conn)

    def close(self) -> None:
        """Close idle connections; checked-out ones close when released."""
        self._closed = True
        while self._idle:
            self._idle.pop().close()


# =============================================================================
# Global Pool Singleton
# =============================================================================

# None until init_engine() is called
_pool: Optional[EnginePool] = None


async def init_engine(settings: Optional[Settings] = None) -> EnginePool:
    """
    Initialize the engine connection pool.

    Idempotent: returns the existing pool if already initialized.

    Args:
        settings: Configuration to use; defaults to get_settings().

    Returns:
        EnginePool: The process-wide pool.

    Raises:
        pydantic.ValidationError: If settings are loaded here and required
            environment variables are missing.
    """
    global _pool

    if _pool is None:
        settings = settings or get_settings()
        _pool = EnginePool(settings)
        logger.info(
            f"Engine pool ready for {settings.presto_protocol}://"
            f"{settings.presto_host}:{settings.presto_port} "
            f"(max {settings.engine_max_connections} connections)"
        )

    return _pool


async def get_engine_pool() -> EnginePool:
    """Get the engine pool, initializing it lazily if needed."""
    if _pool is None:
        await init_engine()

    assert _pool is not None, "Pool should be initialized after init_engine()"

    return _pool


async def close_engine() -> None:
    """Close the engine pool. Safe to call when it was never initialized."""
    global _pool

    if _pool is not None:
        _pool.close()
        _pool = None
