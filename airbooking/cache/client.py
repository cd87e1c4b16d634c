"""
Pooled Valkey client used by the booking session store.
"""

import asyncio
import logging
from typing import Iterator, Optional

import valkey
from valkey.connection import ConnectionPool
from valkey.exceptions import ConnectionError, TimeoutError

from .config import ValkeyConfig, ValkeyConnectionError

logger = logging.getLogger(__name__)


def backoff_delays(attempts: int, base: float = 1.0, cap: float = 30.0) -> Iterator[float]:
    """Delays between connection attempts: base, 2*base, 4*base ... capped."""
    for retry in range(attempts - 1):
        yield min(base * (2 ** retry), cap)


class ValkeyClient:
    """
    Lazily connected wrapper around a synchronous ``valkey.Valkey``.

    connect() and disconnect() are coroutines so the store can back off
    between attempts without blocking an event loop. Use it as an async
    context manager to get a connected client that is closed on exit.
    """

    def __init__(self, config: Optional[ValkeyConfig] = None, max_connection_attempts: int = 5):
        self.config = config or ValkeyConfig.from_env()
        self.max_connection_attempts = max(1, max_connection_attempts)
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[valkey.Valkey] = None

        logger.debug(f"ValkeyClient configured: {self.config}")

    def _open(self) -> None:
        pool = ConnectionPool(**self.config.to_connection_pool_kwargs())
        client = valkey.Valkey(connection_pool=pool)
        try:
            client.ping()
        except (ConnectionError, TimeoutError, OSError):
            pool.disconnect()
            raise
        self._pool, self._client = pool, client

    async def connect(self) -> None:
        """
        Connect and ping, retrying with exponential backoff.

        Raises:
            ValkeyConnectionError: When every attempt fails
        """
        if self.is_connected:
            return

        delays = backoff_delays(self.max_connection_attempts)
        attempt = 0
        while True:
            attempt += 1
            try:
                self._open()
                logger.info(f"Connected to Valkey at {self.config.host}:{self.config.port}")
                return
            except (ConnectionError, TimeoutError, OSError) as e:
                delay = next(delays, None)
                if delay is None:
                    message = f"Valkey unreachable after {attempt} attempt(s): {e}"
                    logger.error(message)
                    raise ValkeyConnectionError(message) from e
                logger.warning(f"Valkey connection attempt {attempt} failed ({e}); retrying in {delay:.1f}s")
                await asyncio.sleep(delay)

    async def disconnect(self) -> None:
        """Release pooled connections; safe to call when not connected."""
        pool, self._pool, self._client = self._pool, None, None
        if pool is not None:
            pool.disconnect()
            logger.info("Disconnected from Valkey")

    async def ensure_connection(self) -> None:
        if not self.is_connected:
            await self.connect()

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> valkey.Valkey:
        """
        The connected ``valkey.Valkey`` instance.

        Raises:
            ValkeyConnectionError: If connect() has not succeeded
        """
        if self._client is None:
            raise ValkeyConnectionError("Valkey client is not connected; call connect() first")
        return self._client

    async def __aenter__(self) -> "ValkeyClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()
