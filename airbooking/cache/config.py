"""
Connection settings for the Valkey session store.

Settings come from ``VALKEY_*`` environment variables (a ``.env`` file is
honoured) or are built from ``BookingConfig.valkey_config()``.
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes", "on")


@dataclass
class ValkeyConfig:
    """Where the session store connects and how patient it is."""

    host: str = "localhost"
    port: int = 6379
    password: Optional[str] = None
    database: int = 0
    max_connections: int = 10
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    retry_on_timeout: bool = True
    decode_responses: bool = True

    @classmethod
    def from_env(cls) -> "ValkeyConfig":
        """Read ``VALKEY_HOST``, ``VALKEY_PORT``, ``VALKEY_PASSWORD`` and friends."""
        defaults = cls()
        return cls(
            host=os.getenv("VALKEY_HOST", defaults.host),
            port=int(os.getenv("VALKEY_PORT", defaults.port)),
            password=os.getenv("VALKEY_PASSWORD") or None,
            database=int(os.getenv("VALKEY_DATABASE", defaults.database)),
            max_connections=int(os.getenv("VALKEY_MAX_CONNECTIONS", defaults.max_connections)),
            socket_timeout=float(os.getenv("VALKEY_SOCKET_TIMEOUT", defaults.socket_timeout)),
            socket_connect_timeout=float(
                os.getenv("VALKEY_SOCKET_CONNECT_TIMEOUT", defaults.socket_connect_timeout)
            ),
            retry_on_timeout=_env_bool("VALKEY_RETRY_ON_TIMEOUT", defaults.retry_on_timeout),
        )

    def to_connection_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for a single Valkey connection (no pool size)."""
        kwargs: Dict[str, Any] = dict(
            host=self.host,
            port=self.port,
            db=self.database,
            socket_timeout=self.socket_timeout,
            socket_connect_timeout=self.socket_connect_timeout,
            retry_on_timeout=self.retry_on_timeout,
            decode_responses=self.decode_responses,
        )
        if self.password:
            kwargs["password"] = self.password
        return kwargs

    def to_connection_pool_kwargs(self) -> Dict[str, Any]:
        return {**self.to_connection_kwargs(), "max_connections": self.max_connections}

    def __str__(self) -> str:
        secret = "***" if self.password else "None"
        return f"ValkeyConfig({self.host}:{self.port}/{self.database}, password={secret}, pool={self.max_connections})"


class ValkeyConnectionError(Exception):
    """Valkey server could not be reached."""
    pass


class SessionStoreError(Exception):
    """A session could not be saved, loaded or deleted."""
    pass
