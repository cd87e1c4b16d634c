"""
Cache key and TTL conventions for booking session storage.
"""

from enum import Enum
from typing import Any, Union


class CacheKeyPrefix(str, Enum):
    """Key prefixes for data kept in Valkey."""

    BOOKING_SESSION = "session:booking"
    CONFIRMED_BOOKING = "booking:confirmed"


class TTLPreset(int, Enum):
    """Standard TTL presets in seconds."""

    BOOKING_SESSION = 1800       # 30 minutes, an abandoned checkout
    CONFIRMED_BOOKING = 2592000  # 30 days


class CacheKeyBuilder:
    """Builder for consistent, colon-separated cache keys."""

    @staticmethod
    def build_key(prefix: Union[CacheKeyPrefix, str], *parts: Any) -> str:
        """
        Build a cache key from a prefix and parts, skipping None parts.

        Example:
            build_key(CacheKeyPrefix.BOOKING_SESSION, "3f2a")
            # Returns: "session:booking:3f2a"
        """
        prefix_str = prefix.value if isinstance(prefix, CacheKeyPrefix) else str(prefix)
        key_parts = [prefix_str]
        key_parts.extend(str(part) for part in parts if part is not None)
        return ":".join(key_parts)

    @staticmethod
    def build_pattern(prefix: Union[CacheKeyPrefix, str], *parts: str) -> str:
        """Build a SCAN pattern, e.g. ``session:booking:*``."""
        prefix_str = prefix.value if isinstance(prefix, CacheKeyPrefix) else str(prefix)
        return ":".join([prefix_str, *parts]) if parts else f"{prefix_str}:*"
