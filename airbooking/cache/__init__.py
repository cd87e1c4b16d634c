"""
Valkey storage layer for booking sessions.

This module contains the Valkey client configuration, the client wrapper
and the key conventions used to persist sessions between requests.
"""

from .config import ValkeyConfig, ValkeyConnectionError, SessionStoreError
from .client import ValkeyClient
from .utils import CacheKeyPrefix, TTLPreset, CacheKeyBuilder

__all__ = [
    # Configuration
    "ValkeyConfig",
    "ValkeyConnectionError",
    "SessionStoreError",

    # Client
    "ValkeyClient",

    # Utilities
    "CacheKeyPrefix",
    "TTLPreset",
    "CacheKeyBuilder",
]
