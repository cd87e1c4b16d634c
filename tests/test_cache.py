"""
Cache layer tests: configuration, key conventions and client connection.

Runs without a Valkey server; the underlying client is patched.
"""

import pytest
from unittest.mock import AsyncMock, patch
from valkey.exceptions import ConnectionError

from airbooking.cache.client import backoff_delays
from airbooking.cache import (
    CacheKeyBuilder,
    CacheKeyPrefix,
    TTLPreset,
    ValkeyClient,
    ValkeyConfig,
    ValkeyConnectionError,
)


class TestValkeyConfig:
    """Test Valkey configuration functionality."""

    def test_config_creation_with_defaults(self):
        """Test creating config with default values."""
        config = ValkeyConfig()
        assert config.host == "localhost"
        assert config.port == 6379
        assert config.database == 0
        assert config.max_connections == 10

    def test_config_from_env(self):
        """Test creating config from environment variables."""
        with patch.dict('os.environ', {
            'VALKEY_HOST': 'session-host',
            'VALKEY_PORT': '6380',
            'VALKEY_PASSWORD': 'test-pass',
            'VALKEY_DATABASE': '5',
            'VALKEY_MAX_CONNECTIONS': '20'
        }):
            config = ValkeyConfig.from_env()
            assert config.host == "session-host"
            assert config.port == 6380
            assert config.password == "test-pass"
            assert config.database == 5
            assert config.max_connections == 20

    def test_config_to_connection_kwargs(self):
        """Test converting config to connection parameters."""
        kwargs = ValkeyConfig(host="session-host", password="test-pass", database=5).to_connection_kwargs()
        assert kwargs["host"] == "session-host"
        assert kwargs["password"] == "test-pass"
        assert kwargs["db"] == 5
        assert "max_connections" not in kwargs

        assert "password" not in ValkeyConfig().to_connection_kwargs()

    def test_config_to_connection_pool_kwargs(self):
        kwargs = ValkeyConfig(max_connections=15).to_connection_pool_kwargs()
        assert kwargs["max_connections"] == 15

    def test_config_string_representation(self):
        """Test config string representation hides password."""
        config_str = str(ValkeyConfig(password="secret123"))
        assert "secret123" not in config_str
        assert "***" in config_str


class TestCacheKeys:
    """Test key and TTL conventions."""

    def test_build_key(self):
        assert CacheKeyBuilder.build_key(CacheKeyPrefix.BOOKING_SESSION, "3f2a") == "session:booking:3f2a"
        assert CacheKeyBuilder.build_key("custom", "a", None, 2) == "custom:a:2"

    def test_build_pattern(self):
        assert CacheKeyBuilder.build_pattern(CacheKeyPrefix.CONFIRMED_BOOKING) == "booking:confirmed:*"
        assert CacheKeyBuilder.build_pattern(CacheKeyPrefix.BOOKING_SESSION, "ab*") == "session:booking:ab*"

    def test_ttl_presets(self):
        assert TTLPreset.BOOKING_SESSION == 1800
        assert TTLPreset.CONFIRMED_BOOKING == 30 * 24 * 3600


class TestValkeyClient:
    """Test connection handling with a patched Valkey client."""

    def test_client_requires_connection(self):
        client = ValkeyClient(ValkeyConfig())
        assert client.is_connected is False
        with pytest.raises(ValkeyConnectionError):
            client.client

    @pytest.mark.asyncio
    async def test_connect_and_disconnect(self):
        with patch("airbooking.cache.client.ConnectionPool") as pool_cls, \
                patch("airbooking.cache.client.valkey.Valkey") as valkey_cls:
            valkey_cls.return_value.ping.return_value = True

            async with ValkeyClient(ValkeyConfig()) as client:
                assert client.is_connected
                assert client.client is valkey_cls.return_value

            pool_cls.return_value.disconnect.assert_called_once()
            assert client.is_connected is False

    @pytest.mark.asyncio
    async def test_connect_retries_then_fails(self):
        with patch("airbooking.cache.client.ConnectionPool"), \
                patch("airbooking.cache.client.valkey.Valkey") as valkey_cls, \
                patch("airbooking.cache.client.asyncio.sleep", new=AsyncMock()) as sleep:
            valkey_cls.return_value.ping.side_effect = ConnectionError("refused")
            client = ValkeyClient(ValkeyConfig(), max_connection_attempts=3)

            with pytest.raises(ValkeyConnectionError):
                await client.connect()

            assert valkey_cls.return_value.ping.call_count == 3
            assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_ensure_connection_reuses_client(self):
        with patch("airbooking.cache.client.ConnectionPool"), \
                patch("airbooking.cache.client.valkey.Valkey") as valkey_cls:
            client = ValkeyClient(ValkeyConfig())
            await client.ensure_connection()
            await client.ensure_connection()

            assert valkey_cls.call_count == 1

    def test_backoff_delays(self):
        assert list(backoff_delays(1)) == []
        assert list(backoff_delays(4)) == [1.0, 2.0, 4.0]
        assert list(backoff_delays(8, cap=10.0))[-1] == 10.0

    @pytest.mark.asyncio
    async def test_failed_ping_releases_pool(self):
        """Test every pool opened for a failed attempt is disconnected."""
        with patch("airbooking.cache.client.ConnectionPool") as pool_cls, \
                patch("airbooking.cache.client.valkey.Valkey") as valkey_cls, \
                patch("airbooking.cache.client.asyncio.sleep", new=AsyncMock()):
            valkey_cls.return_value.ping.side_effect = ConnectionError("refused")
            client = ValkeyClient(ValkeyConfig(), max_connection_attempts=3)

            with pytest.raises(ValkeyConnectionError):
                await client.connect()

            assert pool_cls.call_count == 3
            assert pool_cls.return_value.disconnect.call_count == 3
            assert client.is_connected is False
