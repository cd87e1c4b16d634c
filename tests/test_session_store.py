"""
Tests for the Valkey-backed session store using a mocked client.
"""

import pytest
from unittest.mock import Mock, AsyncMock
from valkey.exceptions import ConnectionError

from airbooking.cache import CacheKeyPrefix, SessionStoreError, TTLPreset
from airbooking.models import BookingStatus
from airbooking.services import BookingSessionManager, BookingSessionStore
from tests.factories import make_passenger


class TestBookingSessionStore:
    """Test session persistence."""

    @pytest.fixture
    def mock_valkey_client(self):
        """Create a mock ValkeyClient backed by a dict."""
        storage = {}
        client = Mock()
        client.ensure_connection = AsyncMock()
        client.client = Mock()
        client.client.set = Mock(side_effect=lambda key, value, ex=None: storage.__setitem__(key, value))
        client.client.get = Mock(side_effect=lambda key: storage.get(key))
        client.client.delete = Mock(side_effect=lambda key: 1 if storage.pop(key, None) is not None else 0)
        client.storage = storage
        return client

    @pytest.fixture
    def store(self, mock_valkey_client):
        return BookingSessionStore(mock_valkey_client)

    @pytest.fixture
    def manager(self, clock, flight):
        manager = BookingSessionManager(clock=clock)
        manager.start_session(flight)
        manager.set_passengers([make_passenger()])
        manager.select_seat(0, "12A", "49.99")
        return manager

    def test_key_for(self):
        assert BookingSessionStore.key_for("abc") == "session:booking:abc"
        assert BookingSessionStore.key_for("abc").startswith(CacheKeyPrefix.BOOKING_SESSION.value)

    @pytest.mark.asyncio
    async def test_save_and_load(self, store, manager, mock_valkey_client):
        """Test the round trip restores every field."""
        key = await store.save(manager)

        assert key == f"session:booking:{manager.session_id}"
        mock_valkey_client.ensure_connection.assert_awaited()
        _, kwargs = mock_valkey_client.client.set.call_args
        assert kwargs["ex"] == TTLPreset.BOOKING_SESSION.value

        loaded = await store.load(manager.session_id)
        assert loaded == manager.session
        assert loaded.model_dump_json() == manager.session.model_dump_json()

    @pytest.mark.asyncio
    async def test_load_bytes_payload(self, store, manager, mock_valkey_client):
        await store.save(manager.session)
        key = store.key_for(manager.session_id)
        mock_valkey_client.storage[key] = mock_valkey_client.storage[key].encode("utf-8")

        loaded = await store.load(manager.session_id)

        assert loaded.session_id == manager.session_id

    @pytest.mark.asyncio
    async def test_confirmed_sessions_kept_longer(self, store, manager, mock_valkey_client):
        manager.set_contact("ada@example.com", "+1 555 010 2030")
        manager.request_payment()
        manager.apply_payment_result({"success": True})

        await store.save(manager)

        _, kwargs = mock_valkey_client.client.set.call_args
        assert kwargs["ex"] == TTLPreset.CONFIRMED_BOOKING.value

    @pytest.mark.asyncio
    async def test_custom_ttl(self, mock_valkey_client, manager):
        store = BookingSessionStore(mock_valkey_client, ttl_seconds=60)
        await store.save(manager)

        _, kwargs = mock_valkey_client.client.set.call_args
        assert kwargs["ex"] == 60

    @pytest.mark.asyncio
    async def test_load_missing(self, store):
        assert await store.load("missing") is None
        assert await store.load_manager("missing") is None

    @pytest.mark.asyncio
    async def test_load_manager(self, store, manager, clock):
        await store.save(manager)

        restored = await store.load_manager(manager.session_id, clock=clock)

        assert restored.status == BookingStatus.DRAFT
        restored.select_seat(0, "14C", 10)
        assert restored.compute_total() == manager.session.flight.fare + 10

    @pytest.mark.asyncio
    async def test_corrupt_payload(self, store, mock_valkey_client):
        mock_valkey_client.storage[store.key_for("bad")] = '{"status": "shipped"}'

        with pytest.raises(SessionStoreError):
            await store.load("bad")

    @pytest.mark.asyncio
    async def test_delete(self, store, manager):
        await store.save(manager)

        assert await store.delete(manager.session_id) is True
        assert await store.delete(manager.session_id) is False
        assert await store.load(manager.session_id) is None

    @pytest.mark.asyncio
    async def test_connection_failure(self, store, manager, mock_valkey_client):
        mock_valkey_client.client.set.side_effect = ConnectionError("refused")

        with pytest.raises(SessionStoreError):
            await store.save(manager)
