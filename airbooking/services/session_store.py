"""
Valkey-backed persistence for booking sessions.

Sessions are stored as JSON blobs keyed by session id, so a traveller's
booking survives page reloads and moves between application workers. Drafts
expire with the checkout TTL; confirmed and cancelled sessions are kept
longer for receipts and support lookups.
"""

import logging
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from valkey.exceptions import ConnectionError, TimeoutError, ResponseError

from ..cache.client import ValkeyClient
from ..cache.config import SessionStoreError
from ..cache.utils import CacheKeyBuilder, CacheKeyPrefix, TTLPreset
from ..models.enums import BookingStatus
from ..models.session import BookingSessionModel
from .booking_session_manager import BookingSessionManager

logger = logging.getLogger(__name__)


class BookingSessionStore:
    """
    Save, load and delete booking sessions in Valkey.

    The round trip is lossless: every session field, including Decimal
    prices and timestamps, is restored exactly.
    """

    def __init__(
        self,
        valkey_client: ValkeyClient,
        ttl_seconds: Union[int, TTLPreset] = TTLPreset.BOOKING_SESSION,
        final_ttl_seconds: Union[int, TTLPreset] = TTLPreset.CONFIRMED_BOOKING,
    ):
        """
        Initialize the store.

        Args:
            valkey_client: Connected (or connectable) ValkeyClient
            ttl_seconds: Expiry for draft and pending sessions
            final_ttl_seconds: Expiry for confirmed and cancelled sessions
        """
        self.valkey_client = valkey_client
        self.ttl_seconds = int(ttl_seconds)
        self.final_ttl_seconds = int(final_ttl_seconds)

    @staticmethod
    def key_for(session_id: str) -> str:
        return CacheKeyBuilder.build_key(CacheKeyPrefix.BOOKING_SESSION, session_id)

    def _ttl_for(self, session: BookingSessionModel) -> int:
        if session.status in (BookingStatus.CONFIRMED, BookingStatus.CANCELLED):
            return self.final_ttl_seconds
        return self.ttl_seconds

    async def save(self, session: Union[BookingSessionModel, BookingSessionManager]) -> str:
        """
        Persist a session (or the session held by a manager).

        Returns:
            str: The cache key written

        Raises:
            SessionStoreError: If Valkey rejects the write
        """
        if isinstance(session, BookingSessionManager):
            session = session.session

        key = self.key_for(session.session_id)
        ttl = self._ttl_for(session)
        try:
            await self.valkey_client.ensure_connection()
            self.valkey_client.client.set(key, session.model_dump_json(), ex=ttl)
        except (ConnectionError, TimeoutError, ResponseError) as e:
            logger.error(f"Failed to save session {session.session_id}: {e}")
            raise SessionStoreError(f"Failed to save session {session.session_id}: {e}") from e

        logger.info(f"Saved session {session.session_id} ({session.status.value}, ttl={ttl}s)")
        return key

    async def load(self, session_id: str) -> Optional[BookingSessionModel]:
        """
        Load a session by id.

        Returns:
            Optional[BookingSessionModel]: None when missing or expired

        Raises:
            SessionStoreError: On Valkey failure or a corrupt payload
        """
        key = self.key_for(session_id)
        try:
            await self.valkey_client.ensure_connection()
            raw: Any = self.valkey_client.client.get(key)
        except (ConnectionError, TimeoutError, ResponseError) as e:
            logger.error(f"Failed to load session {session_id}: {e}")
            raise SessionStoreError(f"Failed to load session {session_id}: {e}") from e

        if raw is None:
            logger.info(f"Session {session_id} not found")
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")

        try:
            return BookingSessionModel.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.error(f"Corrupt payload for session {session_id}: {e}")
            raise SessionStoreError(f"Corrupt payload for session {session_id}") from e

    async def load_manager(self, session_id: str, **manager_kwargs: Any) -> Optional[BookingSessionManager]:
        """Load a session and wrap it in a fresh BookingSessionManager."""
        session = await self.load(session_id)
        if session is None:
            return None
        return BookingSessionManager(session=session, **manager_kwargs)

    async def delete(self, session_id: str) -> bool:
        """
        Delete a session.

        Returns:
            bool: True if a session was removed
        """
        try:
            await self.valkey_client.ensure_connection()
            removed = self.valkey_client.client.delete(self.key_for(session_id))
        except (ConnectionError, TimeoutError, ResponseError) as e:
            logger.error(f"Failed to delete session {session_id}: {e}")
            raise SessionStoreError(f"Failed to delete session {session_id}: {e}") from e

        logger.info(f"Deleted session {session_id}")
        return bool(removed)
