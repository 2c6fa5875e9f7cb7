"""Per-tab session identity and the hold/release calls attributed to it."""

import logging
import uuid
from typing import Protocol

from boxoffice.config import settings
from boxoffice.services.seat_client import SeatClient

logger = logging.getLogger(__name__)


class SessionStorage(Protocol):
    """Tab-scoped key/value storage (the browser's sessionStorage equivalent)."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemorySessionStorage:
    """Ephemeral storage that lives as long as the owning process."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


def generate_session_id() -> str:
    return f"session_{uuid.uuid4().hex}"


class SeatHoldSessionManager:
    """
    Attributes hold/release requests to a stable per-tab session id.

    Failures are reported as False and never retried here; the next poll
    re-syncs local state.
    """

    def __init__(
        self,
        seat_client: SeatClient,
        storage: SessionStorage | None = None,
        storage_key: str | None = None,
    ) -> None:
        self.seat_client = seat_client
        self.storage = storage if storage is not None else MemorySessionStorage()
        self.storage_key = storage_key if storage_key is not None else settings.session_storage_key

    def ensure_session_id(self) -> str:
        """Return the stored session id, generating and storing one if absent."""
        existing = self.storage.get_item(self.storage_key)
        if existing:
            return existing
        generated = generate_session_id()
        self.storage.set_item(self.storage_key, generated)
        logger.debug(f"Generated seat session id {generated}")
        return generated

    @property
    def session_id(self) -> str:
        return self.ensure_session_id()

    async def hold(self, showtime_id: str, seat_ids: list[str], session_id: str | None = None) -> bool:
        """Place or extend a hold; extending uses the same endpoint."""
        return await self.seat_client.hold_seats(
            showtime_id, seat_ids, session_id or self.ensure_session_id()
        )

    async def extend(self, showtime_id: str, seat_ids: list[str], session_id: str | None = None) -> bool:
        return await self.seat_client.extend_hold(
            showtime_id, seat_ids, session_id or self.ensure_session_id()
        )

    async def release(self, showtime_id: str, seat_ids: list[str]) -> bool:
        """Drop the hold on seats; ownership is enforced by the backend."""
        return await self.seat_client.release_seats(showtime_id, seat_ids)
