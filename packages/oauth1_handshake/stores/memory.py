"""In-memory state store for development."""

import typing as t
from datetime import datetime, timedelta, timezone

from oauth1_handshake.stores.base import StateStore

Clock = t.Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStateStore(StateStore):
    """In-memory state store keyed by a hashable session id.

    Warning:
        This store is not suitable for production use in multi-process
        or distributed environments. Use a persistent store instead.
    """

    def __init__(self, clock: Clock = utc_now) -> None:
        """Initialize memory state store.

        Args:
            clock: Returns the current time; replace to simulate time passing.
        """
        self._entries: t.Dict[t.Tuple[t.Hashable, str], t.Tuple[str, datetime]] = {}
        self._clock = clock

    def put(self, context: t.Hashable, key: str, value: str, ttl: timedelta) -> None:
        """Store a value."""
        self._cleanup_expired_entries()
        self._entries[(context, key)] = (value, self._clock() + ttl)

    def get(self, context: t.Hashable, key: str) -> t.Optional[str]:
        """Retrieve a value."""
        self._cleanup_expired_entries()
        entry = self._entries.get((context, key))
        return entry[0] if entry else None

    def delete(self, context: t.Hashable, key: str) -> None:
        """Delete a value."""
        self._entries.pop((context, key), None)

    def _cleanup_expired_entries(self) -> None:
        """Remove expired entries."""
        now = self._clock()
        expired = [entry_key for entry_key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for entry_key in expired:
            del self._entries[entry_key]
