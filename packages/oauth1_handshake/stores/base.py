"""Abstract base class for temporary handshake state stores."""

import typing as t
from abc import ABC, abstractmethod
from datetime import timedelta


class StateStore(ABC):
    """Abstract store for pending handshake state.

    Entries are short-lived (15 minutes for the request token) and are bound to
    the session context that created them: an entry put under one context is
    never visible from another.

    Note:
        What a context is depends on the implementation, e.g. the web
        framework's session mapping or a session id.
    """

    @abstractmethod
    def put(self, context: t.Any, key: str, value: str, ttl: timedelta) -> None:
        """Store a value.

        Args:
            context: Session context the value belongs to.
            key: Entry key.
            value: Opaque string to store.
            ttl: Time after which the entry is no longer returned.
        """

    @abstractmethod
    def get(self, context: t.Any, key: str) -> t.Optional[str]:
        """Retrieve a value.

        Args:
            context: Session context the value belongs to.
            key: Entry key.

        Returns:
            The stored value, or None if absent or expired.
        """

    @abstractmethod
    def delete(self, context: t.Any, key: str) -> None:
        """Delete a value. Deleting a missing entry is not an error.

        Args:
            context: Session context the value belongs to.
            key: Entry key.
        """
