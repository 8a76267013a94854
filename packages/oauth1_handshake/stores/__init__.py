"""Temporary handshake state stores."""

from oauth1_handshake.stores.base import StateStore
from oauth1_handshake.stores.memory import MemoryStateStore
from oauth1_handshake.stores.session import SessionStateStore

__all__ = [
    'MemoryStateStore',
    'SessionStateStore',
    'StateStore',
]
