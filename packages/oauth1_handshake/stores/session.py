"""State store backed by the web framework's session mapping."""

import logging
import typing as t
from datetime import timedelta

from oauth1_handshake.stores.base import StateStore
from oauth1_handshake.stores.memory import Clock, utc_now

logger = logging.getLogger(__name__)

_VALUE = 'value'
_EXPIRES = 'expires'


def _is_entry(entry: t.Any) -> bool:
    if not isinstance(entry, t.Mapping) or not isinstance(entry.get(_VALUE), str):
        return False
    expires = entry.get(_EXPIRES)
    return isinstance(expires, (int, float)) and not isinstance(expires, bool)


class SessionStateStore(StateStore):
    """Keeps entries inside the session mapping itself.

    With a cookie-backed session the state travels with the client, so any
    server instance can complete the handshake. The expiry is stored next to
    the value as a POSIX timestamp so the entry stays JSON-serializable.
    """

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock

    def put(self, context: t.MutableMapping[str, t.Any], key: str, value: str, ttl: timedelta) -> None:
        context[key] = {_VALUE: value, _EXPIRES: (self._clock() + ttl).timestamp()}

    def get(self, context: t.MutableMapping[str, t.Any], key: str) -> t.Optional[str]:
        entry = context.get(key)
        if entry is None:
            return None

        if not _is_entry(entry):
            logger.warning('Ignoring malformed session entry %r', key)
            context.pop(key, None)
            return None

        if self._clock().timestamp() >= entry[_EXPIRES]:
            context.pop(key, None)
            return None

        return entry[_VALUE]

    def delete(self, context: t.MutableMapping[str, t.Any], key: str) -> None:
        context.pop(key, None)
