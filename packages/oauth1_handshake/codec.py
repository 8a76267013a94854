"""Encoding of pending request tokens for client-side storage."""

import re
import typing as t
from datetime import timedelta

from cryptography.fernet import Fernet, InvalidToken, MultiFernet

from oauth1_handshake.exceptions import ConfigurationError, StateCorruptedError
from oauth1_handshake.models import RequestToken

_LENGTH_PREFIX = re.compile(r'([0-9]+):')

KeyType = t.Union[str, bytes]


class StateTokenCodec:
    """Turns a :class:`RequestToken` into an opaque string and back.

    The token and secret are joined as ``<len(token)>:<token><secret>`` so no
    character in either can be confused with the boundary, and the whole payload
    is encrypted with Fernet. Fernet authenticates the ciphertext, so any edit to
    the stored string is detected, and randomizes it on every call.

    Keys are process-wide configuration. Pass several keys to rotate: the first
    one encrypts, all of them are tried when decrypting.
    """

    def __init__(self, keys: t.Union[KeyType, t.Sequence[KeyType]]) -> None:
        """Initialize the codec.

        Args:
            keys: One Fernet key, or a sequence of keys with the current key first.

        Raises:
            ConfigurationError: If no key is given or a key is not a valid Fernet key.
        """
        if isinstance(keys, (str, bytes)):
            keys = [keys]
        if not keys:
            raise ConfigurationError('At least one state encryption key is required')

        try:
            self._fernet = MultiFernet([Fernet(key) for key in keys])
        except (TypeError, ValueError) as e:
            raise ConfigurationError('Invalid state encryption key') from e

    @staticmethod
    def generate_key() -> str:
        """Generate a fresh key suitable for this codec."""
        return Fernet.generate_key().decode('ascii')

    def encode(self, token: RequestToken) -> str:
        payload = f'{len(token.token)}:{token.token}{token.secret}'
        return self._fernet.encrypt(payload.encode('utf-8')).decode('ascii')

    def decode(self, raw: t.Optional[str], max_age: t.Optional[timedelta] = None) -> t.Optional[RequestToken]:
        """Decode a string produced by :meth:`encode`.

        Args:
            raw: Encoded state, or None when nothing is pending.
            max_age: Reject ciphertext older than this.

        Returns:
            The request token, or None if ``raw`` is None.

        Raises:
            StateCorruptedError: If the state is malformed, tampered with,
                encrypted under an unknown key, or older than ``max_age``.
        """
        if raw is None:
            return None

        ttl = int(max_age.total_seconds()) if max_age is not None else None
        try:
            payload = self._fernet.decrypt(raw.encode('ascii'), ttl=ttl).decode('utf-8')
        except (InvalidToken, UnicodeError) as e:
            raise StateCorruptedError('Pending state could not be decrypted') from e

        match = _LENGTH_PREFIX.match(payload)
        if match is None:
            raise StateCorruptedError('Malformed pending state: missing length prefix')

        length = int(match.group(1))
        rest = payload[match.end() :]
        if len(rest) < length:
            raise StateCorruptedError('Malformed pending state: truncated')

        return RequestToken(token=rest[:length], secret=rest[length:])
