"""Tests for the pending state codec."""

import time
from datetime import timedelta
from unittest.mock import patch

import pytest
from cryptography.fernet import Fernet
from oauth1_handshake import ConfigurationError, RequestToken, StateCorruptedError, StateTokenCodec


@pytest.mark.parametrize(
    'token',
    [
        RequestToken(token='abc', secret='s3cr3t'),
        RequestToken(token='with,comma', secret='and,another'),
        RequestToken(token='12:colon:prefix', secret=''),
        RequestToken(token='', secret='empty-token'),
        RequestToken(token='ünïcode', secret='sécret✓'),
    ],
)
def test_round_trip(codec: StateTokenCodec, token: RequestToken) -> None:
    """Decoding an encoded token returns the same token."""
    assert codec.decode(codec.encode(token)) == token


def test_decode_none_means_nothing_pending(codec: StateTokenCodec) -> None:
    assert codec.decode(None) is None


def test_secret_is_not_stored_in_clear(codec: StateTokenCodec) -> None:
    encoded = codec.encode(RequestToken(token='abc', secret='s3cr3t'))
    assert not encoded.startswith('3:abc')
    assert 's3cr3t' not in encoded


def test_encoding_is_randomized(codec: StateTokenCodec) -> None:
    """The same token encodes differently on every call."""
    token = RequestToken(token='abc', secret='s3cr3t')
    assert codec.encode(token) != codec.encode(token)


class TestCorruptedState:
    """Garbled input raises instead of producing a bogus token."""

    def test_tampered_ciphertext(self, codec: StateTokenCodec) -> None:
        encoded = codec.encode(RequestToken(token='abc', secret='s3cr3t'))
        middle = len(encoded) // 2
        replacement = 'A' if encoded[middle] != 'A' else 'B'
        tampered = encoded[:middle] + replacement + encoded[middle + 1 :]

        with pytest.raises(StateCorruptedError):
            codec.decode(tampered)

    @pytest.mark.parametrize('prefix', ['3:evl', '3:abc', '0:'])
    def test_token_outside_ciphertext_is_rejected(self, codec: StateTokenCodec, prefix: str) -> None:
        """A token spliced in front of valid ciphertext never decodes."""
        encoded = codec.encode(RequestToken(token='abc', secret='s3cr3t'))

        with pytest.raises(StateCorruptedError):
            codec.decode(prefix + encoded)

    def test_replaced_leading_characters(self, codec: StateTokenCodec) -> None:
        encoded = codec.encode(RequestToken(token='abc', secret='s3cr3t'))

        with pytest.raises(StateCorruptedError):
            codec.decode('3:evl' + encoded[5:])

    @pytest.mark.parametrize('raw', ['', 'garbage', 'x:abc', '-1:abc', '10:abc', '3:abc', '²:abc', 'café'])
    def test_malformed(self, codec: StateTokenCodec, raw: str) -> None:
        with pytest.raises(StateCorruptedError):
            codec.decode(raw)

    @pytest.mark.parametrize('payload', ['', 'garbage', '²:abc', '-1:abc', '10:abc'])
    def test_malformed_payload_under_valid_key(self, payload: str) -> None:
        """Authentic ciphertext with a garbled payload is still rejected."""
        key = StateTokenCodec.generate_key()
        raw = Fernet(key).encrypt(payload.encode('utf-8')).decode('ascii')

        with pytest.raises(StateCorruptedError):
            StateTokenCodec(key).decode(raw)

    def test_wrong_key(self, codec: StateTokenCodec) -> None:
        encoded = codec.encode(RequestToken(token='abc', secret='s3cr3t'))
        other = StateTokenCodec(StateTokenCodec.generate_key())

        with pytest.raises(StateCorruptedError):
            other.decode(encoded)

    def test_older_than_max_age(self, codec: StateTokenCodec) -> None:
        encoded = codec.encode(RequestToken(token='abc', secret='s3cr3t'))
        later = time.time() + timedelta(minutes=16).total_seconds()

        with patch('cryptography.fernet.time.time', return_value=later):
            with pytest.raises(StateCorruptedError):
                codec.decode(encoded, max_age=timedelta(minutes=15))

    def test_within_max_age(self, codec: StateTokenCodec) -> None:
        token = RequestToken(token='abc', secret='s3cr3t')
        assert codec.decode(codec.encode(token), max_age=timedelta(minutes=15)) == token


class TestKeys:
    def test_rotation(self) -> None:
        """State encoded under the previous key still decodes after rotation."""
        old_key = StateTokenCodec.generate_key()
        new_key = StateTokenCodec.generate_key()
        token = RequestToken(token='abc', secret='s3cr3t')

        encoded = StateTokenCodec(old_key).encode(token)
        assert StateTokenCodec([new_key, old_key]).decode(encoded) == token

    def test_bytes_key(self) -> None:
        key = StateTokenCodec.generate_key().encode('ascii')
        token = RequestToken(token='abc', secret='s3cr3t')

        codec = StateTokenCodec(key)
        assert codec.decode(codec.encode(token)) == token

    @pytest.mark.parametrize('keys', ['not-a-fernet-key', [], ['short']])
    def test_invalid_keys(self, keys: object) -> None:
        with pytest.raises(ConfigurationError):
            StateTokenCodec(keys)  # type: ignore[arg-type]
