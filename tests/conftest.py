"""Shared fixtures for handshake tests."""

import typing as t
from datetime import datetime, timedelta, timezone

import pytest
from oauth1_handshake import StateTokenCodec

PROVIDER_CONFIG: t.Dict[str, t.Any] = {
    'requestTokenUrl': 'https://provider.example.com/oauth/request_token',
    'authorizationUrl': 'https://provider.example.com/oauth/authorize',
    'accessTokenUrl': 'https://provider.example.com/oauth/access_token',
    'consumerKey': 'consumer-key',
    'consumerSecret': 'consumer-secret',
}


class FakeClock:
    """Controllable clock for expiry tests."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def codec() -> StateTokenCodec:
    return StateTokenCodec(StateTokenCodec.generate_key())


@pytest.fixture
def provider_config() -> t.Dict[str, t.Any]:
    return dict(PROVIDER_CONFIG)
