"""Tests for temporary state stores."""

from datetime import timedelta

import pytest
from oauth1_handshake.stores import MemoryStateStore, SessionStateStore, StateStore

from tests.conftest import FakeClock

TTL = timedelta(minutes=15)


@pytest.fixture(params=['memory', 'session'])
def store_and_contexts(request: pytest.FixtureRequest, clock: FakeClock) -> tuple:
    """A store plus two distinct session contexts it accepts."""
    if request.param == 'memory':
        return MemoryStateStore(clock=clock), 'session-1', 'session-2'
    return SessionStateStore(clock=clock), {}, {}


class TestStateStoreContract:
    """Behaviour shared by all store implementations."""

    def test_put_then_get(self, store_and_contexts: tuple) -> None:
        store, context, _ = store_and_contexts
        store.put(context, 'key', 'value', TTL)
        assert store.get(context, 'key') == 'value'

    def test_missing_entry(self, store_and_contexts: tuple) -> None:
        store, context, _ = store_and_contexts
        assert store.get(context, 'key') is None

    def test_entry_expires(self, store_and_contexts: tuple, clock: FakeClock) -> None:
        store, context, _ = store_and_contexts
        store.put(context, 'key', 'value', TTL)

        clock.advance(TTL - timedelta(seconds=1))
        assert store.get(context, 'key') == 'value'

        clock.advance(timedelta(seconds=1))
        assert store.get(context, 'key') is None

    def test_entries_are_bound_to_their_context(self, store_and_contexts: tuple) -> None:
        store, context, other_context = store_and_contexts
        store.put(context, 'key', 'value', TTL)
        assert store.get(other_context, 'key') is None

    def test_put_overwrites(self, store_and_contexts: tuple) -> None:
        store, context, _ = store_and_contexts
        store.put(context, 'key', 'first', TTL)
        store.put(context, 'key', 'second', TTL)
        assert store.get(context, 'key') == 'second'

    def test_delete(self, store_and_contexts: tuple) -> None:
        store, context, _ = store_and_contexts
        store.put(context, 'key', 'value', TTL)
        store.delete(context, 'key')
        assert store.get(context, 'key') is None

    def test_delete_missing_entry(self, store_and_contexts: tuple) -> None:
        store, context, _ = store_and_contexts
        store.delete(context, 'key')


def test_state_store_is_abstract() -> None:
    with pytest.raises(TypeError):
        StateStore()  # type: ignore[abstract]


class TestSessionStateStore:
    def test_entry_lives_in_session(self, clock: FakeClock) -> None:
        session: dict = {}
        SessionStateStore(clock=clock).put(session, 'key', 'value', TTL)

        assert session == {'key': {'value': 'value', 'expires': (clock.now + TTL).timestamp()}}

    def test_expired_entry_is_removed_from_session(self, clock: FakeClock) -> None:
        session: dict = {}
        store = SessionStateStore(clock=clock)
        store.put(session, 'key', 'value', TTL)

        clock.advance(TTL)
        assert store.get(session, 'key') is None
        assert 'key' not in session

    @pytest.mark.parametrize(
        'entry',
        [
            'not-a-state-entry',
            {'value': 'v'},
            {'expires': 1e12},
            {'value': 'v', 'expires': 'soon'},
            {'value': 'v', 'expires': None},
            {'value': 'v', 'expires': True},
            {'value': 42, 'expires': 1e12},
        ],
    )
    def test_malformed_entry_is_ignored(self, clock: FakeClock, entry: object, caplog: pytest.LogCaptureFixture) -> None:
        session = {'key': entry}
        assert SessionStateStore(clock=clock).get(session, 'key') is None
        assert 'key' not in session
        assert 'malformed session entry' in caplog.text


def test_memory_store_cleans_up_expired_entries(clock: FakeClock) -> None:
    store = MemoryStateStore(clock=clock)
    store.put('session-1', 'key', 'value', TTL)
    clock.advance(TTL)
    store.put('session-2', 'key', 'value', TTL)

    assert list(store._entries) == [('session-2', 'key')]
