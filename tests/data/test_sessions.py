"""Tests for the Redis-backed collector session store."""

from decimal import Decimal

import pytest

from mortgage_calc.data.sessions import SessionConflictError, SessionStore
from mortgage_calc.engine import collector
from mortgage_calc.engine.collector import Step


@pytest.fixture
def store(redis_client):
    return SessionStore(redis_client, ttl_seconds=60)


class TestSessionStore:
    def test_missing(self, store):
        assert store.get("nobody") is None

    def test_put_and_get(self, store):
        session = collector.start("user-1").session
        store.put(session)
        assert store.get("user-1") == session

    def test_keyed_by_user(self, store):
        store.put(collector.start("user-1").session)
        assert store.get("user-2") is None

    def test_put_replaces(self, store):
        session = collector.start("user-1").session
        store.put(session)
        advanced = collector.advance(session, "5000000").session
        store.put(advanced)
        assert store.get("user-1") == advanced

    def test_put_sets_ttl(self, store, redis_client):
        store.put(collector.start("user-1").session)
        assert 0 < redis_client.ttl(SessionStore.key("user-1")) <= 60

    def test_expired_session_is_gone(self, store, redis_client):
        store.put(collector.start("user-1").session)
        # What Redis does once the TTL runs out
        redis_client.delete(SessionStore.key("user-1"))
        assert store.get("user-1") is None

    def test_discard(self, store):
        store.put(collector.start("user-1").session)
        assert store.discard("user-1") is True
        assert store.discard("user-1") is False
        assert store.get("user-1") is None


class TestAdvance:
    def test_without_session(self, store):
        assert store.advance("user-1", "5000000") is None

    def test_stores_next_step(self, store, redis_client):
        store.put(collector.start("user-1").session)
        outcome = store.advance("user-1", "5 000 000")
        assert outcome.accepted
        stored = store.get("user-1")
        assert stored.step is Step.PROPERTY_TYPE
        assert stored.property_price == Decimal("5000000")
        assert redis_client.ttl(SessionStore.key("user-1")) > 0

    def test_rejected_answer_keeps_session(self, store):
        session = collector.start("user-1").session
        store.put(session)
        outcome = store.advance("user-1", "lots")
        assert not outcome.accepted
        assert store.get("user-1") == session

    def test_completion_removes_session(self, store):
        store.put(collector.start("user-1").session)
        for answer in ["5000000", "1", "1000000", "no", "20"]:
            store.advance("user-1", answer)
        outcome = store.advance("user-1", "8.5")
        assert outcome.session.is_complete
        assert store.get("user-1") is None

    def test_concurrent_write_conflicts(self, store, monkeypatch):
        store.put(collector.start("user-1").session)
        other = SessionStore(store.client, ttl_seconds=60)
        advance = collector.advance

        def racing_advance(session, answer):
            # Another request stores its answer while this one is in flight
            other.put(advance(session, "7000000").session)
            return advance(session, answer)

        monkeypatch.setattr(collector, "advance", racing_advance)
        with pytest.raises(SessionConflictError):
            store.advance("user-1", "5000000")
        monkeypatch.undo()

        assert store.get("user-1").property_price == Decimal("7000000")
