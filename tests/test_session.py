from datetime import datetime

import pytest

from portal.auth.session import SessionData, SessionStore


@pytest.fixture()
def store(sessions_collection):
    return SessionStore(sessions_collection, secret="s1", store_secret="s2", ttl_seconds=3600)


def test_create_then_load_returns_identity_snapshot(store, sessions_collection):
    token = store.create("Ann", "ann@x.com")
    assert store.load(token) == SessionData(name="Ann", email="ann@x.com")

    doc = sessions_collection.find_one({})
    assert doc["_id"] != token
    assert (doc["expires_at"] - doc["created_at"]).total_seconds() == pytest.approx(3600, abs=1)


def test_missing_or_tampered_token_is_absent(store):
    token = store.create("Ann", "ann@x.com")
    assert store.load("") is None
    assert store.load(token + "x") is None
    assert store.load("garbage") is None


def test_token_signed_with_other_secret_is_rejected(sessions_collection, store):
    token = store.create("Ann", "ann@x.com")
    other = SessionStore(sessions_collection, secret="other", store_secret="s2")
    assert other.load(token) is None


def test_expired_entry_is_treated_as_absent(store, sessions_collection):
    token = store.create("Ann", "ann@x.com")
    sessions_collection.update_many({}, {"$set": {"expires_at": datetime(2000, 1, 1)}})
    assert store.load(token) is None


def test_tampered_payload_is_treated_as_absent(store, sessions_collection):
    token = store.create("Ann", "ann@x.com")
    sessions_collection.update_many({}, {"$set": {"data": "eyJuYW1lIjoiRXZlIn0.forged"}})
    assert store.load(token) is None


def test_destroy_removes_the_entry(store, sessions_collection):
    token = store.create("Ann", "ann@x.com")
    assert store.destroy(token) is True
    assert store.load(token) is None
    assert sessions_collection.count_documents({}) == 0
    assert store.destroy(token) is False


def test_store_requires_secrets(sessions_collection):
    with pytest.raises(RuntimeError):
        SessionStore(sessions_collection, secret="", store_secret="s2")


def test_payload_sealed_with_other_store_secret_is_rejected(sessions_collection, store):
    token = store.create("Ann", "ann@x.com")
    other = SessionStore(sessions_collection, secret="s1", store_secret="different")
    assert other.load(token) is None
