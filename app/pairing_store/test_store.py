import json
from datetime import datetime, timezone

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.models.location import LocationPoint
from app.models.pairing import Pairing
from app.pairing_service.errors import StorageError
from app.pairing_store.store import PairingStore, pairing_key


@pytest.fixture
def fake_redis():
    client = fakeredis.FakeRedis(decode_responses=True)
    client.flushall()
    return client


@pytest.fixture
def pairing():
    return Pairing(
        locations={
            "seattle": LocationPoint(city="Seattle, WA", coordinates=(47.6062, -122.3321)),
            "portland": LocationPoint(city="Portland, OR", coordinates=(45.5152, -122.6784)),
        },
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


class BrokenRedis:
    def _fail(self, *args, **kwargs):
        raise RedisConnectionError("connection refused")

    set = get = delete = mget = scan_iter = _fail


def test_pairing_key():
    assert pairing_key("1700000000000") == "pairing:1700000000000"


def test_create_and_get_pairing(fake_redis, pairing):
    store = PairingStore(fake_redis)
    pairing_id = store.create(pairing)
    assert store.get(pairing_id) == {
        "createdAt": "2024-01-01T00:00:00+00:00",
        "seattle": {"city": "Seattle, WA", "coordinates": [47.6062, -122.3321]},
        "portland": {"city": "Portland, OR", "coordinates": [45.5152, -122.6784]},
    }


def test_create_bumps_id_on_collision(fake_redis, pairing, monkeypatch):
    monkeypatch.setattr("app.pairing_store.store.time.time_ns", lambda: 5_000_000_000)
    store = PairingStore(fake_redis)
    first = store.create(pairing)
    second = store.create(pairing)
    assert first == "5000"
    assert second == "5001"


def test_list_all_returns_records_oldest_first(fake_redis, pairing):
    store = PairingStore(fake_redis)
    fake_redis.set(pairing_key("200"), json.dumps(pairing.to_record()))
    fake_redis.set(pairing_key("1000"), json.dumps(pairing.to_record()))
    fake_redis.set(pairing_key("30"), json.dumps(pairing.to_record()))
    assert [record["id"] for record in store.list_all()] == ["30", "200", "1000"]


def test_list_all_skips_unreadable_values(fake_redis, pairing):
    store = PairingStore(fake_redis)
    fake_redis.set(pairing_key("1"), "{not json")
    fake_redis.set(pairing_key("2"), json.dumps([1, 2]))
    fake_redis.set(pairing_key("3"), json.dumps(pairing.to_record()))
    records = store.list_all()
    assert [record["id"] for record in records] == ["3"]


def test_list_all_ignores_other_keys(fake_redis):
    store = PairingStore(fake_redis)
    fake_redis.set("session:abc", "{}")
    assert store.list_all() == []


def test_get_missing_returns_none(fake_redis):
    store = PairingStore(fake_redis)
    assert store.get("404") is None


def test_delete_pairing(fake_redis, pairing):
    store = PairingStore(fake_redis)
    pairing_id = store.create(pairing)
    assert store.delete(pairing_id) is True
    assert store.get(pairing_id) is None
    assert store.delete(pairing_id) is False


def test_redis_failures_raise_storage_error(pairing):
    store = PairingStore(BrokenRedis())
    with pytest.raises(StorageError):
        store.create(pairing)
    with pytest.raises(StorageError):
        store.list_all()
    with pytest.raises(StorageError):
        store.get("1")
    with pytest.raises(StorageError):
        store.delete("1")
