"""Redis storage for pairing records."""

import json
import os
import time
from functools import partial

from redis import Redis
from redis.exceptions import RedisError

from app.logging_config import logger
from app.models.pairing import Pairing
from app.pairing_service.errors import StorageError

redis_client = Redis(
    host=os.getenv("REDIS_HOST", "redis"),
    port=int(os.getenv("REDIS_PORT", "6379")),
    db=int(os.getenv("REDIS_DB", "0")),
    decode_responses=True,
)
KEY_PREFIX = "pairing:"


def pairing_key(pairing_id: str) -> str:
    """Return the Redis key holding a pairing.

    Args:
        pairing_id: Opaque pairing identifier.

    Returns:
        Redis key for the pairing.
    """
    return f"{KEY_PREFIX}{pairing_id}"


def _id_sort_key(pairing_id: str):
    # ids are millisecond timestamps, so shorter strings are older
    return len(pairing_id), pairing_id


def _decode(pairing_id: str, raw: str | None) -> dict | None:
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("STORED_PAIRING_UNREADABLE", id=pairing_id, error=str(exc))
        return None
    if not isinstance(value, dict):
        logger.warning("STORED_PAIRING_NOT_OBJECT", id=pairing_id)
        return None
    return value


class PairingStore:
    """Store for creating, listing and deleting pairing records.

    Records live until deleted; nothing is expired.
    """

    def __init__(self, client):
        self.redis_client: Redis = client

    def create(self, pairing: Pairing) -> str:
        """Save a pairing under a new timestamp id.

        Args:
            pairing: Validated pairing to store.

        Returns:
            The id the pairing was stored under.

        Raises:
            StorageError: If Redis fails.
        """
        payload = json.dumps(pairing.to_record())
        pairing_id = time.time_ns() // 1_000_000
        try:
            # bump the id until it is free so pairings made in the same ms both persist
            while not self.redis_client.set(pairing_key(str(pairing_id)), payload, nx=True):
                pairing_id += 1
        except RedisError as exc:
            logger.error("REDIS_SAVE_PAIRING_FAILED", error=str(exc))
            raise StorageError("Failed to create pairing") from exc
        logger.info("PAIRING_SAVED", id=str(pairing_id))
        return str(pairing_id)

    def list_all(self) -> list[dict]:
        """List every stored record, oldest first.

        Returns:
            ``{"id": ..., "pairing": {...}}`` dicts; unreadable values are skipped.

        Raises:
            StorageError: If Redis fails.
        """
        try:
            keys = list(self.redis_client.scan_iter(match=f"{KEY_PREFIX}*"))
            ids = sorted((key[len(KEY_PREFIX):] for key in keys), key=_id_sort_key)
            values = self.redis_client.mget([pairing_key(i) for i in ids]) if ids else []
        except RedisError as exc:
            logger.error("REDIS_LIST_PAIRINGS_FAILED", error=str(exc))
            raise StorageError("Failed to retrieve pairings") from exc

        records = []
        for pairing_id, raw in zip(ids, values):
            pairing = _decode(pairing_id, raw)
            if pairing is not None:
                records.append({"id": pairing_id, "pairing": pairing})
        return records

    def get(self, pairing_id: str) -> dict | None:
        """Get one stored pairing.

        Args:
            pairing_id: Pairing identifier.

        Returns:
            The flat pairing dict if present, otherwise None.
        """
        try:
            raw = self.redis_client.get(pairing_key(pairing_id))
        except RedisError as exc:
            logger.error("REDIS_GET_PAIRING_FAILED", id=pairing_id, error=str(exc))
            raise StorageError("Failed to retrieve pairing") from exc
        return _decode(pairing_id, raw)

    def delete(self, pairing_id: str) -> bool:
        """Delete a pairing; returns True when a record was removed."""
        try:
            removed = self.redis_client.delete(pairing_key(pairing_id))
        except RedisError as exc:
            logger.error("REDIS_DELETE_PAIRING_FAILED", id=pairing_id, error=str(exc))
            raise StorageError("Failed to delete pairing") from exc
        return bool(removed)


pairing_store = partial(PairingStore, client=redis_client)
