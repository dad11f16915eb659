# backend/creatoraide/services/persistence.py
"""Key-value persistence port for onboarding snapshots and its adapters.

The progress store only needs get/set/delete by string key, so the concrete
backend (in-process dict, SQL table, Redis) is swappable.
"""
import logging
import threading
from functools import lru_cache
from typing import Callable, Dict, Optional, Protocol

import redis
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from creatoraide.exceptions import PersistenceWriteError
from creatoraide.models.progress_snapshot import ProgressSnapshot

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Process-local store, used for tests and the "memory" backend."""

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class DatabaseKeyValueStore:
    """Stores each value as one row of the ``progress_snapshots`` table.

    Every ``set`` replaces the whole payload and commits, so a reader never
    sees a partially written snapshot.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.query(ProgressSnapshot).filter(ProgressSnapshot.key == key).first()
        return row.payload if row else None

    def set(self, key: str, value: str) -> None:
        try:
            row = self.db.query(ProgressSnapshot).filter(ProgressSnapshot.key == key).first()
            if row:
                row.payload = value
            else:
                self.db.add(ProgressSnapshot(key=key, payload=value))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceWriteError(f"Failed to write {key}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.db.query(ProgressSnapshot).filter(ProgressSnapshot.key == key).delete(
                synchronize_session=False
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceWriteError(f"Failed to delete {key}: {e}") from e


class RedisKeyValueStore:
    """Remote store backed by Redis string keys."""

    def __init__(self, client: redis.Redis):
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> "RedisKeyValueStore":
        return cls(redis.from_url(url, decode_responses=True))

    def get(self, key: str) -> Optional[str]:
        return self._redis.get(key)

    def set(self, key: str, value: str) -> None:
        try:
            self._redis.set(key, value)
        except redis.RedisError as e:
            raise PersistenceWriteError(f"Failed to write {key}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(key)
        except redis.RedisError as e:
            raise PersistenceWriteError(f"Failed to delete {key}: {e}") from e


_memory_store: Optional[InMemoryKeyValueStore] = None


def get_memory_store() -> InMemoryKeyValueStore:
    """Shared in-memory store for the "memory" backend."""
    global _memory_store
    if _memory_store is None:
        _memory_store = InMemoryKeyValueStore()
    return _memory_store


@lru_cache
def get_redis_store(url: str) -> RedisKeyValueStore:
    return RedisKeyValueStore.from_url(url)


def build_key_value_store(
    backend: str,
    db: Optional[Session] = None,
    redis_url: Optional[str] = None,
    memory_factory: Callable[[], InMemoryKeyValueStore] = get_memory_store,
) -> KeyValueStore:
    """Create the configured persistence adapter.

    Args:
        backend: One of "database", "redis" or "memory"
        db: Session for the database backend
        redis_url: Connection URL for the redis backend
        memory_factory: Provider of the in-memory store

    Returns:
        A KeyValueStore implementation
    """
    if backend == "database":
        if db is None:
            raise ValueError("database backend requires a session")
        return DatabaseKeyValueStore(db)
    if backend == "redis":
        if not redis_url:
            raise ValueError("redis backend requires redis_url")
        return get_redis_store(redis_url)
    if backend == "memory":
        return memory_factory()
    raise ValueError(f"Unknown progress backend: {backend}")
