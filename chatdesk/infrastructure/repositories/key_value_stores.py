"""Key-value backends for collection snapshots."""
import logging
from threading import Lock
from typing import Callable, Dict, Optional
import redis

from chatdesk.domain.exceptions import PersistenceFailure
from chatdesk.domain.interfaces.key_value_store import IKeyValueStore


class RedisKeyValueStore(IKeyValueStore):
    """
    Redis-backed key-value store.

    Snapshots are stored without TTL: they are the durable copy of the
    console state.
    """

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        connect: Optional[Callable[[], Optional[redis.Redis]]] = None,
    ):
        """
        Initialize the store.

        Args:
            redis_client: Redis client instance (Dependency Injection)
            connect: Called before each operation while no client is set;
                operations fail with PersistenceFailure until it returns one
        """
        self.redis = redis_client
        self._connect = connect
        self._logger = logging.getLogger(__name__)

    def _client(self) -> Optional[redis.Redis]:
        if self.redis is None and self._connect is not None:
            self.redis = self._connect()
            if self.redis is not None:
                self._logger.info("Redis client connected, snapshot persistence resumed")
        return self.redis

    def get(self, key: str) -> Optional[str]:
        client = self._client()
        if not client:
            raise PersistenceFailure(key, "read", RuntimeError("Redis client not initialized"))

        try:
            return client.get(key)
        except redis.RedisError as e:
            raise PersistenceFailure(key, "read", e) from e

    def set(self, key: str, value: str) -> None:
        client = self._client()
        if not client:
            raise PersistenceFailure(key, "write", RuntimeError("Redis client not initialized"))

        try:
            client.set(key, value)
            self._logger.debug(f"Stored {len(value)} bytes under {key}")
        except redis.RedisError as e:
            raise PersistenceFailure(key, "write", e) from e

    def ping(self) -> bool:
        client = self._client()
        if not client:
            return False
        try:
            return bool(client.ping())
        except redis.RedisError as e:
            self._logger.error(f"Redis health check failed: {e}")
            return False


class InMemoryKeyValueStore(IKeyValueStore):
    """Process-local store used for tests and the ``memory`` backend."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._lock = Lock()
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def ping(self) -> bool:
        return True

    def keys(self):
        with self._lock:
            return sorted(self._data)
