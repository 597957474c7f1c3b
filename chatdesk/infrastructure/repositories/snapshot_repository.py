"""Persistence adapter storing each collection as one JSON snapshot (Repository Pattern)."""
import json
import logging
from threading import Lock
from typing import Any, Callable, Dict, List, Sequence, Set

from chatdesk.domain.entities import Chat, Company, ScheduledMessage, User
from chatdesk.domain.exceptions import PersistenceFailure
from chatdesk.domain.interfaces.key_value_store import IKeyValueStore
from chatdesk.infrastructure import seed
from chatdesk.middleware.monitoring import track_persistence_failure

USERS = "users"
COMPANIES = "companies"
CHATS = "chats"
SCHEDULED_MESSAGES = "scheduled_messages"

# Errors that mean "stored snapshot is unusable" rather than a bug in this module
_DECODE_ERRORS = (json.JSONDecodeError, KeyError, ValueError, TypeError, AttributeError)


class SnapshotRepository:
    """
    Serializes the four console collections to a key-value backend.

    Every save writes the full collection under a fixed key. Failures are
    logged and counted but never raised: the in-memory stores stay
    authoritative. Loads fall back to seed data when a key is absent or its
    value cannot be decoded.

    A collection whose load failed on a backend read error is held: its
    saves are skipped while a snapshot may still exist under its key, so
    seed data never overwrites state that was merely unreachable.
    """

    def __init__(self, store: IKeyValueStore, key_prefix: str = "chatdesk"):
        """
        Initialize the repository.

        Args:
            store: Key-value backend (Dependency Injection)
            key_prefix: Namespace for the collection keys
        """
        self.store = store
        self._key_prefix = key_prefix
        self._logger = logging.getLogger(__name__)
        self._held: Set[str] = set()
        self._held_lock = Lock()

    def key_for(self, collection: str) -> str:
        return f"{self._key_prefix}:{collection}"

    # ------------------------------------------------------------------ saves

    def save_users(self, users: Sequence[User]) -> bool:
        return self._save(USERS, users)

    def save_companies(self, companies: Sequence[Company]) -> bool:
        return self._save(COMPANIES, companies)

    def save_chats(self, chats: Sequence[Chat]) -> bool:
        return self._save(CHATS, chats)

    def save_scheduled_messages(self, scheduled: Sequence[ScheduledMessage]) -> bool:
        return self._save(SCHEDULED_MESSAGES, scheduled)

    # ------------------------------------------------------------------ loads

    def load_users(self) -> List[User]:
        return self._load(USERS, User.from_dict, seed.seed_users)

    def load_companies(self) -> List[Company]:
        return self._load(COMPANIES, Company.from_dict, seed.seed_companies)

    def load_chats(self) -> List[Chat]:
        return self._load(CHATS, Chat.from_dict, seed.seed_chats)

    def load_scheduled_messages(self) -> List[ScheduledMessage]:
        return self._load(SCHEDULED_MESSAGES, ScheduledMessage.from_dict, seed.seed_scheduled_messages)

    def ping(self) -> bool:
        return self.store.ping()

    @property
    def held_collections(self) -> List[str]:
        """Collections not persisted because their stored snapshot was never read."""
        with self._held_lock:
            return sorted(self._held)

    # -------------------------------------------------------------- internals

    def _save(self, collection: str, items: Sequence[Any]) -> bool:
        key = self.key_for(collection)
        if not self._release_hold(collection):
            self._logger.warning(
                f"Not saving {collection}: stored snapshot was never restored into this process"
            )
            track_persistence_failure(collection, "save")
            return False

        try:
            data = json.dumps([item.to_dict() for item in items])
            self.store.set(key, data)
        except PersistenceFailure as e:
            self._logger.error(f"Error storing {collection} snapshot: {e}")
            track_persistence_failure(collection, "save")
            return False
        except (TypeError, ValueError) as e:
            self._logger.error(f"Error serializing {collection} snapshot: {e}")
            track_persistence_failure(collection, "save")
            return False

        self._logger.debug(f"Saved {len(items)} {collection} under {key}")
        return True

    def _load(
        self,
        collection: str,
        decode: Callable[[Dict[str, Any]], Any],
        fallback: Callable[[], List[Any]],
    ) -> List[Any]:
        key = self.key_for(collection)
        try:
            data = self.store.get(key)
        except PersistenceFailure as e:
            self._logger.error(f"Error reading {collection} snapshot, using seed data: {e}")
            track_persistence_failure(collection, "load")
            with self._held_lock:
                self._held.add(collection)
            return fallback()

        with self._held_lock:
            self._held.discard(collection)

        if data is None:
            self._logger.info(f"No stored {collection}, using seed data")
            return fallback()

        try:
            raw = json.loads(data)
            if not isinstance(raw, list):
                raise TypeError(f"expected a JSON array, got {type(raw).__name__}")
            items = [decode(item) for item in raw]
        except _DECODE_ERRORS as e:
            self._logger.error(f"Stored {collection} snapshot is corrupt, using seed data: {e}")
            track_persistence_failure(collection, "load")
            return fallback()

        self._logger.info(f"Restored {len(items)} {collection} from {key}")
        return items

    def _release_hold(self, collection: str) -> bool:
        """
        Check whether a collection may be saved.

        A held collection is released only once its key reads back as absent;
        an existing snapshot keeps it held until the process restores it.
        """
        with self._held_lock:
            if collection not in self._held:
                return True
            try:
                data = self.store.get(self.key_for(collection))
            except PersistenceFailure:
                return False
            if data is not None:
                return False
            self._held.discard(collection)

        self._logger.info(f"No stored {collection} found on recheck, resuming saves")
        return True
