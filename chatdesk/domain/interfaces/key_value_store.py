"""Interface for the durable key-value surface (Repository Pattern)."""
from abc import ABC, abstractmethod
from typing import Optional


class IKeyValueStore(ABC):
    """
    Interface for storing serialized collection snapshots.

    Allows switching storage backends (Redis, in-memory, etc.)
    without changing the persistence adapter.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            Stored string, or None if the key is absent

        Raises:
            PersistenceFailure: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key.

        Args:
            key: Storage key
            value: Serialized snapshot

        Raises:
            PersistenceFailure: If the backend cannot be written
        """
        pass

    @abstractmethod
    def ping(self) -> bool:
        """Return True if the backend is reachable."""
        pass
