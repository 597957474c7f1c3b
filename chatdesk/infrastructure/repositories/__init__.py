"""Repository implementations (Infrastructure Layer).

These implement domain interfaces defined in chatdesk.domain.interfaces.
"""
from chatdesk.infrastructure.repositories.key_value_stores import (
    InMemoryKeyValueStore,
    RedisKeyValueStore,
)
from chatdesk.infrastructure.repositories.snapshot_repository import SnapshotRepository

__all__ = [
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
    "SnapshotRepository",
]
