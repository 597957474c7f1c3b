"""Domain interfaces following Dependency Inversion Principle."""

from chatdesk.domain.interfaces.reply_generator import IReplyGenerator
from chatdesk.domain.interfaces.key_value_store import IKeyValueStore

__all__ = [
    "IReplyGenerator",
    "IKeyValueStore",
]
