"""Dashboard figures computed from the current stores."""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from chatdesk.application.services.conversation_store import ConversationStore
from chatdesk.application.services.identity_store import IdentityStore
from chatdesk.domain.entities.chat import ChatStatus
from chatdesk.domain.entities.identity import UserRole


@dataclass
class OperatorStats:
    user_id: str
    name: str
    messages_sent: int


@dataclass
class DashboardSummary:
    total_chats: int
    active_chats: int
    resolved_chats: int
    unread_messages: int
    operators: List[OperatorStats] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalChats": self.total_chats,
            "activeChats": self.active_chats,
            "resolvedChats": self.resolved_chats,
            "unreadMessages": self.unread_messages,
            "operators": [
                {"userId": op.user_id, "name": op.name, "messagesSent": op.messages_sent}
                for op in self.operators
            ],
        }


class DashboardService:
    def __init__(self, conversation_store: ConversationStore, identity_store: IdentityStore):
        self._conversations = conversation_store
        self._identity = identity_store

    def summary(self) -> DashboardSummary:
        chats = self._conversations.chats
        sent_by: Dict[str, int] = {}
        for chat in chats:
            for message in chat.messages:
                if not message.is_customer:
                    sent_by[message.sender_id] = sent_by.get(message.sender_id, 0) + 1

        operators = [
            OperatorStats(user_id=user.id, name=user.name, messages_sent=sent_by.get(user.id, 0))
            for user in self._identity.users
            if user.role != UserRole.SUPER_ADMIN
        ]
        return DashboardSummary(
            total_chats=len(chats),
            active_chats=sum(1 for chat in chats if chat.status == ChatStatus.ACTIVE),
            resolved_chats=sum(1 for chat in chats if chat.status == ChatStatus.RESOLVED),
            unread_messages=sum(chat.unread_count for chat in chats),
            operators=operators,
        )
