"""Domain entities - core business objects."""
from chatdesk.domain.entities.identity import User, UserRole, Company, MetaConfig
from chatdesk.domain.entities.chat import (
    Chat,
    ChatStatus,
    Message,
    MessageStatus,
    AttachmentType,
    TranscriptTurn,
    CUSTOMER_SENDER_ID,
    CRM_FIELDS,
)
from chatdesk.domain.entities.scheduled_message import ScheduledMessage, ScheduledStatus
from chatdesk.domain.entities.inbound_event import InboundEvent, ParseResult

__all__ = [
    "User",
    "UserRole",
    "Company",
    "MetaConfig",
    "Chat",
    "ChatStatus",
    "Message",
    "MessageStatus",
    "AttachmentType",
    "TranscriptTurn",
    "CUSTOMER_SENDER_ID",
    "CRM_FIELDS",
    "ScheduledMessage",
    "ScheduledStatus",
    "InboundEvent",
    "ParseResult",
]
