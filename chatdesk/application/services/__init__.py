"""Application services (Service Layer Pattern).

Stores own the engine state and are its only mutation surface; the
normalizer and the reply simulator feed messages into the conversation store.
"""
from chatdesk.application.services.conversation_store import ConversationStore
from chatdesk.application.services.identity_store import IdentityStore
from chatdesk.application.services.scheduler_store import SchedulerStore
from chatdesk.application.services.webhook_normalizer import (
    InboundRouting,
    WebhookNormalizer,
    parse_inbound_payload,
)
from chatdesk.application.services.reply_simulator import ReplySimulator, build_transcript
from chatdesk.application.services.dashboard_service import DashboardService

__all__ = [
    "ConversationStore",
    "IdentityStore",
    "SchedulerStore",
    "InboundRouting",
    "WebhookNormalizer",
    "parse_inbound_payload",
    "ReplySimulator",
    "build_transcript",
    "DashboardService",
]
