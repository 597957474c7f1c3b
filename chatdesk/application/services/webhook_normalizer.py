"""Inbound webhook normalizer (Evolution API shaped payloads).

Turns a loosely structured webhook into an ``InboundEvent`` and routes it to
the conversation store: an existing chat when the contact's phone is already
known, otherwise a brand new chat at the head of the collection.
"""
import logging
from dataclasses import dataclass
from typing import Any

from chatdesk.application.services.conversation_store import ConversationStore
from chatdesk.domain.entities.chat import Chat, Message
from chatdesk.domain.entities.inbound_event import InboundEvent, ParseResult
from chatdesk.middleware.monitoring import track_webhook_event
from chatdesk.utils.phone_format import PhoneNumberFormatter
from chatdesk.utils.webhook_parser import WebhookParser

MEDIA_PLACEHOLDER = "[Media received]"


def parse_inbound_payload(payload: Any) -> ParseResult:
    """
    Extract contact identity and text from a webhook payload.

    Args:
        payload: Raw webhook body

    Returns:
        ParseResult holding either the InboundEvent or a MalformedPayload
    """
    data = WebhookParser.extract_data(payload)
    if data is None:
        return ParseResult.failure("missing 'data'")

    remote_jid = WebhookParser.extract_remote_jid(data)
    if remote_jid is None:
        return ParseResult.failure("missing 'data.key.remoteJid'")

    raw_identifier = remote_jid.split("@", 1)[0]
    identifier = PhoneNumberFormatter.digits(raw_identifier)
    if not identifier:
        return ParseResult.failure(f"no phone number in remoteJid {remote_jid!r}")

    return ParseResult.success(InboundEvent(
        contact_identifier=identifier,
        display_name=WebhookParser.extract_push_name(data) or identifier,
        text=WebhookParser.extract_text(data) or MEDIA_PLACEHOLDER,
        display_phone=PhoneNumberFormatter.to_display(identifier),
    ))


@dataclass(frozen=True)
class InboundRouting:
    """Where an inbound event landed."""

    chat: Chat
    message: Message
    created: bool


class WebhookNormalizer:
    """Routes normalized inbound events into the conversation store."""

    def __init__(self, conversation_store: ConversationStore):
        self._store = conversation_store
        self._logger = logging.getLogger(__name__)

    def ingest(self, payload: Any) -> InboundRouting:
        """
        Parse a webhook and append its message to the matching chat.

        Args:
            payload: Raw webhook body

        Returns:
            InboundRouting describing the target chat and the new message

        Raises:
            MalformedPayload: If the payload lacks its routing field; no
                chat or message is created in that case
        """
        result = parse_inbound_payload(payload)
        if not result.ok:
            self._logger.warning(f"Rejected inbound webhook: {result.error}")
            track_webhook_event("malformed")
        event = result.unwrap()
        return self.route(event)

    def route(self, event: InboundEvent) -> InboundRouting:
        # Find and append under one lock so a concurrent delivery cannot open a duplicate chat
        with self._store.lock:
            existing = self._store.find_chat_by_phone(event.contact_identifier)
            if existing is not None:
                message = self._store.receive_customer_message(existing.id, event.text)
                chat = self._store.get_chat(existing.id)
                created = False
            else:
                chat = self._store.open_chat(
                    customer_name=event.display_name,
                    customer_phone=event.display_phone,
                    first_message=event.text,
                )
                message = chat.messages[-1]
                created = True

        if created:
            self._logger.info(f"Inbound message from {event.contact_identifier} opened chat {chat.id}")
            track_webhook_event("created")
        else:
            self._logger.info(
                f"Inbound message from {event.contact_identifier} routed to chat {chat.id} "
                f"({chat.customer_name})"
            )
            track_webhook_event("appended")
        return InboundRouting(chat=chat, message=message, created=created)
