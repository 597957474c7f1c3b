"""Use case for operator sends (Use Case Pattern)."""
import logging
from dataclasses import dataclass
from typing import Optional

from chatdesk.application.services.conversation_store import ConversationStore
from chatdesk.application.services.reply_simulator import ReplySimulator
from chatdesk.domain.entities.chat import AttachmentType, Message


logger = logging.getLogger(__name__)


@dataclass
class SendMessageRequest:
    """Request for an operator send."""
    chat_id: str
    operator_id: str
    text: str = ""
    attachment_url: Optional[str] = None
    attachment_type: Optional[AttachmentType] = None


class SendOperatorMessageUseCase:
    """
    Appends an operator message and schedules exactly one simulated reply.

    The reply simulator is only reached after the store accepted the send, so
    a rejected send (resolved chat, empty message) never triggers a reply.
    """

    def __init__(self, conversation_store: ConversationStore, reply_simulator: ReplySimulator):
        """
        Initialize use case with dependencies (Dependency Injection).

        Args:
            conversation_store: Store receiving the operator message
            reply_simulator: Simulator producing the delayed customer reply
        """
        self.conversation_store = conversation_store
        self.reply_simulator = reply_simulator

    def execute(self, request: SendMessageRequest) -> Message:
        """
        Execute the use case.

        Args:
            request: Send request

        Returns:
            The appended operator message; the reply arrives later

        Raises:
            ChatNotFound, InvalidTransition, EmptyMessage: From the store
        """
        message = self.conversation_store.send_operator_message(
            chat_id=request.chat_id,
            operator_id=request.operator_id,
            text=request.text,
            attachment_url=request.attachment_url,
            attachment_type=request.attachment_type,
        )
        self.reply_simulator.trigger(request.chat_id)
        logger.info(f"Message {message.id} sent to chat {request.chat_id}, reply pending")
        return message
