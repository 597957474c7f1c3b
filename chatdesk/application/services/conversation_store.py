"""Conversation store: single source of truth for every chat.

Each operation replaces the affected chat with a new immutable snapshot and
publishes the full, freshly built collection to the change listener
(the persistence adapter). Callers never see a partially applied mutation.
"""
import logging
import time
from dataclasses import replace
from threading import RLock
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from chatdesk.domain.entities.chat import (
    AttachmentType,
    CRM_FIELDS,
    CUSTOMER_SENDER_ID,
    Chat,
    ChatStatus,
    Message,
    MessageStatus,
)
from chatdesk.domain.exceptions import ChatNotFound, EmptyMessage, InvalidTransition
from chatdesk.middleware.monitoring import track_message_appended
from chatdesk.utils.id_generator import generate_id
from chatdesk.utils.phone_format import PhoneNumberFormatter

ChatsListener = Callable[[List[Chat]], None]


def current_time_ms() -> int:
    return int(time.time() * 1000)


def avatar_for(name: str) -> str:
    return f"https://ui-avatars.com/api/?name={name.replace(' ', '+')}&background=random"


class ConversationStore:
    """
    Holds the chat collection (most recent first) and the focused chat.

    Mutations are serialised by a re-entrant lock because simulated replies
    are delivered from worker threads.
    """

    def __init__(
        self,
        chats: Iterable[Chat] = (),
        on_change: Optional[ChatsListener] = None,
        clock: Callable[[], int] = current_time_ms,
        id_factory: Callable[[], str] = generate_id,
    ):
        """
        Initialize the conversation store.

        Args:
            chats: Initial collection, in display order
            on_change: Called with the full collection after every mutation
            clock: Returns the current time in epoch milliseconds
            id_factory: Returns fresh record identifiers
        """
        self._lock = RLock()
        self._chats: Tuple[Chat, ...] = tuple(chats)
        self._focused_chat_id: Optional[str] = None
        self._on_change = on_change
        self._clock = clock
        self._new_id = id_factory
        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------ reads

    @property
    def chats(self) -> List[Chat]:
        """Snapshot of the collection, most recent first."""
        return list(self._chats)

    @property
    def lock(self):
        """Re-entrant lock guarding the collection, for multi-step operations."""
        return self._lock

    @property
    def focused_chat_id(self) -> Optional[str]:
        return self._focused_chat_id

    def find_chat(self, chat_id: str) -> Optional[Chat]:
        for chat in self._chats:
            if chat.id == chat_id:
                return chat
        return None

    def get_chat(self, chat_id: str) -> Chat:
        chat = self.find_chat(chat_id)
        if chat is None:
            raise ChatNotFound(chat_id)
        return chat

    def list_chats(self, status: Optional[ChatStatus] = None) -> List[Chat]:
        if status is None:
            return self.chats
        return [chat for chat in self._chats if chat.status == status]

    def find_chat_by_phone(self, contact_identifier: str) -> Optional[Chat]:
        """
        Find the first chat whose digit-stripped phone contains the identifier.

        Substring containment, first match in collection order.

        Args:
            contact_identifier: Digits-only contact identifier

        Returns:
            Matching chat, or None
        """
        for chat in self._chats:
            if PhoneNumberFormatter.contains(chat.customer_phone, contact_identifier):
                return chat
        return None

    # -------------------------------------------------------------- messages

    def send_operator_message(
        self,
        chat_id: str,
        operator_id: str,
        text: str = "",
        attachment_url: Optional[str] = None,
        attachment_type: Optional[AttachmentType] = None,
    ) -> Message:
        """
        Append an operator-authored message.

        Args:
            chat_id: Target chat
            operator_id: Acting operator's user id
            text: Message text (may be empty when an attachment is sent)
            attachment_url: Optional attachment (data URL or link)
            attachment_type: Attachment kind; defaults to image when a URL is given

        Returns:
            The appended message

        Raises:
            ChatNotFound: If the chat does not exist
            InvalidTransition: If the chat is resolved
            EmptyMessage: If neither text nor attachment is supplied
        """
        if attachment_url and attachment_type is None:
            attachment_type = AttachmentType.IMAGE
        elif attachment_type is not None:
            attachment_type = AttachmentType(attachment_type)

        with self._lock:
            chat = self.get_chat(chat_id)
            if not chat.is_active:
                raise InvalidTransition(chat_id, chat.status.value, "send an operator message")
            if not (text or "").strip() and not attachment_url:
                raise EmptyMessage(chat_id)

            message = Message(
                id=self._new_id(),
                text=text or "",
                sender_id=operator_id,
                timestamp=self._next_timestamp(chat),
                status=MessageStatus.SENT,
                is_customer=False,
                attachment_url=attachment_url or None,
                attachment_type=attachment_type if attachment_url else None,
            )
            self._replace(replace(
                chat,
                messages=chat.messages + (message,),
                last_message_timestamp=message.timestamp,
            ))

        self._logger.info(f"Operator {operator_id} sent message {message.id} to chat {chat_id}")
        track_message_appended("outbound")
        return message

    def receive_customer_message(self, chat_id: str, text: str) -> Message:
        """
        Append a customer-authored message.

        The unread counter grows by one unless the chat is focused, in which
        case the message counts as read while viewing.

        Args:
            chat_id: Target chat
            text: Message text

        Returns:
            The appended message

        Raises:
            ChatNotFound: If the chat does not exist
        """
        with self._lock:
            chat = self.get_chat(chat_id)
            message = self._customer_message(text, self._next_timestamp(chat))
            focused = chat_id == self._focused_chat_id
            self._replace(replace(
                chat,
                messages=chat.messages + (message,),
                last_message_timestamp=message.timestamp,
                unread_count=0 if focused else chat.unread_count + 1,
            ))

        self._logger.info(f"Customer message {message.id} received in chat {chat_id}")
        track_message_appended("inbound")
        return message

    def open_chat(self, customer_name: str, customer_phone: str, first_message: str) -> Chat:
        """
        Create an active chat seeded with one unread customer message.

        The new chat is placed at the head of the collection.

        Args:
            customer_name: Contact display name
            customer_phone: Contact phone, display formatted
            first_message: Text of the seed message

        Returns:
            The created chat
        """
        with self._lock:
            message = self._customer_message(first_message, self._clock())
            chat = Chat(
                id=self._new_id(),
                customer_name=customer_name,
                customer_phone=customer_phone,
                avatar_url=avatar_for(customer_name),
                messages=(message,),
                unread_count=1,
                last_message_timestamp=message.timestamp,
                status=ChatStatus.ACTIVE,
            )
            self._commit((chat,) + self._chats)

        self._logger.info(f"Opened chat {chat.id} for {customer_name}")
        track_message_appended("inbound")
        return chat

    # ----------------------------------------------------------- chat state

    def select_chat(self, chat_id: str) -> Chat:
        """Focus a chat and reset its unread counter."""
        with self._lock:
            chat = self.get_chat(chat_id)
            self._focused_chat_id = chat_id
            if chat.unread_count != 0:
                chat = replace(chat, unread_count=0)
                self._replace(chat)

        return chat

    def clear_focus(self) -> None:
        with self._lock:
            self._focused_chat_id = None

    def set_status(self, chat_id: str, status: ChatStatus) -> Chat:
        """
        Move a chat between active and resolved.

        Focus is left untouched.
        """
        status = ChatStatus(status)
        with self._lock:
            chat = self.get_chat(chat_id)
            if chat.status == status:
                return chat
            chat = replace(chat, status=status)
            self._replace(chat)

        self._logger.info(f"Chat {chat_id} marked {status.value}")
        return chat

    def update_crm_fields(self, chat_id: str, fields: Dict[str, Any]) -> Chat:
        """
        Merge CRM fields into a chat (patch semantics).

        Args:
            chat_id: Target chat
            fields: Wire names (``customerValue``) or attribute names (``customer_value``)

        Returns:
            The updated chat

        Raises:
            ChatNotFound: If the chat does not exist
            ValueError: On unknown fields, non-text values for text fields or a negative customer value
        """
        attribute_names = set(CRM_FIELDS.values())
        changes: Dict[str, Any] = {}
        unknown = []
        for name, value in fields.items():
            attribute = CRM_FIELDS.get(name, name)
            if attribute not in attribute_names:
                unknown.append(name)
                continue
            changes[attribute] = value
        if unknown:
            raise ValueError(f"Unknown CRM fields: {', '.join(sorted(unknown))}")

        for attribute, text in changes.items():
            if attribute != "customer_value" and text is not None and not isinstance(text, str):
                raise ValueError(f"{attribute} must be a string")

        value = changes.get("customer_value")
        if value is not None:
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise ValueError("customerValue must be a number") from None
            if value < 0:
                raise ValueError("customerValue must be >= 0")
            changes["customer_value"] = value
        for required in ("customer_name", "customer_phone"):
            if required in changes and not changes[required]:
                raise ValueError(f"{required} cannot be empty")

        with self._lock:
            chat = replace(self.get_chat(chat_id), **changes)
            self._replace(chat)

        self._logger.info(f"Updated CRM fields {sorted(changes)} on chat {chat_id}")
        return chat

    # -------------------------------------------------------------- helpers

    def _customer_message(self, text: str, timestamp: int) -> Message:
        return Message(
            id=self._new_id(),
            text=text,
            sender_id=CUSTOMER_SENDER_ID,
            timestamp=timestamp,
            status=MessageStatus.READ,
            is_customer=True,
        )

    def _next_timestamp(self, chat: Chat) -> int:
        last = chat.last_message
        now = self._clock()
        return max(now, last.timestamp) if last else now

    def _replace(self, updated: Chat) -> None:
        self._commit(tuple(updated if chat.id == updated.id else chat for chat in self._chats))

    def _commit(self, chats: Tuple[Chat, ...]) -> None:
        # Callers hold the lock, so snapshots reach the listener in mutation order
        self._chats = chats
        if self._on_change is not None:
            self._on_change(list(chats))
