"""Conversation entities: chats, their messages and reply transcripts."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, Tuple

CUSTOMER_SENDER_ID = "customer"


class ChatStatus(str, Enum):
    ACTIVE = "active"
    RESOLVED = "resolved"


class MessageStatus(str, Enum):
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"


class AttachmentType(str, Enum):
    IMAGE = "image"
    FILE = "file"
    AUDIO = "audio"


# Fields an operator may patch through the CRM panel, keyed by their wire names
CRM_FIELDS: Dict[str, str] = {
    "customerName": "customer_name",
    "customerPhone": "customer_phone",
    "customerEmail": "customer_email",
    "customerCompany": "customer_company",
    "customerWebsite": "customer_website",
    "customerInstagram": "customer_instagram",
    "customerValue": "customer_value",
}


@dataclass(frozen=True)
class Message:
    """A single entry in a chat's message log. Never mutated after creation."""

    id: str
    text: str
    sender_id: str
    timestamp: int  # epoch milliseconds
    status: MessageStatus
    is_customer: bool
    attachment_url: Optional[str] = None
    attachment_type: Optional[AttachmentType] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "senderId": self.sender_id,
            "timestamp": self.timestamp,
            "status": self.status.value,
            "isCustomer": self.is_customer,
        }
        if self.attachment_url is not None:
            data["attachmentUrl"] = self.attachment_url
        if self.attachment_type is not None:
            data["attachmentType"] = self.attachment_type.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        attachment_type = data.get("attachmentType")
        return cls(
            id=data["id"],
            text=data.get("text", ""),
            sender_id=data["senderId"],
            timestamp=int(data["timestamp"]),
            status=MessageStatus(data["status"]),
            is_customer=bool(data["isCustomer"]),
            attachment_url=data.get("attachmentUrl"),
            attachment_type=AttachmentType(attachment_type) if attachment_type else None,
        )


@dataclass(frozen=True)
class Chat:
    """
    Conversation thread with one external contact.

    Snapshots are immutable: every store operation replaces the chat with a
    new instance built through ``dataclasses.replace``.
    """

    id: str
    customer_name: str
    customer_phone: str
    avatar_url: str
    messages: Tuple[Message, ...] = field(default_factory=tuple)
    unread_count: int = 0
    last_message_timestamp: int = 0
    status: ChatStatus = ChatStatus.ACTIVE
    assigned_to: Optional[str] = None
    customer_email: Optional[str] = None
    customer_company: Optional[str] = None
    customer_website: Optional[str] = None
    customer_instagram: Optional[str] = None
    customer_value: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return self.status == ChatStatus.ACTIVE

    @property
    def last_message(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "avatarUrl": self.avatar_url,
            "messages": [message.to_dict() for message in self.messages],
            "unreadCount": self.unread_count,
            "lastMessageTimestamp": self.last_message_timestamp,
            "status": self.status.value,
        }
        optional = {
            "assignedTo": self.assigned_to,
            "customerEmail": self.customer_email,
            "customerCompany": self.customer_company,
            "customerWebsite": self.customer_website,
            "customerInstagram": self.customer_instagram,
            "customerValue": self.customer_value,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chat":
        return cls(
            id=data["id"],
            customer_name=data["customerName"],
            customer_phone=data["customerPhone"],
            avatar_url=data.get("avatarUrl", ""),
            messages=tuple(Message.from_dict(item) for item in data.get("messages", [])),
            unread_count=int(data.get("unreadCount", 0)),
            last_message_timestamp=int(data.get("lastMessageTimestamp", 0)),
            status=ChatStatus(data.get("status", ChatStatus.ACTIVE.value)),
            assigned_to=data.get("assignedTo"),
            customer_email=data.get("customerEmail"),
            customer_company=data.get("customerCompany"),
            customer_website=data.get("customerWebsite"),
            customer_instagram=data.get("customerInstagram"),
            customer_value=data.get("customerValue"),
        )


@dataclass(frozen=True)
class TranscriptTurn:
    """One turn of the conversation handed to the reply generator."""

    role: str  # "operator" or "customer"
    text: str

    OPERATOR = "operator"
    CUSTOMER = "customer"

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "text": self.text}
