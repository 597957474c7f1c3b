"""Scheduled message entity."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any


class ScheduledStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"


@dataclass(frozen=True)
class ScheduledMessage:
    """
    Message an operator planned to send to a contact at a later date.

    Nothing in the engine fires these: records stay ``pending`` until an
    operator deletes them.
    """

    id: str
    customer_name: str
    customer_phone: str
    text: str
    scheduled_date: str  # ISO-8601
    status: ScheduledStatus
    created_by: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "text": self.text,
            "scheduledDate": self.scheduled_date,
            "status": self.status.value,
            "createdBy": self.created_by,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScheduledMessage":
        return cls(
            id=data["id"],
            customer_name=data["customerName"],
            customer_phone=data["customerPhone"],
            text=data["text"],
            scheduled_date=data["scheduledDate"],
            status=ScheduledStatus(data.get("status", ScheduledStatus.PENDING.value)),
            created_by=data["createdBy"],
        )
