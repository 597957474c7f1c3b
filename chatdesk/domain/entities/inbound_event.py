"""Normalized inbound webhook event and its parse result."""
from dataclasses import dataclass
from typing import Optional

from chatdesk.domain.exceptions import MalformedPayload


@dataclass(frozen=True)
class InboundEvent:
    """Contact identity and text extracted from an inbound webhook."""

    contact_identifier: str  # digits only
    display_name: str
    text: str
    display_phone: str


@dataclass(frozen=True)
class ParseResult:
    """Either a parsed event or the reason the payload was rejected."""

    event: Optional[InboundEvent] = None
    error: Optional[MalformedPayload] = None

    @classmethod
    def success(cls, event: InboundEvent) -> "ParseResult":
        return cls(event=event)

    @classmethod
    def failure(cls, reason: str) -> "ParseResult":
        return cls(error=MalformedPayload(reason))

    @property
    def ok(self) -> bool:
        return self.error is None and self.event is not None

    def unwrap(self) -> InboundEvent:
        """Return the event or raise the stored MalformedPayload."""
        if self.error is not None:
            raise self.error
        if self.event is None:
            raise MalformedPayload("empty parse result")
        return self.event
