"""Utilities for reading Evolution-style WhatsApp webhook payloads.

Conceptual payload shape::

    {"data": {"key": {"remoteJid": "<digits>@<domain>"},
              "pushName": "...",
              "message": {"conversation": "...",
                          "extendedTextMessage": {"text": "..."}}}}

Every lookup is optional and returns None instead of raising.
"""
from typing import Dict, Any, Optional


class WebhookParser:
    """Utility class for extracting fields from webhook payloads."""

    @staticmethod
    def _lookup(payload: Any, *path: str) -> Optional[Any]:
        current = payload
        for key in path:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
            if current is None:
                return None
        return current

    @staticmethod
    def _text(value: Any) -> Optional[str]:
        if isinstance(value, str) and value:
            return value
        return None

    @classmethod
    def extract_data(cls, payload: Any) -> Optional[Dict[str, Any]]:
        """
        Extract the ``data`` envelope.

        Args:
            payload: Webhook payload

        Returns:
            The envelope dictionary, or None if absent
        """
        data = cls._lookup(payload, "data")
        return data if isinstance(data, dict) else None

    @classmethod
    def extract_remote_jid(cls, data: Dict[str, Any]) -> Optional[str]:
        """Extract ``key.remoteJid`` (``"<digits>@<suffix>"``)."""
        return cls._text(cls._lookup(data, "key", "remoteJid"))

    @classmethod
    def extract_push_name(cls, data: Dict[str, Any]) -> Optional[str]:
        """Extract the sender's push name."""
        return cls._text(cls._lookup(data, "pushName"))

    @classmethod
    def extract_text(cls, data: Dict[str, Any]) -> Optional[str]:
        """
        Extract the message text.

        Plain conversation text wins over extended (quoted/linked) text.

        Args:
            data: Webhook ``data`` envelope

        Returns:
            Message text, or None for media-only messages
        """
        return (
            cls._text(cls._lookup(data, "message", "conversation"))
            or cls._text(cls._lookup(data, "message", "extendedTextMessage", "text"))
        )
