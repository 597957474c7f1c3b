"""Domain exceptions for the conversation engine."""
from typing import Optional


class ChatdeskError(Exception):
    """Base class for every error raised by the engine."""


class MalformedPayload(ChatdeskError):
    """Inbound webhook payload is missing its routing field."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Malformed webhook payload: {reason}")


class InvalidTransition(ChatdeskError):
    """Operation is not allowed in the chat's current status."""

    def __init__(self, chat_id: str, status: str, operation: str):
        self.chat_id = chat_id
        self.status = status
        self.operation = operation
        super().__init__(f"Cannot {operation} on chat {chat_id} while it is {status}")


class ChatNotFound(ChatdeskError, KeyError):
    def __init__(self, chat_id: str):
        self.chat_id = chat_id
        super().__init__(f"Chat not found: {chat_id}")

    def __str__(self) -> str:
        return self.args[0]


class UserNotFound(ChatdeskError, KeyError):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")

    def __str__(self) -> str:
        return self.args[0]


class CompanyNotFound(ChatdeskError, KeyError):
    def __init__(self, company_id: str):
        self.company_id = company_id
        super().__init__(f"Company not found: {company_id}")

    def __str__(self) -> str:
        return self.args[0]


class ScheduledMessageNotFound(ChatdeskError, KeyError):
    def __init__(self, scheduled_id: str):
        self.scheduled_id = scheduled_id
        super().__init__(f"Scheduled message not found: {scheduled_id}")

    def __str__(self) -> str:
        return self.args[0]


class CompanyCapacityExceeded(ChatdeskError):
    """Company already holds its maximum number of users."""

    def __init__(self, company_id: str, max_users: int):
        self.company_id = company_id
        self.max_users = max_users
        super().__init__(f"Company {company_id} already has the maximum of {max_users} users")


class EmptyMessage(ChatdeskError, ValueError):
    """Operator message carries neither text nor attachment."""

    def __init__(self, chat_id: str):
        self.chat_id = chat_id
        super().__init__(f"Message for chat {chat_id} has no text and no attachment")


class InvalidScheduleDate(ChatdeskError, ValueError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Scheduled date is not an ISO-8601 timestamp: {value!r}")


class PersistenceFailure(ChatdeskError):
    """Snapshot could not be written to or read from the key-value backend."""

    def __init__(self, key: str, operation: str, cause: Optional[Exception] = None):
        self.key = key
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to {operation} '{key}'{detail}")


class ExternalGenerationFailure(ChatdeskError):
    """Reply text generator is unavailable or returned an error."""
