"""Application use cases."""
from chatdesk.application.use_cases.send_operator_message_use_case import (
    SendMessageRequest,
    SendOperatorMessageUseCase,
)

__all__ = ["SendMessageRequest", "SendOperatorMessageUseCase"]
