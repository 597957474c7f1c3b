"""Reply generator implementations (Infrastructure Layer)."""
from chatdesk.infrastructure.providers.openai_reply_generator import OpenAIReplyGenerator
from chatdesk.infrastructure.providers.langchain_reply_generator import LangChainReplyGenerator
from chatdesk.infrastructure.providers.offline_reply_generator import OfflineReplyGenerator

__all__ = [
    "OpenAIReplyGenerator",
    "LangChainReplyGenerator",
    "OfflineReplyGenerator",
]
