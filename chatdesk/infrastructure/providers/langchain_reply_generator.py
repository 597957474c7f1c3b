"""LangChain-based reply generator implementation (Strategy Pattern).

The transcript is replayed as chat messages: operator turns become human
messages and customer turns become AI messages, so the model continues as
the customer.
"""
import logging
from typing import List, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from chatdesk.config.settings import Config
from chatdesk.domain.entities.chat import TranscriptTurn
from chatdesk.domain.exceptions import ExternalGenerationFailure
from chatdesk.domain.interfaces.reply_generator import IReplyGenerator
from chatdesk.infrastructure.providers.reply_prompt import build_system_prompt


class LangChainReplyGenerator(IReplyGenerator):
    """LangChain ChatOpenAI reply generator."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        llm: Optional[ChatOpenAI] = None,
    ):
        """
        Initialize the LangChain reply generator.

        Args:
            api_key: OpenAI API key (defaults to Config)
            model: Chat model name (defaults to Config)
            max_tokens: Reply length cap (defaults to Config)
            timeout: Request timeout in seconds (defaults to Config)
            llm: Preconfigured chat model (Dependency Injection)

        Raises:
            ValueError: If no API key is available and no model is given
        """
        api_key = api_key or Config.OPENAI_API_KEY
        if llm is None and not api_key:
            raise ValueError("OPENAI_API_KEY not found in environment")

        self.model = model or Config.OPENAI_MODEL
        self.llm = llm or ChatOpenAI(
            model=self.model,
            api_key=api_key,
            max_tokens=max_tokens or Config.REPLY_MAX_TOKENS,
            timeout=timeout or Config.REPLY_GENERATION_TIMEOUT,
            max_retries=1,
        )
        self._logger = logging.getLogger(__name__)

    def _to_messages(self, transcript: Sequence[TranscriptTurn], customer_name: str) -> List[BaseMessage]:
        messages: List[BaseMessage] = [SystemMessage(content=build_system_prompt(customer_name))]
        for turn in transcript:
            if turn.role == TranscriptTurn.CUSTOMER:
                messages.append(AIMessage(content=turn.text))
            else:
                messages.append(HumanMessage(content=turn.text))
        return messages

    def generate_reply(self, transcript: Sequence[TranscriptTurn], customer_name: str) -> str:
        try:
            result = self.llm.invoke(self._to_messages(transcript, customer_name))
        except Exception as e:
            self._logger.error(f"LangChain error while generating reply for {customer_name}: {e}")
            raise ExternalGenerationFailure(str(e)) from e

        content = result.content if isinstance(result.content, str) else ""
        return content.strip()
