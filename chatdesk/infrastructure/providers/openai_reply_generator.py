"""OpenAI reply generator implementation (Strategy Pattern)."""
import logging
from typing import Optional, Sequence
from openai import OpenAI, OpenAIError

from chatdesk.config.settings import Config
from chatdesk.domain.entities.chat import TranscriptTurn
from chatdesk.domain.exceptions import ExternalGenerationFailure
from chatdesk.domain.interfaces.reply_generator import IReplyGenerator
from chatdesk.infrastructure.providers.reply_prompt import (
    build_conversation_prompt,
    build_system_prompt,
)


class OpenAIReplyGenerator(IReplyGenerator):
    """
    OpenAI Chat Completions reply generator.

    Implements IReplyGenerator interface following Strategy Pattern. The
    model plays the customer: the system prompt sets the persona and the
    transcript is sent as a single chat log ending with the customer's turn.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize OpenAI reply generator.

        Args:
            api_key: OpenAI API key (defaults to Config)
            model: Chat model name (defaults to Config)
            max_tokens: Reply length cap (defaults to Config)
            timeout: Request timeout in seconds (defaults to Config)
            client: Preconfigured client (Dependency Injection)

        Raises:
            ValueError: If no API key is available and no client is given
        """
        self.api_key = api_key or Config.OPENAI_API_KEY
        if client is None and not self.api_key:
            raise ValueError("OPENAI_API_KEY not found in environment")

        self.model = model or Config.OPENAI_MODEL
        self.max_tokens = max_tokens or Config.REPLY_MAX_TOKENS
        self.timeout = timeout or Config.REPLY_GENERATION_TIMEOUT
        self.client = client or OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=1)
        self._logger = logging.getLogger(__name__)

    def generate_reply(self, transcript: Sequence[TranscriptTurn], customer_name: str) -> str:
        """
        Generate the customer's next message.

        Args:
            transcript: Ordered operator/customer turns, oldest first
            customer_name: Display name of the customer being impersonated

        Returns:
            Reply text (may be empty if the model returned nothing)

        Raises:
            ExternalGenerationFailure: If the API call fails
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": build_system_prompt(customer_name)},
                    {"role": "user", "content": build_conversation_prompt(transcript, customer_name)},
                ],
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            self._logger.error(f"OpenAI API error while generating reply for {customer_name}: {e}")
            raise ExternalGenerationFailure(str(e)) from e

        if not response.choices:
            raise ExternalGenerationFailure("OpenAI returned no choices")

        content = response.choices[0].message.content or ""
        self._logger.debug(f"Generated {len(content)} chars for {customer_name} with {self.model}")
        return content.strip()
