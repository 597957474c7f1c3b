"""Interface for reply text generators (Strategy Pattern).

This allows switching between different generation backends:
- OpenAI Chat Completions
- LangChain chat models
- Offline (no generator configured)
"""
from abc import ABC, abstractmethod
from typing import Sequence

from chatdesk.domain.entities.chat import TranscriptTurn


class IReplyGenerator(ABC):
    """
    Interface for generating a simulated customer reply.

    Implementations can be swapped without changing the reply simulator.
    """

    @abstractmethod
    def generate_reply(self, transcript: Sequence[TranscriptTurn], customer_name: str) -> str:
        """
        Generate the customer's next message.

        Args:
            transcript: Ordered operator/customer turns, oldest first
            customer_name: Display name of the customer being impersonated

        Returns:
            Short reply text

        Raises:
            ExternalGenerationFailure: If the backend is unavailable or errors
        """
        pass
