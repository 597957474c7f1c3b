"""Reply generator used when no text generation backend is configured."""
from typing import Sequence

from chatdesk.domain.entities.chat import TranscriptTurn
from chatdesk.domain.exceptions import ExternalGenerationFailure
from chatdesk.domain.interfaces.reply_generator import IReplyGenerator


class OfflineReplyGenerator(IReplyGenerator):
    """Always unavailable; the reply simulator answers with its fallback text."""

    def generate_reply(self, transcript: Sequence[TranscriptTurn], customer_name: str) -> str:
        raise ExternalGenerationFailure("No reply generator configured")
