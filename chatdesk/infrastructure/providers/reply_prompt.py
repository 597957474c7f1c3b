"""Prompt building shared by the reply generators."""
from typing import List, Sequence

from chatdesk.domain.entities.chat import TranscriptTurn

OPERATOR_LABEL = "Agent"

SYSTEM_PROMPT_TEMPLATE = (
    "You are {customer_name}, a customer chatting with a company on WhatsApp.\n"
    "Keep replies short, informal and direct, like a real chat.\n"
    "Be polite but occasionally impatient if the problem is not solved.\n"
    "Never use complex markdown formatting, use emojis sparingly."
)


def build_system_prompt(customer_name: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(customer_name=customer_name)


def speaker_label(turn: TranscriptTurn, customer_name: str) -> str:
    return customer_name if turn.role == TranscriptTurn.CUSTOMER else OPERATOR_LABEL


def build_conversation_prompt(transcript: Sequence[TranscriptTurn], customer_name: str) -> str:
    """
    Render the transcript as a chat log ending with the customer's empty turn.

    Example::

        Agent: Hello, how can I help?
        Ana: My order is late
        Agent: Let me check
        Ana:
    """
    lines: List[str] = [
        f"{speaker_label(turn, customer_name)}: {turn.text}" for turn in transcript
    ]
    lines.append(f"{customer_name}:")
    return "\n".join(lines)
