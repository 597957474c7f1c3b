"""Cleanup of generated reply text before it is shown as a WhatsApp message."""
import re
from typing import Optional, Pattern


class WhatsAppTextProcessor:
    """Turns raw model output into a plausible customer chat message."""

    CITATION_PATTERN: Pattern = re.compile(r"【.*?】")
    BOLD_PATTERN: Pattern = re.compile(r"\*\*(.*?)\*\*")
    BLANK_LINES_PATTERN: Pattern = re.compile(r"\n{3,}")
    QUOTES = "\"'“”"

    @classmethod
    def process(cls, text: str, speaker: Optional[str] = None) -> str:
        """
        Clean generated text for WhatsApp.

        Drops citation markers, converts markdown bold (``**x**``) to WhatsApp
        bold (``*x*``), removes an echoed ``"<speaker>:"`` prefix and
        surrounding quotes, and squeezes runs of blank lines.

        Args:
            text: Raw generated text
            speaker: Customer name the model may have echoed as a prefix

        Returns:
            Cleaned text, possibly empty
        """
        processed = cls.CITATION_PATTERN.sub("", text).strip()
        if speaker and processed.lower().startswith(f"{speaker.lower()}:"):
            processed = processed[len(speaker) + 1:].strip()
        if len(processed) > 1 and processed[0] in cls.QUOTES and processed[-1] in cls.QUOTES:
            processed = processed[1:-1].strip()
        processed = cls.BOLD_PATTERN.sub(r"*\1*", processed)
        return cls.BLANK_LINES_PATTERN.sub("\n\n", processed)
