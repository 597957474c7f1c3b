"""Phone number normalization and display formatting utilities."""
import re
from typing import Pattern


class PhoneNumberFormatter:
    """Utility class for phone number normalization and display."""

    NON_DIGIT_PATTERN: Pattern = re.compile(r"\D")

    @classmethod
    def digits(cls, phone_number: str) -> str:
        """
        Strip every non-digit character.

        Args:
            phone_number: Phone number in any format

        Returns:
            Just the digits, in their original order
        """
        return cls.NON_DIGIT_PATTERN.sub("", str(phone_number or ""))

    @classmethod
    def to_display(cls, identifier: str) -> str:
        """
        Group a digit string as ``+CC AA NNNNN-NNNN``.

        Short identifiers lose the trailing groups but never any digit.

        Args:
            identifier: Digit string (country code first)

        Returns:
            Display formatted phone number
        """
        digits = cls.digits(identifier)
        country, area, first, rest = digits[:2], digits[2:4], digits[4:9], digits[9:]

        formatted = f"+{country}"
        if area:
            formatted += f" {area}"
        if first:
            formatted += f" {first}"
        if rest:
            formatted += f"-{rest}"
        return formatted

    @classmethod
    def contains(cls, stored_phone: str, identifier: str) -> bool:
        """Return True if the digits of ``stored_phone`` contain ``identifier``."""
        return bool(identifier) and identifier in cls.digits(stored_phone)
