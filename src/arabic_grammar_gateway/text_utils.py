"""Arabic text helpers for request validation."""

import re

# Arabic, Arabic Supplement, Arabic Extended-A, Presentation Forms A and B
ARABIC_CHARS = re.compile(
    "[\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF\uFB50-\uFDFF\uFE70-\uFEFF]"
)


def is_valid_arabic(text: object) -> bool:
    """
    True if ``text`` is a non-blank string containing at least one Arabic character.

    Examples:
        >>> is_valid_arabic("ذهب الولد")
        True
        >>> is_valid_arabic("hello")
        False
        >>> is_valid_arabic("   ")
        False
    """
    if not isinstance(text, str) or not text.strip():
        return False
    return ARABIC_CHARS.search(text) is not None
