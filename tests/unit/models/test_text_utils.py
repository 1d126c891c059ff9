"""Unit tests for the Arabic script check."""

import pytest

from arabic_grammar_gateway.text_utils import is_valid_arabic


@pytest.mark.parametrize(
    "text",
    [
        "ذهب الطالب إلى المدرسة",
        "العلمُ نورٌ",
        "Hello مرحبا",
        "ﷺ",
        "ﻻ",
    ],
)
def test_arabic_text_accepted(text):
    """Test any Arabic-block character is enough."""
    assert is_valid_arabic(text) is True


@pytest.mark.parametrize("text", ["", "   ", "Hello world", "12345", "Привет"])
def test_non_arabic_rejected(text):
    """Test text without Arabic characters is rejected."""
    assert is_valid_arabic(text) is False
