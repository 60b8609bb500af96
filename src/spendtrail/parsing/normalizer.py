"""Whitespace normalization for extracted statement text."""
import re

_WHITESPACE_RUN = re.compile(r"\s+")
_BLANK_LINES = re.compile(r"\n\s*\n")


def normalize_text(text: str) -> str:
    """
    Collapse whitespace so the text can be scanned as a single stream.

    Every whitespace run (newlines included) becomes one space, remaining
    blank-line gaps collapse to one newline, and the ends are trimmed.
    Applying it twice gives the same result as applying it once.

    Args:
        text: Raw extracted text

    Returns:
        Normalized text
    """
    text = _WHITESPACE_RUN.sub(" ", text)
    text = _BLANK_LINES.sub("\n", text)
    return text.strip()
