"""Split statement text into one segment per timestamp anchor."""
import re
from datetime import datetime
from typing import Iterator

from .models import RawSegment

# e.g. "01 Sep, 2025 12:38 AM"
ANCHOR_PATTERN = re.compile(
    r"(?P<day>\d{1,2})\s+(?P<month>[A-Za-z]{3}),?\s+(?P<year>\d{4})\s+"
    r"(?P<hour>\d{1,2}):(?P<minute>\d{2})\s*(?P<meridiem>[AaPp][Mm])"
)

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}


def iter_segments(text: str) -> Iterator[RawSegment]:
    """
    Lazily yield segments in order of appearance.

    Each segment holds the matched anchor and the text between it and the
    next anchor (or the end of the string). Text before the first anchor is
    ignored.
    """
    previous = None
    for match in ANCHOR_PATTERN.finditer(text):
        if previous is not None:
            yield RawSegment(previous.group(0), text[previous.end():match.start()])
        previous = match

    if previous is not None:
        yield RawSegment(previous.group(0), text[previous.end():])


def parse_anchor_date(anchor: str) -> datetime:
    """
    Parse an anchor such as "01 Sep, 2025 12:38 AM".

    Raises:
        ValueError: Unknown month, out-of-range day or malformed time
    """
    match = ANCHOR_PATTERN.fullmatch(anchor.strip())
    if not match:
        raise ValueError(f"Not a timestamp anchor: {anchor!r}")

    month = MONTHS.get(match.group("month").lower())
    if month is None:
        raise ValueError(f"Unknown month name: {match.group('month')!r}")

    hour = int(match.group("hour"))
    if not 1 <= hour <= 12:
        raise ValueError(f"Hour out of range for 12-hour clock: {hour}")
    hour %= 12
    if match.group("meridiem").upper() == "PM":
        hour += 12

    return datetime(
        int(match.group("year")),
        month,
        int(match.group("day")),
        hour,
        int(match.group("minute"))
    )
