"""Data models for statement parsing."""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class ParsedTransaction:
    """Candidate transaction recovered from statement text."""
    date: datetime
    description: str
    amount: Decimal  # always positive, currency stripped


@dataclass(frozen=True)
class RawSegment:
    """Anchor text plus everything up to the next anchor."""
    anchor: str
    text: str
