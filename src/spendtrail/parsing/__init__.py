"""Statement text parsing module."""
from .models import ParsedTransaction, RawSegment
from .normalizer import normalize_text
from .segmenter import iter_segments, parse_anchor_date
from .extractor import DescriptionRule, extract_amount, extract_description
from .collector import (
    DiscardReason,
    ParseReport,
    SegmentResult,
    StatementParser,
    parse_statement
)

__all__ = [
    "ParsedTransaction",
    "RawSegment",
    "normalize_text",
    "iter_segments",
    "parse_anchor_date",
    "DescriptionRule",
    "extract_amount",
    "extract_description",
    "DiscardReason",
    "ParseReport",
    "SegmentResult",
    "StatementParser",
    "parse_statement"
]
