"""Segment validation and transaction collection."""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Sequence

from .models import ParsedTransaction, RawSegment
from .normalizer import normalize_text
from .segmenter import iter_segments, parse_anchor_date
from .extractor import (
    DEFAULT_CURRENCY_SYMBOLS,
    DEFAULT_MAX_NAME_LENGTH,
    DEFAULT_RAIL_KEYWORDS,
    build_amount_pattern,
    build_description_rules,
    extract_amount,
    extract_description,
)
from spendtrail.utils import get_logger, MalformedInputError

logger = get_logger()

DEFAULT_MIN_AMOUNT = Decimal("0")
DEFAULT_MAX_AMOUNT = Decimal("10000000")


class DiscardReason(Enum):
    """Why a segment did not become a transaction."""
    NO_AMOUNT = "no_amount"
    AMOUNT_OUT_OF_RANGE = "amount_out_of_range"
    INVALID_DATE = "invalid_date"
    ERROR = "error"


@dataclass(frozen=True)
class SegmentResult:
    """Outcome of evaluating one segment."""
    segment: RawSegment
    transaction: Optional[ParsedTransaction] = None
    reason: Optional[DiscardReason] = None
    detail: str = ""

    @property
    def accepted(self) -> bool:
        return self.transaction is not None


@dataclass
class ParseReport:
    """Ordered transactions plus the segments that were dropped."""
    transactions: List[ParsedTransaction] = field(default_factory=list)
    discarded: List[SegmentResult] = field(default_factory=list)

    @property
    def segments_seen(self) -> int:
        return len(self.transactions) + len(self.discarded)

    @property
    def is_empty(self) -> bool:
        """True when no transactions were found."""
        return not self.transactions


class StatementParser:
    """Turns extracted statement text into ordered candidate transactions."""

    def __init__(
        self,
        currency_symbols: Sequence[str] = DEFAULT_CURRENCY_SYMBOLS,
        rail_keywords: Sequence[str] = DEFAULT_RAIL_KEYWORDS,
        min_amount: Decimal = DEFAULT_MIN_AMOUNT,
        max_amount: Decimal = DEFAULT_MAX_AMOUNT,
        max_name_length: int = DEFAULT_MAX_NAME_LENGTH
    ):
        """
        Initialize statement parser.

        Args:
            currency_symbols: Symbols that may prefix an amount
            rail_keywords: Transfer-rail keywords ending a counterparty name
            min_amount: Exclusive lower bound for accepted amounts
            max_amount: Inclusive upper bound for accepted amounts
            max_name_length: Longest counterparty name a description rule accepts
        """
        if min_amount >= max_amount:
            raise ValueError(f"min_amount ({min_amount}) must be below max_amount ({max_amount})")

        self.amount_pattern = build_amount_pattern(currency_symbols)
        self.description_rules = build_description_rules(rail_keywords, max_name_length)
        self.min_amount = Decimal(min_amount)
        self.max_amount = Decimal(max_amount)

    @classmethod
    def from_settings(cls, settings) -> "StatementParser":
        """Create a parser from AppSettings."""
        return cls(
            currency_symbols=settings.currency_symbols,
            rail_keywords=settings.rail_keywords,
            min_amount=settings.min_amount,
            max_amount=settings.max_amount,
            max_name_length=settings.max_name_length
        )

    def parse(self, text: str) -> List[ParsedTransaction]:
        """
        Extract transactions from statement text.

        Args:
            text: Raw extracted statement text

        Returns:
            Transactions in order of appearance; empty if none were found

        Raises:
            MalformedInputError: If text is not a string
        """
        return self.parse_report(text).transactions

    def parse_report(self, text: str) -> ParseReport:
        """Like parse, but also return the discarded segments."""
        if not isinstance(text, str):
            raise MalformedInputError(
                f"Statement text must be a string, got {type(text).__name__}"
            )

        report = ParseReport()
        for segment in iter_segments(normalize_text(text)):
            result = self.evaluate(segment)
            if result.accepted:
                report.transactions.append(result.transaction)
            else:
                logger.debug(
                    f"Discarded segment '{segment.anchor}': {result.reason.value} {result.detail}".rstrip()
                )
                report.discarded.append(result)

        logger.info(
            f"Parsed {len(report.transactions)} transactions from {report.segments_seen} segments "
            f"({len(report.discarded)} discarded)"
        )
        return report

    def evaluate(self, segment: RawSegment) -> SegmentResult:
        """
        Validate one segment and build its transaction.

        Never raises: any failure becomes a discarded result.
        """
        try:
            return self._evaluate(segment)
        except Exception as e:
            return SegmentResult(segment, reason=DiscardReason.ERROR, detail=str(e))

    def _evaluate(self, segment: RawSegment) -> SegmentResult:
        amount = extract_amount(segment.text, self.amount_pattern)
        if amount is None:
            return SegmentResult(segment, reason=DiscardReason.NO_AMOUNT)

        if not self.min_amount < amount <= self.max_amount:
            return SegmentResult(
                segment,
                reason=DiscardReason.AMOUNT_OUT_OF_RANGE,
                detail=str(amount)
            )

        try:
            date = parse_anchor_date(segment.anchor)
        except ValueError as e:
            return SegmentResult(segment, reason=DiscardReason.INVALID_DATE, detail=str(e))

        return SegmentResult(
            segment,
            transaction=ParsedTransaction(
                date=date,
                description=extract_description(segment.text, self.description_rules),
                amount=amount
            )
        )


def parse_statement(text: str) -> List[ParsedTransaction]:
    """Parse statement text with the default thresholds."""
    return StatementParser().parse(text)
