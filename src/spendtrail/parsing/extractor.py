"""Field extraction for a single statement segment."""
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

DEFAULT_CURRENCY_SYMBOLS = ("₹",)
DEFAULT_RAIL_KEYWORDS = ("UPI", "NEFT", "IMPS", "RTGS")
DEFAULT_DESCRIPTION = "Transaction"
DEFAULT_MAX_NAME_LENGTH = 120

_MINUS = "-−"


def build_amount_pattern(currency_symbols: Iterable[str] = DEFAULT_CURRENCY_SYMBOLS) -> re.Pattern:
    """
    Build the pattern for a currency-prefixed amount token.

    Matches "₹399", "₹1,500.00", "₹12,34,567.89" and a minus sign placed
    directly before or after the symbol ("-₹50", "₹-50"). A dash
    separated from the symbol by a space is punctuation, not a sign.
    """
    symbols = sorted(set(currency_symbols), key=len, reverse=True)
    if not symbols:
        raise ValueError("At least one currency symbol is required")
    alternatives = "|".join(re.escape(symbol) for symbol in symbols)
    return re.compile(
        rf"(?P<lead>[{_MINUS}]?)(?:{alternatives})(?P<trail>[{_MINUS}]?)\s?"
        r"(?P<number>\d+(?:,\d+)*(?:\.\d{1,2})?)"
    )


def extract_amount(text: str, pattern: re.Pattern = None) -> Optional[Decimal]:
    """
    Return the first currency-prefixed amount in text, or None.

    Thousands separators are stripped. The value keeps its sign so that
    range validation can reject negative amounts.
    """
    pattern = pattern or DEFAULT_AMOUNT_PATTERN
    match = pattern.search(text)
    if not match:
        return None

    value = Decimal(match.group("number").replace(",", ""))
    if match.group("lead") or match.group("trail"):
        value = -value
    return value


@dataclass(frozen=True)
class DescriptionRule:
    """A directional phrase and the label it produces."""
    pattern: re.Pattern
    prefix: str

    def apply(self, text: str) -> Optional[str]:
        match = self.pattern.search(text)
        if not match:
            return None
        name = match.group("name").strip()
        if not name:
            return None
        return f"{self.prefix} {name}"


def build_description_rules(
    rail_keywords: Sequence[str] = DEFAULT_RAIL_KEYWORDS,
    max_name_length: int = DEFAULT_MAX_NAME_LENGTH
) -> List[DescriptionRule]:
    """
    Build the ordered description rules.

    The counterparty name is the shortest run of letters, digits, spaces and
    periods that ends at a transfer-rail keyword or at the end of the text.
    Names longer than max_name_length do not match, which keeps every
    phrase occurrence to a bounded scan. "Paid to" is listed first and wins
    over "Received from".
    """
    if max_name_length < 1:
        raise ValueError(f"max_name_length must be positive, got {max_name_length}")

    if rail_keywords:
        rails = "|".join(re.escape(keyword) for keyword in rail_keywords)
        terminator = rf"(?:\s+(?:{rails})\b|$)"
    else:
        terminator = "$"

    def phrase(words: str) -> re.Pattern:
        return re.compile(rf"\b{words}\s+(?P<name>(?:[^\W_]|[\s.]){{1,{max_name_length}}}?){terminator}", re.IGNORECASE)

    return [
        DescriptionRule(phrase(r"paid\s+to"), "Paid to"),
        DescriptionRule(phrase(r"received\s+from"), "Received from"),
    ]


def extract_description(text: str, rules: Sequence[DescriptionRule] = None) -> str:
    """Apply rules in order; the first match wins."""
    for rule in rules if rules is not None else DEFAULT_DESCRIPTION_RULES:
        description = rule.apply(text)
        if description:
            return description
    return DEFAULT_DESCRIPTION


DEFAULT_AMOUNT_PATTERN = build_amount_pattern()
DEFAULT_DESCRIPTION_RULES = build_description_rules()
