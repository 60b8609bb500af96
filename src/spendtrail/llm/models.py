"""Data models for classification and analytics."""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

CATEGORIES = [
    "Food",
    "Travel",
    "Shopping",
    "Bills",
    "Entertainment",
    "Healthcare",
    "Education",
    "Investment",
    "Salary",
    "Other",
]

TYPES = ["Need", "Want", "Investment", "Income", "Other"]

FALLBACK_LABEL = "Other"


@dataclass
class Classification:
    """Model verdict for one transaction."""
    index: int  # 1-based position in the batch
    category: str
    type: str
    merchant: str = ""
    confidence: int = 100
    note: str = ""


@dataclass
class ClassifiedTransaction:
    """Transaction ready to be stored."""
    date: datetime
    description: str
    amount: Decimal
    category: str
    type: str
    merchant: str = ""
    confidence: int = 100
    note: str = ""
    batch_id: Optional[str] = None
    source: str = "pdf-extracted"


@dataclass
class Preference:
    """User's preferred labelling for a merchant."""
    merchant: str
    description: str
    category: str
    type: str
    tags: List[str] = field(default_factory=list)
    usage_count: int = 1
    confidence: int = 50


@dataclass
class GroupTotal:
    """Totals for one category or type."""
    key: str
    total: Decimal
    count: int
    average: Decimal


@dataclass
class MonthTotal:
    """Totals for one calendar month."""
    year: int
    month: int
    total: Decimal
    count: int


@dataclass
class TypeShare:
    """Share of the overall total for one type."""
    type: str
    total: Decimal
    count: int
    percentage: Decimal


@dataclass
class AnalyticsReport:
    """Aggregated analytics views."""
    groups: List[GroupTotal]
    monthly: List[MonthTotal]
    types: List[TypeShare]
    total_amount: Decimal
    group_by: str = "category"
