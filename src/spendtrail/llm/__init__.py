"""LLM classification and analytics module."""
from .models import (
    CATEGORIES,
    TYPES,
    Classification,
    ClassifiedTransaction,
    Preference,
    AnalyticsReport
)
from .classifier import TransactionClassifier
from .preferences import PreferenceBook
from .aggregator import Aggregator

__all__ = [
    "CATEGORIES",
    "TYPES",
    "Classification",
    "ClassifiedTransaction",
    "Preference",
    "AnalyticsReport",
    "TransactionClassifier",
    "PreferenceBook",
    "Aggregator"
]
