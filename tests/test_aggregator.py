"""Tests for transaction analytics."""
import unittest
from datetime import datetime
from decimal import Decimal

from spendtrail.llm import Aggregator, ClassifiedTransaction
from spendtrail.utils import ValidationError


def _txn(date, amount, category, txn_type):
    return ClassifiedTransaction(
        date=date,
        description="test",
        amount=Decimal(amount),
        category=category,
        type=txn_type
    )


class TestAggregator(unittest.TestCase):
    """Test Aggregator functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.aggregator = Aggregator()
        self.transactions = [
            _txn(datetime(2025, 9, 1), "100", "Food", "Want"),
            _txn(datetime(2025, 9, 2), "50", "Food", "Want"),
            _txn(datetime(2025, 8, 20), "200", "Bills", "Need"),
            _txn(datetime(2025, 10, 5), "250", "Bills", "Need"),
        ]

    def test_group_by_category(self):
        """Test totals, counts and averages per category."""
        report = self.aggregator.analytics(self.transactions)

        self.assertEqual([g.key for g in report.groups], ["Bills", "Food"])
        self.assertEqual(report.groups[0].total, Decimal("450"))
        self.assertEqual(report.groups[1].count, 2)
        self.assertEqual(report.groups[1].average, Decimal("75.00"))
        self.assertEqual(report.total_amount, Decimal("600"))

    def test_group_by_type(self):
        """Test grouping on transaction type."""
        report = self.aggregator.analytics(self.transactions, group_by="type")
        self.assertEqual([g.key for g in report.groups], ["Need", "Want"])
        self.assertEqual(report.group_by, "type")

    def test_monthly_breakdown(self):
        """Test chronological month totals."""
        report = self.aggregator.analytics(self.transactions)

        self.assertEqual(
            [(m.year, m.month, m.total) for m in report.monthly],
            [(2025, 8, Decimal("200")), (2025, 9, Decimal("150")), (2025, 10, Decimal("250"))]
        )

    def test_type_percentages(self):
        """Test type share of the overall total."""
        report = self.aggregator.analytics(self.transactions)
        shares = {share.type: share.percentage for share in report.types}

        self.assertEqual(shares, {"Want": Decimal("25.00"), "Need": Decimal("75.00")})

    def test_date_range(self):
        """Test inclusive date filtering."""
        report = self.aggregator.analytics(
            self.transactions,
            start=datetime(2025, 9, 1),
            end=datetime(2025, 9, 30)
        )

        self.assertEqual(report.total_amount, Decimal("150"))
        self.assertEqual(len(report.monthly), 1)

    def test_empty_transactions_raises_error(self):
        """Test that empty transaction list raises error."""
        with self.assertRaises(ValidationError):
            self.aggregator.analytics([])

    def test_unknown_group_by(self):
        """Test invalid grouping field."""
        with self.assertRaises(ValidationError):
            self.aggregator.analytics(self.transactions, group_by="merchant")


if __name__ == "__main__":
    unittest.main()
