"""Transaction analytics."""
from decimal import Decimal, ROUND_HALF_UP
from collections import defaultdict
from datetime import datetime
from typing import List, Optional

from .models import AnalyticsReport, ClassifiedTransaction, GroupTotal, MonthTotal, TypeShare
from spendtrail.utils import get_logger, ValidationError

logger = get_logger()

GROUP_FIELDS = ("category", "type")
_CENT = Decimal("0.01")


class Aggregator:
    """Aggregates classified transactions into analytics views."""

    def analytics(
        self,
        transactions: List[ClassifiedTransaction],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        group_by: str = "category"
    ) -> AnalyticsReport:
        """
        Build analytics for transactions within [start, end].

        Args:
            transactions: Classified transactions
            start: Inclusive lower date bound
            end: Inclusive upper date bound
            group_by: "category" or "type"

        Returns:
            AnalyticsReport object

        Raises:
            ValidationError: On empty input or unknown group_by
        """
        if not transactions:
            raise ValidationError("Cannot aggregate empty transaction list")
        if group_by not in GROUP_FIELDS:
            raise ValidationError(f"group_by must be one of {GROUP_FIELDS}, got '{group_by}'")

        selected = [
            txn for txn in transactions
            if (start is None or txn.date >= start) and (end is None or txn.date <= end)
        ]

        report = AnalyticsReport(
            groups=self._group_totals(selected, group_by),
            monthly=self._monthly_totals(selected),
            types=self._type_shares(selected),
            total_amount=sum((txn.amount for txn in selected), Decimal("0")),
            group_by=group_by
        )

        logger.info(
            f"Aggregated {len(selected)} transactions into {len(report.groups)} {group_by} groups "
            f"across {len(report.monthly)} months"
        )
        return report

    def _group_totals(self, transactions: List[ClassifiedTransaction], group_by: str) -> List[GroupTotal]:
        totals = defaultdict(Decimal)
        counts = defaultdict(int)
        for txn in transactions:
            key = getattr(txn, group_by)
            totals[key] += txn.amount
            counts[key] += 1

        groups = [
            GroupTotal(key, totals[key], counts[key], (totals[key] / counts[key]).quantize(_CENT, ROUND_HALF_UP))
            for key in totals
        ]
        groups.sort(key=lambda g: g.total, reverse=True)
        return groups

    def _monthly_totals(self, transactions: List[ClassifiedTransaction]) -> List[MonthTotal]:
        totals = defaultdict(Decimal)
        counts = defaultdict(int)
        for txn in transactions:
            key = (txn.date.year, txn.date.month)
            totals[key] += txn.amount
            counts[key] += 1

        return [MonthTotal(year, month, totals[(year, month)], counts[(year, month)]) for year, month in sorted(totals)]

    def _type_shares(self, transactions: List[ClassifiedTransaction]) -> List[TypeShare]:
        totals = defaultdict(Decimal)
        counts = defaultdict(int)
        for txn in transactions:
            totals[txn.type] += txn.amount
            counts[txn.type] += 1

        overall = sum(totals.values(), Decimal("0"))
        shares = []
        for txn_type, total in totals.items():
            percentage = (total / overall * 100).quantize(_CENT, ROUND_HALF_UP) if overall else Decimal("0.00")
            shares.append(TypeShare(txn_type, total, counts[txn_type], percentage))
        return shares
