"""
Chart-ready series built from a month's transactions.
"""
from dataclasses import dataclass
from datetime import timezone, tzinfo
from decimal import Decimal
from typing import Iterable, List, Tuple

from finance_dashboard.aggregation.periods import MonthPeriod
from finance_dashboard.domain.enums import TransactionStatus, TransactionType
from finance_dashboard.domain.models import Transaction

STUDIO_INCOME = "Studio Income"
OUTDOOR_EVENTS_INCOME = "Outdoor Events Income"

# (chart label, category)
INCOME_SOURCES: Tuple[Tuple[str, str], ...] = (
    ("Studio", STUDIO_INCOME),
    ("Outdoor", OUTDOOR_EVENTS_INCOME),
)


@dataclass
class DailyTotals:
    """Realized income and expense for one day of the month"""
    day: int
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def name(self) -> str:
        return str(self.day)


@dataclass
class SourceComparison:
    """Confirmed vs pending income for one income category"""
    name: str
    category: str
    confirmed: Decimal = Decimal("0")
    pending: Decimal = Decimal("0")

    def as_row(self) -> dict:
        return {"name": self.name, "Confirmed": self.confirmed, "Pending": self.pending}


def daily_series(
    transactions: Iterable[Transaction],
    period: MonthPeriod,
    tz: tzinfo = timezone.utc,
) -> List[DailyTotals]:
    """
    Build one bucket per day of the month from confirmed transactions.

    The series is dense: every day 1..N is present, in order, even when
    nothing happened that day. Pending transactions are left out since the
    series shows realized cash flow.

    Args:
        transactions: Transactions already scoped to the month
        period: The month, used for its day count
        tz: Timezone the day of month is read in

    Returns:
        List of length period.days
    """
    buckets = [DailyTotals(day=day) for day in range(1, period.days + 1)]

    for txn in transactions:
        if txn.status != TransactionStatus.CONFIRMED:
            continue
        if not period.contains(txn.date, tz):
            continue

        bucket = buckets[txn.date.astimezone(tz).day - 1]
        if txn.type == TransactionType.INCOME:
            bucket.income += txn.amount
        elif txn.type == TransactionType.EXPENSE:
            bucket.expense += txn.amount

    return buckets


def income_source_comparison(transactions: Iterable[Transaction]) -> List[SourceComparison]:
    """
    Confirmed and pending income for the studio and outdoor event categories.

    Always returns both rows, in that order. Expenses and other income
    categories are ignored.
    """
    rows = [SourceComparison(name=name, category=category) for name, category in INCOME_SOURCES]
    by_category = {row.category: row for row in rows}

    for txn in transactions:
        if txn.type != TransactionType.INCOME:
            continue
        row = by_category.get(txn.category)
        if row is None:
            continue
        if txn.status == TransactionStatus.CONFIRMED:
            row.confirmed += txn.amount
        else:
            row.pending += txn.amount

    return rows
