from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal
from typing import List, Optional

from finance_dashboard.aggregation import MonthPeriod
from finance_dashboard.domain.enums import TransactionStatus, TransactionType
from finance_dashboard.domain.models import Transaction

def _on_day(period: MonthPeriod, day: int, tz: tzinfo) -> datetime:
    day = min(day, period.days)
    return datetime(period.year, period.month, day, 12, tzinfo=tz).astimezone(timezone.utc)

def sample_transactions(
    today: Optional[date] = None,
    tz: tzinfo = timezone.utc,
) -> List[Transaction]:
    """
    Demo transactions placed in the current and previous month.

    Args:
        today: Reference day, defaults to today in tz
        tz: Timezone the demo days are placed in
    """
    today = today or datetime.now(tz).date()
    current = MonthPeriod(today.year, today.month)
    previous = current.previous()

    return [
        Transaction(
            type=TransactionType.INCOME,
            category="Studio Income",
            details="Wedding Photoshoot",
            amount=Decimal("5000"),
            date=_on_day(current, 1, tz),
            status=TransactionStatus.CONFIRMED,
            is_business=True,
        ),
        Transaction(
            type=TransactionType.EXPENSE,
            category="Office Rent",
            amount=Decimal("1500"),
            date=_on_day(current, 5, tz),
            status=TransactionStatus.CONFIRMED,
            is_business=True,
        ),
        Transaction(
            type=TransactionType.INCOME,
            category="Outdoor Events Income",
            details="Corporate Event Coverage",
            amount=Decimal("1200"),
            date=_on_day(current, 15, tz),
            status=TransactionStatus.PENDING,
            user="Kelvin",
            is_business=False,
            due_date=_on_day(current, 25, tz),
        ),
        Transaction(
            type=TransactionType.INCOME,
            category="Studio Income",
            details="Product Photography",
            amount=Decimal("2500"),
            date=_on_day(previous, today.day, tz),
            status=TransactionStatus.CONFIRMED,
            is_business=True,
        ),
        Transaction(
            type=TransactionType.EXPENSE,
            category="Software Subscription",
            amount=Decimal("150"),
            date=_on_day(current, 20, tz),
            status=TransactionStatus.CONFIRMED,
            user="Brian",
            is_business=False,
        ),
    ]
