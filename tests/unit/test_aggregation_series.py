import pytest
from datetime import timedelta, timezone
from decimal import Decimal

from finance_dashboard.aggregation import (
    MonthPeriod,
    daily_series,
    filter_transactions,
    income_source_comparison,
)
from finance_dashboard.domain.enums import TransactionStatus, TransactionType

@pytest.mark.unit
class TestDailySeries:

    @pytest.mark.parametrize("year, month, days", [
        (2023, 2, 28),
        (2024, 2, 29),
        (2024, 4, 30),
        (2024, 3, 31),
    ])
    def test_dense_series_for_empty_month(self, year, month, days):
        series = daily_series([], MonthPeriod(year, month))

        assert len(series) == days
        assert [bucket.day for bucket in series] == list(range(1, days + 1))
        assert all(b.income == 0 and b.expense == 0 for b in series)

    def test_march_book(self, march_transactions):
        period = MonthPeriod(2024, 3)

        series = daily_series(filter_transactions(march_transactions, period), period)

        assert len(series) == 31
        assert series[0].income == Decimal("5000")
        assert series[0].name == "1"
        assert series[4].expense == Decimal("1500")
        # pending outdoor event on the 15th is not realized yet
        assert series[14].income == Decimal("0")
        active = [b.day for b in series if b.income or b.expense]
        assert active == [1, 5]

    def test_same_day_amounts_accumulate(self, make_transaction):
        from conftest import utc
        period = MonthPeriod(2024, 2)
        transactions = [
            make_transaction(amount=Decimal("10"), date=utc(2024, 2, 29, 8)),
            make_transaction(amount=Decimal("15"), date=utc(2024, 2, 29, 17)),
            make_transaction(type=TransactionType.EXPENSE, amount=Decimal("4"), date=utc(2024, 2, 29)),
        ]

        series = daily_series(transactions, period)

        assert series[28].income == Decimal("25")
        assert series[28].expense == Decimal("4")

    def test_rows_outside_month_ignored(self, mixed_transactions):
        series = daily_series(mixed_transactions, MonthPeriod(2024, 3))
        assert sum(b.income for b in series) == Decimal("340")  # 300 + 40, Feb and unknown dates left out
        assert sum(b.expense for b in series) == Decimal("150")

    def test_day_read_in_timezone(self, make_transaction):
        from conftest import utc
        nairobi = timezone(timedelta(hours=3))
        txn = make_transaction(amount=Decimal("10"), date=utc(2024, 3, 9, 22))

        series = daily_series([txn], MonthPeriod(2024, 3), tz=nairobi)

        assert series[9].income == Decimal("10")
        assert series[8].income == Decimal("0")


@pytest.mark.unit
class TestIncomeSourceComparison:

    def test_march_book(self, march_transactions):
        rows = income_source_comparison(march_transactions)

        assert [row.as_row() for row in rows] == [
            {"name": "Studio", "Confirmed": Decimal("5000"), "Pending": Decimal("0")},
            {"name": "Outdoor", "Confirmed": Decimal("0"), "Pending": Decimal("1200")},
        ]

    def test_always_two_rows(self):
        rows = income_source_comparison([])
        assert [(r.name, r.category) for r in rows] == [
            ("Studio", "Studio Income"),
            ("Outdoor", "Outdoor Events Income"),
        ]
        assert all(r.confirmed == 0 and r.pending == 0 for r in rows)

    def test_other_categories_and_expenses_excluded(self, make_transaction):
        rows = income_source_comparison([
            make_transaction(category="Print Sales", amount=Decimal("80")),
            make_transaction(type=TransactionType.EXPENSE, category="Studio Income", amount=Decimal("60")),
            make_transaction(category="studio income", amount=Decimal("7")),
            make_transaction(category="Studio Income", amount=Decimal("5"), status=TransactionStatus.PENDING),
        ])

        studio, outdoor = rows
        assert studio.confirmed == Decimal("0")
        assert studio.pending == Decimal("5")
        assert outdoor.confirmed == outdoor.pending == Decimal("0")
