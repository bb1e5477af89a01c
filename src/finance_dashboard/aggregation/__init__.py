"""
Monthly aggregation for the finance dashboards.

Turns a flat list of transactions into the figures the dashboards show:
a filtered subset, confirmed/pending totals, a daily series and an income
source comparison. Every function here is pure and never raises for odd
data (unknown dates simply never fall in a month).

Quick Start:
    >>> from finance_dashboard.aggregation import MonthPeriod, filter_transactions, summarize
    >>>
    >>> march = filter_transactions(transactions, MonthPeriod(2024, 3))
    >>> summarize(march).net_balance
"""
from finance_dashboard.aggregation.periods import MonthPeriod
from finance_dashboard.aggregation.filters import (
    ALL,
    TransactionFilter,
    filter_transactions,
)
from finance_dashboard.aggregation.summary import Summary, summarize
from finance_dashboard.aggregation.series import (
    INCOME_SOURCES,
    DailyTotals,
    SourceComparison,
    daily_series,
    income_source_comparison,
)

__all__ = [
    "ALL",
    "MonthPeriod",
    "TransactionFilter",
    "filter_transactions",
    "Summary",
    "summarize",
    "INCOME_SOURCES",
    "DailyTotals",
    "SourceComparison",
    "daily_series",
    "income_source_comparison",
]
