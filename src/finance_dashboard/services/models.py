"""
Service layer models - DTOs for service operations.

These models represent the results of service operations, not domain entities.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List

from finance_dashboard.aggregation import (
    DailyTotals,
    MonthPeriod,
    SourceComparison,
    Summary,
)
from finance_dashboard.domain.models import Transaction

@dataclass
class ImportResult:
    """
    Result of importing a transactions file.

    Tells apart transactions that were new from those whose ID was already
    in the store.
    """
    total_parsed: int
    new_transactions: int
    duplicates_skipped: int

    imported: List[Transaction] = field(default_factory=list)
    skipped: List[Transaction] = field(default_factory=list)

    filepath: str = ""
    file_format: str = ""

    @property
    def success(self) -> bool:
        """Import is successful if at least one transaction is imported"""
        return self.new_transactions > 0

    def __str__(self) -> str:
        "Human-readable summary"
        return "\n".join([
            f"Import summary for {self.filepath} ({self.file_format}):",
            f" New transactions: {self.new_transactions}",
            f" Duplicates skipped: {self.duplicates_skipped}",
        ])

    def __post_init__(self):
        """Validate counts match lists"""
        if self.new_transactions != len(self.imported):
            raise ValueError(
                f"Count mismatch: new_transactions={self.new_transactions} "
                f"but len(imported)={len(self.imported)}"
            )
        if self.duplicates_skipped != len(self.skipped):
            raise ValueError(
                f"Count mismatch: duplicates_skipped={self.duplicates_skipped} "
                f"but len(skipped)={len(self.skipped)}"
            )

@dataclass
class PublicSummary:
    """
    What the public view shows for a month.

    Totals include pending amounts; the net balance does not.
    """
    period: MonthPeriod
    summary: Summary

    @property
    def net_balance(self) -> Decimal:
        return self.summary.net_balance

    @property
    def total_income(self) -> Decimal:
        return self.summary.total_income

    @property
    def total_expense(self) -> Decimal:
        return self.summary.total_expense

    @property
    def chart_rows(self) -> List[Dict[str, object]]:
        return self.summary.chart_rows()

@dataclass
class MonthlyDashboard:
    """Everything the management view shows for a filtered month."""
    period: MonthPeriod
    transactions: List[Transaction]
    summary: Summary
    daily: List[DailyTotals]
    income_sources: List[SourceComparison]

    @property
    def total_transactions(self) -> int:
        return len(self.transactions)

    @property
    def pending(self) -> List[Transaction]:
        """Transactions still awaiting confirmation"""
        return [t for t in self.transactions if not t.is_confirmed]
