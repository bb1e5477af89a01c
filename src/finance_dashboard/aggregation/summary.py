from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List

from finance_dashboard.domain.enums import TransactionStatus, TransactionType
from finance_dashboard.domain.models import Transaction

@dataclass(frozen=True)
class Summary:
    """
    Income and expense totals split by status.

    Pending amounts are expected but not realized, so ``net_balance`` only
    uses the confirmed totals. ``total_income`` and ``total_expense`` include
    pending amounts, which is what the public view shows.
    """
    confirmed_income: Decimal = Decimal("0")
    pending_income: Decimal = Decimal("0")
    confirmed_expense: Decimal = Decimal("0")
    pending_expense: Decimal = Decimal("0")

    @property
    def net_balance(self) -> Decimal:
        """Confirmed income minus confirmed expense"""
        return self.confirmed_income - self.confirmed_expense

    @property
    def total_income(self) -> Decimal:
        """Confirmed plus pending income"""
        return self.confirmed_income + self.pending_income

    @property
    def total_expense(self) -> Decimal:
        """Confirmed plus pending expense"""
        return self.confirmed_expense + self.pending_expense

    def __add__(self, other: "Summary") -> "Summary":
        return Summary(
            confirmed_income=self.confirmed_income + other.confirmed_income,
            pending_income=self.pending_income + other.pending_income,
            confirmed_expense=self.confirmed_expense + other.confirmed_expense,
            pending_expense=self.pending_expense + other.pending_expense,
        )

    def chart_rows(self) -> List[Dict[str, object]]:
        """Income vs expenditure, stacked by status"""
        return [
            {"name": "Income", "Confirmed": self.confirmed_income, "Pending": self.pending_income},
            {"name": "Expenditure", "Confirmed": self.confirmed_expense, "Pending": self.pending_expense},
        ]


def summarize(transactions: Iterable[Transaction]) -> Summary:
    """
    Reduce transactions to confirmed/pending income and expense totals.

    Rows with an unrecognized type are skipped. Any status other than
    confirmed counts as pending.
    """
    totals = {
        "confirmed_income": Decimal("0"),
        "pending_income": Decimal("0"),
        "confirmed_expense": Decimal("0"),
        "pending_expense": Decimal("0"),
    }

    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            kind = "income"
        elif txn.type == TransactionType.EXPENSE:
            kind = "expense"
        else:
            continue

        state = "confirmed" if txn.status == TransactionStatus.CONFIRMED else "pending"
        totals[f"{state}_{kind}"] += txn.amount

    return Summary(**totals)
