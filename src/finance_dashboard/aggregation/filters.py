from dataclasses import dataclass, replace
from datetime import timezone, tzinfo
from typing import Iterable, List, Optional, Union

from finance_dashboard.aggregation.periods import MonthPeriod
from finance_dashboard.domain.models import Transaction

# Filter value meaning "do not restrict on this field"
ALL = "all"

UserFilter = Optional[str]
BusinessFilter = Union[bool, str]


@dataclass(frozen=True)
class TransactionFilter:
    """
    Criteria for narrowing a transaction list.

    Each criterion defaults to not restricting anything:
    - period: None keeps every date, a MonthPeriod keeps that calendar month
    - user: ALL keeps everyone, None keeps rows with no user, a name keeps
      that user's rows
    - business: ALL keeps everything, True keeps business rows, False keeps
      personal rows
    """
    period: Optional[MonthPeriod] = None
    user: UserFilter = ALL
    business: BusinessFilter = ALL
    tz: tzinfo = timezone.utc

    def __post_init__(self):
        if self.business != ALL and not isinstance(self.business, bool):
            raise ValueError(f"Business filter must be '{ALL}', True or False, got {self.business!r}")

    def matches(self, transaction: Transaction) -> bool:
        if self.period is not None and not self.period.contains(transaction.date, self.tz):
            return False

        if self.user != ALL and transaction.user != self.user:
            return False

        if self.business != ALL and transaction.is_business != self.business:
            return False

        return True

    def apply(self, transactions: Iterable[Transaction]) -> List[Transaction]:
        """Return matching transactions, keeping their input order"""
        return [txn for txn in transactions if self.matches(txn)]

    def combine(self, other: "TransactionFilter") -> "TransactionFilter":
        """
        Merge two filters restricting different fields.

        Raises:
            ValueError: If both filters restrict the same field differently
        """
        merged = self
        for name in ("period", "user", "business"):
            mine = getattr(self, name)
            theirs = getattr(other, name)
            if theirs == _UNRESTRICTED[name]:
                continue
            if mine != _UNRESTRICTED[name] and mine != theirs:
                raise ValueError(f"Conflicting '{name}' criteria: {mine!r} and {theirs!r}")
            merged = replace(merged, **{name: theirs})
        return merged


_UNRESTRICTED = {"period": None, "user": ALL, "business": ALL}


def filter_transactions(
    transactions: Iterable[Transaction],
    period: Optional[MonthPeriod] = None,
    user: UserFilter = ALL,
    business: BusinessFilter = ALL,
    tz: tzinfo = timezone.utc,
) -> List[Transaction]:
    """
    Narrow transactions to one month, user and business/personal scope.

    Args:
        transactions: Transactions to filter (left untouched)
        period: Month to keep, or None for every month
        user: ALL, None for rows without a user, or a user name
        business: ALL, True for business rows, False for personal rows
        tz: Timezone used to decide which month a transaction falls in

    Returns:
        New list of matching transactions in input order

    Example:
        march = filter_transactions(txns, MonthPeriod(2024, 3), business=True)
    """
    criteria = TransactionFilter(period=period, user=user, business=business, tz=tz)
    return criteria.apply(transactions)
