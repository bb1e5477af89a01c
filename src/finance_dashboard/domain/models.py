from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from finance_dashboard.domain.dates import normalize_date, to_iso
from finance_dashboard.domain.enums import TransactionStatus, TransactionType

@dataclass
class Transaction:
    """Core domain model representing a single income or expense"""
    type: TransactionType
    category: str
    amount: Decimal
    date: Optional[datetime]
    status: TransactionStatus
    is_business: bool = True
    user: Optional[str] = None
    details: Optional[str] = None
    due_date: Optional[datetime] = None
    id: Optional[str] = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == TransactionStatus.CONFIRMED

    @property
    def owner(self) -> str:
        """Label used in the User/Business column"""
        return "Business" if self.is_business else (self.user or "")

    @classmethod
    def from_record(cls, record: Dict[str, Any], tz: tzinfo = timezone.utc) -> "Transaction":
        """
        Build a transaction from a stored or imported record.

        Accepts both the camelCase keys of the browser dashboard
        (``isBusiness``, ``dueDate``) and snake_case keys. Dates may be ISO
        strings or seconds/nanoseconds pairs and are normalized here; dates
        without an offset are read in ``tz``. A user on a business record is
        dropped.

        Raises:
            ValueError: If type, status or amount cannot be read, or the
                amount is negative
        """
        is_business = bool(record.get("isBusiness", record.get("is_business", True)))
        return cls(
            id=record.get("id"),
            type=TransactionType(record["type"]),
            category=record.get("category") or "",
            details=record.get("details") or None,
            amount=parse_non_negative_amount(record.get("amount")),
            date=normalize_date(record.get("date"), tz=tz),
            status=TransactionStatus(record["status"]),
            user=None if is_business else (record.get("user") or None),
            is_business=is_business,
            due_date=normalize_date(record.get("dueDate", record.get("due_date")), tz=tz),
        )

    def to_record(self) -> Dict[str, Any]:
        """Serialize using the browser dashboard's field names"""
        return {
            "id": self.id,
            "type": self.type.value,
            "category": self.category,
            "details": self.details,
            "amount": float(self.amount),
            "date": to_iso(self.date),
            "status": self.status.value,
            "user": self.user,
            "isBusiness": self.is_business,
            "dueDate": to_iso(self.due_date),
        }

    def __repr__(self):
        sign = "+" if self.type == TransactionType.INCOME else "-"
        return f"Transaction({self.id}, {self.category[:30]}, {sign}{self.amount}, {self.status.value})"


@dataclass
class NewTransaction:
    """Fields submitted from the management view"""
    type: TransactionType
    category: str
    amount: Decimal
    date: Optional[datetime]
    status: TransactionStatus
    is_business: bool = True
    user: Optional[str] = None
    details: Optional[str] = None
    due_date: Optional[datetime] = None


@dataclass
class PublicNewTransaction:
    """Fields submitted from the public view; the rest is filled in on save"""
    category: str
    amount: Decimal
    type: TransactionType = TransactionType.INCOME
    status: TransactionStatus = TransactionStatus.CONFIRMED
    details: Optional[str] = None


def parse_amount(value: Any) -> Decimal:
    """
    Read an amount as a Decimal.

    Floats go through str() so 0.1 stays 0.1.

    Raises:
        ValueError: If the value is not a number
    """
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    try:
        if isinstance(value, str):
            value = value.replace(",", "").strip()
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


def parse_non_negative_amount(value: Any) -> Decimal:
    """
    Read an amount that must not be negative, as on stored records.

    Raises:
        ValueError: If the value is not a number or is below zero
    """
    amount = parse_amount(value)
    if amount < 0:
        raise ValueError(f"Negative amount: {value!r}")
    return amount
