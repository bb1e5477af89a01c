import pytest
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, List

from finance_dashboard.domain.enums import TransactionStatus, TransactionType
from finance_dashboard.domain.models import Transaction
from finance_dashboard.repositories.memory import (
    InMemorySettingsRepository,
    InMemoryTransactionRepository,
)
from finance_dashboard.services.transaction_service import TransactionService

PIN = "199542"

def utc(year: int, month: int, day: int, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)

@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    """Build a transaction with sensible defaults"""
    def _make(**overrides) -> Transaction:
        fields = dict(
            type=TransactionType.INCOME,
            category="Studio Income",
            amount=Decimal("100"),
            date=utc(2024, 3, 10),
            status=TransactionStatus.CONFIRMED,
            is_business=True,
            user=None,
        )
        fields.update(overrides)
        return Transaction(**fields)
    return _make

@pytest.fixture
def march_transactions(make_transaction) -> List[Transaction]:
    """The studio's March 2024 book: rent, a shoot and a pending event"""
    return [
        make_transaction(
            id="tx_1",
            category="Studio Income",
            amount=Decimal("5000"),
            date=utc(2024, 3, 1),
        ),
        make_transaction(
            id="tx_2",
            type=TransactionType.EXPENSE,
            category="Office Rent",
            amount=Decimal("1500"),
            date=utc(2024, 3, 5),
        ),
        make_transaction(
            id="tx_3",
            category="Outdoor Events Income",
            amount=Decimal("1200"),
            date=utc(2024, 3, 15),
            status=TransactionStatus.PENDING,
        ),
    ]

@pytest.fixture
def mixed_transactions(make_transaction) -> List[Transaction]:
    """Business and personal rows spread over February and March 2024"""
    return [
        make_transaction(id="b_mar", amount=Decimal("300"), date=utc(2024, 3, 2)),
        make_transaction(
            id="kelvin_mar",
            amount=Decimal("1200"),
            date=utc(2024, 3, 15),
            status=TransactionStatus.PENDING,
            is_business=False,
            user="Kelvin",
        ),
        make_transaction(
            id="brian_mar",
            type=TransactionType.EXPENSE,
            category="Software Subscription",
            amount=Decimal("150"),
            date=utc(2024, 3, 20),
            is_business=False,
            user="Brian",
        ),
        make_transaction(
            id="personal_no_user",
            amount=Decimal("40"),
            date=utc(2024, 3, 21),
            is_business=False,
            user=None,
        ),
        make_transaction(id="b_feb", amount=Decimal("2500"), date=utc(2024, 2, 29)),
        make_transaction(id="unknown_date", amount=Decimal("999"), date=None),
    ]

@pytest.fixture
def repository() -> InMemoryTransactionRepository:
    return InMemoryTransactionRepository()

@pytest.fixture
def settings_repository() -> InMemorySettingsRepository:
    return InMemorySettingsRepository(pin=PIN)

@pytest.fixture
def service(repository, settings_repository) -> TransactionService:
    """Service over in-memory stores"""
    return TransactionService(repository=repository, settings=settings_repository)
