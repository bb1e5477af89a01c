from copy import deepcopy
from typing import Dict, List, Optional

from finance_dashboard.domain.enums import TransactionStatus
from finance_dashboard.domain.models import Transaction
from finance_dashboard.repositories.base import (
    DuplicateTransactionError,
    SettingsRepository,
    TransactionNotFoundError,
    TransactionRepository,
    new_transaction_id,
)

class InMemoryTransactionRepository(TransactionRepository):
    """
    Dict-backed repository for tests and throwaway sessions.

    Returns copies so callers cannot change stored state behind its back.
    """

    def __init__(self, transactions: Optional[List[Transaction]] = None):
        self._transactions: Dict[str, Transaction] = {}
        for txn in transactions or []:
            self.add(txn)

    def add(self, transaction: Transaction) -> Transaction:
        if transaction.id is None:
            transaction.id = new_transaction_id()
        elif transaction.id in self._transactions:
            raise DuplicateTransactionError(f"Transaction already exists: {transaction.id}")
        self._transactions[transaction.id] = deepcopy(transaction)
        return transaction

    def save_many(self, transactions: List[Transaction]) -> List[Transaction]:
        saved = []
        for txn in transactions:
            if txn.id is not None and txn.id in self._transactions:
                continue
            saved.append(self.add(txn))
        return saved

    def get_by_id(self, transaction_id: str) -> Optional[Transaction]:
        txn = self._transactions.get(transaction_id)
        return deepcopy(txn) if txn is not None else None

    def list_all(self) -> List[Transaction]:
        return [deepcopy(txn) for txn in self._transactions.values()]

    def update_status(self, transaction_id: str, status: TransactionStatus) -> Transaction:
        if transaction_id not in self._transactions:
            raise TransactionNotFoundError(
                f"Transaction with ID {transaction_id} not found"
            )
        self._transactions[transaction_id].status = status
        return deepcopy(self._transactions[transaction_id])

class InMemorySettingsRepository(SettingsRepository):

    def __init__(self, pin: Optional[str] = None):
        self._pin = pin

    def get_pin(self) -> Optional[str]:
        return self._pin

    def set_pin(self, pin: str) -> None:
        self._pin = pin
