from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import uuid4

from finance_dashboard.domain.enums import TransactionStatus
from finance_dashboard.domain.models import Transaction

class DuplicateTransactionError(Exception):
    """Raised when a transaction with the same ID is already stored."""
    pass

class TransactionNotFoundError(Exception):
    """Raised when a transaction cannot be found."""
    pass

def new_transaction_id() -> str:
    """Opaque, unique identifier for a new transaction"""
    return f"tx_{uuid4().hex}"

class TransactionRepository(ABC):
    """
    Abstract store for transactions.

    Transactions are only ever appended or moved from pending to confirmed;
    nothing is deleted. The repository pattern keeps the services independent
    of the storage backend (SQLite in production, memory in tests).
    """

    @abstractmethod
    def add(self, transaction: Transaction) -> Transaction:
        """
        Append a transaction to the store.

        Args:
            transaction: Transaction to save. A missing id is assigned.

        Returns:
            Transaction with ID populated

        Raises:
            DuplicateTransactionError: If the ID is already stored
        """
        pass

    @abstractmethod
    def save_many(self, transactions: List[Transaction]) -> List[Transaction]:
        """
        Append several transactions in a single operation.

        Transactions whose id is already in the store are skipped.

        Args:
            transactions: List of transactions to save.

        Returns:
            List of saved transactions with IDs
        """
        pass

    @abstractmethod
    def get_by_id(self, transaction_id: str) -> Optional[Transaction]:
        """
        Retrieve a transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction if found, None otherwise
        """
        pass

    @abstractmethod
    def list_all(self) -> List[Transaction]:
        """
        Retrieve every transaction in insertion order.

        Returns:
            List of transactions
        """
        pass

    @abstractmethod
    def update_status(self, transaction_id: str, status: TransactionStatus) -> Transaction:
        """
        Change the status of a stored transaction.

        Args:
            transaction_id: ID of the transaction
            status: New status

        Returns:
            Updated transaction

        Raises:
            TransactionNotFoundError: If transaction doesn't exist
        """
        pass

    def exists(self, transaction_id: str) -> bool:
        """Check if a transaction with this ID is stored"""
        return self.get_by_id(transaction_id) is not None

class SettingsRepository(ABC):
    """Abstract store for the management PIN."""

    @abstractmethod
    def get_pin(self) -> Optional[str]:
        """
        Returns:
            The stored PIN, or None if none has been set
        """
        pass

    @abstractmethod
    def set_pin(self, pin: str) -> None:
        """Replace the stored PIN."""
        pass
