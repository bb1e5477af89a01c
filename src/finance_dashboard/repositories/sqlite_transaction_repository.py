import sqlite3
from decimal import Decimal
from typing import List, Optional

from finance_dashboard.database.connection import Connection, DatabaseManager
from finance_dashboard.domain.dates import normalize_date, to_iso
from finance_dashboard.domain.enums import TransactionStatus, TransactionType
from finance_dashboard.domain.models import Transaction
from finance_dashboard.repositories.base import (
    SettingsRepository,
    DuplicateTransactionError,
    TransactionNotFoundError,
    TransactionRepository,
    new_transaction_id,
)

PIN_KEY = "pin"

class SQLiteTransactionRepository(TransactionRepository):
    """
    SQLite implementation of the TransactionRepository.

    Handles all database operations for transactions using raw SQL.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def add(self, transaction: Transaction) -> Transaction:
        """Save a single transaction."""
        if transaction.id is None:
            transaction.id = new_transaction_id()

        with self.db.transaction() as conn:
            if self._exists(conn, transaction.id):
                raise DuplicateTransactionError(
                    f"Transaction already exists: {transaction.id}"
                )
            self._insert(conn, transaction)

        return transaction

    def save_many(self, transactions: List[Transaction]) -> List[Transaction]:
        """Save multiple transactions, skipping IDs already stored"""
        saved = []

        with self.db.transaction() as conn:
            for txn in transactions:
                if txn.id is not None and self._exists(conn, txn.id):
                    continue
                if txn.id is None:
                    txn.id = new_transaction_id()

                self._insert(conn, txn)
                saved.append(txn)

        return saved

    def get_by_id(self, transaction_id: str) -> Optional[Transaction]:
        """Retrieve a transaction by ID, or None if it doesn't exist"""
        conn = self.db.get_connection()
        cursor = conn.execute(
            "SELECT * FROM transactions WHERE id = ?",
            (transaction_id,)
        )
        row = cursor.fetchone()

        if row is None:
            return None

        return self._row_to_transaction(row)

    def list_all(self) -> List[Transaction]:
        """Retrieve every transaction in insertion order."""
        conn = self.db.get_connection()
        cursor = conn.execute("SELECT * FROM transactions ORDER BY rowid")
        return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def update_status(self, transaction_id: str, status: TransactionStatus) -> Transaction:
        """Change the status of an existing transaction."""
        with self.db.transaction() as conn:
            cursor = conn.execute(
                "UPDATE transactions SET status = ? WHERE id = ?",
                (status.value, transaction_id)
            )

            if cursor.rowcount == 0:
                raise TransactionNotFoundError(
                    f"Transaction with ID {transaction_id} not found"
                )

        return self.get_by_id(transaction_id)

    def _exists(self, conn: Connection, transaction_id: str) -> bool:
        cursor = conn.execute(
            "SELECT 1 FROM transactions WHERE id = ?",
            (transaction_id,)
        )
        return cursor.fetchone() is not None

    def _insert(self, conn: Connection, transaction: Transaction) -> None:
        conn.execute(
            """
            INSERT INTO transactions (
                id, type, category, details, amount, date,
                status, user, is_business, due_date
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                transaction.id,
                transaction.type.value,
                transaction.category,
                transaction.details,
                str(transaction.amount), # Store as string for precision
                to_iso(transaction.date),
                transaction.status.value,
                transaction.user,
                int(transaction.is_business),
                to_iso(transaction.due_date),
            ),
        )

    def _row_to_transaction(self, row: sqlite3.Row) -> Transaction:
        """Convert database row to Transaction object."""
        return Transaction(
            id=row["id"],
            type=TransactionType(row["type"]),
            category=row["category"],
            details=row["details"],
            amount=Decimal(row["amount"]),
            date=normalize_date(row["date"]),
            status=TransactionStatus(row["status"]),
            user=row["user"],
            is_business=bool(row["is_business"]),
            due_date=normalize_date(row["due_date"]),
        )

class SQLiteSettingsRepository(SettingsRepository):
    """Keeps the management PIN in the settings table."""

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def get_pin(self) -> Optional[str]:
        conn = self.db.get_connection()
        row = conn.execute(
            "SELECT value FROM settings WHERE key = ?",
            (PIN_KEY,)
        ).fetchone()
        return row["value"] if row else None

    def set_pin(self, pin: str) -> None:
        with self.db.transaction() as conn:
            conn.execute(
                """
                INSERT INTO settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (PIN_KEY, pin)
            )
