from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Union

from finance_dashboard.aggregation import (
    ALL,
    MonthPeriod,
    daily_series,
    filter_transactions,
    income_source_comparison,
    summarize,
)
from finance_dashboard.aggregation.filters import BusinessFilter, UserFilter
from finance_dashboard.domain.dates import sort_key
from finance_dashboard.domain.enums import TransactionStatus, TransactionType
from finance_dashboard.domain.models import NewTransaction, PublicNewTransaction, Transaction
from finance_dashboard.logging_setup import get_logger
from finance_dashboard.parsers.factory import ParserFactory
from finance_dashboard.repositories.base import (
    SettingsRepository,
    TransactionNotFoundError,
    TransactionRepository,
)
from finance_dashboard.services.exceptions import AuthenticationError, TransactionValidationError
from finance_dashboard.services.export import export_transactions
from finance_dashboard.services.models import ImportResult, MonthlyDashboard, PublicSummary

logger = get_logger(__name__)

class TransactionService:
    """
    Operations behind the public and management dashboards.

    Public operations need no credentials. Management operations take the
    PIN and compare it with the stored one; a mismatch raises
    AuthenticationError before anything else happens.
    """

    def __init__(
        self,
        repository: TransactionRepository,
        settings: SettingsRepository,
        tz: tzinfo = timezone.utc,
    ):
        self.repository = repository
        self.settings = settings
        self.tz = tz

    def ensure_pin(self, default_pin: str) -> None:
        """Store the default PIN if none has been set yet"""
        if self.settings.get_pin() is None:
            logger.info("No PIN stored, installing the default one")
            self.settings.set_pin(default_pin)

    def add_sample_data(self, transactions: List[Transaction]) -> List[Transaction]:
        """Store demo transactions, skipping any already present"""
        saved = self.repository.save_many(transactions)
        logger.info("Added %d sample transactions", len(saved))
        return saved

    def verify_pin(self, pin: str) -> None:
        """
        Check a PIN against the stored one.

        Raises:
            AuthenticationError: If the PIN doesn't match
        """
        stored = self.settings.get_pin()
        if stored is None or pin != stored:
            logger.warning("Rejected management request: invalid PIN")
            raise AuthenticationError("Invalid PIN")

    def list_public_transactions(self) -> List[Transaction]:
        """All transactions, newest first"""
        return self._sorted(self.repository.list_all())

    def list_transactions(self, pin: str) -> List[Transaction]:
        """
        All transactions, newest first, for the management view.

        Raises:
            AuthenticationError: If the PIN doesn't match
        """
        self.verify_pin(pin)
        return self._sorted(self.repository.list_all())

    def add_transaction(self, pin: str, new_transaction: NewTransaction) -> str:
        """
        Record a transaction from the management view.

        Args:
            pin: Management PIN
            new_transaction: Submitted fields

        Returns:
            The ID assigned by the store

        Raises:
            AuthenticationError: If the PIN doesn't match
            TransactionValidationError: If the fields are not acceptable
        """
        self.verify_pin(pin)
        validate_new_transaction(new_transaction)

        transaction = Transaction(
            type=new_transaction.type,
            category=new_transaction.category.strip(),
            details=new_transaction.details or None,
            amount=new_transaction.amount,
            date=new_transaction.date,
            status=new_transaction.status,
            user=None if new_transaction.is_business else (new_transaction.user or None),
            is_business=new_transaction.is_business,
            due_date=new_transaction.due_date,
        )
        saved = self.repository.add(transaction)
        logger.info("Added %s %s of %s", saved.status.value, saved.type.value, saved.amount)
        return saved.id

    def add_public_transaction(
        self,
        new_transaction: PublicNewTransaction,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Record a transaction from the public view.

        Public entries are always business transactions, dated now.

        Returns:
            The ID assigned by the store

        Raises:
            TransactionValidationError: If the fields are not acceptable
        """
        validate_public_transaction(new_transaction)

        transaction = Transaction(
            type=new_transaction.type,
            category=new_transaction.category.strip(),
            details=new_transaction.details or None,
            amount=new_transaction.amount,
            date=now or datetime.now(timezone.utc),
            status=new_transaction.status,
            user=None,
            is_business=True,
        )
        saved = self.repository.add(transaction)
        logger.info("Added public %s %s of %s", saved.status.value, saved.type.value, saved.amount)
        return saved.id

    def confirm_transaction(self, pin: str, transaction_id: str) -> bool:
        """
        Mark a pending transaction as confirmed.

        Confirming an already confirmed transaction succeeds and changes
        nothing.

        Returns:
            True once the transaction is confirmed

        Raises:
            AuthenticationError: If the PIN doesn't match
            TransactionNotFoundError: If no transaction has this ID
        """
        self.verify_pin(pin)

        existing = self.repository.get_by_id(transaction_id)
        if existing is None:
            raise TransactionNotFoundError("Transaction not found")

        if not existing.is_confirmed:
            self.repository.update_status(transaction_id, TransactionStatus.CONFIRMED)
            logger.info("Confirmed transaction %s", transaction_id)

        return True

    def get_public_summary(self, period: MonthPeriod) -> PublicSummary:
        """Totals over every transaction in the month"""
        transactions = filter_transactions(
            self.list_public_transactions(),
            period=period,
            tz=self.tz,
        )
        return PublicSummary(period=period, summary=summarize(transactions))

    def get_management_dashboard(
        self,
        pin: str,
        period: MonthPeriod,
        user: UserFilter = ALL,
        business: BusinessFilter = ALL,
    ) -> MonthlyDashboard:
        """
        Filtered transactions, totals and chart series for one month.

        Raises:
            AuthenticationError: If the PIN doesn't match
        """
        transactions = filter_transactions(
            self.list_transactions(pin),
            period=period,
            user=user,
            business=business,
            tz=self.tz,
        )
        return MonthlyDashboard(
            period=period,
            transactions=transactions,
            summary=summarize(transactions),
            daily=daily_series(transactions, period, tz=self.tz),
            income_sources=income_source_comparison(transactions),
        )

    def export_report(
        self,
        pin: str,
        filepath: Union[Path, str],
        period: MonthPeriod,
        user: UserFilter = ALL,
        business: BusinessFilter = ALL,
    ) -> int:
        """
        Write the filtered month to a CSV or Excel file.

        Returns:
            Number of rows written
        """
        dashboard = self.get_management_dashboard(pin, period, user=user, business=business)
        export_transactions(dashboard.transactions, filepath, tz=self.tz)
        logger.info("Exported %d transactions to %s", dashboard.total_transactions, filepath)
        return dashboard.total_transactions

    def import_file(
        self,
        pin: str,
        filepath: Path,
        file_format: str,
        dry_run: bool = False,
    ) -> ImportResult:
        """
        Import transactions from a file

        Args:
            pin: Management PIN
            filepath: The path to the file
            file_format: Registered parser name (e.g. 'json', 'csv')
            dry_run: Preview without saving

        Returns:
            An ImportResult.
        """
        self.verify_pin(pin)

        parser = ParserFactory.create_parser(file_format, tz=self.tz)
        transactions = parser.parse(filepath)

        if dry_run:
            new_transactions = [
                txn for txn in transactions
                if txn.id is None or not self.repository.exists(txn.id)
            ]
        else:
            new_transactions = self.repository.save_many(transactions)

        new_ids = {id(t) for t in new_transactions}
        skipped = [t for t in transactions if id(t) not in new_ids]

        logger.info(
            "Import of %s: %d new, %d skipped%s",
            filepath, len(new_transactions), len(skipped), " (dry run)" if dry_run else "",
        )

        return ImportResult(
            total_parsed=len(transactions),
            new_transactions=len(new_transactions),
            duplicates_skipped=len(skipped),
            imported=new_transactions,
            skipped=skipped,
            filepath=str(filepath),
            file_format=file_format,
        )

    def _sorted(self, transactions: List[Transaction]) -> List[Transaction]:
        return sorted(transactions, key=lambda t: sort_key(t.date), reverse=True)


def validate_public_transaction(new_transaction: PublicNewTransaction) -> None:
    """
    Check a public submission before it is stored.

    Raises:
        TransactionValidationError: On a missing category, a non-positive
            amount, or an unknown type/status
    """
    _validate_common(
        new_transaction.type,
        new_transaction.status,
        new_transaction.category,
        new_transaction.amount,
    )


def validate_new_transaction(new_transaction: NewTransaction) -> None:
    """
    Check a management submission before it is stored.

    Raises:
        TransactionValidationError: On the public checks, a missing date, or
            a user on a business transaction
    """
    _validate_common(
        new_transaction.type,
        new_transaction.status,
        new_transaction.category,
        new_transaction.amount,
    )

    if new_transaction.date is None:
        raise TransactionValidationError("A valid date is required")

    if new_transaction.is_business and new_transaction.user:
        raise TransactionValidationError("Business transactions cannot have a user")


def _validate_common(type_, status, category, amount) -> None:
    if not isinstance(type_, TransactionType):
        raise TransactionValidationError(f"Unknown transaction type: {type_!r}")

    if not isinstance(status, TransactionStatus):
        raise TransactionValidationError(f"Unknown transaction status: {status!r}")

    if not category or not category.strip():
        raise TransactionValidationError("A category is required")

    if not isinstance(amount, Decimal) or not amount.is_finite() or amount <= 0:
        raise TransactionValidationError("Amount must be greater than zero")
