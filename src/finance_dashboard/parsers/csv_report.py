from pathlib import Path
from typing import List, Optional

import pandas as pd

from finance_dashboard.domain.dates import normalize_date
from finance_dashboard.domain.enums import TransactionStatus, TransactionType
from finance_dashboard.domain.models import Transaction, parse_non_negative_amount
from finance_dashboard.logging_setup import get_logger
from finance_dashboard.parsers.base import TransactionParser
from finance_dashboard.services.export import EXPORT_COLUMNS

logger = get_logger(__name__)

class CsvReportParser(TransactionParser):
    """
    Parser for CSV files in the management export layout.

    Columns: Date, Category, Details, Type, Amount, Status, User/Business,
    Due Date. "Business" in the User/Business column marks a business row;
    anything else is the owner of a personal row. Rows get fresh IDs.
    """

    extensions = (".csv",)

    REQUIRED_COLUMNS = ["Date", "Category", "Type", "Amount", "Status"]

    def parse(self, filepath: Path) -> List[Transaction]:
        self.validate_file(filepath)

        try:
            df = pd.read_csv(filepath, dtype=str, keep_default_na=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise ValueError(f"Failed to read CSV file: {e}")

        self._validate_columns(df)

        transactions = []
        for index, row in df.iterrows():
            try:
                transactions.append(self._parse_row(row))
            except (ValueError, KeyError) as e:
                logger.warning("Skipping row %s: %s", index, e)

        return transactions

    def _validate_columns(self, df: pd.DataFrame) -> None:
        """Ensure all required columns are present"""
        missing = [col for col in self.REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise ValueError(
                f"Missing required columns: {missing}. "
                f"Expected columns: {EXPORT_COLUMNS}"
            )

    def _parse_row(self, row: pd.Series) -> Transaction:
        owner = self._cell(row, "User/Business")
        is_business = owner is None or owner.lower() == "business"

        return Transaction(
            type=TransactionType(row["Type"].strip().lower()),
            category=row["Category"].strip(),
            details=self._cell(row, "Details"),
            amount=parse_non_negative_amount(row["Amount"]),
            date=normalize_date(row["Date"], tz=self.tz),
            status=TransactionStatus(row["Status"].strip().lower()),
            user=None if is_business else owner,
            is_business=is_business,
            due_date=normalize_date(self._cell(row, "Due Date"), tz=self.tz),
        )

    def _cell(self, row: pd.Series, column: str) -> Optional[str]:
        """Cell text, with blanks and placeholders read as missing"""
        value = str(row.get(column, "") or "").strip()
        if value in ("", "N/A", "Invalid Date"):
            return None
        return value
