"""
Report export for the management view.

The export is a straight projection of the filtered transactions; no totals
are computed here.
"""
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Dict, Iterable, List, Union

import pandas as pd

from finance_dashboard.domain.dates import NOT_AVAILABLE, format_date
from finance_dashboard.domain.models import Transaction

EXPORT_COLUMNS = [
    "Date",
    "Category",
    "Details",
    "Type",
    "Amount",
    "Status",
    "User/Business",
    "Due Date",
]

SHEET_NAME = "Transactions"


def transaction_rows(
    transactions: Iterable[Transaction],
    tz: tzinfo = timezone.utc,
) -> List[Dict[str, object]]:
    """Project transactions onto the export columns"""
    return [
        {
            "Date": format_date(txn.date, tz=tz),
            "Category": txn.category,
            "Details": txn.details or "",
            "Type": txn.type.value,
            "Amount": float(txn.amount),
            "Status": txn.status.value,
            "User/Business": txn.owner,
            "Due Date": format_date(txn.due_date, placeholder=NOT_AVAILABLE, tz=tz),
        }
        for txn in transactions
    ]


def to_dataframe(
    transactions: Iterable[Transaction],
    tz: tzinfo = timezone.utc,
) -> pd.DataFrame:
    return pd.DataFrame(transaction_rows(transactions, tz=tz), columns=EXPORT_COLUMNS)


def export_transactions(
    transactions: Iterable[Transaction],
    filepath: Union[Path, str],
    tz: tzinfo = timezone.utc,
) -> Path:
    """
    Write transactions to a .csv or .xlsx file.

    Args:
        transactions: Rows to write, in order
        filepath: Destination; the suffix picks the format
        tz: Timezone dates are rendered in

    Returns:
        The path written

    Raises:
        ValueError: If the suffix is neither .csv nor .xlsx
    """
    path = Path(filepath)
    suffix = path.suffix.lower()
    if suffix not in (".csv", ".xlsx"):
        raise ValueError(f"Export file must be .csv or .xlsx, got '{path.suffix}'")

    df = to_dataframe(transactions, tz=tz)
    path.parent.mkdir(parents=True, exist_ok=True)

    if suffix == ".csv":
        df.to_csv(path, index=False)
    else:
        df.to_excel(path, index=False, sheet_name=SHEET_NAME)

    return path
