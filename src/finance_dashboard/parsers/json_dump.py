import json
from pathlib import Path
from typing import Any, Dict, List

from finance_dashboard.domain.models import Transaction
from finance_dashboard.logging_setup import get_logger
from finance_dashboard.parsers.base import TransactionParser

logger = get_logger(__name__)

class JsonDumpParser(TransactionParser):
    """
    Parser for JSON dumps of the browser dashboard's transaction list.

    Accepts either a bare list of records or an object with a
    ``transactions`` key (the shape of a full local storage dump). Dates may
    be ISO strings or ``{"_seconds": ..., "_nanoseconds": ...}`` pairs; record
    IDs are kept so re-importing the same dump adds nothing.
    """

    extensions = (".json",)

    def parse(self, filepath: Path) -> List[Transaction]:
        self.validate_file(filepath)

        try:
            with open(filepath) as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {filepath}: {e}")

        records = self._records(payload)

        transactions = []
        for index, record in enumerate(records):
            try:
                transactions.append(Transaction.from_record(record, tz=self.tz))
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.warning("Skipping record %d: %s", index, e)

        return transactions

    def _records(self, payload: Any) -> List[Dict[str, Any]]:
        if isinstance(payload, dict):
            payload = payload.get("transactions")

        if isinstance(payload, str):
            # Local storage keeps the list as a JSON string
            payload = json.loads(payload)

        if not isinstance(payload, list):
            raise ValueError("Expected a list of transactions")

        return payload
