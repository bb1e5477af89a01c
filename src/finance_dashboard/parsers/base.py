from abc import ABC, abstractmethod
from datetime import timezone, tzinfo
from pathlib import Path
from typing import List, Sequence

from finance_dashboard.domain.models import Transaction

class TransactionParser(ABC):
    """
    Abstract base class for transaction file parsers.

    Each supported file format gets its own concrete parser implementing
    this interface. Dates written without an offset are read in ``tz``.
    """

    # Suffixes the parser accepts
    extensions: Sequence[str] = ()

    def __init__(self, tz: tzinfo = timezone.utc):
        self.tz = tz

    @abstractmethod
    def parse(self, filepath: Path) -> List[Transaction]:
        """
        Parse a file and return a list of transactions.

        Args:
            filepath: Path to the file

        Returns:
            List of Transaction objects with normalized dates

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is invalid
        """
        pass

    def validate_file(self, filepath: Path) -> None:
        """
        Check the file exists and has an accepted suffix.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the suffix is not accepted
        """
        path = Path(filepath)

        if not path.exists():
            raise FileNotFoundError(f"File does not exist on path {path}")

        if self.extensions and path.suffix.lower() not in self.extensions:
            raise ValueError(
                f"File must be one of {', '.join(self.extensions)}, got '{path.suffix}'"
            )
