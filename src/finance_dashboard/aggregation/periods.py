from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from typing import Optional

@dataclass(frozen=True)
class MonthPeriod:
    """
    A calendar month the dashboards are scoped to.

    Usage:
        period = MonthPeriod(2024, 2)
        period.days          # 29
        period.next().label  # "March 2024"
    """
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {self.month}")

    @classmethod
    def current(cls, tz: tzinfo = timezone.utc) -> "MonthPeriod":
        """The month containing now, read in the given timezone"""
        now = datetime.now(tz)
        return cls(now.year, now.month)

    @property
    def days(self) -> int:
        """Number of days in the month (leap years included)"""
        _, last_day = monthrange(self.year, self.month)
        return last_day

    @property
    def start_date(self) -> date:
        """First day of the month"""
        return date(self.year, self.month, 1)

    @property
    def end_date(self) -> date:
        """Last day of the month"""
        return date(self.year, self.month, self.days)

    @property
    def label(self) -> str:
        return self.start_date.strftime("%B %Y")

    def previous(self) -> "MonthPeriod":
        if self.month == 1:
            return MonthPeriod(self.year - 1, 12)
        return MonthPeriod(self.year, self.month - 1)

    def next(self) -> "MonthPeriod":
        if self.month == 12:
            return MonthPeriod(self.year + 1, 1)
        return MonthPeriod(self.year, self.month + 1)

    def contains(self, instant: Optional[datetime], tz: tzinfo = timezone.utc) -> bool:
        """True if the instant falls in this month; unknown instants never do"""
        if instant is None:
            return False
        local = instant.astimezone(tz)
        return local.year == self.year and local.month == self.month

    def __str__(self) -> str:
        return self.label
