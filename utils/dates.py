# utils/dates.py
"""Calendar helpers shared by rent accrual, billing and audit text."""
import calendar
from datetime import date, datetime, timezone
from typing import Iterator, Tuple


def utcnow() -> datetime:
     """Naive UTC timestamp, matching what the DateTime columns store."""
     return datetime.now(timezone.utc).replace(tzinfo=None)


def month_name(month: int) -> str:
     return calendar.month_name[month]


def days_in_month(year: int, month: int) -> int:
     return calendar.monthrange(year, month)[1]


def rent_day(joining_date: date, year: int, month: int) -> int:
     """
     Day of the given month on which rent falls due.

     A room that joined on the 31st is due on the last day of shorter months
     (the 28th or 29th in February, the 30th in April).
     """
     return min(joining_date.day, days_in_month(year, month))


def iter_months(start: date, end: date) -> Iterator[Tuple[int, int]]:
     """Yield (month, year) pairs from start's month through end's month inclusive."""
     year, month = start.year, start.month
     while (year, month) <= (end.year, end.month):
          yield month, year
          month += 1
          if month > 12:
               month = 1
               year += 1
