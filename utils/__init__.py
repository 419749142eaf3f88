# utils/__init__.py
from .dates import utcnow, month_name, days_in_month, rent_day, iter_months
from .formatting import format_inr, format_units

__all__ = [
     "utcnow",
     "month_name",
     "days_in_month",
     "rent_day",
     "iter_months",
     "format_inr",
     "format_units",
]
