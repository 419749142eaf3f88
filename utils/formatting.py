# utils/formatting.py
from decimal import Decimal, ROUND_HALF_UP

RUPEE = "₹"


def _group_indian(digits: str) -> str:
     # 1234567 -> 12,34,567
     if len(digits) <= 3:
          return digits
     head, tail = digits[:-3], digits[-3:]
     groups = []
     while len(head) > 2:
          groups.insert(0, head[-2:])
          head = head[:-2]
     if head:
          groups.insert(0, head)
     return ",".join(groups + [tail])


def format_inr(amount) -> str:
     """
     Format an amount the way the audit log shows it: rupee sign, Indian
     digit grouping, paise only when non-zero.

     format_inr(Decimal("100000")) -> "₹1,00,000"
     format_inr(Decimal("1234.5")) -> "₹1,234.50"
     """
     value = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
     sign = "-" if value < 0 else ""
     whole, _, paise = f"{abs(value):.2f}".partition(".")
     text = _group_indian(whole)
     if paise != "00":
          text = f"{text}.{paise}"
     return f"{sign}{RUPEE}{text}"


def format_units(units) -> str:
     return f"{Decimal(units):.2f}"
