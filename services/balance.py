# services/balance.py
"""
Balance application rules.

Pure functions over (pending, extra) pairs. Rent accrual and electricity
billing both go through apply_charge so the two call sites cannot drift.

Charges draw on the advance first:
     apply_charge(0, 2000, 3000)  -> pending 1000, extra 0, drawn 2000
Payments settle dues first, the surplus becomes advance:
     apply_payment(5000, 0, 7000) -> pending 0, extra 2000, added 2000
"""
from decimal import Decimal
from typing import NamedTuple

ZERO = Decimal("0")


class ChargeSplit(NamedTuple):
     pending: Decimal
     extra: Decimal
     drawn_from_extra: Decimal


class PaymentSplit(NamedTuple):
     pending: Decimal
     extra: Decimal
     added_to_extra: Decimal


class PaymentReversal(NamedTuple):
     pending: Decimal
     extra: Decimal
     taken_from_extra: Decimal


def _check_non_negative(**values: Decimal) -> None:
     for name, value in values.items():
          if value < 0:
               raise ValueError(f"{name} must be non-negative, got {value}")


def apply_charge(pending: Decimal, extra: Decimal, charge: Decimal) -> ChargeSplit:
     """Offset a new charge against extra balance, the remainder raises pending."""
     _check_non_negative(pending=pending, extra=extra, charge=charge)
     if extra >= charge:
          return ChargeSplit(pending, extra - charge, charge)
     if extra > 0:
          return ChargeSplit(pending + (charge - extra), ZERO, extra)
     return ChargeSplit(pending + charge, extra, ZERO)


def apply_payment(pending: Decimal, extra: Decimal, amount: Decimal) -> PaymentSplit:
     """Reduce pending by the payment; any surplus is added to extra."""
     _check_non_negative(pending=pending, extra=extra, amount=amount)
     if amount >= pending:
          added = amount - pending
          return PaymentSplit(ZERO, extra + added, added)
     return PaymentSplit(pending - amount, extra, ZERO)


def reverse_payment(pending: Decimal, extra: Decimal, amount: Decimal) -> PaymentReversal:
     """
     Inverse of apply_payment: take the amount back out of extra first, the
     rest goes back onto pending.
     """
     _check_non_negative(pending=pending, extra=extra, amount=amount)
     taken = min(extra, amount)
     return PaymentReversal(pending + (amount - taken), extra - taken, taken)


def reverse_charge(pending: Decimal, amount: Decimal) -> Decimal:
     """
     Undo a rent or electricity charge: pending drops by the amount, floored
     at zero. Extra drawn at charge time is not given back.
     """
     _check_non_negative(pending=pending, amount=amount)
     return max(ZERO, pending - amount)
