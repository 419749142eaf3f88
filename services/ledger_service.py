# services/ledger_service.py
"""
Ledger Service - the four forward events that move a room's balances.

Each operation, inside the caller's transaction:
1. Locks the room row and reads its current balances
2. Applies the shared balance rule (services.balance)
3. Writes the new balances, the immutable event record and the audit entries

Validation happens before anything is written, so a rejected call leaves no
trace. Operations flush but never commit: the request session (or the
per-room loop in rent sync) commits or rolls back the whole unit.
"""
import logging
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

from sqlalchemy.orm import Session

from models import (
     ActivityEventType,
     ActivityLog,
     ElectricityReading,
     Payment,
     PaymentMode,
     RentEntry,
)
from utils.dates import month_name, utcnow
from utils.formatting import format_inr, format_units
from .activity_log import log_activity
from .balance import apply_charge, apply_payment
from .errors import (
     ConcessionExceedsPendingError,
     InvalidReadingError,
     ValidationError,
)
from .locking import flush_changes, lock_room

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def to_amount(value, field: str = "amount") -> Decimal:
     """Coerce user input to a 2-decimal money amount."""
     try:
          amount = Decimal(str(value))
     except (InvalidOperation, ValueError, TypeError):
          raise ValidationError(f"{field} must be a number, got {value!r}")
     if not amount.is_finite():
          raise ValidationError(f"{field} must be a finite number")
     return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_timestamp(value: Union[date, datetime, None]) -> datetime:
     if value is None:
          return utcnow()
     if isinstance(value, datetime):
          return value
     return datetime(value.year, value.month, value.day)


def require_reason(reason: Optional[str]) -> str:
     text = (reason or "").strip()
     if not text:
          raise ValidationError("A reason is required")
     return text


def find_rent_entry(
     db: Session,
     room_id: int,
     month: int,
     year: int,
     include_reversed: bool = False,
) -> Optional[RentEntry]:
     """The rent entry for a period, if any. Reversed entries count only with include_reversed."""
     query = db.query(RentEntry).filter(
          RentEntry.room_id == room_id,
          RentEntry.month == month,
          RentEntry.year == year,
     )
     if not include_reversed:
          query = query.filter(RentEntry.is_reversed.is_(False))
     return query.first()


def _log_extra_adjusted(db: Session, room_id: int, drawn: Decimal, what: str) -> None:
     log_activity(
          db,
          room_id,
          ActivityEventType.EXTRA_ADJUSTED,
          f"Extra balance used for {what}: {format_inr(drawn)} deducted from advance",
          -drawn,
     )


def accrue_rent(
     db: Session,
     room_id: int,
     month: int,
     year: int,
     first_month: bool = False,
     skip_reversed_periods: bool = False,
) -> Optional[RentEntry]:
     """
     Charge one month of rent to a room.

     Idempotent per (room, month, year): if a non-reversed entry already
     exists the call returns None and changes nothing, so scheduler re-runs
     are harmless. With skip_reversed_periods a reversed entry also counts,
     so a month whose rent was reversed is not charged again.

     Raises:
          NotFoundError: room does not exist
          ValidationError: room inactive, or month outside 1..12
     """
     if not 1 <= month <= 12:
          raise ValidationError(f"month must be between 1 and 12, got {month}")

     room = lock_room(db, room_id)
     if not room.is_active:
          raise ValidationError(f"Room {room.room_number} is not active")

     if find_rent_entry(db, room.id, month, year, include_reversed=skip_reversed_periods) is not None:
          logger.debug("Rent for room %s %d-%02d already accrued", room.id, year, month)
          return None

     rent = room.monthly_rent
     split = apply_charge(room.pending_amount, room.extra_balance, rent)

     entry = RentEntry(room_id=room.id, month=month, year=year, rent_amount=rent)
     db.add(entry)

     room.pending_amount = split.pending
     room.extra_balance = split.extra

     period = f"{month_name(month)} {year}"
     prefix = "First month rent added" if first_month else "Monthly rent added"
     log_activity(
          db,
          room.id,
          ActivityEventType.RENT_ADDED,
          f"{prefix} for {period}: {format_inr(rent)}",
          rent,
     )
     if split.drawn_from_extra > 0:
          _log_extra_adjusted(db, room.id, split.drawn_from_extra, f"{month_name(month)} rent")

     flush_changes(db)
     logger.info(
          "Rent accrued: room=%s period=%d-%02d amount=%s drawn_from_extra=%s",
          room.id, year, month, rent, split.drawn_from_extra,
     )
     return entry


def bill_electricity(
     db: Session,
     room_id: int,
     current_reading,
     reading_date: Union[date, datetime, None] = None,
) -> ElectricityReading:
     """
     Record a meter reading and charge the resulting bill.

     units = current_reading - previous reading; bill = units * room rate.
     The room's current_meter_reading moves forward to the new reading.

     Raises:
          NotFoundError: room does not exist
          InvalidReadingError: current_reading below the previous reading
     """
     current = to_amount(current_reading, "current_reading")
     room = lock_room(db, room_id)

     previous = room.current_meter_reading
     units = current - previous
     if units < 0:
          raise InvalidReadingError(
               f"Current reading {current} cannot be less than previous reading {previous}"
          )

     rate = room.electricity_rate
     bill = (units * rate).quantize(CENT, rounding=ROUND_HALF_UP)
     taken_at = to_timestamp(reading_date)

     reading = ElectricityReading(
          room_id=room.id,
          previous_reading=previous,
          current_reading=current,
          units_consumed=units,
          rate_per_unit=rate,
          bill_amount=bill,
          month=taken_at.month,
          year=taken_at.year,
          reading_date=taken_at,
     )
     db.add(reading)

     split = apply_charge(room.pending_amount, room.extra_balance, bill)
     room.current_meter_reading = current
     room.pending_amount = split.pending
     room.extra_balance = split.extra

     log_activity(
          db,
          room.id,
          ActivityEventType.ELECTRICITY_ADDED,
          f"Electricity bill for {month_name(taken_at.month)} {taken_at.year}: "
          f"{format_units(units)} units × {format_inr(rate)} = {format_inr(bill)}",
          bill,
     )
     if split.drawn_from_extra > 0:
          _log_extra_adjusted(db, room.id, split.drawn_from_extra, "electricity")

     flush_changes(db)
     logger.info(
          "Electricity billed: room=%s units=%s bill=%s drawn_from_extra=%s",
          room.id, units, bill, split.drawn_from_extra,
     )
     return reading


def receive_payment(
     db: Session,
     room_id: int,
     amount,
     mode: Union[PaymentMode, str],
     reason: str = "Rent",
     reason_notes: Optional[str] = None,
     paid_by: Optional[str] = None,
     payment_date: Union[date, datetime, None] = None,
) -> Payment:
     """
     Record money received. Dues are settled first; any surplus becomes
     extra (advance) balance.

     Raises:
          NotFoundError: room does not exist
          ValidationError: amount not positive, or unknown payment mode
     """
     value = to_amount(amount)
     if value <= 0:
          raise ValidationError("Payment amount must be greater than zero")
     try:
          payment_mode = PaymentMode(mode)
     except ValueError:
          raise ValidationError(f"Unknown payment mode: {mode!r}")

     room = lock_room(db, room_id)

     payment = Payment(
          room_id=room.id,
          amount=value,
          payment_mode=payment_mode,
          payment_reason=(reason or "Rent").strip() or "Rent",
          reason_notes=reason_notes,
          paid_by=paid_by,
          payment_date=to_timestamp(payment_date),
     )
     db.add(payment)

     split = apply_payment(room.pending_amount, room.extra_balance, value)
     room.pending_amount = split.pending
     room.extra_balance = split.extra
     room.total_paid = room.total_paid + value

     log_activity(
          db,
          room.id,
          ActivityEventType.PAYMENT_RECEIVED,
          f"Payment received: {format_inr(value)} via {payment_mode.value}",
          value,
     )
     if split.added_to_extra > 0:
          log_activity(
               db,
               room.id,
               ActivityEventType.EXTRA_ADDED,
               f"Extra payment of {format_inr(split.added_to_extra)} added to advance balance",
               split.added_to_extra,
          )

     flush_changes(db)
     logger.info(
          "Payment received: room=%s amount=%s mode=%s added_to_extra=%s",
          room.id, value, payment_mode.value, split.added_to_extra,
     )
     return payment


def apply_concession(db: Session, room_id: int, amount, reason: str) -> ActivityLog:
     """
     Waive part of a room's pending amount.

     A concession has no table of its own; the CONCESSION_APPLIED log entry
     (amount stored negative) is the record, and its id is what
     undo_concession takes.

     Raises:
          NotFoundError: room does not exist
          ValidationError: amount not positive, or reason missing
          ConcessionExceedsPendingError: amount above pending_amount
     """
     value = to_amount(amount)
     if value <= 0:
          raise ValidationError("Concession amount must be greater than zero")
     text = require_reason(reason)

     room = lock_room(db, room_id)
     if value > room.pending_amount:
          raise ConcessionExceedsPendingError(
               f"Concession of {value} exceeds pending amount {room.pending_amount}"
          )

     room.pending_amount = room.pending_amount - value
     entry = log_activity(
          db,
          room.id,
          ActivityEventType.CONCESSION_APPLIED,
          f"Concession of {format_inr(value)} applied to Room {room.room_number}: {text}",
          -value,
     )

     flush_changes(db)
     logger.info("Concession applied: room=%s amount=%s", room.id, value)
     return entry
