# services/reversal_service.py
"""
Reversal Service - undoing ledger events without erasing them.

Every financial record moves ACTIVE -> REVERSED exactly once. Reversal flags
the record (is_reversed / reversed_at / reversal_reason), restores the room
balances and appends a *_REVERSED audit entry; nothing is deleted.

- Payments are reversed precisely: extra is taken back first, the rest
  returns to pending.
- Rent and electricity reversals only lower pending (floored at zero). Extra
  drawn when the charge was applied is not handed back.
- Concessions have no row to flag. Undoing one adds the amount back to
  pending and writes a CONCESSION_REVERSED entry linked to the original.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from models import (
     ActivityEventType,
     ActivityLog,
     ElectricityReading,
     Payment,
     RentEntry,
     Room,
)
from utils.dates import month_name, utcnow
from utils.formatting import format_inr, format_units
from . import balance
from .activity_log import log_activity
from .errors import AlreadyReversedError, NotFoundError, ValidationError
from .ledger_service import require_reason
from .locking import flush_changes, lock_room

logger = logging.getLogger(__name__)


class TransactionType(str, enum.Enum):
     """Kinds of ledger events that can be undone."""
     PAYMENT = "PAYMENT"
     RENT = "RENT"
     ELECTRICITY = "ELECTRICITY"
     CONCESSION = "CONCESSION"


@dataclass(frozen=True)
class TransactionRef:
     """Points at one undoable event: a payment, rent entry, reading or concession log id."""
     type: TransactionType
     id: int


@dataclass
class UndoableTransaction:
     """A candidate row for the undo list."""
     id: int
     type: TransactionType
     room_id: int
     amount: Decimal
     description: str
     created_at: datetime
     room_number: Optional[str] = None
     room_name: Optional[str] = None
     details: Optional[str] = None
     already_undone: bool = False


@dataclass
class UndoResult:
     type: TransactionType
     id: int
     room_id: int
     amount: Decimal


def _load_unreversed(db: Session, model, record_id: int, label: str):
     record = db.get(model, record_id)
     if record is None:
          raise NotFoundError(f"{label} with ID {record_id} not found")
     if record.is_reversed:
          raise AlreadyReversedError(f"{label} {record_id} has already been reversed")
     return record


def _lock_for(db: Session, record, label: str) -> Room:
     """
     Lock the owning room, then re-read the record under that lock so a
     reversal that committed meanwhile is seen.
     """
     room = lock_room(db, record.room_id)
     db.refresh(record)
     if record.is_reversed:
          raise AlreadyReversedError(f"{label} {record.id} has already been reversed")
     return room


def reverse_payment(db: Session, payment_id: int, reason: str) -> Payment:
     """
     Reverse a payment.

     Raises:
          ValidationError: empty reason
          NotFoundError: no such payment
          AlreadyReversedError: payment already reversed
     """
     text = require_reason(reason)
     payment = _load_unreversed(db, Payment, payment_id, "Payment")
     room = _lock_for(db, payment, "Payment")

     amount = payment.amount
     restored = balance.reverse_payment(room.pending_amount, room.extra_balance, amount)
     room.pending_amount = restored.pending
     room.extra_balance = restored.extra
     room.total_paid = room.total_paid - amount
     payment.mark_reversed(text, utcnow())

     log_activity(
          db,
          room.id,
          ActivityEventType.PAYMENT_REVERSED,
          f"Payment reversed: {format_inr(amount)} – {text}",
          -amount,
     )

     flush_changes(db)
     logger.info(
          "Payment reversed: payment=%s room=%s amount=%s taken_from_extra=%s",
          payment.id, room.id, amount, restored.taken_from_extra,
     )
     return payment


def reverse_rent(db: Session, entry_id: int, reason: str) -> RentEntry:
     """
     Reverse a monthly rent entry. Pending drops by the rent, floored at zero.

     Raises:
          ValidationError: empty reason
          NotFoundError: no such rent entry
          AlreadyReversedError: entry already reversed
     """
     text = require_reason(reason)
     entry = _load_unreversed(db, RentEntry, entry_id, "Rent entry")
     room = _lock_for(db, entry, "Rent entry")

     amount = entry.rent_amount
     room.pending_amount = balance.reverse_charge(room.pending_amount, amount)
     entry.mark_reversed(text, utcnow())

     log_activity(
          db,
          room.id,
          ActivityEventType.RENT_REVERSED,
          f"Monthly rent for {month_name(entry.month)} {entry.year} undone: {format_inr(amount)} – {text}",
          -amount,
     )

     flush_changes(db)
     logger.info("Rent reversed: entry=%s room=%s amount=%s", entry.id, room.id, amount)
     return entry


def reverse_electricity(db: Session, reading_id: int, reason: str) -> ElectricityReading:
     """
     Reverse an electricity bill. Pending drops by the bill, floored at zero.
     The room's meter reading is left where it is.

     Raises:
          ValidationError: empty reason
          NotFoundError: no such reading
          AlreadyReversedError: reading already reversed
     """
     text = require_reason(reason)
     reading = _load_unreversed(db, ElectricityReading, reading_id, "Electricity reading")
     room = _lock_for(db, reading, "Electricity reading")

     amount = reading.bill_amount
     room.pending_amount = balance.reverse_charge(room.pending_amount, amount)
     reading.mark_reversed(text, utcnow())

     log_activity(
          db,
          room.id,
          ActivityEventType.ELECTRICITY_REVERSED,
          f"Electricity bill undone: {format_inr(amount)} – {text}",
          -amount,
     )

     flush_changes(db)
     logger.info("Electricity reversed: reading=%s room=%s amount=%s", reading.id, room.id, amount)
     return reading


def undo_concession(db: Session, log_id: int, reason: str) -> ActivityLog:
     """
     Undo a concession: its amount goes back onto pending.

     log_id is the id of the CONCESSION_APPLIED activity entry. Returns the
     new CONCESSION_REVERSED entry.

     Raises:
          ValidationError: empty reason
          NotFoundError: no CONCESSION_APPLIED entry with that id
     """
     text = require_reason(reason)
     applied = db.get(ActivityLog, log_id)
     if applied is None or applied.event_type != ActivityEventType.CONCESSION_APPLIED:
          raise NotFoundError(f"Concession with ID {log_id} not found")

     room = lock_room(db, applied.room_id)
     amount = abs(applied.amount or Decimal("0"))
     room.pending_amount = room.pending_amount + amount

     undone = log_activity(
          db,
          room.id,
          ActivityEventType.CONCESSION_REVERSED,
          f"Concession undone: {format_inr(amount)} – {text}",
          -amount,
          reverses_log_id=applied.id,
     )

     flush_changes(db)
     logger.info("Concession undone: log=%s room=%s amount=%s", applied.id, room.id, amount)
     return undone


# One handler per transaction type, with the amount each record carries.
_REVERSAL_HANDLERS: Dict[TransactionType, Tuple[Callable, Callable]] = {
     TransactionType.PAYMENT: (reverse_payment, lambda record: record.amount),
     TransactionType.RENT: (reverse_rent, lambda record: record.rent_amount),
     TransactionType.ELECTRICITY: (reverse_electricity, lambda record: record.bill_amount),
     TransactionType.CONCESSION: (undo_concession, lambda record: abs(record.amount)),
}

_unhandled = set(TransactionType) - set(_REVERSAL_HANDLERS)
if _unhandled:
     raise RuntimeError(f"No reversal handler for: {sorted(t.value for t in _unhandled)}")

_TYPE_LABELS = {
     TransactionType.PAYMENT: "Payment",
     TransactionType.RENT: "Rent",
     TransactionType.ELECTRICITY: "Electricity",
     TransactionType.CONCESSION: "Concession",
}


def undo_transaction(db: Session, ref: TransactionRef, reason: str) -> UndoResult:
     """
     Generic undo entry point used by the undo dialog.

     Dispatches to the matching reversal above (same balance effect as
     calling it directly) and adds a TRANSACTION_UNDONE entry, with no
     amount, recording that the undo came through this path.
     """
     text = require_reason(reason)
     try:
          tx_type = TransactionType(ref.type)
     except ValueError:
          raise ValidationError(f"Unknown transaction type: {ref.type!r}")

     handler, amount_of = _REVERSAL_HANDLERS[tx_type]
     record = handler(db, ref.id, text)
     amount = amount_of(record)

     log_activity(
          db,
          record.room_id,
          ActivityEventType.TRANSACTION_UNDONE,
          f"{_TYPE_LABELS[tx_type]} of {format_inr(amount)} undone – {text}",
          None,
     )
     flush_changes(db)
     return UndoResult(type=tx_type, id=ref.id, room_id=record.room_id, amount=amount)


def list_undoable_transactions(db: Session, room_id: Optional[int] = None) -> List[UndoableTransaction]:
     """
     Everything the undo dialog may offer, newest first: non-reversed
     payments, rent entries and electricity readings, plus every
     CONCESSION_APPLIED entry. Concessions that were already undone are still
     listed (there is no reversed flag on them) but carry already_undone=True.
     Payments are placed by their payment date.
     """
     rooms = {r.id: r for r in db.query(Room).all()}

     def _scoped(query, model):
          if room_id is not None:
               query = query.filter(model.room_id == room_id)
          return query

     candidates: List[UndoableTransaction] = []

     def _add(tx_type, record_id, owner_id, amount, description, created_at, details, undone=False):
          room = rooms.get(owner_id)
          candidates.append(UndoableTransaction(
               id=record_id,
               type=tx_type,
               room_id=owner_id,
               amount=amount,
               description=description,
               created_at=created_at,
               room_number=room.room_number if room else None,
               room_name=room.name if room else None,
               details=details,
               already_undone=undone,
          ))

     payments = _scoped(db.query(Payment).filter(Payment.is_reversed.is_(False)), Payment).all()
     for p in payments:
          _add(
               TransactionType.PAYMENT, p.id, p.room_id, p.amount,
               f"Payment received: {format_inr(p.amount)} via {p.payment_mode.value}",
               p.payment_date or p.created_at, p.details,
          )

     entries = _scoped(db.query(RentEntry).filter(RentEntry.is_reversed.is_(False)), RentEntry).all()
     for r in entries:
          period = f"{month_name(r.month)} {r.year}"
          _add(
               TransactionType.RENT, r.id, r.room_id, r.rent_amount,
               f"Monthly rent added for {period}: {format_inr(r.rent_amount)}",
               r.created_at, period,
          )

     readings = _scoped(
          db.query(ElectricityReading).filter(ElectricityReading.is_reversed.is_(False)),
          ElectricityReading,
     ).all()
     for e in readings:
          _add(
               TransactionType.ELECTRICITY, e.id, e.room_id, e.bill_amount,
               f"Electricity bill for {month_name(e.month)} {e.year}: {format_inr(e.bill_amount)}",
               e.created_at, f"{format_units(e.units_consumed)} units @ {format_inr(e.rate_per_unit)}/unit",
          )

     concessions = _scoped(
          db.query(ActivityLog).filter(ActivityLog.event_type == ActivityEventType.CONCESSION_APPLIED),
          ActivityLog,
     ).all()
     undone_ids = {
          row[0]
          for row in db.query(ActivityLog.reverses_log_id)
          .filter(
               ActivityLog.event_type == ActivityEventType.CONCESSION_REVERSED,
               ActivityLog.reverses_log_id.isnot(None),
          )
          .all()
     }
     for c in concessions:
          _add(
               TransactionType.CONCESSION, c.id, c.room_id, abs(c.amount or Decimal("0")),
               c.description, c.created_at, "Concession applied", c.id in undone_ids,
          )

     candidates.sort(key=lambda t: (t.created_at, t.id), reverse=True)
     return candidates


def undo_latest_transaction(db: Session, room_id: int, reason: str) -> UndoResult:
     """
     Undo the most recent ledger effect on a room. Concessions already undone
     are skipped.

     Raises:
          NotFoundError: room missing, or nothing left to undo
     """
     require_reason(reason)
     if db.get(Room, room_id) is None:
          raise NotFoundError(f"Room with ID {room_id} not found")

     for candidate in list_undoable_transactions(db, room_id):
          if not candidate.already_undone:
               return undo_transaction(db, TransactionRef(candidate.type, candidate.id), reason)
     raise NotFoundError(f"Room {room_id} has no transactions to undo")
