# services/rent_sync_service.py
"""
Rent Sync Service - the periodic monthly-rent sweep.

An external trigger (POST /api/rent/sync, or a cron job using
get_session_context) calls sync_rent about once a day. Every active room is
charged for each month it owes, back-filling months that were missed. The
per-period check in accrue_rent makes repeated runs harmless, and the sweep
treats a reversed month as already handled so a reversal is never undone by
the next run.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from models import Room
from utils.dates import iter_months, month_name, rent_day, utcnow
from .errors import LedgerError
from .ledger_service import accrue_rent

logger = logging.getLogger(__name__)


@dataclass
class RoomSyncFailure:
     room_id: int
     room_number: str
     error: str


@dataclass
class RentSyncResult:
     """Outcome of one sweep."""
     rooms_checked: int = 0
     entries_created: int = 0
     details: List[str] = field(default_factory=list)
     failures: List[RoomSyncFailure] = field(default_factory=list)


class RentSyncService:
     """Service class for monthly rent accrual."""

     @staticmethod
     def months_due(joining_date: date, now: datetime) -> List[Tuple[int, int]]:
          """
          List the (month, year) periods a room should have been charged for by `now`.

          The joining month counts once the joining date is reached. Months
          between the joining month and now are always due. The current month
          becomes due on its rent day: the joining day of month, clamped to
          the month's length (joined on the 31st -> due on Feb 28).
          """
          today = now.date() if isinstance(now, datetime) else now
          if joining_date > today:
               return []

          due = []
          for month, year in iter_months(joining_date, today):
               is_joining_month = (month, year) == (joining_date.month, joining_date.year)
               is_current_month = (month, year) == (today.month, today.year)
               if is_joining_month:
                    include = today >= joining_date
               elif is_current_month:
                    include = today.day >= rent_day(joining_date, year, month)
               else:
                    include = True
               if include:
                    due.append((month, year))
          return due

     @staticmethod
     def sync_rent(db: Session, now: Optional[datetime] = None) -> RentSyncResult:
          """
          Accrue every due month for every active room.

          Each room is committed on its own. A room that fails is rolled back,
          logged and reported in the result; the sweep moves on to the next.
          """
          now = now or utcnow()
          result = RentSyncResult()

          room_ids = [
               row[0]
               for row in db.query(Room.id).filter(Room.is_active.is_(True)).order_by(Room.id).all()
          ]

          for room_id in room_ids:
               room = db.get(Room, room_id)
               result.rooms_checked += 1
               room_number = room.room_number
               try:
                    added = []
                    for month, year in RentSyncService.months_due(room.joining_date, now):
                         if accrue_rent(db, room_id, month, year, skip_reversed_periods=True) is not None:
                              added.append(f"Room {room_number}: rent added for {month_name(month)} {year}")
                    db.commit()
               except LedgerError as e:
                    db.rollback()
                    logger.error("Rent sync failed for room %s: %s", room_id, e)
                    result.failures.append(RoomSyncFailure(room_id=room_id, room_number=room_number, error=str(e)))
                    continue
               result.entries_created += len(added)
               result.details.extend(added)

          logger.info(
               "Rent sync finished: rooms=%d entries=%d failures=%d",
               result.rooms_checked, result.entries_created, len(result.failures),
          )
          return result
