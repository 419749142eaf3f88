# services/activity_log.py
"""
Activity log writer and reader.

The log is append-only: this module only ever inserts. Reversals write new
entries, the originals are left as they were.
"""
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from models import ActivityLog, ActivityEventType, REVERSAL_EVENT_TYPES
from utils.dates import utcnow


def log_activity(
     db: Session,
     room_id: int,
     event_type: ActivityEventType,
     description: str,
     amount: Optional[Decimal] = None,
     reverses_log_id: Optional[int] = None,
) -> ActivityLog:
     """Append one entry. Written in the caller's transaction, flushed with it."""
     entry = ActivityLog(
          room_id=room_id,
          event_type=event_type,
          description=description,
          amount=amount,
          reverses_log_id=reverses_log_id,
          created_at=utcnow(),
     )
     db.add(entry)
     return entry


def list_activity(
     db: Session,
     room_id: Optional[int] = None,
     hide_reversals: bool = False,
     limit: Optional[int] = None,
) -> List[ActivityLog]:
     """
     Newest entries first, optionally for one room.

     hide_reversals drops the *_REVERSED and TRANSACTION_UNDONE entries, for
     timeline views that only show what happened forward.
     """
     query = db.query(ActivityLog)
     if room_id is not None:
          query = query.filter(ActivityLog.room_id == room_id)
     if hide_reversals:
          query = query.filter(ActivityLog.event_type.notin_(list(REVERSAL_EVENT_TYPES)))
     query = query.order_by(desc(ActivityLog.created_at), desc(ActivityLog.id))
     if limit:
          query = query.limit(limit)
     return query.all()
