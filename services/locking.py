# services/locking.py
"""
Per-room transactional scope.

Every ledger operation reads its room through lock_room(): a row lock
(SELECT ... FOR UPDATE) on databases that support it, with fresh column
values even if the room is already in the session. The Room mapper's
version_id column is the second line: if another transaction still slipped
an update in, the flush raises StaleDataError, surfaced here as
ConcurrencyConflictError. Rooms never share a lock.
"""
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from models import Room
from .errors import ConcurrencyConflictError, NotFoundError


def lock_room(db: Session, room_id: int) -> Room:
     """Load and lock one room row. Raises NotFoundError if it does not exist."""
     room = (
          db.query(Room)
          .filter(Room.id == room_id)
          .with_for_update()
          .populate_existing()
          .first()
     )
     if room is None:
          raise NotFoundError(f"Room with ID {room_id} not found")
     return room


def flush_changes(db: Session) -> None:
     """Flush pending writes, translating a stale room version into a conflict."""
     try:
          db.flush()
     except StaleDataError as exc:
          raise ConcurrencyConflictError(
               "Room balances were modified concurrently; retry the operation"
          ) from exc
