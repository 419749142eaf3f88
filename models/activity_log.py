# models/activity_log.py
"""
ActivityLog model - append-only, human-readable history of every room event.

Entries are never updated or deleted. Reversing an event writes a new entry;
the original stays. Concessions exist only here (no table of their own).
"""
import enum
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from utils.dates import utcnow
from .base import Base


class ActivityEventType(str, enum.Enum):
     """Closed set of audit event types."""
     ROOM_CREATED = "ROOM_CREATED"
     RENT_ADDED = "RENT_ADDED"
     ELECTRICITY_ADDED = "ELECTRICITY_ADDED"
     PAYMENT_RECEIVED = "PAYMENT_RECEIVED"
     EXTRA_ADDED = "EXTRA_ADDED"
     EXTRA_ADJUSTED = "EXTRA_ADJUSTED"
     CONCESSION_APPLIED = "CONCESSION_APPLIED"
     ROOM_DEACTIVATED = "ROOM_DEACTIVATED"
     ROOM_REACTIVATED = "ROOM_REACTIVATED"
     MEMBER_ADDED = "MEMBER_ADDED"
     MEMBER_UPDATED = "MEMBER_UPDATED"
     MEMBER_DISCONTINUED = "MEMBER_DISCONTINUED"
     PAYMENT_REVERSED = "PAYMENT_REVERSED"
     RENT_REVERSED = "RENT_REVERSED"
     ELECTRICITY_REVERSED = "ELECTRICITY_REVERSED"
     CONCESSION_REVERSED = "CONCESSION_REVERSED"
     TRANSACTION_UNDONE = "TRANSACTION_UNDONE"


REVERSAL_EVENT_TYPES = frozenset({
     ActivityEventType.PAYMENT_REVERSED,
     ActivityEventType.RENT_REVERSED,
     ActivityEventType.ELECTRICITY_REVERSED,
     ActivityEventType.CONCESSION_REVERSED,
     ActivityEventType.TRANSACTION_UNDONE,
})


class ActivityLog(Base):
     """One audit entry. amount is signed (negative for reductions) or NULL."""
     __tablename__ = "activity_log"

     id = Column(Integer, primary_key=True, autoincrement=True)
     room_id = Column(Integer, ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False, index=True)

     event_type = Column(
          Enum(ActivityEventType, name="activity_event_type", create_constraint=True),
          nullable=False,
          index=True
     )
     description = Column(String(1000), nullable=False)
     amount = Column(Numeric(12, 2), nullable=True)

     # Set on CONCESSION_REVERSED entries: the CONCESSION_APPLIED entry undone
     reverses_log_id = Column(Integer, ForeignKey("activity_log.id"), nullable=True, index=True)

     created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

     # Relationships
     room = relationship("Room", back_populates="activity_logs")

     def __repr__(self):
          return f"<ActivityLog(id={self.id}, room_id={self.room_id}, event='{self.event_type.value}', amount={self.amount})>"
