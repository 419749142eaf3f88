# models/rent_entry.py
from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from utils.dates import utcnow
from .base import Base, ReversibleMixin


class RentEntry(ReversibleMixin, Base):
     """
     RentEntry model - one month of rent charged to a room.

     At most one non-reversed entry exists per (room_id, month, year); accrual
     checks for it under the room lock before inserting.
     """
     __tablename__ = "rent_entries"

     id = Column(Integer, primary_key=True, autoincrement=True)
     room_id = Column(Integer, ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False, index=True)

     month = Column(Integer, nullable=False)
     year = Column(Integer, nullable=False)
     rent_amount = Column(Numeric(12, 2), nullable=False)

     created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

     __table_args__ = (
          Index("ix_rent_entries_room_period", "room_id", "year", "month"),
     )

     # Relationships
     room = relationship("Room", back_populates="rent_entries")

     def __repr__(self):
          return (
               f"<RentEntry(id={self.id}, room_id={self.room_id}, "
               f"period={self.year}-{self.month:02d}, amount={self.rent_amount})>"
          )
