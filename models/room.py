# models/room.py
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Numeric, Date, Boolean, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from .base import Base


class Room(Base):
     """
     Room model - one rented room and the single ledger attached to it.

     All financial state lives here at room granularity:
     - pending_amount: money owed by the room
     - extra_balance: advance/credit held for the room
     - total_paid: lifetime sum of non-reversed payments

     Both pending_amount and extra_balance stay >= 0. version_id backs the
     optimistic concurrency check on every balance update.
     """
     __tablename__ = "rooms"

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Occupancy
     room_number = Column(String(50), nullable=False, index=True)
     name = Column(String(255), nullable=False)  # active member names joined with " & "
     phone = Column(String(50), nullable=True)
     joining_date = Column(Date, nullable=False)
     is_active = Column(Boolean, default=True, nullable=False, index=True)
     discontinued_reason = Column(String(500), nullable=True)
     discontinued_at = Column(DateTime, nullable=True)

     # Billing configuration
     monthly_rent = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
     electricity_rate = Column(Numeric(10, 2), default=Decimal("0"), nullable=False)
     initial_meter_reading = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
     current_meter_reading = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)

     # Balances
     pending_amount = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
     extra_balance = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
     total_paid = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)

     version_id = Column(Integer, nullable=False)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     __table_args__ = (
          CheckConstraint("pending_amount >= 0", name="ck_rooms_pending_non_negative"),
          CheckConstraint("extra_balance >= 0", name="ck_rooms_extra_non_negative"),
     )
     __mapper_args__ = {"version_id_col": version_id}

     # Relationships
     members = relationship("Member", back_populates="room", order_by="Member.id")
     rent_entries = relationship("RentEntry", back_populates="room")
     electricity_readings = relationship("ElectricityReading", back_populates="room")
     payments = relationship("Payment", back_populates="room")
     activity_logs = relationship("ActivityLog", back_populates="room")

     def __repr__(self):
          return (
               f"<Room(id={self.id}, room_number='{self.room_number}', "
               f"pending={self.pending_amount}, extra={self.extra_balance})>"
          )

