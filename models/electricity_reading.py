# models/electricity_reading.py
from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from utils.dates import utcnow
from .base import Base, ReversibleMixin


class ElectricityReading(ReversibleMixin, Base):
     """
     ElectricityReading model - a meter reading and the bill derived from it.

     units_consumed = current_reading - previous_reading (never negative)
     bill_amount = units_consumed * rate_per_unit, computed at entry time only
     """
     __tablename__ = "electricity_readings"

     id = Column(Integer, primary_key=True, autoincrement=True)
     room_id = Column(Integer, ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False, index=True)

     previous_reading = Column(Numeric(12, 2), nullable=False)
     current_reading = Column(Numeric(12, 2), nullable=False)
     units_consumed = Column(Numeric(12, 2), nullable=False)
     rate_per_unit = Column(Numeric(10, 2), nullable=False)
     bill_amount = Column(Numeric(12, 2), nullable=False)

     month = Column(Integer, nullable=False)
     year = Column(Integer, nullable=False)
     reading_date = Column(DateTime, nullable=False)

     created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

     # Relationships
     room = relationship("Room", back_populates="electricity_readings")

     def __repr__(self):
          return (
               f"<ElectricityReading(id={self.id}, room_id={self.room_id}, "
               f"units={self.units_consumed}, bill={self.bill_amount})>"
          )
