# services/report_service.py
"""
Report Service - read-only views over rooms and their ledger records.

Nothing here writes. "Current" views skip reversed rows; listings can
include them for audit screens.
"""
from collections import defaultdict
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from models import ElectricityReading, Payment, RentEntry, Room
from utils.dates import month_name
from .errors import NotFoundError

ZERO = Decimal("0.00")


class ReportService:
     """Service class for dashboards and ledgers."""

     @staticmethod
     def dashboard_summary(db: Session) -> dict:
          """
          Totals across active rooms.

          Returns:
               Dictionary with room count, pending/extra/collected totals and
               the rooms that owe money, largest pending first
          """
          rooms = db.query(Room).filter(Room.is_active.is_(True)).all()

          defaulters = sorted(
               (r for r in rooms if r.pending_amount > 0),
               key=lambda r: (-r.pending_amount, r.room_number),
          )

          return {
               "active_rooms": len(rooms),
               "total_pending": sum((r.pending_amount for r in rooms), ZERO),
               "total_extra": sum((r.extra_balance for r in rooms), ZERO),
               "total_collected": sum((r.total_paid for r in rooms), ZERO),
               "defaulters": [
                    {
                         "room_id": r.id,
                         "room_number": r.room_number,
                         "name": r.name,
                         "phone": r.phone,
                         "pending_amount": r.pending_amount,
                    }
                    for r in defaulters
               ],
          }

     @staticmethod
     def monthly_ledger(db: Session, room_id: int) -> List[dict]:
          """
          Month-wise breakdown of a room's non-reversed charges and payments,
          newest month first.
          """
          if db.get(Room, room_id) is None:
               raise NotFoundError(f"Room with ID {room_id} not found")

          months = defaultdict(lambda: {
               "rent": ZERO,
               "electricity": ZERO,
               "paid": ZERO,
               "payments": [],
          })

          rent_entries = db.query(RentEntry).filter(
               RentEntry.room_id == room_id,
               RentEntry.is_reversed.is_(False),
          ).all()
          for entry in rent_entries:
               months[(entry.year, entry.month)]["rent"] += entry.rent_amount

          readings = db.query(ElectricityReading).filter(
               ElectricityReading.room_id == room_id,
               ElectricityReading.is_reversed.is_(False),
          ).all()
          for reading in readings:
               months[(reading.year, reading.month)]["electricity"] += reading.bill_amount

          payments = db.query(Payment).filter(
               Payment.room_id == room_id,
               Payment.is_reversed.is_(False),
          ).order_by(Payment.payment_date).all()
          for payment in payments:
               bucket = months[(payment.payment_date.year, payment.payment_date.month)]
               bucket["paid"] += payment.amount
               bucket["payments"].append(payment)

          ledger = []
          for (year, month) in sorted(months, reverse=True):
               bucket = months[(year, month)]
               charged = bucket["rent"] + bucket["electricity"]
               ledger.append({
                    "year": year,
                    "month": month,
                    "label": f"{month_name(month)} {year}",
                    "rent": bucket["rent"],
                    "electricity": bucket["electricity"],
                    "total_charged": charged,
                    "total_paid": bucket["paid"],
                    "payments": bucket["payments"],
               })
          return ledger

     @staticmethod
     def list_payments(db: Session, room_id: Optional[int] = None, include_reversed: bool = False) -> List[Payment]:
          query = db.query(Payment)
          if room_id is not None:
               query = query.filter(Payment.room_id == room_id)
          if not include_reversed:
               query = query.filter(Payment.is_reversed.is_(False))
          return query.order_by(desc(Payment.payment_date), desc(Payment.id)).all()

     @staticmethod
     def list_rent_entries(db: Session, room_id: Optional[int] = None, include_reversed: bool = False) -> List[RentEntry]:
          query = db.query(RentEntry)
          if room_id is not None:
               query = query.filter(RentEntry.room_id == room_id)
          if not include_reversed:
               query = query.filter(RentEntry.is_reversed.is_(False))
          return query.order_by(desc(RentEntry.year), desc(RentEntry.month), desc(RentEntry.id)).all()

     @staticmethod
     def list_electricity_readings(
          db: Session,
          room_id: Optional[int] = None,
          include_reversed: bool = False,
     ) -> List[ElectricityReading]:
          query = db.query(ElectricityReading)
          if room_id is not None:
               query = query.filter(ElectricityReading.room_id == room_id)
          if not include_reversed:
               query = query.filter(ElectricityReading.is_reversed.is_(False))
          return query.order_by(desc(ElectricityReading.reading_date), desc(ElectricityReading.id)).all()
