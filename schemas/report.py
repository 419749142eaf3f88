# schemas/report.py
"""
Pydantic schemas for the reporting endpoints.
"""
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, ConfigDict

from .ledger import PaymentResponse


class DefaulterResponse(BaseModel):
     room_id: int
     room_number: str
     name: str
     phone: Optional[str] = None
     pending_amount: Decimal


class DashboardResponse(BaseModel):
     """Totals over active rooms."""
     active_rooms: int
     total_pending: Decimal
     total_extra: Decimal
     total_collected: Decimal
     defaulters: List[DefaulterResponse] = []

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "active_rooms": 12,
                    "total_pending": 18500.00,
                    "total_extra": 2000.00,
                    "total_collected": 240000.00,
                    "defaulters": [
                         {"room_id": 3, "room_number": "103", "name": "Anita & Meera", "pending_amount": 9000.00}
                    ],
               }
          }
     )


class MonthlyLedgerRow(BaseModel):
     """One month of a room's ledger."""
     year: int
     month: int
     label: str
     rent: Decimal
     electricity: Decimal
     total_charged: Decimal
     total_paid: Decimal
     payments: List[PaymentResponse] = []
