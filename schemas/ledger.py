# schemas/ledger.py
"""
Pydantic schemas for the ledger API: rent, electricity, payments,
concessions, reversals and undo.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models import ActivityEventType, PaymentMode
from services import TransactionType


class RentAccrueRequest(BaseModel):
     """Request body for POST /api/rooms/{id}/rent."""
     month: int = Field(..., ge=1, le=12)
     year: int = Field(..., ge=2000, le=2100)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "month": 3,
                    "year": 2026
               }
          }
     )


class ElectricityBillRequest(BaseModel):
     """Request body for POST /api/rooms/{id}/electricity."""
     current_reading: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2, description="Meter value now")
     reading_date: Optional[date] = Field(None, description="Defaults to today")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "current_reading": 1350.00,
                    "reading_date": "2026-03-31"
               }
          }
     )


class PaymentCreate(BaseModel):
     """Request body for POST /api/rooms/{id}/payments."""
     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Amount received")
     payment_mode: PaymentMode = Field(..., description="Cash, UPI or Bank")
     payment_reason: str = Field("Rent", min_length=1, max_length=100)
     reason_notes: Optional[str] = Field(None, max_length=500)
     paid_by: Optional[str] = Field(None, max_length=200, description="Member who paid")
     payment_date: Optional[date] = Field(None, description="Defaults to today")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "amount": 7000.00,
                    "payment_mode": "UPI",
                    "payment_reason": "Rent",
                    "paid_by": "Ravi Kumar",
                    "payment_date": "2026-03-10"
               }
          }
     )


class ConcessionCreate(BaseModel):
     """Request body for POST /api/rooms/{id}/concessions."""
     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
     reason: str = Field(..., min_length=1, max_length=500)


class ReasonRequest(BaseModel):
     """Body shared by every reversal and undo call."""
     reason: str = Field(..., min_length=1, max_length=500, description="Why the entry is being undone")


class UndoRequest(BaseModel):
     """Request body for POST /api/transactions/undo."""
     type: TransactionType
     id: int = Field(..., gt=0)
     reason: str = Field(..., min_length=1, max_length=500)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "type": "PAYMENT",
                    "id": 12,
                    "reason": "Entered twice"
               }
          }
     )


class RentEntryResponse(BaseModel):
     id: int
     room_id: int
     month: int
     year: int
     rent_amount: Decimal
     created_at: datetime
     is_reversed: bool
     reversed_at: Optional[datetime] = None
     reversal_reason: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)


class ElectricityReadingResponse(BaseModel):
     id: int
     room_id: int
     previous_reading: Decimal
     current_reading: Decimal
     units_consumed: Decimal
     rate_per_unit: Decimal
     bill_amount: Decimal
     month: int
     year: int
     reading_date: datetime
     created_at: datetime
     is_reversed: bool
     reversed_at: Optional[datetime] = None
     reversal_reason: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)


class PaymentResponse(BaseModel):
     id: int
     room_id: int
     amount: Decimal
     payment_mode: PaymentMode
     payment_reason: str
     reason_notes: Optional[str] = None
     paid_by: Optional[str] = None
     payment_date: datetime
     created_at: datetime
     is_reversed: bool
     reversed_at: Optional[datetime] = None
     reversal_reason: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)


class ActivityLogResponse(BaseModel):
     id: int
     room_id: int
     event_type: ActivityEventType
     description: str
     amount: Optional[Decimal] = None
     reverses_log_id: Optional[int] = None
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class UndoableTransactionResponse(BaseModel):
     id: int
     type: TransactionType
     room_id: int
     room_number: Optional[str] = None
     room_name: Optional[str] = None
     amount: Decimal
     description: str
     details: Optional[str] = None
     created_at: datetime
     already_undone: bool = False

     model_config = ConfigDict(from_attributes=True)


class UndoResultResponse(BaseModel):
     type: TransactionType
     id: int
     room_id: int
     amount: Decimal

     model_config = ConfigDict(from_attributes=True)


class RoomSyncFailureResponse(BaseModel):
     room_id: int
     room_number: str
     error: str

     model_config = ConfigDict(from_attributes=True)


class RentSyncResponse(BaseModel):
     rooms_checked: int
     entries_created: int
     details: List[str] = []
     failures: List[RoomSyncFailureResponse] = []

     model_config = ConfigDict(from_attributes=True)
