# schemas/room.py
"""
Pydantic schemas for Room and Member API request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict


class MemberCreate(BaseModel):
     """Schema for adding a member to a room."""
     name: str = Field(..., min_length=1, max_length=200, description="Member full name")
     phone: Optional[str] = Field(None, max_length=50)
     gender: Optional[str] = Field(None, max_length=20)
     occupation: Optional[str] = Field(None, max_length=200)
     id_document_url: Optional[str] = Field(None, max_length=500, description="Reference to an uploaded ID (front)")
     id_document_back_url: Optional[str] = Field(None, max_length=500, description="Reference to an uploaded ID (back)")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Ravi Kumar",
                    "phone": "9876543210",
                    "gender": "Male",
                    "occupation": "Engineer",
               }
          }
     )


class MemberUpdate(BaseModel):
     """Schema for updating a member. Omitted fields are left unchanged."""
     name: Optional[str] = Field(None, min_length=1, max_length=200)
     phone: Optional[str] = Field(None, max_length=50)
     gender: Optional[str] = Field(None, max_length=20)
     occupation: Optional[str] = Field(None, max_length=200)
     id_document_url: Optional[str] = Field(None, max_length=500)
     id_document_back_url: Optional[str] = Field(None, max_length=500)


class MemberResponse(BaseModel):
     id: int
     room_id: int
     name: str
     phone: Optional[str] = None
     gender: Optional[str] = None
     occupation: Optional[str] = None
     id_document_url: Optional[str] = None
     id_document_back_url: Optional[str] = None
     is_active: bool
     discontinued_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class RoomCreate(BaseModel):
     """Schema for creating a room with its first one or two members."""
     room_number: str = Field(..., min_length=1, max_length=50, description="Room label")
     phone: Optional[str] = Field(None, max_length=50, description="Contact number, defaults to the first member's")
     joining_date: date = Field(..., description="Date the room was let")
     monthly_rent: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
     electricity_rate: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Price per unit")
     initial_meter_reading: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
     members: List[MemberCreate] = Field(..., min_length=1, max_length=2)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "room_number": "101",
                    "joining_date": "2026-03-05",
                    "monthly_rent": 5000.00,
                    "electricity_rate": 8.00,
                    "initial_meter_reading": 1200.00,
                    "members": [{"name": "Ravi Kumar", "phone": "9876543210"}],
               }
          }
     )


class RoomUpdate(BaseModel):
     """Schema for updating room details. New rent applies to future months."""
     room_number: Optional[str] = Field(None, min_length=1, max_length=50)
     phone: Optional[str] = Field(None, max_length=50)
     monthly_rent: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     electricity_rate: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "monthly_rent": 5500.00
               }
          }
     )


class RoomDeactivate(BaseModel):
     reason: Optional[str] = Field(None, max_length=500, description="Why the room was vacated")


class RoomResponse(BaseModel):
     """Schema for room response, balances included."""
     id: int
     room_number: str
     name: str
     phone: Optional[str] = None
     joining_date: date
     is_active: bool
     discontinued_reason: Optional[str] = None
     discontinued_at: Optional[datetime] = None
     monthly_rent: Decimal
     electricity_rate: Decimal
     initial_meter_reading: Decimal
     current_meter_reading: Decimal
     pending_amount: Decimal
     extra_balance: Decimal
     total_paid: Decimal
     members: List[MemberResponse] = []

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": 1,
                    "room_number": "101",
                    "name": "Ravi Kumar",
                    "phone": "9876543210",
                    "joining_date": "2026-03-05",
                    "is_active": True,
                    "monthly_rent": 5000.00,
                    "electricity_rate": 8.00,
                    "initial_meter_reading": 1200.00,
                    "current_meter_reading": 1200.00,
                    "pending_amount": 5000.00,
                    "extra_balance": 0.00,
                    "total_paid": 0.00,
                    "members": [],
               }
          }
     )
