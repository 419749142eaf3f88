# routers/rooms.py
"""
Room API routes.

Rooms and their members: create, list, update, vacate/reactivate, and
member changes. Balances are read-only here; they move through the ledger
routes.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import ledger_http_error, verify_token
from services import LedgerError, RoomService
from schemas.room import (
     MemberCreate,
     MemberUpdate,
     MemberResponse,
     RoomCreate,
     RoomUpdate,
     RoomDeactivate,
     RoomResponse,
)

router = APIRouter(prefix="/api/rooms", tags=["rooms"])


def _fail(db: Session, error: LedgerError) -> HTTPException:
     db.rollback()
     return ledger_http_error(error)


@router.post(
     "",
     response_model=RoomResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a room"
)
def create_room(
     room_data: RoomCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Create a room with one or two members.

     - **room_number**: Room label
     - **joining_date**: If today or earlier, the joining month's rent is charged now
     - **monthly_rent** / **electricity_rate**: Billing configuration
     - **initial_meter_reading**: Meter value at move-in
     - **members**: One or two members
     """
     try:
          room = RoomService.create_room(
               db,
               room_number=room_data.room_number,
               monthly_rent=room_data.monthly_rent,
               electricity_rate=room_data.electricity_rate,
               initial_meter_reading=room_data.initial_meter_reading,
               joining_date=room_data.joining_date,
               members=[m.model_dump() for m in room_data.members],
               phone=room_data.phone,
          )
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     db.refresh(room)
     return room


@router.get(
     "",
     response_model=List[RoomResponse],
     summary="List rooms"
)
def list_rooms(
     active_only: bool = Query(False, description="Only rooms currently let"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return RoomService.list_rooms(db, active_only=active_only)


@router.get(
     "/{room_id}",
     response_model=RoomResponse,
     summary="Get room by ID"
)
def get_room(
     room_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          return RoomService.get_room(db, room_id)
     except LedgerError as e:
          raise _fail(db, e)


@router.patch(
     "/{room_id}",
     response_model=RoomResponse,
     summary="Update room details"
)
def update_room(
     room_id: int,
     room_data: RoomUpdate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """Only provided fields are updated. A new rent applies from the next accrual."""
     try:
          room = RoomService.update_room(db, room_id, **room_data.model_dump(exclude_unset=True))
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     db.refresh(room)
     return room


@router.post(
     "/{room_id}/deactivate",
     response_model=RoomResponse,
     summary="Vacate a room"
)
def deactivate_room(
     room_id: int,
     body: RoomDeactivate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          room = RoomService.deactivate_room(db, room_id, reason=body.reason)
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     db.refresh(room)
     return room


@router.post(
     "/{room_id}/reactivate",
     response_model=RoomResponse,
     summary="Reactivate a vacated room"
)
def reactivate_room(
     room_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          room = RoomService.reactivate_room(db, room_id)
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     db.refresh(room)
     return room


@router.post(
     "/{room_id}/members",
     response_model=MemberResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Add a member to a room"
)
def add_member(
     room_id: int,
     member_data: MemberCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          member = RoomService.add_member(db, room_id, member_data.model_dump())
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     db.refresh(member)
     return member


@router.patch(
     "/{room_id}/members/{member_id}",
     response_model=MemberResponse,
     summary="Update a member"
)
def update_member(
     room_id: int,
     member_id: int,
     member_data: MemberUpdate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          member = RoomService.update_member(
               db, room_id, member_id, member_data.model_dump(exclude_unset=True)
          )
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     db.refresh(member)
     return member


@router.post(
     "/{room_id}/members/{member_id}/discontinue",
     response_model=MemberResponse,
     summary="Discontinue a member"
)
def discontinue_member(
     room_id: int,
     member_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          member = RoomService.discontinue_member(db, room_id, member_id)
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     db.refresh(member)
     return member
