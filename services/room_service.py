# services/room_service.py
"""
Room Service - Business logic for rooms and their members.

Rooms are never deleted: vacating a room is a flag flip. Member changes
never touch balances; the only money movement here is the first month of
rent charged when a room is created with a joining date that has passed.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from models import ActivityEventType, Member, Room
from utils.dates import utcnow
from .activity_log import log_activity
from .errors import NotFoundError, ValidationError
from .ledger_service import accrue_rent, to_amount
from .locking import flush_changes, lock_room

logger = logging.getLogger(__name__)

MAX_ACTIVE_MEMBERS = 2

MEMBER_FIELDS = (
     "name",
     "phone",
     "gender",
     "occupation",
     "id_document_url",
     "id_document_back_url",
)

ROOM_UPDATE_FIELDS = ("room_number", "phone", "monthly_rent", "electricity_rate")


def _non_negative(value, field: str) -> Decimal:
     amount = to_amount(value, field)
     if amount < 0:
          raise ValidationError(f"{field} cannot be negative")
     return amount


def _member_from(data: dict, room_id: int) -> Member:
     name = (data.get("name") or "").strip()
     if not name:
          raise ValidationError("Member name is required")
     fields = {k: data.get(k) for k in MEMBER_FIELDS if k != "name"}
     return Member(room_id=room_id, name=name, **fields)


class RoomService:
     """Service class for room and member administration."""

     @staticmethod
     def get_room(db: Session, room_id: int) -> Room:
          room = db.get(Room, room_id)
          if room is None:
               raise NotFoundError(f"Room with ID {room_id} not found")
          return room

     @staticmethod
     def list_rooms(db: Session, active_only: bool = False) -> List[Room]:
          query = db.query(Room)
          if active_only:
               query = query.filter(Room.is_active.is_(True))
          return query.order_by(Room.room_number).all()

     @staticmethod
     def active_members(db: Session, room_id: int) -> List[Member]:
          return (
               db.query(Member)
               .filter(Member.room_id == room_id, Member.is_active.is_(True))
               .order_by(Member.id)
               .all()
          )

     @staticmethod
     def _refresh_name(db: Session, room: Room) -> None:
          names = [m.name for m in RoomService.active_members(db, room.id)]
          if names:
               room.name = " & ".join(names)

     @staticmethod
     def create_room(
          db: Session,
          room_number: str,
          monthly_rent,
          electricity_rate,
          initial_meter_reading,
          joining_date: date,
          members: List[dict],
          phone: Optional[str] = None,
          today: Optional[date] = None,
     ) -> Room:
          """
          Create a room with its members.

          If the joining date is today or earlier, the joining month's rent is
          charged straight away; later months are left to the rent sync.

          Args:
               db: SQLAlchemy database session
               room_number: Room label shown everywhere
               monthly_rent: Rent charged each month
               electricity_rate: Price per meter unit
               initial_meter_reading: Meter value at move-in
               joining_date: Date the room was let
               members: 1-2 member dicts (name required)
               phone: Contact number, defaults to the first member's
               today: Override for the current date (tests, back-dated entry)

          Returns:
               Created Room object

          Raises:
               ValidationError: bad amounts, missing room number or member count
          """
          room_number = (room_number or "").strip()
          if not room_number:
               raise ValidationError("Room number is required")
          if not members:
               raise ValidationError("A room needs at least one member")
          if len(members) > MAX_ACTIVE_MEMBERS:
               raise ValidationError(f"A room can have at most {MAX_ACTIVE_MEMBERS} members")

          rent = _non_negative(monthly_rent, "monthly_rent")
          rate = _non_negative(electricity_rate, "electricity_rate")
          meter = _non_negative(initial_meter_reading, "initial_meter_reading")

          room = Room(
               room_number=room_number,
               name=room_number,
               phone=phone,
               joining_date=joining_date,
               is_active=True,
               monthly_rent=rent,
               electricity_rate=rate,
               initial_meter_reading=meter,
               current_meter_reading=meter,
               pending_amount=Decimal("0"),
               extra_balance=Decimal("0"),
               total_paid=Decimal("0"),
          )
          db.add(room)
          flush_changes(db)

          created = [_member_from(data, room.id) for data in members]
          db.add_all(created)
          room.name = " & ".join(m.name for m in created)
          if not room.phone:
               room.phone = created[0].phone

          log_activity(
               db,
               room.id,
               ActivityEventType.ROOM_CREATED,
               f"Room {room_number} created with {len(created)} member(s): "
               f"{', '.join(m.name for m in created)}",
               None,
          )
          flush_changes(db)

          today = today or utcnow().date()
          if joining_date <= today:
               accrue_rent(db, room.id, joining_date.month, joining_date.year, first_month=True)

          logger.info("Room created: id=%s number=%s members=%d", room.id, room_number, len(created))
          return room

     @staticmethod
     def update_room(db: Session, room_id: int, **changes) -> Room:
          """
          Update room details and billing configuration.

          Only room_number, phone, monthly_rent and electricity_rate can be
          changed here; balances move only through the ledger services. A new
          rent applies from the next accrual on.
          """
          unknown = set(changes) - set(ROOM_UPDATE_FIELDS)
          if unknown:
               raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

          room = lock_room(db, room_id)
          for field, value in changes.items():
               if value is None:
                    continue
               if field in ("monthly_rent", "electricity_rate"):
                    value = _non_negative(value, field)
               elif field == "room_number":
                    value = value.strip()
                    if not value:
                         raise ValidationError("Room number is required")
               setattr(room, field, value)

          flush_changes(db)
          return room

     @staticmethod
     def deactivate_room(db: Session, room_id: int, reason: Optional[str] = None) -> Room:
          """Mark a room vacated. Balances are kept as they are."""
          room = lock_room(db, room_id)
          if not room.is_active:
               raise ValidationError(f"Room {room.room_number} is already inactive")

          reason = (reason or "").strip() or None
          room.is_active = False
          room.discontinued_reason = reason
          room.discontinued_at = utcnow()

          description = f"Room {room.room_number} vacated/discontinued"
          if reason:
               description += f": {reason}"
          log_activity(db, room.id, ActivityEventType.ROOM_DEACTIVATED, description, None)

          flush_changes(db)
          logger.info("Room deactivated: id=%s", room.id)
          return room

     @staticmethod
     def reactivate_room(db: Session, room_id: int) -> Room:
          room = lock_room(db, room_id)
          if room.is_active:
               raise ValidationError(f"Room {room.room_number} is already active")

          room.is_active = True
          room.discontinued_reason = None
          room.discontinued_at = None
          log_activity(
               db,
               room.id,
               ActivityEventType.ROOM_REACTIVATED,
               f"Room {room.room_number} reactivated",
               None,
          )

          flush_changes(db)
          logger.info("Room reactivated: id=%s", room.id)
          return room

     @staticmethod
     def _get_member(db: Session, room_id: int, member_id: int) -> Member:
          member = db.get(Member, member_id)
          if member is None or member.room_id != room_id:
               raise NotFoundError(f"Member with ID {member_id} not found in room {room_id}")
          return member

     @staticmethod
     def add_member(db: Session, room_id: int, data: dict) -> Member:
          room = lock_room(db, room_id)
          if len(RoomService.active_members(db, room.id)) >= MAX_ACTIVE_MEMBERS:
               raise ValidationError(f"Room {room.room_number} already has {MAX_ACTIVE_MEMBERS} members")

          member = _member_from(data, room.id)
          db.add(member)
          flush_changes(db)
          RoomService._refresh_name(db, room)

          log_activity(
               db,
               room.id,
               ActivityEventType.MEMBER_ADDED,
               f"New member added to Room {room.room_number}: {member.name}",
               None,
          )
          flush_changes(db)
          return member

     @staticmethod
     def update_member(db: Session, room_id: int, member_id: int, data: dict) -> Member:
          room = lock_room(db, room_id)
          member = RoomService._get_member(db, room.id, member_id)

          for field in MEMBER_FIELDS:
               if field not in data or data[field] is None:
                    continue
               value = data[field]
               if field == "name":
                    value = value.strip()
                    if not value:
                         raise ValidationError("Member name is required")
               setattr(member, field, value)
          flush_changes(db)
          RoomService._refresh_name(db, room)

          log_activity(
               db,
               room.id,
               ActivityEventType.MEMBER_UPDATED,
               f"Member details updated in Room {room.room_number}: {member.name}",
               None,
          )
          flush_changes(db)
          return member

     @staticmethod
     def discontinue_member(db: Session, room_id: int, member_id: int) -> Member:
          """Discontinue one member. The last active member cannot be removed; deactivate the room instead."""
          room = lock_room(db, room_id)
          member = RoomService._get_member(db, room.id, member_id)
          if not member.is_active:
               raise ValidationError(f"Member {member.name} is already discontinued")
          if len(RoomService.active_members(db, room.id)) <= 1:
               raise ValidationError("Cannot discontinue the only active member of a room")

          member.is_active = False
          member.discontinued_at = utcnow()
          flush_changes(db)
          RoomService._refresh_name(db, room)

          log_activity(
               db,
               room.id,
               ActivityEventType.MEMBER_DISCONTINUED,
               f"Member discontinued from Room {room.room_number}: {member.name}",
               None,
          )
          flush_changes(db)
          return member
