"""
Tests: room and member administration
"""

from datetime import date
from decimal import Decimal

import pytest

from models import ActivityEventType, ActivityLog, Member, RentEntry
from services import NotFoundError, RoomService, ValidationError

TODAY = date(2026, 3, 20)


def _create(db, joining_date=date(2026, 3, 5), members=None, **kwargs):
    return RoomService.create_room(
        db,
        room_number=kwargs.pop("room_number", "101"),
        monthly_rent=kwargs.pop("monthly_rent", "5000"),
        electricity_rate=kwargs.pop("electricity_rate", "8"),
        initial_meter_reading=kwargs.pop("initial_meter_reading", "1200"),
        joining_date=joining_date,
        members=members or [{"name": "Ravi Kumar", "phone": "9876543210"}],
        today=TODAY,
        **kwargs,
    )


def _event_types(db, room_id):
    return [
        e.event_type
        for e in db.query(ActivityLog).filter(ActivityLog.room_id == room_id).order_by(ActivityLog.id)
    ]


class TestCreateRoom:
    def test_create_with_past_joining_date_charges_first_month(self, db):
        room = _create(db, members=[{"name": "Anita"}, {"name": "Meera", "phone": "9000000000"}])

        assert room.name == "Anita & Meera"
        assert room.phone is None
        assert room.current_meter_reading == Decimal("1200")
        assert room.pending_amount == Decimal("5000")
        entry = db.query(RentEntry).filter(RentEntry.room_id == room.id).one()
        assert (entry.month, entry.year) == (3, 2026)
        assert _event_types(db, room.id) == [ActivityEventType.ROOM_CREATED, ActivityEventType.RENT_ADDED]
        created = db.query(ActivityLog).filter(ActivityLog.room_id == room.id).first()
        assert created.description == "Room 101 created with 2 member(s): Anita, Meera"

    def test_phone_defaults_to_first_member(self, db):
        room = _create(db)
        assert room.phone == "9876543210"

    def test_future_joining_date_charges_nothing(self, db):
        room = _create(db, joining_date=date(2026, 4, 1))
        assert room.pending_amount == Decimal("0")
        assert db.query(RentEntry).count() == 0

    def test_first_month_goes_to_joining_month(self, db):
        room = _create(db, joining_date=date(2026, 1, 15))
        entry = db.query(RentEntry).filter(RentEntry.room_id == room.id).one()
        assert (entry.month, entry.year) == (1, 2026)

    def test_needs_members(self, db):
        with pytest.raises(ValidationError, match="at least one member"):
            RoomService.create_room(db, "101", "5000", "8", "0", date(2026, 3, 5), [], today=TODAY)

    def test_at_most_two_members(self, db):
        with pytest.raises(ValidationError, match="at most 2"):
            _create(db, members=[{"name": "A"}, {"name": "B"}, {"name": "C"}])

    def test_negative_rent_rejected(self, db):
        with pytest.raises(ValidationError, match="monthly_rent"):
            _create(db, monthly_rent="-1")


class TestUpdateAndStatus:
    def test_update_rent_applies_to_future_only(self, db):
        room = _create(db)
        RoomService.update_room(db, room.id, monthly_rent="5500", phone="9111111111")

        assert room.monthly_rent == Decimal("5500")
        assert room.phone == "9111111111"
        assert room.pending_amount == Decimal("5000")

    def test_unknown_field_rejected(self, db):
        room = _create(db)
        with pytest.raises(ValidationError, match="pending_amount"):
            RoomService.update_room(db, room.id, pending_amount="0")

    def test_deactivate_keeps_balances(self, db):
        room = _create(db)

        RoomService.deactivate_room(db, room.id, reason="Moved out")

        assert room.is_active is False
        assert room.discontinued_reason == "Moved out"
        assert room.discontinued_at is not None
        assert room.pending_amount == Decimal("5000")
        last = db.query(ActivityLog).order_by(ActivityLog.id.desc()).first()
        assert last.event_type == ActivityEventType.ROOM_DEACTIVATED
        assert last.description == "Room 101 vacated/discontinued: Moved out"

    def test_deactivate_twice_rejected(self, db):
        room = _create(db)
        RoomService.deactivate_room(db, room.id)
        with pytest.raises(ValidationError, match="already inactive"):
            RoomService.deactivate_room(db, room.id)

    def test_reactivate(self, db):
        room = _create(db)
        RoomService.deactivate_room(db, room.id, reason="Moved out")

        RoomService.reactivate_room(db, room.id)

        assert room.is_active is True
        assert room.discontinued_reason is None
        assert _event_types(db, room.id)[-1] == ActivityEventType.ROOM_REACTIVATED

    def test_reactivate_active_room_rejected(self, db):
        room = _create(db)
        with pytest.raises(ValidationError, match="already active"):
            RoomService.reactivate_room(db, room.id)

    def test_get_missing_room(self, db):
        with pytest.raises(NotFoundError):
            RoomService.get_room(db, 404)


class TestMembers:
    def test_add_member_refreshes_name(self, db):
        room = _create(db)

        member = RoomService.add_member(db, room.id, {"name": "Suresh", "occupation": "Student"})

        assert member.is_active is True
        assert room.name == "Ravi Kumar & Suresh"
        assert _event_types(db, room.id)[-1] == ActivityEventType.MEMBER_ADDED

    def test_third_member_rejected(self, db):
        room = _create(db, members=[{"name": "A"}, {"name": "B"}])
        with pytest.raises(ValidationError, match="already has 2 members"):
            RoomService.add_member(db, room.id, {"name": "C"})

    def test_update_member_name(self, db):
        room = _create(db)
        member = db.query(Member).filter(Member.room_id == room.id).one()

        RoomService.update_member(db, room.id, member.id, {"name": "Ravi K."})

        assert member.name == "Ravi K."
        assert room.name == "Ravi K."
        assert _event_types(db, room.id)[-1] == ActivityEventType.MEMBER_UPDATED

    def test_discontinue_member_leaves_balances(self, db):
        room = _create(db, members=[{"name": "A"}, {"name": "B"}])
        second = db.query(Member).filter(Member.room_id == room.id, Member.name == "B").one()

        RoomService.discontinue_member(db, room.id, second.id)

        assert second.is_active is False
        assert room.name == "A"
        assert room.pending_amount == Decimal("5000")
        assert _event_types(db, room.id)[-1] == ActivityEventType.MEMBER_DISCONTINUED

    def test_last_member_cannot_be_discontinued(self, db):
        room = _create(db)
        member = db.query(Member).filter(Member.room_id == room.id).one()
        with pytest.raises(ValidationError, match="only active member"):
            RoomService.discontinue_member(db, room.id, member.id)

    def test_member_of_other_room_not_found(self, db):
        first = _create(db)
        second = _create(db, room_number="102")
        member = db.query(Member).filter(Member.room_id == first.id).one()
        with pytest.raises(NotFoundError):
            RoomService.update_member(db, second.id, member.id, {"name": "X"})
