"""
Tests: ledger forward operations
"""

from datetime import date
from decimal import Decimal

import pytest

from models import ActivityEventType, ActivityLog, ElectricityReading, Payment, PaymentMode, RentEntry
from services import (
    ConcessionExceedsPendingError,
    InvalidReadingError,
    NotFoundError,
    ValidationError,
    accrue_rent,
    apply_concession,
    bill_electricity,
    receive_payment,
)


def _logs(db, room_id):
    return (
        db.query(ActivityLog)
        .filter(ActivityLog.room_id == room_id)
        .order_by(ActivityLog.id)
        .all()
    )


class TestAccrueRent:
    def test_rent_on_empty_room(self, db, make_room):
        room = make_room(rent="5000")

        entry = accrue_rent(db, room.id, 3, 2026)
        db.commit()

        assert entry.rent_amount == Decimal("5000")
        assert room.pending_amount == Decimal("5000")
        assert room.extra_balance == Decimal("0")
        logs = _logs(db, room.id)
        assert [l.event_type for l in logs] == [ActivityEventType.RENT_ADDED]
        assert logs[0].amount == Decimal("5000")
        assert logs[0].description == "Monthly rent added for March 2026: ₹5,000"

    def test_rent_draws_from_extra(self, db, make_room):
        room = make_room(extra="6000", rent="5000")

        accrue_rent(db, room.id, 3, 2026)

        assert room.pending_amount == Decimal("0")
        assert room.extra_balance == Decimal("1000")
        adjusted = [l for l in _logs(db, room.id) if l.event_type == ActivityEventType.EXTRA_ADJUSTED]
        assert len(adjusted) == 1
        assert adjusted[0].amount == Decimal("-5000")

    def test_same_period_twice_is_a_no_op(self, db, make_room):
        room = make_room(rent="5000")

        first = accrue_rent(db, room.id, 3, 2026)
        second = accrue_rent(db, room.id, 3, 2026)

        assert first is not None
        assert second is None
        assert db.query(RentEntry).filter(RentEntry.room_id == room.id).count() == 1
        assert room.pending_amount == Decimal("5000")

    def test_reversed_period_can_be_charged_again(self, db, make_room):
        room = make_room(rent="5000")
        entry = accrue_rent(db, room.id, 3, 2026)
        entry.is_reversed = True
        db.flush()

        again = accrue_rent(db, room.id, 3, 2026)

        assert again is not None
        assert again.id != entry.id

    def test_first_month_wording(self, db, make_room):
        room = make_room(rent="4500")
        accrue_rent(db, room.id, 1, 2026, first_month=True)
        assert _logs(db, room.id)[0].description == "First month rent added for January 2026: ₹4,500"

    def test_inactive_room_rejected(self, db, make_room):
        room = make_room(is_active=False)
        with pytest.raises(ValidationError, match="not active"):
            accrue_rent(db, room.id, 3, 2026)

    def test_bad_month_rejected(self, db, make_room):
        room = make_room()
        with pytest.raises(ValidationError, match="month"):
            accrue_rent(db, room.id, 13, 2026)

    def test_missing_room(self, db):
        with pytest.raises(NotFoundError):
            accrue_rent(db, 999, 3, 2026)


class TestReceivePayment:
    def test_overpayment_becomes_extra(self, db, make_room):
        room = make_room(pending="5000")

        payment = receive_payment(db, room.id, Decimal("7000"), "UPI", paid_by="Ravi Kumar")
        db.commit()

        assert payment.payment_mode == PaymentMode.UPI
        assert payment.payment_reason == "Rent"
        assert room.pending_amount == Decimal("0")
        assert room.extra_balance == Decimal("2000")
        assert room.total_paid == Decimal("7000")
        logs = _logs(db, room.id)
        assert [(l.event_type, l.amount) for l in logs] == [
            (ActivityEventType.PAYMENT_RECEIVED, Decimal("7000")),
            (ActivityEventType.EXTRA_ADDED, Decimal("2000")),
        ]
        assert logs[0].description == "Payment received: ₹7,000 via UPI"

    def test_partial_payment_has_no_extra_entry(self, db, make_room):
        room = make_room(pending="5000")

        receive_payment(db, room.id, "2000", PaymentMode.CASH)

        assert room.pending_amount == Decimal("3000")
        assert [l.event_type for l in _logs(db, room.id)] == [ActivityEventType.PAYMENT_RECEIVED]

    def test_payment_date_is_stored(self, db, make_room):
        room = make_room(pending="100")
        payment = receive_payment(db, room.id, "100", "Bank", payment_date=date(2026, 3, 10))
        assert payment.payment_date.date() == date(2026, 3, 10)

    @pytest.mark.parametrize("amount", ["0", "-50"])
    def test_non_positive_amount_rejected(self, db, make_room, amount):
        room = make_room(pending="5000")
        with pytest.raises(ValidationError, match="greater than zero"):
            receive_payment(db, room.id, amount, "Cash")
        assert db.query(Payment).count() == 0

    def test_unknown_mode_rejected(self, db, make_room):
        room = make_room(pending="5000")
        with pytest.raises(ValidationError, match="payment mode"):
            receive_payment(db, room.id, "100", "Cheque")

    def test_payment_on_inactive_room_is_allowed(self, db, make_room):
        room = make_room(pending="800", is_active=False)
        receive_payment(db, room.id, "800", "Cash")
        assert room.pending_amount == Decimal("0")


class TestBillElectricity:
    def test_extra_covers_part_of_bill(self, db, make_room):
        room = make_room(pending="2000", extra="2000", rate="10", meter="100")

        reading = bill_electricity(db, room.id, "400", reading_date=date(2026, 3, 31))

        assert reading.previous_reading == Decimal("100")
        assert reading.units_consumed == Decimal("300")
        assert reading.bill_amount == Decimal("3000")
        assert (reading.month, reading.year) == (3, 2026)
        assert room.pending_amount == Decimal("3000")
        assert room.extra_balance == Decimal("0")
        assert room.current_meter_reading == Decimal("400")
        logs = _logs(db, room.id)
        assert [(l.event_type, l.amount) for l in logs] == [
            (ActivityEventType.ELECTRICITY_ADDED, Decimal("3000")),
            (ActivityEventType.EXTRA_ADJUSTED, Decimal("-2000")),
        ]

    def test_bill_is_rounded_half_up(self, db, make_room):
        room = make_room(rate="7.25", meter="0")
        reading = bill_electricity(db, room.id, "10.1")
        # 10.10 * 7.25 = 73.225
        assert reading.bill_amount == Decimal("73.23")

    def test_same_reading_bills_zero(self, db, make_room):
        room = make_room(meter="100")
        reading = bill_electricity(db, room.id, "100")
        assert reading.bill_amount == Decimal("0")
        assert room.pending_amount == Decimal("0")

    def test_reading_below_previous_rejected(self, db, make_room):
        room = make_room(meter="500")
        with pytest.raises(InvalidReadingError, match="cannot be less than"):
            bill_electricity(db, room.id, "499")
        assert db.query(ElectricityReading).count() == 0
        assert room.current_meter_reading == Decimal("500")

    def test_next_reading_starts_from_last(self, db, make_room):
        room = make_room(meter="100", rate="10")
        bill_electricity(db, room.id, "150")
        second = bill_electricity(db, room.id, "180")
        assert second.previous_reading == Decimal("150")
        assert second.bill_amount == Decimal("300")


class TestApplyConcession:
    def test_concession_lowers_pending(self, db, make_room):
        room = make_room(pending="5000")

        entry = apply_concession(db, room.id, "1500", "Festival discount")

        assert room.pending_amount == Decimal("3500")
        assert entry.event_type == ActivityEventType.CONCESSION_APPLIED
        assert entry.amount == Decimal("-1500")
        assert "Festival discount" in entry.description

    def test_concession_up_to_pending_is_allowed(self, db, make_room):
        room = make_room(pending="5000")
        apply_concession(db, room.id, "5000", "Waived")
        assert room.pending_amount == Decimal("0")

    def test_concession_above_pending_rejected(self, db, make_room):
        room = make_room(pending="1000")
        with pytest.raises(ConcessionExceedsPendingError):
            apply_concession(db, room.id, "1000.01", "Too much")
        assert room.pending_amount == Decimal("1000")
        assert _logs(db, room.id) == []

    def test_concession_needs_reason(self, db, make_room):
        room = make_room(pending="1000")
        with pytest.raises(ValidationError, match="reason"):
            apply_concession(db, room.id, "100", "   ")


class TestBalancesNeverNegative:
    def test_mixed_sequence(self, db, make_room):
        room = make_room(rent="5000", rate="8", meter="0")
        steps = [
            lambda: accrue_rent(db, room.id, 1, 2026),
            lambda: receive_payment(db, room.id, "9000", "Cash"),
            lambda: bill_electricity(db, room.id, "250"),
            lambda: accrue_rent(db, room.id, 2, 2026),
            lambda: apply_concession(db, room.id, "1000", "Repair work"),
            lambda: receive_payment(db, room.id, "100", "UPI"),
        ]
        for step in steps:
            step()
            assert room.pending_amount >= 0
            assert room.extra_balance >= 0
        # 5000 - 9000 -> extra 4000; bill 2000 -> extra 2000; rent 5000 -> pending 3000;
        # concession 1000 -> 2000; payment 100 -> 1900
        assert room.pending_amount == Decimal("1900")
        assert room.extra_balance == Decimal("0")
        assert room.total_paid == Decimal("9100")
