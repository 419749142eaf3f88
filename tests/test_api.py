"""
Tests: HTTP layer
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from jose import jwt

import dependencies
from main import app


def _create_room(client, **overrides):
    body = {
        "room_number": "201",
        "joining_date": (date.today() + timedelta(days=30)).isoformat(),
        "monthly_rent": "5000",
        "electricity_rate": "10",
        "initial_meter_reading": "100",
        "members": [{"name": "Ravi Kumar", "phone": "9876543210"}],
    }
    body.update(overrides)
    response = client.post("/api/rooms", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def _room(client, room_id):
    return client.get(f"/api/rooms/{room_id}").json()


class TestRooms:
    def test_create_and_get(self, client):
        created = _create_room(client)

        room = _room(client, created["id"])
        assert room["room_number"] == "201"
        assert room["name"] == "Ravi Kumar"
        assert Decimal(room["pending_amount"]) == Decimal("0")
        assert [m["name"] for m in room["members"]] == ["Ravi Kumar"]

    def test_create_with_past_joining_date_charges_rent(self, client):
        created = _create_room(client, joining_date=(date.today() - timedelta(days=1)).isoformat())
        assert Decimal(created["pending_amount"]) == Decimal("5000")

    def test_three_members_rejected_by_schema(self, client):
        response = client.post("/api/rooms", json={
            "room_number": "202",
            "joining_date": "2026-01-01",
            "monthly_rent": "5000",
            "electricity_rate": "10",
            "members": [{"name": "A"}, {"name": "B"}, {"name": "C"}],
        })
        assert response.status_code == 422

    def test_missing_room_is_404(self, client):
        response = client.get("/api/rooms/999")
        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    def test_deactivate_and_list_active(self, client):
        kept = _create_room(client)
        gone = _create_room(client, room_number="202")

        response = client.post(f"/api/rooms/{gone['id']}/deactivate", json={"reason": "Moved out"})
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        again = client.post(f"/api/rooms/{gone['id']}/deactivate", json={})
        assert again.status_code == 400

        active = client.get("/api/rooms", params={"active_only": True}).json()
        assert [r["id"] for r in active] == [kept["id"]]

    def test_member_lifecycle(self, client):
        room = _create_room(client)

        added = client.post(f"/api/rooms/{room['id']}/members", json={"name": "Suresh"})
        assert added.status_code == 201
        assert _room(client, room["id"])["name"] == "Ravi Kumar & Suresh"

        member_id = added.json()["id"]
        updated = client.patch(f"/api/rooms/{room['id']}/members/{member_id}", json={"phone": "9000000000"})
        assert updated.json()["phone"] == "9000000000"

        removed = client.post(f"/api/rooms/{room['id']}/members/{member_id}/discontinue")
        assert removed.json()["is_active"] is False
        assert _room(client, room["id"])["name"] == "Ravi Kumar"


class TestLedgerRoutes:
    def test_rent_payment_and_reversal(self, client):
        room = _create_room(client)
        room_id = room["id"]

        rent = client.post(f"/api/rooms/{room_id}/rent", json={"month": 3, "year": 2026})
        assert rent.status_code == 200
        assert Decimal(rent.json()["rent_amount"]) == Decimal("5000")

        duplicate = client.post(f"/api/rooms/{room_id}/rent", json={"month": 3, "year": 2026})
        assert duplicate.status_code == 200
        assert duplicate.json() is None

        payment = client.post(f"/api/rooms/{room_id}/payments", json={"amount": "7000", "payment_mode": "UPI"})
        assert payment.status_code == 201
        state = _room(client, room_id)
        assert Decimal(state["pending_amount"]) == Decimal("0")
        assert Decimal(state["extra_balance"]) == Decimal("2000")

        payment_id = payment.json()["id"]
        reversed_payment = client.post(f"/api/payments/{payment_id}/reverse", json={"reason": "Bounced"})
        assert reversed_payment.status_code == 200
        assert reversed_payment.json()["is_reversed"] is True

        twice = client.post(f"/api/payments/{payment_id}/reverse", json={"reason": "Bounced"})
        assert twice.status_code == 409

        state = _room(client, room_id)
        assert Decimal(state["pending_amount"]) == Decimal("5000")
        assert Decimal(state["total_paid"]) == Decimal("0")

    def test_bad_reading_is_400(self, client):
        room = _create_room(client)
        response = client.post(f"/api/rooms/{room['id']}/electricity", json={"current_reading": "50"})
        assert response.status_code == 400
        assert "cannot be less than" in response.json()["detail"]

    def test_electricity_then_reverse(self, client):
        room = _create_room(client)
        reading = client.post(
            f"/api/rooms/{room['id']}/electricity",
            json={"current_reading": "130", "reading_date": "2026-03-31"},
        )
        assert reading.status_code == 201
        assert Decimal(reading.json()["bill_amount"]) == Decimal("300")

        undone = client.post(
            f"/api/electricity-readings/{reading.json()['id']}/reverse",
            json={"reason": "Misread"},
        )
        assert undone.status_code == 200
        assert Decimal(_room(client, room["id"])["pending_amount"]) == Decimal("0")

    def test_concession_over_pending_is_400(self, client):
        room = _create_room(client)
        response = client.post(
            f"/api/rooms/{room['id']}/concessions",
            json={"amount": "100", "reason": "Goodwill"},
        )
        assert response.status_code == 400

    def test_concession_and_undo(self, client):
        room = _create_room(client)
        client.post(f"/api/rooms/{room['id']}/rent", json={"month": 3, "year": 2026})

        applied = client.post(
            f"/api/rooms/{room['id']}/concessions",
            json={"amount": "1000", "reason": "Repairs"},
        )
        assert applied.status_code == 201
        assert Decimal(applied.json()["amount"]) == Decimal("-1000")

        undone = client.post(f"/api/concessions/{applied.json()['id']}/undo", json={"reason": "Withdrawn"})
        assert undone.status_code == 200
        assert undone.json()["reverses_log_id"] == applied.json()["id"]
        assert Decimal(_room(client, room["id"])["pending_amount"]) == Decimal("5000")

    def test_undo_dialog(self, client):
        room = _create_room(client)
        client.post(f"/api/rooms/{room['id']}/rent", json={"month": 3, "year": 2026})
        client.post(f"/api/rooms/{room['id']}/payments", json={"amount": "1000", "payment_mode": "Cash"})

        candidates = client.get("/api/transactions/undoable", params={"room_id": room["id"]}).json()
        assert [c["type"] for c in candidates] == ["PAYMENT", "RENT"]

        result = client.post("/api/transactions/undo", json={
            "type": "RENT",
            "id": candidates[1]["id"],
            "reason": "Not due yet",
        })
        assert result.status_code == 200
        assert result.json()["type"] == "RENT"

        latest = client.post(f"/api/rooms/{room['id']}/undo-latest", json={"reason": "Wrong room"})
        assert latest.status_code == 200
        assert latest.json()["type"] == "PAYMENT"

        nothing = client.post(f"/api/rooms/{room['id']}/undo-latest", json={"reason": "Again"})
        assert nothing.status_code == 404

    def test_rent_sync(self, client):
        room = _create_room(client, joining_date=(date.today() - timedelta(days=1)).isoformat())

        response = client.post("/api/rent/sync")

        assert response.status_code == 200
        body = response.json()
        assert body["rooms_checked"] == 1
        assert body["failures"] == []
        entries = client.get("/api/rent-entries", params={"room_id": room["id"]}).json()
        assert len(entries) >= 1


class TestReportRoutes:
    def test_dashboard_and_activity(self, client):
        room = _create_room(client)
        client.post(f"/api/rooms/{room['id']}/rent", json={"month": 3, "year": 2026})

        dashboard = client.get("/api/reports/dashboard").json()
        assert dashboard["active_rooms"] == 1
        assert Decimal(dashboard["total_pending"]) == Decimal("5000")
        assert dashboard["defaulters"][0]["room_id"] == room["id"]

        activity = client.get("/api/activity-log", params={"room_id": room["id"]}).json()
        assert [a["event_type"] for a in activity] == ["RENT_ADDED", "ROOM_CREATED"]

        ledger = client.get(f"/api/reports/rooms/{room['id']}/ledger").json()
        assert ledger[0]["label"] == "March 2026"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestAuth:
    @pytest.fixture
    def bare_client(self, client):
        app.dependency_overrides.pop(dependencies.verify_token, None)
        return client

    def test_missing_token_is_401(self, bare_client):
        assert bare_client.get("/api/rooms").status_code == 401

    def test_invalid_token_is_403(self, bare_client):
        response = bare_client.get("/api/rooms", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 403

    def test_valid_token_accepted(self, bare_client):
        token = jwt.encode({"id": 1}, dependencies.SECRET_KEY, algorithm=dependencies.ALGORITHM)
        response = bare_client.get("/api/rooms", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
