"""Create room ledger tables

Revision ID: 20261018_000001
Revises:
Create Date: 2026-10-18

rooms, members, rent_entries, electricity_readings, payments and the
append-only activity_log.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20261018_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PAYMENT_MODES = ("Cash", "UPI", "Bank")

ACTIVITY_EVENT_TYPES = (
    "ROOM_CREATED",
    "RENT_ADDED",
    "ELECTRICITY_ADDED",
    "PAYMENT_RECEIVED",
    "EXTRA_ADDED",
    "EXTRA_ADJUSTED",
    "CONCESSION_APPLIED",
    "ROOM_DEACTIVATED",
    "ROOM_REACTIVATED",
    "MEMBER_ADDED",
    "MEMBER_UPDATED",
    "MEMBER_DISCONTINUED",
    "PAYMENT_REVERSED",
    "RENT_REVERSED",
    "ELECTRICITY_REVERSED",
    "CONCESSION_REVERSED",
    "TRANSACTION_UNDONE",
)


def _reversal_columns():
    return [
        sa.Column("is_reversed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("reversed_at", sa.DateTime(), nullable=True),
        sa.Column("reversal_reason", sa.String(500), nullable=True),
    ]


def _room_fk(table: str, ondelete: str = "RESTRICT"):
    return sa.ForeignKeyConstraint(
        ["room_id"],
        ["rooms.id"],
        name=f"fk_{table}_room_id",
        ondelete=ondelete,
    )


def upgrade() -> None:
    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("room_number", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("joining_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("discontinued_reason", sa.String(500), nullable=True),
        sa.Column("discontinued_at", sa.DateTime(), nullable=True),
        sa.Column("monthly_rent", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("electricity_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("initial_meter_reading", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("current_meter_reading", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("pending_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("extra_balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total_paid", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("pending_amount >= 0", name="ck_rooms_pending_non_negative"),
        sa.CheckConstraint("extra_balance >= 0", name="ck_rooms_extra_non_negative"),
    )
    op.create_index("ix_rooms_room_number", "rooms", ["room_number"])
    op.create_index("ix_rooms_is_active", "rooms", ["is_active"])

    op.create_table(
        "members",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("room_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("gender", sa.String(20), nullable=True),
        sa.Column("occupation", sa.String(200), nullable=True),
        sa.Column("id_document_url", sa.String(500), nullable=True),
        sa.Column("id_document_back_url", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("discontinued_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        _room_fk("members", ondelete="CASCADE"),
    )
    op.create_index("ix_members_room_id", "members", ["room_id"])

    op.create_table(
        "rent_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("room_id", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("rent_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        *_reversal_columns(),
        sa.PrimaryKeyConstraint("id"),
        _room_fk("rent_entries"),
        sa.CheckConstraint("month BETWEEN 1 AND 12", name="ck_rent_entries_month"),
    )
    op.create_index("ix_rent_entries_room_id", "rent_entries", ["room_id"])
    op.create_index("ix_rent_entries_room_period", "rent_entries", ["room_id", "year", "month"])
    op.create_index("ix_rent_entries_created_at", "rent_entries", ["created_at"])
    op.create_index("ix_rent_entries_is_reversed", "rent_entries", ["is_reversed"])

    op.create_table(
        "electricity_readings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("room_id", sa.Integer(), nullable=False),
        sa.Column("previous_reading", sa.Numeric(12, 2), nullable=False),
        sa.Column("current_reading", sa.Numeric(12, 2), nullable=False),
        sa.Column("units_consumed", sa.Numeric(12, 2), nullable=False),
        sa.Column("rate_per_unit", sa.Numeric(10, 2), nullable=False),
        sa.Column("bill_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("reading_date", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        *_reversal_columns(),
        sa.PrimaryKeyConstraint("id"),
        _room_fk("electricity_readings"),
        sa.CheckConstraint("units_consumed >= 0", name="ck_electricity_readings_units"),
    )
    op.create_index("ix_electricity_readings_room_id", "electricity_readings", ["room_id"])
    op.create_index("ix_electricity_readings_created_at", "electricity_readings", ["created_at"])
    op.create_index("ix_electricity_readings_is_reversed", "electricity_readings", ["is_reversed"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("room_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_mode", sa.Enum(*PAYMENT_MODES, name="payment_mode"), nullable=False),
        sa.Column("payment_reason", sa.String(100), nullable=False, server_default="Rent"),
        sa.Column("reason_notes", sa.String(500), nullable=True),
        sa.Column("paid_by", sa.String(200), nullable=True),
        sa.Column("payment_date", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        *_reversal_columns(),
        sa.PrimaryKeyConstraint("id"),
        _room_fk("payments"),
        sa.CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )
    op.create_index("ix_payments_room_id", "payments", ["room_id"])
    op.create_index("ix_payments_payment_date", "payments", ["payment_date"])
    op.create_index("ix_payments_created_at", "payments", ["created_at"])
    op.create_index("ix_payments_is_reversed", "payments", ["is_reversed"])

    op.create_table(
        "activity_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("room_id", sa.Integer(), nullable=False),
        sa.Column(
            "event_type",
            sa.Enum(*ACTIVITY_EVENT_TYPES, name="activity_event_type", create_constraint=True),
            nullable=False,
        ),
        sa.Column("description", sa.String(1000), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("reverses_log_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        _room_fk("activity_log"),
        sa.ForeignKeyConstraint(
            ["reverses_log_id"],
            ["activity_log.id"],
            name="fk_activity_log_reverses_log_id",
        ),
    )
    op.create_index("ix_activity_log_room_id", "activity_log", ["room_id"])
    op.create_index("ix_activity_log_event_type", "activity_log", ["event_type"])
    op.create_index("ix_activity_log_reverses_log_id", "activity_log", ["reverses_log_id"])
    op.create_index("ix_activity_log_created_at", "activity_log", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_activity_log_created_at", table_name="activity_log")
    op.drop_index("ix_activity_log_reverses_log_id", table_name="activity_log")
    op.drop_index("ix_activity_log_event_type", table_name="activity_log")
    op.drop_index("ix_activity_log_room_id", table_name="activity_log")
    op.drop_table("activity_log")

    op.drop_index("ix_payments_is_reversed", table_name="payments")
    op.drop_index("ix_payments_created_at", table_name="payments")
    op.drop_index("ix_payments_payment_date", table_name="payments")
    op.drop_index("ix_payments_room_id", table_name="payments")
    op.drop_table("payments")

    op.drop_index("ix_electricity_readings_is_reversed", table_name="electricity_readings")
    op.drop_index("ix_electricity_readings_created_at", table_name="electricity_readings")
    op.drop_index("ix_electricity_readings_room_id", table_name="electricity_readings")
    op.drop_table("electricity_readings")

    op.drop_index("ix_rent_entries_is_reversed", table_name="rent_entries")
    op.drop_index("ix_rent_entries_created_at", table_name="rent_entries")
    op.drop_index("ix_rent_entries_room_period", table_name="rent_entries")
    op.drop_index("ix_rent_entries_room_id", table_name="rent_entries")
    op.drop_table("rent_entries")

    op.drop_index("ix_members_room_id", table_name="members")
    op.drop_table("members")

    op.drop_index("ix_rooms_is_active", table_name="rooms")
    op.drop_index("ix_rooms_room_number", table_name="rooms")
    op.drop_table("rooms")
