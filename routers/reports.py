# routers/reports.py
"""
Read-only reporting routes: dashboard, per-room ledger, activity log and
record listings.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from dependencies import ledger_http_error, verify_token
from services import LedgerError, ReportService, list_activity
from schemas.ledger import (
     ActivityLogResponse,
     ElectricityReadingResponse,
     PaymentResponse,
     RentEntryResponse,
)
from schemas.report import DashboardResponse, MonthlyLedgerRow

router = APIRouter(prefix="/api", tags=["reports"])


@router.get(
     "/reports/dashboard",
     response_model=DashboardResponse,
     summary="Totals across active rooms"
)
def get_dashboard(
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return ReportService.dashboard_summary(db)


@router.get(
     "/reports/rooms/{room_id}/ledger",
     response_model=List[MonthlyLedgerRow],
     summary="Month-wise ledger for a room"
)
def get_room_ledger(
     room_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          return ReportService.monthly_ledger(db, room_id)
     except LedgerError as e:
          raise ledger_http_error(e)


@router.get(
     "/activity-log",
     response_model=List[ActivityLogResponse],
     summary="Activity log, newest first"
)
def get_activity_log(
     room_id: Optional[int] = Query(None, description="Filter by room ID"),
     hide_reversals: bool = Query(False, description="Leave out reversal and undo entries"),
     limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum entries"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return list_activity(db, room_id=room_id, hide_reversals=hide_reversals, limit=limit)


@router.get(
     "/payments",
     response_model=List[PaymentResponse],
     summary="List payments"
)
def get_payments(
     room_id: Optional[int] = Query(None, description="Filter by room ID"),
     include_reversed: bool = Query(False, description="Include reversed payments"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return ReportService.list_payments(db, room_id=room_id, include_reversed=include_reversed)


@router.get(
     "/rent-entries",
     response_model=List[RentEntryResponse],
     summary="List rent entries"
)
def get_rent_entries(
     room_id: Optional[int] = Query(None, description="Filter by room ID"),
     include_reversed: bool = Query(False, description="Include reversed entries"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return ReportService.list_rent_entries(db, room_id=room_id, include_reversed=include_reversed)


@router.get(
     "/electricity-readings",
     response_model=List[ElectricityReadingResponse],
     summary="List electricity readings"
)
def get_electricity_readings(
     room_id: Optional[int] = Query(None, description="Filter by room ID"),
     include_reversed: bool = Query(False, description="Include reversed readings"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return ReportService.list_electricity_readings(db, room_id=room_id, include_reversed=include_reversed)
