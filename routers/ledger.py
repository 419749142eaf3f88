# routers/ledger.py
"""
Ledger API routes.

Forward events (rent, electricity, payments, concessions), their reversals,
the generic undo dialog endpoints and the rent sync trigger. Each request
is one transaction: the balance change, the record and its audit entries
are committed together.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import ledger_http_error, verify_token
from services import (
     LedgerError,
     RentSyncService,
     TransactionRef,
     accrue_rent,
     apply_concession,
     bill_electricity,
     list_undoable_transactions,
     receive_payment,
     reverse_electricity,
     reverse_payment,
     reverse_rent,
     undo_concession,
     undo_latest_transaction,
     undo_transaction,
)
from schemas.ledger import (
     ActivityLogResponse,
     ConcessionCreate,
     ElectricityBillRequest,
     ElectricityReadingResponse,
     PaymentCreate,
     PaymentResponse,
     ReasonRequest,
     RentAccrueRequest,
     RentEntryResponse,
     RentSyncResponse,
     UndoableTransactionResponse,
     UndoRequest,
     UndoResultResponse,
)

router = APIRouter(prefix="/api", tags=["ledger"])


def _fail(db: Session, error: LedgerError) -> HTTPException:
     db.rollback()
     return ledger_http_error(error)


# ---------------------------------------------------------------------------
# Forward events
# ---------------------------------------------------------------------------

@router.post(
     "/rooms/{room_id}/rent",
     response_model=Optional[RentEntryResponse],
     summary="Charge a month of rent"
)
def add_rent(
     room_id: int,
     body: RentAccrueRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Charge one month of rent. Returns null when the month was already
     charged (nothing changes).
     """
     try:
          entry = accrue_rent(db, room_id, body.month, body.year)
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     return entry


@router.post(
     "/rooms/{room_id}/electricity",
     response_model=ElectricityReadingResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a meter reading and bill it"
)
def add_electricity(
     room_id: int,
     body: ElectricityBillRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          reading = bill_electricity(db, room_id, body.current_reading, reading_date=body.reading_date)
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     return reading


@router.post(
     "/rooms/{room_id}/payments",
     response_model=PaymentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a payment"
)
def add_payment(
     room_id: int,
     body: PaymentCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Record money received. Dues are settled first, any surplus goes to the
     room's extra (advance) balance.
     """
     try:
          payment = receive_payment(
               db,
               room_id,
               body.amount,
               body.payment_mode,
               reason=body.payment_reason,
               reason_notes=body.reason_notes,
               paid_by=body.paid_by,
               payment_date=body.payment_date,
          )
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     return payment


@router.post(
     "/rooms/{room_id}/concessions",
     response_model=ActivityLogResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Waive part of the pending amount"
)
def add_concession(
     room_id: int,
     body: ConcessionCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """Returns the CONCESSION_APPLIED log entry; its id is what the undo call takes."""
     try:
          entry = apply_concession(db, room_id, body.amount, body.reason)
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     return entry


# ---------------------------------------------------------------------------
# Reversals
# ---------------------------------------------------------------------------

@router.post(
     "/payments/{payment_id}/reverse",
     response_model=PaymentResponse,
     summary="Reverse a payment"
)
def reverse_payment_route(
     payment_id: int,
     body: ReasonRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          payment = reverse_payment(db, payment_id, body.reason)
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     return payment


@router.post(
     "/rent-entries/{entry_id}/reverse",
     response_model=RentEntryResponse,
     summary="Reverse a rent entry"
)
def reverse_rent_route(
     entry_id: int,
     body: ReasonRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          entry = reverse_rent(db, entry_id, body.reason)
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     return entry


@router.post(
     "/electricity-readings/{reading_id}/reverse",
     response_model=ElectricityReadingResponse,
     summary="Reverse an electricity bill"
)
def reverse_electricity_route(
     reading_id: int,
     body: ReasonRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          reading = reverse_electricity(db, reading_id, body.reason)
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     return reading


@router.post(
     "/concessions/{log_id}/undo",
     response_model=ActivityLogResponse,
     summary="Undo a concession"
)
def undo_concession_route(
     log_id: int,
     body: ReasonRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          entry = undo_concession(db, log_id, body.reason)
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     return entry


# ---------------------------------------------------------------------------
# Undo dialog
# ---------------------------------------------------------------------------

@router.get(
     "/transactions/undoable",
     response_model=List[UndoableTransactionResponse],
     summary="List transactions that can be undone"
)
def get_undoable_transactions(
     room_id: Optional[int] = Query(None, description="Filter by room ID"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return list_undoable_transactions(db, room_id=room_id)


@router.post(
     "/transactions/undo",
     response_model=UndoResultResponse,
     summary="Undo a transaction"
)
def undo_transaction_route(
     body: UndoRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          result = undo_transaction(db, TransactionRef(body.type, body.id), body.reason)
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     return result


@router.post(
     "/rooms/{room_id}/undo-latest",
     response_model=UndoResultResponse,
     summary="Undo the most recent transaction of a room"
)
def undo_latest_route(
     room_id: int,
     body: ReasonRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          result = undo_latest_transaction(db, room_id, body.reason)
     except LedgerError as e:
          raise _fail(db, e)

     db.commit()
     return result


# ---------------------------------------------------------------------------
# Rent sync
# ---------------------------------------------------------------------------

@router.post(
     "/rent/sync",
     response_model=RentSyncResponse,
     summary="Charge rent for every due month of every active room"
)
def sync_rent(
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Meant to be called once a day by an external scheduler. Safe to call
     more often: months already charged are skipped.
     """
     return RentSyncService.sync_rent(db)
