# schemas/__init__.py
from .room import (
     MemberCreate,
     MemberUpdate,
     MemberResponse,
     RoomCreate,
     RoomUpdate,
     RoomDeactivate,
     RoomResponse,
)
from .ledger import (
     RentAccrueRequest,
     ElectricityBillRequest,
     PaymentCreate,
     ConcessionCreate,
     ReasonRequest,
     UndoRequest,
     RentEntryResponse,
     ElectricityReadingResponse,
     PaymentResponse,
     ActivityLogResponse,
     UndoableTransactionResponse,
     UndoResultResponse,
     RentSyncResponse,
)
from .report import DashboardResponse, MonthlyLedgerRow

__all__ = [
     "MemberCreate",
     "MemberUpdate",
     "MemberResponse",
     "RoomCreate",
     "RoomUpdate",
     "RoomDeactivate",
     "RoomResponse",
     "RentAccrueRequest",
     "ElectricityBillRequest",
     "PaymentCreate",
     "ConcessionCreate",
     "ReasonRequest",
     "UndoRequest",
     "RentEntryResponse",
     "ElectricityReadingResponse",
     "PaymentResponse",
     "ActivityLogResponse",
     "UndoableTransactionResponse",
     "UndoResultResponse",
     "RentSyncResponse",
     "DashboardResponse",
     "MonthlyLedgerRow",
]
