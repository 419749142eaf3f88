# services/__init__.py
from .errors import (
     LedgerError,
     ValidationError,
     InvalidReadingError,
     ConcessionExceedsPendingError,
     NotFoundError,
     AlreadyReversedError,
     ConcurrencyConflictError,
)
from .activity_log import log_activity, list_activity
from .ledger_service import (
     accrue_rent,
     bill_electricity,
     receive_payment,
     apply_concession,
)
from .reversal_service import (
     TransactionType,
     TransactionRef,
     UndoableTransaction,
     UndoResult,
     reverse_payment,
     reverse_rent,
     reverse_electricity,
     undo_concession,
     undo_transaction,
     list_undoable_transactions,
     undo_latest_transaction,
)
from .rent_sync_service import RentSyncService, RentSyncResult
from .room_service import RoomService
from .report_service import ReportService

__all__ = [
     "LedgerError",
     "ValidationError",
     "InvalidReadingError",
     "ConcessionExceedsPendingError",
     "NotFoundError",
     "AlreadyReversedError",
     "ConcurrencyConflictError",
     "log_activity",
     "list_activity",
     "accrue_rent",
     "bill_electricity",
     "receive_payment",
     "apply_concession",
     "TransactionType",
     "TransactionRef",
     "UndoableTransaction",
     "UndoResult",
     "reverse_payment",
     "reverse_rent",
     "reverse_electricity",
     "undo_concession",
     "undo_transaction",
     "list_undoable_transactions",
     "undo_latest_transaction",
     "RentSyncService",
     "RentSyncResult",
     "RoomService",
     "ReportService",
]
