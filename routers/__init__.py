# routers/__init__.py
from .rooms import router as rooms_router
from .ledger import router as ledger_router
from .reports import router as reports_router

__all__ = [
     "rooms_router",
     "ledger_router",
     "reports_router",
]
