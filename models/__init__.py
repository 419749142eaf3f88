# models/__init__.py
from .base import Base, ReversibleMixin
from .room import Room
from .member import Member
from .rent_entry import RentEntry
from .electricity_reading import ElectricityReading
from .payment import Payment, PaymentMode
from .activity_log import ActivityLog, ActivityEventType, REVERSAL_EVENT_TYPES

__all__ = [
     "Base",
     "ReversibleMixin",
     "Room",
     "Member",
     "RentEntry",
     "ElectricityReading",
     "Payment",
     "PaymentMode",
     "ActivityLog",
     "ActivityEventType",
     "REVERSAL_EVENT_TYPES",
]
