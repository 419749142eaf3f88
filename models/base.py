# models/base.py
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import Column, Boolean, DateTime, String


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.
     Each model names its own table.
     """


class ReversibleMixin:
     """
     The is_reversed / reversed_at / reversal_reason triple carried by every
     financial event record.

     ACTIVE -> REVERSED is one-way; rows are flagged, never deleted.
     """
     is_reversed = Column(Boolean, default=False, nullable=False, index=True)
     reversed_at = Column(DateTime, nullable=True)
     reversal_reason = Column(String(500), nullable=True)

     def mark_reversed(self, reason: str, when) -> None:
          """Flag the record reversed. Callers check is_reversed first."""
          self.is_reversed = True
          self.reversed_at = when
          self.reversal_reason = reason
