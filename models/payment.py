# models/payment.py
import enum
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from utils.dates import utcnow
from .base import Base, ReversibleMixin


class PaymentMode(str, enum.Enum):
     """How the money was received."""
     CASH = "Cash"
     UPI = "UPI"
     BANK = "Bank"


class Payment(ReversibleMixin, Base):
     """
     Payment model - money received for a room.
     """
     __tablename__ = "payments"

     id = Column(Integer, primary_key=True, autoincrement=True)
     room_id = Column(Integer, ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False, index=True)

     amount = Column(Numeric(12, 2), nullable=False)
     payment_mode = Column(
          Enum(PaymentMode, name="payment_mode", values_callable=lambda e: [m.value for m in e]),
          nullable=False,
     )
     payment_reason = Column(String(100), default="Rent", nullable=False)
     reason_notes = Column(String(500), nullable=True)
     paid_by = Column(String(200), nullable=True)
     payment_date = Column(DateTime, nullable=False, index=True)

     created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

     __table_args__ = (
          CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
     )

     # Relationships
     room = relationship("Room", back_populates="payments")

     def __repr__(self):
          return f"<Payment(id={self.id}, room_id={self.room_id}, amount={self.amount}, mode='{self.payment_mode.value}')>"

     @property
     def details(self) -> str:
          """Reason line shown next to the payment, e.g. 'Rent - March balance'."""
          if self.reason_notes:
               return f"{self.payment_reason} – {self.reason_notes}"
          return self.payment_reason
