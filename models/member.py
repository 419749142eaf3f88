# models/member.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class Member(Base):
     """
     Member model - a person living in a room (1-2 active per room).
     Members hold no balances; the room carries the ledger.
     """
     __tablename__ = "members"

     id = Column(Integer, primary_key=True, autoincrement=True)
     room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)

     # Personal info
     name = Column(String(200), nullable=False)
     phone = Column(String(50), nullable=True)
     gender = Column(String(20), nullable=True)
     occupation = Column(String(200), nullable=True)

     # ID document reference (front/back scans stored elsewhere)
     id_document_url = Column(String(500), nullable=True)
     id_document_back_url = Column(String(500), nullable=True)

     # Status
     is_active = Column(Boolean, default=True, nullable=False)
     discontinued_at = Column(DateTime, nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     room = relationship("Room", back_populates="members")

     def __repr__(self):
          return f"<Member(id={self.id}, room_id={self.room_id}, name='{self.name}')>"
