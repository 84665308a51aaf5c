"""
Calendar event model.
"""
from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from .base import Base, new_id, utcnow


class Event(Base):
    """Dated occasion an outfit can be planned for"""
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    description = Column(Text, nullable=True)
    type = Column(String(100), nullable=True)
    venue = Column(String(255), nullable=True)
    city = Column(String(120), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
