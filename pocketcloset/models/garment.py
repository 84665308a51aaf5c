"""
Garment (single clothing item) model.
"""
from sqlalchemy import Column, DateTime, ForeignKey, JSON, String, Text

from .base import Base, new_id, utcnow

SECTIONS = ("top", "bottom", "footwear", "outerwear", "one-piece", "accessories")


class Garment(Base):
    """Clothing item owned by exactly one user"""
    __tablename__ = "garments"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False, index=True)
    color = Column(String(100), nullable=False, index=True)
    brand = Column(String(120), nullable=True)
    image_url = Column(Text, nullable=True)  # Cloudinary URL or data URL
    storage_id = Column(String(255), nullable=True)  # For deletion
    occasion = Column(String(100), nullable=True)
    season = Column(String(50), nullable=True)
    section = Column(String(50), nullable=True, index=True)
    ai_metadata = Column(JSON, nullable=True)  # raw classifier output
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
