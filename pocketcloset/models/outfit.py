"""
Outfit model and its garment association table.
"""
from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow

outfit_garments = Table(
    "outfit_garments",
    Base.metadata,
    Column("outfit_id", String(36), ForeignKey("outfits.id", ondelete="CASCADE"), primary_key=True),
    Column("garment_id", String(36), ForeignKey("garments.id", ondelete="CASCADE"), primary_key=True),
)


class Outfit(Base):
    """Saved combination of garments"""
    __tablename__ = "outfits"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(255), nullable=False)
    image_url = Column(Text, nullable=True)  # collage
    category = Column(String(50), nullable=False, default="casual", index=True)
    season = Column(String(50), nullable=False, default="all", index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    garments = relationship("Garment", secondary=outfit_garments, backref="outfits", lazy="selectin")
    # deleting an event detaches its outfits
    event = relationship("Event", backref="outfits")
