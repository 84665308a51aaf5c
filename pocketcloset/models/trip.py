"""
Trip and packing list models.
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Table, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow

PACKING_KINDS = ("full_outfit", "loose_items")

packing_item_garments = Table(
    "packing_item_garments",
    Base.metadata,
    Column("packing_item_id", String(36), ForeignKey("packing_items.id", ondelete="CASCADE"), primary_key=True),
    Column("garment_id", String(36), ForeignKey("garments.id", ondelete="CASCADE"), primary_key=True),
)


class Trip(Base):
    """Trip the user is packing for"""
    __tablename__ = "trips"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    destination = Column(String(255), nullable=False)
    city = Column(String(120), nullable=True)
    start_date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    end_date = Column(String(10), nullable=False)
    transport = Column(String(20), nullable=False, default="plane")
    activities = Column(JSON, nullable=False, default=list)
    description = Column(Text, nullable=True)
    suitcase_size = Column(String(20), nullable=True)
    packing_generated = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    packing_items = relationship(
        "PackingItem",
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by="PackingItem.created_at",
    )


class PackingItem(Base):
    """Suitcase entry: a full outfit or a bundle of loose garments"""
    __tablename__ = "packing_items"

    id = Column(String(36), primary_key=True, default=new_id)
    trip_id = Column(String(36), ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False, default="casual")
    kind = Column(String(20), nullable=False, default="full_outfit")
    image_url = Column(Text, nullable=True)
    packed = Column(Boolean, nullable=False, default=False)
    quantity = Column(Integer, nullable=False, default=1)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    trip = relationship("Trip", back_populates="packing_items")
    garments = relationship("Garment", secondary=packing_item_garments, backref="packing_items", lazy="selectin")
