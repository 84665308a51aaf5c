"""
User account and per-user style preferences.
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class User(Base):
    """Registered account. OAuth accounts carry an empty password hash."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(80), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    email_confirmed = Column(Boolean, nullable=False, default=True)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    city = Column(String(120), nullable=True)
    avatar_url = Column(Text, nullable=True)
    avatar_storage_id = Column(String(255), nullable=True)
    reset_token = Column(String(128), nullable=True, index=True)
    reset_token_expires = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    preferences = relationship(
        "UserPreferences", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )


class UserPreferences(Base):
    """Style preferences, at most one row per user"""
    __tablename__ = "user_preferences"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    city = Column(String(120), nullable=True)
    environment = Column(String(120), nullable=True)  # e.g. office, outdoors, campus
    styles = Column(JSON, nullable=False, default=list)
    colors = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="preferences")
