"""
Database models for PocketCloset.

Import all models here for easy access and to ensure they are registered with SQLAlchemy.
"""
from .base import Base
from .user import User, UserPreferences
from .garment import Garment
from .event import Event
from .outfit import Outfit, outfit_garments
from .trip import Trip, PackingItem, packing_item_garments

__all__ = [
    "Base",
    "User",
    "UserPreferences",
    "Garment",
    "Event",
    "Outfit",
    "outfit_garments",
    "Trip",
    "PackingItem",
    "packing_item_garments",
]
