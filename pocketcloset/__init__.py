"""PocketCloset backend: wardrobe, outfit and trip packing API."""

__version__ = "1.0.0"
