"""
Common/shared schemas used across the application.
"""
import re
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

def validate_iso_date(value: Optional[str]) -> Optional[str]:
    """Accept zero-padded YYYY-MM-DD only, so stored dates sort as strings."""
    if value is None:
        return value
    try:
        if not ISO_DATE.match(value):
            raise ValueError(value)
        return date.fromisoformat(value).isoformat()
    except ValueError:
        raise ValueError("must be a date in YYYY-MM-DD format")

class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    database: str
    storage: dict

class ReverseGeocodeRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
