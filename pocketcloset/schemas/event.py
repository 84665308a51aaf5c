"""
Event schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import validate_iso_date


class EventCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    date: str = Field(..., description="YYYY-MM-DD")
    description: Optional[str] = None
    type: Optional[str] = Field(None, max_length=100)
    venue: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=120)

    @field_validator('date')
    @classmethod
    def check_date(cls, v: Optional[str]) -> Optional[str]:
        return validate_iso_date(v)


class EventUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = Field(None, max_length=100)
    venue: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=120)

    @field_validator('date')
    @classmethod
    def check_date(cls, v: Optional[str]) -> Optional[str]:
        return validate_iso_date(v)


class EventResponse(BaseModel):
    id: str
    name: str
    date: str
    description: Optional[str] = None
    type: Optional[str] = None
    venue: Optional[str] = None
    city: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
