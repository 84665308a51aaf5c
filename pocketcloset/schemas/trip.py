"""
Trip and packing list schemas.
"""
from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .common import validate_iso_date
from .garment import GarmentResponse

Transport = Literal['plane', 'train', 'car', 'bus', 'boat']
PackingCategory = Literal['casual', 'formal', 'sport', 'elegant']
PackingKind = Literal['full_outfit', 'loose_items']


class TripCreate(BaseModel):
    destination: str = Field(..., min_length=1, max_length=255)
    city: Optional[str] = Field(None, max_length=120)
    start_date: str = Field(..., description="YYYY-MM-DD")
    end_date: str = Field(..., description="YYYY-MM-DD")
    transport: Transport = 'plane'
    activities: List[str] = Field(default_factory=list)
    description: Optional[str] = None

    @field_validator('start_date', 'end_date')
    @classmethod
    def check_dates(cls, v: str) -> str:
        return validate_iso_date(v)

    @model_validator(mode='after')
    def end_after_start(self):
        if date.fromisoformat(self.end_date) < date.fromisoformat(self.start_date):
            raise ValueError('end_date must not be before start_date')
        return self


class TripUpdate(BaseModel):
    destination: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, max_length=120)
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    transport: Optional[Transport] = None
    activities: Optional[List[str]] = None
    description: Optional[str] = None

    @field_validator('start_date', 'end_date')
    @classmethod
    def check_dates(cls, v: Optional[str]) -> Optional[str]:
        return validate_iso_date(v)


class TripResponse(BaseModel):
    id: str
    destination: str
    city: Optional[str] = None
    start_date: str
    end_date: str
    transport: str
    activities: List[str] = []
    description: Optional[str] = None
    suitcase_size: Optional[str] = None
    packing_generated: bool
    created_at: datetime

    class Config:
        from_attributes = True


class PackingGenerateRequest(BaseModel):
    outfit_count: Optional[int] = Field(None, ge=1, le=20)
    category_priority: Optional[PackingCategory] = None
    notes: Optional[str] = Field(None, max_length=500)


class PackingItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: PackingCategory = 'casual'
    kind: PackingKind = 'full_outfit'
    garment_ids: List[str] = Field(default_factory=list)
    quantity: int = Field(1, ge=1)
    notes: Optional[str] = None
    image_url: Optional[str] = None


class PackingItemUpdate(BaseModel):
    packed: Optional[bool] = None
    quantity: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None


class PackingItemResponse(BaseModel):
    id: str
    name: str
    category: str
    kind: str
    image_url: Optional[str] = None
    packed: bool
    quantity: int
    notes: Optional[str] = None
    garments: List[GarmentResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True
