"""
Outfit schemas.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .garment import GarmentResponse

Category = Literal['casual', 'formal', 'sport', 'elegant']


class OutfitCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field('casual', max_length=50)
    season: str = Field('all', max_length=50)
    garment_ids: List[str] = Field(..., min_length=1)
    event_id: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator('category', 'season')
    @classmethod
    def lowercase(cls, v: str) -> str:
        return v.strip().lower()


class OutfitUpdate(BaseModel):
    """Only provided fields change; a non-empty garment_ids replaces the garments"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, max_length=50)
    season: Optional[str] = Field(None, max_length=50)
    garment_ids: Optional[List[str]] = None
    event_id: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator('category', 'season')
    @classmethod
    def lowercase(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v is not None else v


class OutfitResponse(BaseModel):
    # None for previews that were not saved
    id: Optional[str] = None
    name: str
    category: str
    season: str
    image_url: Optional[str] = None
    event_id: Optional[str] = None
    garments: List[GarmentResponse] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WeatherOutfitRequest(BaseModel):
    category: Optional[Category] = None
    # Overrides the live lookup when given
    temperature: Optional[float] = Field(None, ge=-50, le=60)


class EventOutfitRequest(BaseModel):
    event_id: str
    category: Optional[Category] = None


class GarmentOutfitRequest(BaseModel):
    garment_id: str
    category: Optional[Category] = None
    season: Optional[str] = None
    event_id: Optional[str] = None
