"""
Garment schemas.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

Section = Literal['top', 'bottom', 'footwear', 'outerwear', 'one-piece', 'accessories']


class GarmentBase(BaseModel):
    """Fields a user can set on a garment"""
    name: Optional[str] = Field(None, max_length=255)
    type: Optional[str] = Field(None, max_length=100, description="Type of clothing item (e.g., shirt, jeans, dress)")
    color: Optional[str] = Field(None, max_length=100, description="Primary color of the item")
    brand: Optional[str] = Field(None, max_length=120)
    occasion: Optional[str] = Field(None, max_length=100)
    season: Optional[str] = Field(None, max_length=50)
    section: Optional[Section] = Field(None, description="Categorization for outfit building")


class GarmentCreate(GarmentBase):
    """Image URL or base64 data URL; missing fields are filled by classification"""
    image: str = Field(..., min_length=1)
    # public id issued by POST /garments/upload to this user for this image
    storage_id: Optional[str] = Field(None, max_length=255)

    class Config:
        json_schema_extra = {
            "example": {
                "image": "https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?w=400",
                "brand": "Nike",
            }
        }


class GarmentUpdate(GarmentBase):
    """Schema for updating a garment"""
    pass


class GarmentResponse(GarmentBase):
    id: str
    name: str
    type: str
    color: str
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class Classification(BaseModel):
    name: str
    type: str
    color: str
    section: str
    season: str
    occasion: str
