"""
Pydantic schemas for request/response validation.
"""
from .common import HealthResponse, ReverseGeocodeRequest
from .user import (
    RegisterRequest,
    LoginRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    GoogleAuthRequest,
    AppleAuthRequest,
    UserResponse,
    PreferencesCreate,
    PreferencesUpdate,
    PreferencesResponse,
)
from .garment import GarmentCreate, GarmentUpdate, GarmentResponse, Classification
from .outfit import (
    OutfitCreate,
    OutfitUpdate,
    OutfitResponse,
    WeatherOutfitRequest,
    EventOutfitRequest,
    GarmentOutfitRequest,
)
from .event import EventCreate, EventUpdate, EventResponse
from .trip import (
    TripCreate,
    TripUpdate,
    TripResponse,
    PackingGenerateRequest,
    PackingItemCreate,
    PackingItemUpdate,
    PackingItemResponse,
)
