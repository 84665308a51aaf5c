"""
User-related schemas for authentication and user management.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    """Schema for creating a new account"""
    name: str = Field(..., min_length=2, max_length=80, description="Display name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, max_length=128, description="Password (8+ chars)")

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError('Name must be at least 2 characters')
        return v

    @field_validator('email')
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(BaseModel):
    """Schema for user login; presence is checked by the endpoint"""
    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordRequest(BaseModel):
    email: EmailStr

    @field_validator('email')
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)


class GoogleAuthRequest(BaseModel):
    """Either a Google ID token or an OAuth access token"""
    id_token: Optional[str] = None
    access_token: Optional[str] = None


class AppleAuthRequest(BaseModel):
    id_token: str = Field(..., min_length=1)
    # Apple only sends the name on first sign-in, through the client
    name: Optional[str] = None


class UserResponse(BaseModel):
    """Schema for user response"""
    id: str
    name: str
    email: str
    city: Optional[str] = None
    avatar_url: Optional[str] = None
    email_confirmed: bool
    created_at: datetime

    class Config:
        from_attributes = True


class PreferencesCreate(BaseModel):
    city: Optional[str] = Field(None, max_length=120)
    environment: Optional[str] = Field(None, max_length=120)
    styles: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)


class PreferencesUpdate(BaseModel):
    city: Optional[str] = Field(None, max_length=120)
    environment: Optional[str] = Field(None, max_length=120)
    styles: Optional[List[str]] = None
    colors: Optional[List[str]] = None


class PreferencesResponse(BaseModel):
    id: str
    city: Optional[str] = None
    environment: Optional[str] = None
    styles: List[str] = []
    colors: List[str] = []
    updated_at: datetime

    class Config:
        from_attributes = True
