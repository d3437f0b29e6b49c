from typing import Optional, Dict, List
from pydantic import BaseModel, EmailStr, Field, field_validator

from .enums import VenueType, PriceRange


PHONE_PATTERN = r"^\+?[\d\s\-\(\)]+$"
TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


class OpeningHours(BaseModel):
    open: str = Field(..., pattern=TIME_PATTERN)
    close: str = Field(..., pattern=TIME_PATTERN)


# -------------------------------------------------
# Shared profile fields (Supabase-safe)
# -------------------------------------------------
class VenueBase(BaseModel):
    description: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    instagram: Optional[str] = Field(None, max_length=100)
    facebook: Optional[str] = Field(None, max_length=100)
    twitter: Optional[str] = Field(None, max_length=100)

    venue_type: Optional[VenueType] = None
    capacity: Optional[int] = Field(None, gt=0)
    dress_code: Optional[str] = Field(None, max_length=100)
    age_restriction: Optional[int] = Field(None, ge=0, le=99)
    price_range: Optional[PriceRange] = None

    opening_hours: Optional[Dict[str, OpeningHours]] = None
    amenities: Optional[List[str]] = None

    # -------------------------------------------------
    # HTML forms send "" for untouched inputs
    # -------------------------------------------------
    @field_validator(
        "description", "phone", "email", "website", "instagram",
        "facebook", "twitter", "venue_type", "dress_code", "price_range",
        mode="before",
    )
    def blank_as_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("website")
    def validate_website(cls, v):
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError("Website must be a valid URL")
        return v


# -------------------------------------------------
# Create / owner edit (full form)
# -------------------------------------------------
class VenueForm(VenueBase):
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)

    @field_validator("name", "address", "city", "country", mode="before")
    def strip_required(cls, v):
        return v.strip() if isinstance(v, str) else v


# -------------------------------------------------
# Admin partial update
# -------------------------------------------------
class VenueUpdate(VenueBase):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    country: Optional[str] = Field(None, min_length=1, max_length=100)


class VerificationToggle(BaseModel):
    is_verified: bool
