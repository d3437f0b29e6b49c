from typing import Optional, List
from pydantic import BaseModel, Field

from .enums import ImageType


class VenueImage(BaseModel):
    """
    One media entry for a venue. With media stored on the venues row,
    ids are synthetic: "{venue_id}-cover-image" / "{venue_id}-cover-video".
    """
    id: str
    venue_id: str
    image_url: str
    image_type: ImageType = ImageType.cover
    caption: Optional[str] = None
    display_order: int = 0
    is_active: bool = True
    created_at: Optional[str] = None


class ImageOrderUpdate(BaseModel):
    id: str
    display_order: int = Field(..., ge=0)


class ImageOrderPayload(BaseModel):
    updates: List[ImageOrderUpdate]


class VenueImageUpdate(BaseModel):
    image_type: ImageType
    caption: Optional[str] = Field(None, max_length=200)


class UploadedMedia(BaseModel):
    url: str
    type: str
