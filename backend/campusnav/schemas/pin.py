# backend/campusnav/schemas/pin.py
from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional
import datetime as dt

from .commons import check_http_url


class PinIn(BaseModel):
    map_id: int
    slug: str = Field(min_length=2)
    name: str = Field(min_length=2)
    description: Optional[str] = None
    lat: float
    lng: float
    floor: Optional[str] = None
    category: Optional[str] = None
    audio_text: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    @field_validator("image_url", "video_url")
    @classmethod
    def validate_urls(cls, value):
        return check_http_url(value)


class PinUpdate(BaseModel):
    map_id: Optional[int] = None
    slug: Optional[str] = Field(default=None, min_length=2)
    name: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    floor: Optional[str] = None
    category: Optional[str] = None
    audio_text: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    @field_validator("image_url", "video_url")
    @classmethod
    def validate_urls(cls, value):
        return check_http_url(value)


class PinOut(BaseModel):
    id: int
    map_id: int
    slug: str
    name: str
    description: Optional[str] = None
    lat: float
    lng: float
    floor: Optional[str] = None
    category: Optional[str] = None
    audio_text: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
