# backend/campusnav/schemas/map.py
from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional
import datetime as dt

from .commons import MapKind, check_http_url
from .pin import PinOut
from .route import RouteOut


class MapIn(BaseModel):
    slug: str = Field(min_length=2)
    name: str = Field(min_length=2)
    description: Optional[str] = None
    base_map_type: MapKind = "TILE"
    tile_url: Optional[str] = None
    tile_attribution: Optional[str] = None
    image_overlay_url: Optional[str] = None
    image_bounds: Optional[Any] = None
    metadata: Optional[dict[str, Any]] = None
    is_active: Optional[bool] = None

    @field_validator("tile_url", "image_overlay_url")
    @classmethod
    def validate_urls(cls, value):
        return check_http_url(value)


class MapUpdate(BaseModel):
    slug: Optional[str] = Field(default=None, min_length=2)
    name: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None
    base_map_type: Optional[MapKind] = None
    tile_url: Optional[str] = None
    tile_attribution: Optional[str] = None
    image_overlay_url: Optional[str] = None
    image_bounds: Optional[Any] = None
    metadata: Optional[dict[str, Any]] = None
    is_active: Optional[bool] = None

    @field_validator("tile_url", "image_overlay_url")
    @classmethod
    def validate_urls(cls, value):
        return check_http_url(value)


class MapOut(BaseModel):
    id: int
    slug: str
    name: str
    description: Optional[str] = None
    base_map_type: MapKind
    tile_url: Optional[str] = None
    tile_attribution: Optional[str] = None
    image_overlay_url: Optional[str] = None
    image_bounds: Optional[Any] = None
    metadata: Optional[dict[str, Any]] = None
    is_active: bool
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class MapFullOut(MapOut):
    location_pins: list[PinOut] = []
    routes: list[RouteOut] = []
