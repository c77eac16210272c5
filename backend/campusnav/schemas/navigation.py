# backend/campusnav/schemas/navigation.py
from pydantic import BaseModel, model_validator
from typing import Optional, Union

from .commons import GeoJSONFeature, ViewportMode
from .map import MapOut
from .pin import PinOut
from .route import RouteOut


class CampusBoundsOut(BaseModel):
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float
    center: tuple[float, float]


class PlanOut(BaseModel):
    user: Optional[str] = None
    map: Optional[MapOut] = None
    route: Optional[RouteOut] = None
    steps: list[str] = []
    summary: Optional[str] = None
    length_m: Optional[float] = None
    polyline: Optional[GeoJSONFeature] = None
    campus_bounds: Optional[CampusBoundsOut] = None
    image_bounds: Optional[list[list[float]]] = None


class Position(BaseModel):
    lat: float
    lng: float
    accuracy: Optional[float] = None


class ProgressIn(BaseModel):
    map_id: Optional[int] = None
    destination: Optional[str] = None
    route_id: Optional[Union[int, str]] = None
    position: Optional[Position] = None
    # raw postMessage string from the mobile shell, used when position is absent
    bridge_message: Optional[str] = None
    announced: list[str] = []
    viewport: ViewportMode = "combined"

    @model_validator(mode="after")
    def require_position_source(self):
        if self.position is None and self.bridge_message is None:
            raise ValueError("either position or bridge_message is required")
        return self


class ProgressOut(BaseModel):
    status: str
    position: Optional[Position] = None
    announcement: Optional[str] = None
    waypoint_key: Optional[str] = None
    arrival_pin: Optional[PinOut] = None
    within_campus: bool = False
    distance_from_campus_km: Optional[float] = None
    fit_bounds: Optional[list[list[float]]] = None
