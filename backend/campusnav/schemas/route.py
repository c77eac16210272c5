# backend/campusnav/schemas/route.py
from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional, Union
import datetime as dt

from .pin import PinOut


class WaypointIn(BaseModel):
    order: int = Field(ge=0)
    lat: float
    lng: float
    location_id: Optional[int] = None
    instruction: Optional[str] = None


def _check_orders(waypoints: Optional[list[WaypointIn]]) -> Optional[list[WaypointIn]]:
    if waypoints is None:
        return waypoints
    orders = [wp.order for wp in waypoints]
    if len(set(orders)) != len(orders):
        raise ValueError("waypoint order values must be unique within a route")
    return sorted(waypoints, key=lambda wp: wp.order)


class RouteIn(BaseModel):
    map_id: int
    slug: str = Field(min_length=2)
    name: str = Field(min_length=2)
    description: Optional[str] = None
    is_default: Optional[bool] = None
    estimated_minutes: Optional[int] = Field(default=None, gt=0)
    start_location_id: int
    end_location_id: int
    instructions: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    waypoints: list[WaypointIn] = []

    @field_validator("waypoints")
    @classmethod
    def validate_waypoints(cls, value):
        return _check_orders(value)


class RouteUpdate(BaseModel):
    slug: Optional[str] = Field(default=None, min_length=2)
    name: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None
    is_default: Optional[bool] = None
    estimated_minutes: Optional[int] = Field(default=None, gt=0)
    start_location_id: Optional[int] = None
    end_location_id: Optional[int] = None
    instructions: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    # replaces the whole list when given
    waypoints: Optional[list[WaypointIn]] = None

    @field_validator("waypoints")
    @classmethod
    def validate_waypoints(cls, value):
        return _check_orders(value)


# Virtual routes (campus tour) carry string ids, stored ones integers
class WaypointOut(BaseModel):
    id: Union[int, str]
    route_id: Union[int, str]
    order: int
    lat: float
    lng: float
    location_id: Optional[int] = None
    location: Optional[PinOut] = None
    instruction: Optional[str] = None


class RouteOut(BaseModel):
    id: Union[int, str]
    map_id: int
    slug: str
    name: str
    description: Optional[str] = None
    is_default: bool = False
    estimated_minutes: Optional[int] = None
    start_location_id: int
    end_location_id: int
    instructions: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    start_location: Optional[PinOut] = None
    end_location: Optional[PinOut] = None
    waypoints: list[WaypointOut] = []
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
