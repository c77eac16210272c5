# backend/campusnav/services/navigation/bounds.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from shapely.geometry import MultiPoint, LineString, mapping

from campusnav.schemas.pin import PinOut
from campusnav.schemas.route import RouteOut
from campusnav.services.geo import normalize_lng, distance_km

CAMPUS_PADDING_DEG = 0.01


@dataclass
class CampusBounds:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @property
    def center(self) -> tuple[float, float]:
        return ((self.min_lat + self.max_lat) / 2, (self.min_lng + self.max_lng) / 2)

    def as_expression(self) -> list[list[float]]:
        return [[self.min_lat, self.min_lng], [self.max_lat, self.max_lng]]


def campus_bounds(pins: Sequence[PinOut]) -> Optional[CampusBounds]:
    if not pins:
        return None
    # shapely works in x=lng, y=lat
    minx, miny, maxx, maxy = MultiPoint([(normalize_lng(p.lng), p.lat) for p in pins]).bounds
    return CampusBounds(min_lat=miny, max_lat=maxy, min_lng=minx, max_lng=maxx)


def within_campus(position: Optional[tuple], bounds: Optional[CampusBounds], padding: float = CAMPUS_PADDING_DEG) -> bool:
    if position is None or bounds is None:
        return False
    lat, lng = position[0], normalize_lng(position[1])
    return (
        bounds.min_lat - padding <= lat <= bounds.max_lat + padding
        and bounds.min_lng - padding <= lng <= bounds.max_lng + padding
    )


def distance_from_campus(position: Optional[tuple], bounds: Optional[CampusBounds]) -> Optional[float]:
    if position is None or bounds is None:
        return None
    return distance_km((position[0], normalize_lng(position[1])), bounds.center)


def fit_bounds(mode: str, bounds: Optional[CampusBounds], position: Optional[tuple]) -> Optional[list[list[float]]]:
    """Viewport for the map: pins only, user only, or both together."""
    user = None
    if position is not None:
        lng = normalize_lng(position[1])
        user = [[position[0], lng], [position[0], lng]]
    campus = bounds.as_expression() if bounds is not None else None

    if mode == "user":
        return user or campus
    if mode == "campus":
        return campus or user
    if bounds is not None and position is not None:
        lat, lng = position[0], normalize_lng(position[1])
        return [
            [min(bounds.min_lat, lat), min(bounds.min_lng, lng)],
            [max(bounds.max_lat, lat), max(bounds.max_lng, lng)],
        ]
    return campus or user


def parse_image_bounds(raw: Any) -> Optional[list[list[float]]]:
    """Accept [[lat,lng],[lat,lng]] or {"southWest": {...}, "northEast": {...}}."""
    if not raw:
        return None
    if (
        isinstance(raw, (list, tuple))
        and len(raw) == 2
        and all(isinstance(c, (list, tuple)) and len(c) >= 2 for c in raw)
    ):
        try:
            return [[float(raw[0][0]), float(raw[0][1])], [float(raw[1][0]), float(raw[1][1])]]
        except (TypeError, ValueError):
            return None
    if isinstance(raw, dict):
        sw, ne = raw.get("southWest"), raw.get("northEast")
        corners = []
        for corner in (sw, ne):
            if not isinstance(corner, dict):
                return None
            lat, lng = corner.get("lat"), corner.get("lng")
            if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
                return None
            corners.append([float(lat), float(lng)])
        return corners
    return None


def route_polyline(route: Optional[RouteOut]) -> Optional[dict]:
    """Route geometry as a GeoJSON Feature (EPSG:4326, lng/lat order)."""
    if route is None or not route.waypoints:
        return None
    ordered = sorted(route.waypoints, key=lambda w: w.order)
    coords = [(normalize_lng(w.lng), w.lat) for w in ordered]
    if len(coords) == 1:
        geometry = {"type": "Point", "coordinates": list(coords[0])}
    else:
        geometry = mapping(LineString(coords))
    return {
        "type": "Feature",
        "geometry": geometry,
        "properties": {"route_id": route.id, "name": route.name},
    }
