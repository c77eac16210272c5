# backend/campusnav/services/geo.py
from __future__ import annotations
from math import radians, degrees, sin, cos, asin, atan2, sqrt, isfinite

EARTH_RADIUS_M = 6371000.0
TURN_THRESHOLD_DEG = 25.0

# (lower bound, label); north wraps around 337.5 -> 22.5
_COMPASS = (
    (22.5, "northeast"),
    (67.5, "east"),
    (112.5, "southeast"),
    (157.5, "south"),
    (202.5, "southwest"),
    (247.5, "west"),
    (292.5, "northwest"),
)


def haversine_m(lat1, lng1, lat2, lng2) -> float:
    dlng, dlat = radians(lng2 - lng1), radians(lat2 - lat1)
    a = sin(dlat/2)**2 + cos(radians(lat1))*cos(radians(lat2))*sin(dlng/2)**2
    return 2 * EARTH_RADIUS_M * asin(sqrt(min(1.0, a)))


def distance_km(a: tuple, b: tuple) -> float:
    """Great-circle distance between two (lat, lng) pairs in kilometres."""
    return haversine_m(a[0], a[1], b[0], b[1]) / 1000.0


def initial_bearing(a: tuple, b: tuple) -> float:
    """Initial bearing from a to b in degrees, 0 = north, clockwise, in [0, 360)."""
    dlng = radians(b[1] - a[1])
    lat1, lat2 = radians(a[0]), radians(b[0])
    y = sin(dlng) * cos(lat2)
    x = cos(lat1)*sin(lat2) - sin(lat1)*cos(lat2)*cos(dlng)
    return (degrees(atan2(y, x)) + 360.0) % 360.0


def heading_to_text(heading: float) -> str:
    if heading >= 337.5 or heading < 22.5:
        return "north"
    label = "north"
    for lower, name in _COMPASS:
        if heading >= lower:
            label = name
    return label


def turn_delta(prev_bearing: float, bearing: float) -> float:
    # signed change of heading in [-180, 180)
    return ((bearing - prev_bearing + 540.0) % 360.0) - 180.0


def turn_text(prev_bearing: float | None, bearing: float, threshold: float = TURN_THRESHOLD_DEG) -> str:
    if prev_bearing is None:
        return ""
    delta = turn_delta(prev_bearing, bearing)
    if abs(delta) <= threshold:
        return ""
    return " then turn right" if delta > 0 else " then turn left"


def normalize_lng(lng: float) -> float:
    normalized = ((lng + 180.0) % 360.0 + 360.0) % 360.0 - 180.0
    return normalized if isfinite(normalized) else lng


def format_meters(distance: float) -> str:
    if distance < 1000:
        return f"{distance:.0f} m"
    return f"{distance / 1000:.2f} km"
