from .resolver import resolve_route, build_campus_tour
from .guidance import build_guidance_steps, route_summary, route_length_m, next_announcement, Announcement
from .bounds import (
    CampusBounds,
    campus_bounds,
    within_campus,
    distance_from_campus,
    fit_bounds,
    parse_image_bounds,
    route_polyline,
)

__all__ = [
    "resolve_route",
    "build_campus_tour",
    "build_guidance_steps",
    "route_summary",
    "route_length_m",
    "next_announcement",
    "Announcement",
    "CampusBounds",
    "campus_bounds",
    "within_campus",
    "distance_from_campus",
    "fit_bounds",
    "parse_image_bounds",
    "route_polyline",
]
