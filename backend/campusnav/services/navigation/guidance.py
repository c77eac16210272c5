# backend/campusnav/services/navigation/guidance.py
"""Turn-by-turn narration for a route and live waypoint announcements."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional

from campusnav.schemas.pin import PinOut
from campusnav.schemas.route import RouteOut, WaypointOut
from campusnav.services.geo import (
    haversine_m,
    initial_bearing,
    heading_to_text,
    turn_text,
    format_meters,
)

ARRIVAL_RADIUS_M = 35.0


def _ordered(route: RouteOut) -> list[WaypointOut]:
    return sorted(route.waypoints, key=lambda w: w.order)


def build_guidance_steps(route: Optional[RouteOut]) -> list[str]:
    if route is None or not route.waypoints:
        return []
    ordered = _ordered(route)
    steps: list[str] = []
    prev_bearing: Optional[float] = None

    for i in range(1, len(ordered)):
        prev, curr = ordered[i - 1], ordered[i]
        dist_m = haversine_m(prev.lat, prev.lng, curr.lat, curr.lng)
        bearing = initial_bearing((prev.lat, prev.lng), (curr.lat, curr.lng))
        target = curr.location.name if curr.location else f"waypoint {i + 1}"
        steps.append(
            f"Go {format_meters(dist_m)} {heading_to_text(bearing)} to {target}"
            f"{turn_text(prev_bearing, bearing)}."
        )
        prev_bearing = bearing

    final_name = None
    if route.end_location is not None:
        final_name = route.end_location.name
    elif ordered[-1].location is not None:
        final_name = ordered[-1].location.name
    if final_name:
        steps.append(f"Arrive at {final_name}.")
    return steps


def route_summary(route: Optional[RouteOut]) -> Optional[str]:
    if route is None:
        return None
    start = route.start_location.name if route.start_location else "start"
    end = route.end_location.name if route.end_location else "your destination"
    return f"Starting guidance from {start} to {end}. Follow the highlighted path."


def route_length_m(route: RouteOut) -> float:
    ordered = _ordered(route)
    return sum(
        haversine_m(a.lat, a.lng, b.lat, b.lng) for a, b in zip(ordered, ordered[1:])
    )


@dataclass
class Announcement:
    key: str
    text: str
    is_final: bool
    pin: Optional[PinOut] = None


def waypoint_key(waypoint: WaypointOut, index: int) -> str:
    return str(waypoint.id) if waypoint.id is not None else f"idx-{index}"


def next_announcement(
    route: Optional[RouteOut],
    position: tuple,
    announced: Iterable[str] = (),
    radius_m: float = ARRIVAL_RADIUS_M,
) -> Optional[Announcement]:
    """Line to speak when the user reaches a waypoint not announced before."""
    if route is None or not route.waypoints:
        return None
    ordered = _ordered(route)

    closest_idx, closest_dist = -1, float("inf")
    for idx, wp in enumerate(ordered):
        d = haversine_m(position[0], position[1], wp.lat, wp.lng)
        if d < closest_dist:
            closest_idx, closest_dist = idx, d
    if closest_idx == -1 or closest_dist > radius_m:
        return None

    wp = ordered[closest_idx]
    key = waypoint_key(wp, closest_idx)
    if key in set(announced):
        return None

    is_final = closest_idx == len(ordered) - 1
    if is_final:
        end = route.end_location.name if route.end_location else "your destination"
        text = f"You have arrived at {end}."
    elif wp.location is not None and wp.location.audio_text:
        text = wp.location.audio_text
    elif wp.instruction:
        text = wp.instruction
    else:
        name = wp.location.name if wp.location else f"waypoint {closest_idx + 1}"
        text = f"Approaching {name}. Keep following the path."
    return Announcement(key=key, text=text, is_final=is_final, pin=wp.location)
