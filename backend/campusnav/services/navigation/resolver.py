# backend/campusnav/services/navigation/resolver.py
"""Pick the route to guide along for a map and a (spoken) destination."""
from __future__ import annotations
import logging
import re
from typing import Optional, Union

from campusnav.schemas.map import MapFullOut
from campusnav.schemas.pin import PinOut
from campusnav.schemas.route import RouteOut, WaypointOut

logger = logging.getLogger(__name__)

CAMPUS_TOUR_ID = "virtual-campus-tour"

_TOUR = re.compile(r"tour", re.IGNORECASE)
_GATE = re.compile(r"gate", re.IGNORECASE)
_ENTRANCE = re.compile(r"entrance|welcome", re.IGNORECASE)


def _pick_main_gate(pins: list[PinOut]) -> PinOut:
    for pattern in (_GATE, _ENTRANCE):
        for p in pins:
            if pattern.search(p.name):
                return p
    return pins[0]


def build_campus_tour(map_view: MapFullOut) -> Optional[RouteOut]:
    """Virtual route: main gate -> every other pin -> back to the gate."""
    pins = list(map_view.location_pins)
    if len(pins) < 2:
        return None
    gate = _pick_main_gate(pins)
    rest = [p for p in pins if p.id != gate.id]
    ordered = [gate, *rest, gate]

    waypoints = []
    for idx, p in enumerate(ordered):
        if idx == 0:
            instruction = "Start at the main gate."
        elif idx == len(ordered) - 1:
            instruction = "Return to the main gate."
        else:
            instruction = f"Proceed to {p.name}."
        waypoints.append(
            WaypointOut(
                id=f"virtual-{idx}",
                route_id=CAMPUS_TOUR_ID,
                order=idx,
                lat=p.lat,
                lng=p.lng,
                location_id=p.id,
                location=p,
                instruction=instruction,
            )
        )

    return RouteOut(
        id=CAMPUS_TOUR_ID,
        map_id=map_view.id,
        slug="campus-tour",
        name="Campus Tour",
        description="Visit all locations and return to the main gate.",
        is_default=False,
        estimated_minutes=max(10, len(ordered) * 3),
        start_location_id=gate.id,
        end_location_id=gate.id,
        start_location=gate,
        end_location=gate,
        instructions="Follow the highlighted path through all locations.",
        metadata={"virtual": True},
        waypoints=waypoints,
    )


def _matches_destination(route: RouteOut, target: str) -> bool:
    end_name = route.end_location.name.lower() if route.end_location else ""
    return (bool(end_name) and target in end_name) or target in route.name.lower()


def _mentions_end(route: RouteOut, phrase: str) -> bool:
    # "take me to the knowledge library please" contains the pin name
    return route.end_location is not None and route.end_location.name.lower() in phrase


def resolve_route(
    map_view: Optional[MapFullOut],
    destination: Optional[str] = None,
    route_id: Optional[Union[int, str]] = None,
) -> Optional[RouteOut]:
    if map_view is None:
        return None
    routes = list(map_view.routes)
    destination = (destination or "").strip() or None

    tour_route = next((r for r in routes if _TOUR.search(r.name)), None)

    if destination and _TOUR.search(destination):
        if tour_route is not None:
            return tour_route
        virtual = build_campus_tour(map_view)
        if virtual is not None:
            return virtual
        if routes:
            return max(routes, key=lambda r: len(r.waypoints))
        return None

    if route_id is not None:
        by_id = next((r for r in routes if str(r.id) == str(route_id)), None)
        if by_id is not None:
            return by_id
        if str(route_id) == CAMPUS_TOUR_ID:
            virtual = build_campus_tour(map_view)
            if virtual is not None:
                return virtual

    if destination:
        target = destination.lower()
        match = next((r for r in routes if _matches_destination(r, target)), None)
        if match is None:
            match = next((r for r in routes if _mentions_end(r, target)), None)
        if match is not None:
            return match
        logger.info("no route matched destination, falling back to default")

    if not destination and tour_route is not None:
        return tour_route

    default = next((r for r in routes if r.is_default), None)
    if default is not None:
        return default
    return routes[0] if routes else None
