from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional
import logging

from campusnav.api.routers.maps import full_map_options
from campusnav.db import get_db
from campusnav.models import Map
from campusnav.schemas.bridge import parse_bridge_message
from campusnav.schemas.map import MapFullOut, MapOut
from campusnav.schemas.navigation import (
    CampusBoundsOut,
    PlanOut,
    Position,
    ProgressIn,
    ProgressOut,
)
from campusnav.services.navigation import (
    resolve_route,
    build_guidance_steps,
    route_summary,
    route_length_m,
    next_announcement,
    campus_bounds,
    within_campus,
    distance_from_campus,
    fit_bounds,
    parse_image_bounds,
    route_polyline,
)
from campusnav.services.serializers import map_full_out

logger = logging.getLogger(__name__)

router = APIRouter()


def select_map(db: Session, map_id: Optional[int]) -> Optional[MapFullOut]:
    """Requested map when it exists, otherwise the first map by name."""
    q = db.query(Map).options(*full_map_options())
    m = None
    if map_id is not None:
        m = q.filter(Map.id == map_id).first()
        if m is None:
            logger.info("map %s not found, using first map", map_id)
    if m is None:
        m = q.order_by(Map.name.asc()).first()
    return map_full_out(m) if m is not None else None


def position_from(payload: ProgressIn) -> Optional[Position]:
    if payload.position is not None:
        return payload.position
    msg = parse_bridge_message(payload.bridge_message or "")
    if msg is None:
        return None
    return Position(lat=msg.coords.latitude, lng=msg.coords.longitude, accuracy=msg.coords.accuracy)


@router.get("/plan")
def plan(
    map_id: Optional[int] = None,
    destination: Optional[str] = None,
    route_id: Optional[str] = None,
    user: Optional[str] = None,
    db: Session = Depends(get_db),
) -> PlanOut:
    map_view = select_map(db, map_id)
    if map_view is None:
        raise HTTPException(status_code=404, detail="No maps available")

    route = resolve_route(map_view, destination=destination, route_id=route_id)
    bounds = campus_bounds(map_view.location_pins)
    return PlanOut(
        user=user,
        map=MapOut(**map_view.model_dump(exclude={"location_pins", "routes"})),
        route=route,
        steps=build_guidance_steps(route),
        summary=route_summary(route),
        length_m=route_length_m(route) if route else None,
        polyline=route_polyline(route),
        campus_bounds=CampusBoundsOut(
            min_lat=bounds.min_lat,
            max_lat=bounds.max_lat,
            min_lng=bounds.min_lng,
            max_lng=bounds.max_lng,
            center=bounds.center,
        ) if bounds else None,
        image_bounds=parse_image_bounds(map_view.image_bounds),
    )


@router.post("/progress")
def progress(payload: ProgressIn, db: Session = Depends(get_db)) -> ProgressOut:
    map_view = select_map(db, payload.map_id)
    bounds = campus_bounds(map_view.location_pins) if map_view else None
    position = position_from(payload)

    if position is None:
        return ProgressOut(status="Awaiting GPS", fit_bounds=fit_bounds(payload.viewport, bounds, None))

    point = (position.lat, position.lng)
    route = resolve_route(map_view, destination=payload.destination, route_id=payload.route_id)
    announcement = next_announcement(route, point, payload.announced)
    inside = within_campus(point, bounds)
    if announcement is not None:
        logger.debug("announcing waypoint %s", announcement.key)
    return ProgressOut(
        status="Live guidance" if inside else "Off campus",
        position=position,
        announcement=announcement.text if announcement else None,
        waypoint_key=announcement.key if announcement else None,
        arrival_pin=announcement.pin if announcement else None,
        within_campus=inside,
        distance_from_campus_km=distance_from_campus(point, bounds),
        fit_bounds=fit_bounds(payload.viewport, bounds, point),
    )
