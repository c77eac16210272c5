# backend/campusnav/services/catalog.py
"""
Integrity rules for maps, pins and routes. Callers commit.

Dependents are removed explicitly, in foreign-key order, before their parent:
routes (with waypoints) -> pins -> map.
"""
import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from campusnav.models import Map, LocationPin, Route, RouteWaypoint
from campusnav.schemas.route import WaypointIn

logger = logging.getLogger(__name__)


class InvalidReference(ValueError):
    pass


def check_pin_on_map(db: Session, pin_id: int, map_id: int, label: str) -> LocationPin:
    pin = db.get(LocationPin, pin_id)
    if pin is None:
        raise InvalidReference(f"{label} pin {pin_id} does not exist")
    if pin.map_id != map_id:
        raise InvalidReference(f"{label} pin {pin_id} belongs to another map")
    return pin


def build_waypoints(db: Session, map_id: int, waypoints: Iterable[WaypointIn]) -> list[RouteWaypoint]:
    rows = []
    for wp in waypoints:
        if wp.location_id is not None:
            check_pin_on_map(db, wp.location_id, map_id, "waypoint")
        rows.append(
            RouteWaypoint(
                order=wp.order,
                lat=wp.lat,
                lng=wp.lng,
                location_id=wp.location_id,
                instruction=wp.instruction,
            )
        )
    return rows


def clear_other_defaults(db: Session, route: Route) -> None:
    # one default route per map
    q = db.query(Route).filter(Route.map_id == route.map_id, Route.is_default.is_(True))
    if route.id is not None:
        q = q.filter(Route.id != route.id)
    for other in q.all():
        other.is_default = False
        db.add(other)


def _delete_routes(db: Session, routes: Iterable[Route]) -> int:
    count = 0
    for route in routes:
        db.delete(route)  # waypoints go with it (delete-orphan)
        count += 1
    db.flush()
    return count


def delete_route(db: Session, route: Route) -> None:
    _delete_routes(db, [route])


def delete_pin(db: Session, pin: LocationPin) -> int:
    """Delete a pin and every route that starts or ends at it."""
    pin_id = pin.id
    routes = (
        db.query(Route)
        .filter((Route.start_location_id == pin_id) | (Route.end_location_id == pin_id))
        .all()
    )
    removed = _delete_routes(db, routes)
    # waypoints of surviving routes keep their coordinates, not the link
    (
        db.query(RouteWaypoint)
        .filter(RouteWaypoint.location_id == pin_id)
        .update({RouteWaypoint.location_id: None}, synchronize_session=False)
    )
    db.delete(pin)
    db.flush()
    logger.info("deleted pin id=%s with %d dependent routes", pin_id, removed)
    return removed


def delete_map(db: Session, m: Map) -> dict:
    """Delete a map after its routes and pins."""
    map_id = m.id
    routes = db.query(Route).filter(Route.map_id == map_id).all()
    removed_routes = _delete_routes(db, routes)

    pins = db.query(LocationPin).filter(LocationPin.map_id == map_id).all()
    for pin in pins:
        db.delete(pin)
    db.flush()

    # collections loaded before the deletes are stale now
    db.expire(m)
    db.delete(m)
    db.flush()
    logger.info("deleted map id=%s routes=%d pins=%d", map_id, removed_routes, len(pins))
    return {"routes": removed_routes, "pins": len(pins)}


def find_map_by_slug(db: Session, slug: str) -> Optional[Map]:
    return db.query(Map).filter(Map.slug == slug).first()
