from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload
from typing import Optional

from campusnav.api.deps import require_admin, persist
from campusnav.db import get_db
from campusnav.models import Map, Route, RouteWaypoint, AdminUser
from campusnav.schemas.route import RouteIn, RouteOut, RouteUpdate
from campusnav.services import catalog
from campusnav.services.serializers import route_out

router = APIRouter()

_REQUIRED = {"slug", "name", "is_default", "start_location_id", "end_location_id"}


def _route_query(db: Session):
    return db.query(Route).options(
        selectinload(Route.waypoints).selectinload(RouteWaypoint.location),
        selectinload(Route.start_location),
        selectinload(Route.end_location),
    )


def _load_route(db: Session, route_id: int) -> Route:
    r = _route_query(db).filter(Route.id == route_id).first()
    if not r:
        raise HTTPException(status_code=404, detail="Route not found")
    return r


@router.get("")
@router.get("/")
def list_routes(map_id: Optional[int] = None, db: Session = Depends(get_db)) -> list[RouteOut]:
    q = _route_query(db)
    if map_id is not None:
        q = q.filter(Route.map_id == map_id)
    return [route_out(r) for r in q.order_by(Route.id.asc()).all()]


@router.post("", status_code=201)
@router.post("/", status_code=201)
def create_route(payload: RouteIn, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)) -> RouteOut:
    if not db.get(Map, payload.map_id):
        raise HTTPException(status_code=400, detail="map does not exist")
    with persist(db, "Failed to create route"):
        catalog.check_pin_on_map(db, payload.start_location_id, payload.map_id, "start")
        catalog.check_pin_on_map(db, payload.end_location_id, payload.map_id, "end")
        obj = Route(
            map_id=payload.map_id,
            slug=payload.slug,
            name=payload.name,
            description=payload.description,
            is_default=bool(payload.is_default),
            estimated_minutes=payload.estimated_minutes,
            start_location_id=payload.start_location_id,
            end_location_id=payload.end_location_id,
            instructions=payload.instructions,
            meta=payload.metadata,
        )
        obj.waypoints = catalog.build_waypoints(db, payload.map_id, payload.waypoints)
        if obj.is_default:
            catalog.clear_other_defaults(db, obj)
        db.add(obj)
    return route_out(_load_route(db, obj.id))


@router.get("/{route_id}")
def get_route(route_id: int, db: Session = Depends(get_db)) -> RouteOut:
    return route_out(_load_route(db, route_id))


@router.patch("/{route_id}")
def update_route(
    route_id: int,
    payload: RouteUpdate,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
) -> RouteOut:
    r = _load_route(db, route_id)
    changes = payload.model_dump(exclude_unset=True, exclude={"waypoints"})
    with persist(db, "Failed to update route"):
        for key in ("start_location_id", "end_location_id"):
            if changes.get(key) is not None:
                catalog.check_pin_on_map(db, changes[key], r.map_id, key.split("_")[0])
        if "metadata" in changes:
            r.meta = changes.pop("metadata")
        for key, value in changes.items():
            if value is None and key in _REQUIRED:
                continue
            setattr(r, key, value)
        if payload.waypoints is not None:
            r.waypoints = []
            db.flush()  # old rows out before the new orders go in
            r.waypoints = catalog.build_waypoints(db, r.map_id, payload.waypoints)
        if r.is_default:
            catalog.clear_other_defaults(db, r)
        db.add(r)
    db.expire_all()
    return route_out(_load_route(db, route_id))


@router.delete("/{route_id}")
def delete_route(route_id: int, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    r = db.get(Route, route_id)
    if not r:
        raise HTTPException(status_code=404, detail="Route not found")
    with persist(db, "Failed to delete route"):
        catalog.delete_route(db, r)
    return {"ok": True}
