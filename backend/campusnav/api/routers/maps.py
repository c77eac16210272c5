from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload
from typing import Optional

from campusnav.api.deps import require_admin, persist
from campusnav.db import get_db
from campusnav.models import Map, MapType, Route, RouteWaypoint, AdminUser
from campusnav.schemas.map import MapIn, MapOut, MapFullOut, MapUpdate
from campusnav.services import catalog
from campusnav.services.serializers import map_out, map_full_out

router = APIRouter()


def full_map_options():
    return (
        selectinload(Map.location_pins),
        selectinload(Map.routes).selectinload(Route.waypoints).selectinload(RouteWaypoint.location),
        selectinload(Map.routes).selectinload(Route.start_location),
        selectinload(Map.routes).selectinload(Route.end_location),
    )


def load_full_map(db: Session, map_id: int) -> Optional[Map]:
    return db.query(Map).options(*full_map_options()).filter(Map.id == map_id).first()


@router.get("", response_model=None)
@router.get("/", response_model=None)
def list_maps(include: Optional[str] = None, db: Session = Depends(get_db)) -> list:
    # relations are embedded only with include=full
    q = db.query(Map).order_by(Map.name.asc())
    if include == "full":
        return [map_full_out(m) for m in q.options(*full_map_options()).all()]
    return [map_out(m) for m in q.all()]


@router.post("", status_code=201)
@router.post("/", status_code=201)
def create_map(payload: MapIn, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)) -> MapOut:
    obj = Map(
        slug=payload.slug,
        name=payload.name,
        description=payload.description,
        base_map_type=MapType(payload.base_map_type),
        tile_url=payload.tile_url,
        tile_attribution=payload.tile_attribution,
        image_overlay_url=payload.image_overlay_url,
        image_bounds=payload.image_bounds,
        meta=payload.metadata,
        is_active=True if payload.is_active is None else payload.is_active,
    )
    with persist(db, "Failed to create map"):
        db.add(obj)
    db.refresh(obj)
    return map_out(obj)


@router.get("/{map_id}")
def get_map(map_id: int, db: Session = Depends(get_db)) -> MapFullOut:
    m = load_full_map(db, map_id)
    if not m:
        raise HTTPException(status_code=404, detail="Map not found")
    return map_full_out(m)


@router.patch("/{map_id}")
def update_map(
    map_id: int,
    payload: MapUpdate,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
) -> MapOut:
    m = db.get(Map, map_id)
    if not m:
        raise HTTPException(status_code=404, detail="Map not found")
    changes = payload.model_dump(exclude_unset=True)
    if "metadata" in changes:
        m.meta = changes.pop("metadata")
    if changes.get("base_map_type") is not None:
        m.base_map_type = MapType(changes.pop("base_map_type"))
    for key, value in changes.items():
        if value is None and key in ("slug", "name", "base_map_type", "is_active"):
            continue  # required columns
        setattr(m, key, value)
    with persist(db, "Failed to update map"):
        db.add(m)
    db.refresh(m)
    return map_out(m)


@router.delete("/{map_id}")
def delete_map(map_id: int, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    m = db.get(Map, map_id)
    if not m:
        raise HTTPException(status_code=404, detail="Map not found")
    with persist(db, "Failed to delete map"):
        removed = catalog.delete_map(db, m)
    return {"ok": True, "deleted": removed}
