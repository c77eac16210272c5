from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional

from campusnav.api.deps import require_admin, persist
from campusnav.db import get_db
from campusnav.models import Map, LocationPin, AdminUser
from campusnav.schemas.pin import PinIn, PinOut, PinUpdate
from campusnav.services import catalog
from campusnav.services.serializers import pin_out

router = APIRouter()

_REQUIRED = {"map_id", "slug", "name", "lat", "lng"}


@router.get("")
@router.get("/")
def list_pins(map_id: Optional[int] = None, db: Session = Depends(get_db)) -> list[PinOut]:
    q = db.query(LocationPin)
    if map_id is not None:
        q = q.filter(LocationPin.map_id == map_id)
    return [pin_out(p) for p in q.order_by(LocationPin.id.asc()).all()]


@router.post("", status_code=201)
@router.post("/", status_code=201)
def create_pin(payload: PinIn, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)) -> PinOut:
    if not db.get(Map, payload.map_id):
        raise HTTPException(status_code=400, detail="map does not exist")
    obj = LocationPin(
        map_id=payload.map_id,
        slug=payload.slug,
        name=payload.name,
        description=payload.description,
        lat=payload.lat,
        lng=payload.lng,
        floor=payload.floor,
        category=payload.category,
        audio_text=payload.audio_text,
        image_url=payload.image_url,
        video_url=payload.video_url,
        meta=payload.metadata,
    )
    with persist(db, "Failed to create pin"):
        db.add(obj)
    db.refresh(obj)
    return pin_out(obj)


@router.get("/{pin_id}")
def get_pin(pin_id: int, db: Session = Depends(get_db)) -> PinOut:
    p = db.get(LocationPin, pin_id)
    if not p:
        raise HTTPException(status_code=404, detail="Pin not found")
    return pin_out(p)


@router.patch("/{pin_id}")
def update_pin(
    pin_id: int,
    payload: PinUpdate,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
) -> PinOut:
    p = db.get(LocationPin, pin_id)
    if not p:
        raise HTTPException(status_code=404, detail="Pin not found")
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("map_id") is not None and changes["map_id"] != p.map_id:
        # routes would end up pointing across maps
        raise HTTPException(status_code=400, detail="pins cannot move between maps")
    if "metadata" in changes:
        p.meta = changes.pop("metadata")
    for key, value in changes.items():
        if value is None and key in _REQUIRED:
            continue
        setattr(p, key, value)
    with persist(db, "Failed to update pin"):
        db.add(p)
    db.refresh(p)
    return pin_out(p)


@router.delete("/{pin_id}")
def delete_pin(pin_id: int, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    p = db.get(LocationPin, pin_id)
    if not p:
        raise HTTPException(status_code=404, detail="Pin not found")
    with persist(db, "Failed to delete pin"):
        removed_routes = catalog.delete_pin(db, p)
    return {"ok": True, "deleted_routes": removed_routes}
