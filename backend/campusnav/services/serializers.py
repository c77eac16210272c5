# backend/campusnav/services/serializers.py
from campusnav.models import Map, LocationPin, Route, RouteWaypoint
from campusnav.schemas.map import MapOut, MapFullOut
from campusnav.schemas.pin import PinOut
from campusnav.schemas.route import RouteOut, WaypointOut


def _enum_value(v):
    return getattr(v, "value", v)


def pin_out(p: LocationPin) -> PinOut:
    return PinOut(
        id=p.id,
        map_id=p.map_id,
        slug=p.slug,
        name=p.name,
        description=p.description,
        lat=p.lat,
        lng=p.lng,
        floor=p.floor,
        category=p.category,
        audio_text=p.audio_text,
        image_url=p.image_url,
        video_url=p.video_url,
        metadata=p.meta,
        created_at=p.created_at,
        updated_at=p.updated_at,
    )


def waypoint_out(w: RouteWaypoint) -> WaypointOut:
    return WaypointOut(
        id=w.id,
        route_id=w.route_id,
        order=w.order,
        lat=w.lat,
        lng=w.lng,
        location_id=w.location_id,
        location=pin_out(w.location) if w.location is not None else None,
        instruction=w.instruction,
    )


def route_out(r: Route) -> RouteOut:
    return RouteOut(
        id=r.id,
        map_id=r.map_id,
        slug=r.slug,
        name=r.name,
        description=r.description,
        is_default=bool(r.is_default),
        estimated_minutes=r.estimated_minutes,
        start_location_id=r.start_location_id,
        end_location_id=r.end_location_id,
        instructions=r.instructions,
        metadata=r.meta,
        start_location=pin_out(r.start_location) if r.start_location is not None else None,
        end_location=pin_out(r.end_location) if r.end_location is not None else None,
        waypoints=[waypoint_out(w) for w in sorted(r.waypoints, key=lambda w: w.order)],
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


def _map_fields(m: Map) -> dict:
    return dict(
        id=m.id,
        slug=m.slug,
        name=m.name,
        description=m.description,
        base_map_type=_enum_value(m.base_map_type),
        tile_url=m.tile_url,
        tile_attribution=m.tile_attribution,
        image_overlay_url=m.image_overlay_url,
        image_bounds=m.image_bounds,
        metadata=m.meta,
        is_active=bool(m.is_active),
        created_at=m.created_at,
        updated_at=m.updated_at,
    )


def map_out(m: Map) -> MapOut:
    return MapOut(**_map_fields(m))


def map_full_out(m: Map) -> MapFullOut:
    return MapFullOut(
        **_map_fields(m),
        location_pins=[pin_out(p) for p in m.location_pins],
        routes=[route_out(r) for r in m.routes],
    )
