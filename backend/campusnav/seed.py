"""
Demo campus data: one tile map, three pins, a default route and the
superadmin account. Safe to run repeatedly.

    python -m campusnav.seed
"""
import logging

from sqlalchemy.orm import Session

from campusnav.config import get_settings
from campusnav.db import SessionLocal, init_db
from campusnav.models import AdminRole, AdminUser, LocationPin, Map, MapType, Route, RouteWaypoint
from campusnav.services.auth import hash_password
from campusnav.services.catalog import find_map_by_slug

logger = logging.getLogger(__name__)

CAMPUS_MAP = {
    "slug": "central-campus",
    "name": "Central Innovation Campus",
    "description": (
        "A demo campus showcasing how the navigation assistant guides visitors across buildings and labs."
    ),
    "base_map_type": MapType.TILE,
    "tile_url": "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
    "tile_attribution": "&copy; OpenStreetMap contributors",
    "meta": {"welcomeMessage": "Welcome to the Central Innovation Campus!"},
}

PINS = [
    {
        "slug": "welcome-center",
        "name": "Welcome Center",
        "description": "Pick up visitor passes, ask questions, and meet the concierge team.",
        "lat": 37.4221,
        "lng": -122.0841,
        "audio_text": (
            "You are at the Welcome Center. This is the perfect spot to begin your tour of the campus."
        ),
        "image_url": "https://images.unsplash.com/photo-1485217988980-11786ced9454",
    },
    {
        "slug": "innovation-hub",
        "name": "Innovation Hub",
        "description": "A collaborative workspace for research teams and founders.",
        "lat": 37.4212,
        "lng": -122.085,
        "audio_text": (
            "The Innovation Hub is where students build prototypes, test ideas, and showcase demos."
        ),
        "image_url": "https://images.unsplash.com/photo-1461749280684-dccba630e2f6",
    },
    {
        "slug": "knowledge-library",
        "name": "Knowledge Library",
        "description": "Silent study spaces, archives, and digital resource labs.",
        "lat": 37.4204,
        "lng": -122.0838,
        "audio_text": "The Knowledge Library offers collaborative zones and quiet pods.",
        "image_url": "https://images.unsplash.com/photo-1469474968028-56623f02e42e",
    },
]

ADMIN = {"username": "admin", "email": "admin@example.com", "name": "Super Admin", "password": "password"}


def _upsert_pin(db: Session, map_id: int, data: dict) -> LocationPin:
    pin = (
        db.query(LocationPin)
        .filter(LocationPin.map_id == map_id, LocationPin.slug == data["slug"])
        .first()
    )
    if pin is None:
        pin = LocationPin(map_id=map_id, slug=data["slug"])
    for key, value in data.items():
        setattr(pin, key, value)
    db.add(pin)
    db.flush()
    return pin


def _upsert_route(db: Session, map_id: int, welcome: LocationPin, hub: LocationPin, library: LocationPin) -> Route:
    route = db.query(Route).filter(Route.map_id == map_id, Route.slug == "welcome-to-library").first()
    if route is None:
        # only a new route becomes the default; an admin may have changed it since
        route = Route(map_id=map_id, slug="welcome-to-library", is_default=True)
    route.name = "Welcome Center to Library"
    route.description = "A shaded path that guides visitors through the quad."
    route.start_location_id = welcome.id
    route.end_location_id = library.id
    route.instructions = (
        "Exit the Welcome Center, keep Innovation Hub on your left, "
        "and continue straight until you reach the Library entrance."
    )
    route.waypoints = []
    db.add(route)
    db.flush()
    route.waypoints = [
        RouteWaypoint(order=1, lat=welcome.lat, lng=welcome.lng, instruction="Head south toward the main quad."),
        RouteWaypoint(
            order=2,
            lat=hub.lat,
            lng=hub.lng,
            location_id=hub.id,
            instruction="Pass by the Innovation Hub on your left and stay on the paved pathway.",
        ),
        RouteWaypoint(
            order=3,
            lat=library.lat,
            lng=library.lng,
            location_id=library.id,
            instruction="Arrive at the Library entrance.",
        ),
    ]
    db.flush()
    return route


def _upsert_admin(db: Session, rounds: int) -> AdminUser:
    user = db.query(AdminUser).filter(AdminUser.email == ADMIN["email"]).first()
    if user is None:
        user = AdminUser(email=ADMIN["email"], role=AdminRole.SUPERADMIN)
    user.username = ADMIN["username"]
    user.name = ADMIN["name"]
    user.password_hash = hash_password(ADMIN["password"], rounds)
    db.add(user)
    db.flush()
    return user


def seed(db: Session, rounds: int = 12) -> Map:
    campus = find_map_by_slug(db, CAMPUS_MAP["slug"])
    if campus is None:
        campus = Map(slug=CAMPUS_MAP["slug"])
    for key, value in CAMPUS_MAP.items():
        setattr(campus, key, value)
    db.add(campus)
    db.flush()

    welcome, hub, library = [_upsert_pin(db, campus.id, data) for data in PINS]
    _upsert_route(db, campus.id, welcome, hub, library)
    _upsert_admin(db, rounds)
    db.commit()
    db.refresh(campus)
    logger.info("database seeded with demo campus data (map id=%s)", campus.id)
    return campus


def main():
    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        seed(db, rounds=get_settings().bcrypt_rounds)
    finally:
        db.close()


if __name__ == "__main__":
    main()
