from .base import Base
from .map import Map, MapType
from .location_pin import LocationPin
from .route import Route, RouteWaypoint
from .admin_user import AdminUser, AdminSession, AdminRole

__all__ = [
    "Base",
    "Map",
    "MapType",
    "LocationPin",
    "Route",
    "RouteWaypoint",
    "AdminUser",
    "AdminSession",
    "AdminRole",
]
