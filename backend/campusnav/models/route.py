# backend/campusnav/models/route.py
from sqlalchemy import (
    Integer,
    String,
    Text,
    JSON,
    Float,
    Boolean,
    Column,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


class Route(TimestampMixin, Base):
    __tablename__ = "routes"
    __table_args__ = (UniqueConstraint("slug", "map_id", name="uq_routes_slug_map"),)

    id = Column(Integer, primary_key=True)
    map_id = Column(Integer, ForeignKey("maps.id"), nullable=False, index=True)
    slug = Column(String, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)
    estimated_minutes = Column(Integer, nullable=True)
    start_location_id = Column(Integer, ForeignKey("location_pins.id"), nullable=False)
    end_location_id = Column(Integer, ForeignKey("location_pins.id"), nullable=False)
    instructions = Column(Text, nullable=True)
    meta = Column("metadata", JSON, nullable=True)

    map = relationship("Map", back_populates="routes")
    start_location = relationship("LocationPin", foreign_keys=[start_location_id])
    end_location = relationship("LocationPin", foreign_keys=[end_location_id])
    waypoints = relationship(
        "RouteWaypoint",
        back_populates="route",
        order_by="RouteWaypoint.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class RouteWaypoint(Base):
    __tablename__ = "route_waypoints"
    __table_args__ = (UniqueConstraint("route_id", "order", name="uq_route_waypoints_order"),)

    id = Column(Integer, primary_key=True)
    route_id = Column(Integer, ForeignKey("routes.id", ondelete="CASCADE"), nullable=False, index=True)
    order = Column(Integer, nullable=False)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    # optional pin this waypoint passes; the link is dropped when the pin goes
    location_id = Column(Integer, ForeignKey("location_pins.id", ondelete="SET NULL"), nullable=True)
    instruction = Column(Text, nullable=True)

    route = relationship("Route", back_populates="waypoints")
    location = relationship("LocationPin")
