# backend/campusnav/models/map.py
import enum

from sqlalchemy import Integer, String, Text, JSON, Boolean, Column, Enum
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


class MapType(str, enum.Enum):
    TILE = "TILE"
    IMAGE_OVERLAY = "IMAGE_OVERLAY"


class Map(TimestampMixin, Base):
    __tablename__ = "maps"
    id = Column(Integer, primary_key=True)
    slug = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    base_map_type = Column(Enum(MapType), nullable=False, default=MapType.TILE)
    tile_url = Column(String, nullable=True)
    tile_attribution = Column(String, nullable=True)
    image_overlay_url = Column(String, nullable=True)
    # [[lat,lng],[lat,lng]] or {"southWest": {...}, "northEast": {...}}
    image_bounds = Column(JSON, nullable=True)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    location_pins = relationship("LocationPin", back_populates="map", order_by="LocationPin.id")
    routes = relationship("Route", back_populates="map", order_by="Route.id")
