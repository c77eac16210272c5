# backend/campusnav/models/location_pin.py
from sqlalchemy import Integer, String, Text, JSON, Float, Column, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


class LocationPin(TimestampMixin, Base):
    __tablename__ = "location_pins"
    __table_args__ = (UniqueConstraint("slug", "map_id", name="uq_location_pins_slug_map"),)

    id = Column(Integer, primary_key=True)
    map_id = Column(Integer, ForeignKey("maps.id"), nullable=False, index=True)
    slug = Column(String, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    floor = Column(String, nullable=True)
    category = Column(String, nullable=True)
    audio_text = Column(Text, nullable=True)  # read aloud on arrival
    image_url = Column(String, nullable=True)
    video_url = Column(String, nullable=True)
    meta = Column("metadata", JSON, nullable=True)

    map = relationship("Map", back_populates="location_pins")
