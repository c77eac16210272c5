# backend/campusnav/schemas/commons.py
from pydantic import BaseModel
from typing import Literal, Optional
from urllib.parse import urlparse

MapKind = Literal["TILE", "IMAGE_OVERLAY"]
ViewportMode = Literal["combined", "campus", "user"]


class GeoJSONFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    geometry: dict
    properties: dict


def check_http_url(value: Optional[str]) -> Optional[str]:
    # tile templates like https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png must pass
    if value is None:
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be an http(s) URL")
    return value
