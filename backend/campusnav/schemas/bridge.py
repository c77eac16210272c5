# backend/campusnav/schemas/bridge.py
"""Messages posted by the mobile WebView shell into the page."""
from pydantic import BaseModel, ValidationError
from typing import Literal, Optional
import json
import logging

logger = logging.getLogger(__name__)


class BridgeCoords(BaseModel):
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    timestamp: Optional[int] = None  # epoch millis from the device


class GpsUpdateMessage(BaseModel):
    type: Literal["GPS_UPDATE"] = "GPS_UPDATE"
    coords: BridgeCoords


def parse_bridge_message(raw: str) -> Optional[GpsUpdateMessage]:
    """Decode a postMessage payload; anything that is not a GPS update is ignored."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("ignoring non-JSON bridge message")
        return None
    if not isinstance(data, dict) or data.get("type") != "GPS_UPDATE":
        return None
    try:
        return GpsUpdateMessage.model_validate(data)
    except ValidationError:
        logger.warning("malformed GPS_UPDATE bridge message")
        return None


def encode_gps_update(latitude: float, longitude: float, accuracy: Optional[float], timestamp: int) -> str:
    msg = GpsUpdateMessage(
        coords=BridgeCoords(latitude=latitude, longitude=longitude, accuracy=accuracy, timestamp=timestamp)
    )
    return msg.model_dump_json()
