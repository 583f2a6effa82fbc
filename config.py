from __future__ import annotations

import math
import os

DEFAULT_API_BASE_URL = "https://loftgaedi.onrender.com/"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0

# Mean Earth radius (IUGG), metres
EARTH_RADIUS_METERS = 6_371_008.8


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if math.isfinite(value) and value > 0 else default


API_BASE_URL = os.environ.get("LOFTGAEDI_API_URL") or DEFAULT_API_BASE_URL
REQUEST_TIMEOUT_SECONDS = _env_float("LOFTGAEDI_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT_SECONDS)

REQUIRED_STATION_FIELDS = (
    "id",
    "name",
    "status",
    "latitude",
    "longitude",
    "measurements",
)
