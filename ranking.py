from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

try:
    from .config import EARTH_RADIUS_METERS  # type: ignore[attr-defined]
except ImportError:
    from config import EARTH_RADIUS_METERS  # type: ignore

if TYPE_CHECKING:  # pragma: no cover
    from api_client import Station

FRAME_COLUMNS = ["id", "name", "status", "latitude", "longitude", "distance_km", "comment"]


@dataclass(frozen=True, slots=True)
class Coordinate:
    latitude: float
    longitude: float


# The observer is only ever the most recent coordinate from the location provider.
ObserverLocation = Coordinate


def haversine_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in metres."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # clamp guards against rounding just above 1.0 for antipodal points
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(min(1.0, h)))


def rank_stations(stations: Sequence["Station"], observer: Optional[Coordinate]) -> List["Station"]:
    """Order stations by ascending distance from ``observer``.

    Without an observer the input order is returned as is. ``sorted`` is
    stable, so stations at equal distance keep their relative order.
    """
    if observer is None:
        return list(stations)
    return sorted(stations, key=lambda station: station.distance_to(observer))


class StationRanker:
    """Stateless ranking step; call it again whenever either input changes."""

    def rank(self, stations: Sequence["Station"], observer: Optional[Coordinate] = None) -> List["Station"]:
        return rank_stations(stations, observer)

    def __call__(self, stations: Sequence["Station"], observer: Optional[Coordinate] = None) -> List["Station"]:
        return self.rank(stations, observer)


def stations_to_frame(stations: Iterable["Station"], observer: Optional[Coordinate] = None) -> pd.DataFrame:
    records: list[Dict[str, Any]] = []
    for station in stations:
        location = station.location()
        distance_km = round(station.distance_to(observer) / 1000.0, 2) if observer is not None else None
        records.append(
            {
                "id": station.id,
                "name": station.name,
                "status": station.status,
                "latitude": location.latitude,
                "longitude": location.longitude,
                "distance_km": distance_km,
                "comment": station.comment or "",
            }
        )
    return pd.DataFrame(records, columns=FRAME_COLUMNS)


__all__ = [
    "Coordinate",
    "ObserverLocation",
    "StationRanker",
    "haversine_meters",
    "rank_stations",
    "stations_to_frame",
]
