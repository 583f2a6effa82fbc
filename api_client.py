from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

import requests

try:
    from .config import API_BASE_URL, REQUEST_TIMEOUT_SECONDS, REQUIRED_STATION_FIELDS  # type: ignore[attr-defined]
    from .ranking import Coordinate, haversine_meters  # type: ignore[attr-defined]
except ImportError:
    from config import API_BASE_URL, REQUEST_TIMEOUT_SECONDS, REQUIRED_STATION_FIELDS  # type: ignore
    from ranking import Coordinate, haversine_meters  # type: ignore

logger = logging.getLogger(__name__)


class StationDecodeError(ValueError):
    """A single station record does not match the expected schema."""


class FetchError(Exception):
    """Base class for a failed station fetch."""

    kind = "unknown"

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url
        self.message = message

    def __str__(self) -> str:
        return f"{self.message} ({self.url})"


class NetworkFetchError(FetchError):
    """Transport failure or non-success HTTP status."""

    kind = "network"


class DecodeFetchError(FetchError):
    """Malformed or schema-mismatched response body."""

    kind = "decode"


@dataclass(frozen=True, slots=True)
class StationStat:
    key: str
    value: str


@dataclass(frozen=True, slots=True)
class Station:
    """One monitoring station exactly as the API publishes it.

    Coordinates stay as the transmitted strings; ``location()`` parses them on
    every read and falls back to 0.0 for anything that is not a finite number.
    """

    id: int
    name: str
    comment: Optional[str]
    status: int
    latitude: str
    longitude: str
    # read-only view; left out of the hash since mappings are not hashable
    measurements: Mapping[str, Optional[str]] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "measurements", MappingProxyType(dict(self.measurements)))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Station":
        if not isinstance(payload, Mapping):
            raise StationDecodeError(f"Station record must be an object, got {type(payload).__name__}")
        missing = [name for name in REQUIRED_STATION_FIELDS if name not in payload]
        if missing:
            raise StationDecodeError(f"Station record is missing fields: {', '.join(missing)}")

        comment = payload.get("comment")
        if comment is not None and not isinstance(comment, str):
            raise StationDecodeError(f"Field 'comment' must be a string or null, got {type(comment).__name__}")

        return cls(
            id=_require_int(payload, "id"),
            name=_require_str(payload, "name"),
            comment=comment,
            status=_require_int(payload, "status"),
            latitude=_require_str(payload, "latitude"),
            longitude=_require_str(payload, "longitude"),
            measurements=_require_measurements(payload.get("measurements")),
        )

    def location(self) -> Coordinate:
        return Coordinate(
            latitude=_parse_coordinate(self.latitude, "latitude", self.id),
            longitude=_parse_coordinate(self.longitude, "longitude", self.id),
        )

    def distance_to(self, observer: Coordinate) -> float:
        """Great-circle surface distance to ``observer`` in metres."""
        return haversine_meters(self.location(), observer)

    def stats(self) -> List[StationStat]:
        return [StationStat(key=key, value=value if value is not None else "") for key, value in self.measurements.items()]


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of one fetch: either a station batch or the error that stopped it."""

    stations: Tuple[Station, ...] = ()
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Tuple[Station, ...]:
        if self.error is not None:
            raise self.error
        return self.stations


class StationAPIClient:
    """Thin wrapper around the station endpoint with timeout and error handling."""

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url or API_BASE_URL
        self.timeout = timeout
        self._external_session = session
        self._session = session or requests.Session()

    def fetch_stations(self) -> List[Station]:
        try:
            response = self._session.get(self.url, timeout=self.timeout, headers={"Accept": "application/json"})
            response.raise_for_status()
        except requests.RequestException as exc:
            raise NetworkFetchError(self.url, f"HTTP error: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeFetchError(self.url, f"JSON decode error: {exc}") from exc

        return decode_stations(payload, url=self.url)

    def close(self) -> None:
        if not self._external_session:
            self._session.close()


class StationRepository:
    """Fetches station batches and keeps the last one that decoded cleanly.

    A failed fetch is logged and handed back in the ``FetchResult``; the
    previous batch stays in ``stations`` untouched. There is no retry.
    """

    def __init__(self, client: Optional[StationAPIClient] = None) -> None:
        self._owns_client = client is None
        self._client = client or StationAPIClient()
        self._stations: Tuple[Station, ...] = ()

    @property
    def stations(self) -> Tuple[Station, ...]:
        return self._stations

    def fetch(self) -> FetchResult:
        try:
            batch = tuple(self._client.fetch_stations())
        except FetchError as exc:
            logger.warning("Station fetch failed (%s): %s", exc.kind, exc)
            return FetchResult(error=exc)

        self._stations = batch
        logger.info("Fetched %d stations from %s", len(batch), self._client.url)
        return FetchResult(stations=batch)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


def decode_stations(payload: Any, *, url: str = "") -> List[Station]:
    """Decode a whole response body; one bad record fails the batch."""
    if not isinstance(payload, list):
        raise DecodeFetchError(url, f"Unexpected payload structure: expected list, got {type(payload).__name__}")
    stations: List[Station] = []
    for index, record in enumerate(payload):
        try:
            stations.append(Station.from_dict(record))
        except StationDecodeError as exc:
            raise DecodeFetchError(url, f"Station #{index}: {exc}") from exc
    return stations


# --- Helper utilities -----------------------------------------------------

def _require_int(payload: Mapping[str, Any], name: str) -> int:
    value = payload.get(name)
    # bool is an int subclass but never a valid id or status
    if isinstance(value, bool) or not isinstance(value, int):
        raise StationDecodeError(f"Field '{name}' must be an integer, got {type(value).__name__}")
    return value


def _require_str(payload: Mapping[str, Any], name: str) -> str:
    value = payload.get(name)
    if not isinstance(value, str):
        raise StationDecodeError(f"Field '{name}' must be a string, got {type(value).__name__}")
    return value


def _require_measurements(value: Any) -> Mapping[str, Optional[str]]:
    if not isinstance(value, Mapping):
        raise StationDecodeError(f"Field 'measurements' must be an object, got {type(value).__name__}")
    measurements: Dict[str, Optional[str]] = {}
    for key, reading in value.items():
        if reading is not None and not isinstance(reading, str):
            raise StationDecodeError(f"Measurement '{key}' must be a string or null, got {type(reading).__name__}")
        measurements[str(key)] = reading
    return MappingProxyType(measurements)


def _parse_coordinate(raw: str, axis: str, station_id: int) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.debug("Station %s has unparsable %s %r, using 0.0", station_id, axis, raw)
        return 0.0
    if not math.isfinite(value):
        logger.debug("Station %s has non-finite %s %r, using 0.0", station_id, axis, raw)
        return 0.0
    return value


__all__ = [
    "DecodeFetchError",
    "FetchError",
    "FetchResult",
    "NetworkFetchError",
    "Station",
    "StationAPIClient",
    "StationDecodeError",
    "StationRepository",
    "StationStat",
    "decode_stations",
]
