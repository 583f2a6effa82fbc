from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional, Protocol

try:
    from .ranking import Coordinate  # type: ignore[attr-defined]
except ImportError:
    from ranking import Coordinate  # type: ignore

logger = logging.getLogger(__name__)

LocationListener = Callable[[Optional[Coordinate]], None]
Unsubscribe = Callable[[], None]


class AuthorizationStatus(str, Enum):
    NOT_DETERMINED = "notDetermined"
    RESTRICTED = "restricted"
    DENIED = "denied"
    AUTHORIZED_ALWAYS = "authorizedAlways"
    AUTHORIZED_WHEN_IN_USE = "authorizedWhenInUse"
    UNKNOWN = "unknown"


def status_string(status: Optional[AuthorizationStatus]) -> str:
    if status is None:
        return AuthorizationStatus.UNKNOWN.value
    return AuthorizationStatus(status).value


class LocationProvider(Protocol):
    """Anything that can report the device's latest coordinate."""

    authorization_status: Optional[AuthorizationStatus]

    def current_location(self) -> Optional[Coordinate]:
        ...

    def subscribe(self, listener: LocationListener) -> Unsubscribe:
        """Call ``listener`` after every change; returns a function that detaches it."""
        ...


class ManualLocationProvider:
    """Push-based provider: whoever owns the device feed calls ``update``."""

    def __init__(self, initial: Optional[Coordinate] = None) -> None:
        self.authorization_status: Optional[AuthorizationStatus] = None
        self._location = initial
        self._listeners: List[LocationListener] = []

    def current_location(self) -> Optional[Coordinate]:
        return self._location

    def subscribe(self, listener: LocationListener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, location: Optional[Coordinate]) -> None:
        self._location = location
        logger.debug("Location updated: %s", location)
        self._notify()

    def update_authorization(self, status: AuthorizationStatus) -> None:
        self.authorization_status = status
        logger.info("Location authorization: %s", status_string(status))
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._location)
