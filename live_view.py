from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, List, Optional, Tuple

try:
    from .api_client import FetchError, FetchResult, Station, StationRepository  # type: ignore[attr-defined]
    from .location import LocationProvider  # type: ignore[attr-defined]
    from .ranking import Coordinate, StationRanker  # type: ignore[attr-defined]
except ImportError:
    from api_client import FetchError, FetchResult, Station, StationRepository  # type: ignore
    from location import LocationProvider  # type: ignore
    from ranking import Coordinate, StationRanker  # type: ignore

logger = logging.getLogger(__name__)

RankedListener = Callable[[Tuple[Station, ...]], None]
ErrorListener = Callable[[FetchError], None]


class ViewState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"


class LiveStationView:
    """Keeps a ranked station tuple current and republishes it on every change.

    ``READY`` is re-entered after each successful fetch (replace, then rank)
    and after each location update (rank only). A failed fetch returns the
    view to whatever state it was in before and is passed to error listeners.
    """

    def __init__(
        self,
        repository: StationRepository,
        location_provider: LocationProvider,
        ranker: Optional[StationRanker] = None,
    ) -> None:
        self.repository = repository
        self.location_provider = location_provider
        self.ranker = ranker or StationRanker()
        self.state = ViewState.IDLE
        self._ranked: Tuple[Station, ...] = ()
        self._listeners: List[RankedListener] = []
        self._error_listeners: List[ErrorListener] = []
        self._thread: Optional[threading.Thread] = None
        self._thread_lock = threading.Lock()
        self._rank_lock = threading.RLock()
        self._unsubscribe_location = location_provider.subscribe(self._on_location)

    @property
    def ranked(self) -> Tuple[Station, ...]:
        return self._ranked

    def subscribe(self, listener: RankedListener) -> Callable[[], None]:
        return _attach(self._listeners, listener)

    def subscribe_errors(self, listener: ErrorListener) -> Callable[[], None]:
        return _attach(self._error_listeners, listener)

    def refresh(self) -> FetchResult:
        previous = self.state
        self.state = ViewState.FETCHING
        try:
            result = self.repository.fetch()
        except Exception:
            self.state = previous
            raise
        if result.error is not None:
            self.state = previous
            _notify(self._error_listeners, result.error)
            return result
        self._publish()
        return result

    def start(self) -> Optional[threading.Thread]:
        """Fetch on a background thread; ignored while a fetch is still running."""
        with self._thread_lock:
            if self._thread and self._thread.is_alive():
                logger.debug("Fetch already in flight, start() ignored")
                return None
            thread = threading.Thread(target=self.refresh, name="station-fetch", daemon=True)
            thread.start()
            self._thread = thread
        return thread

    def close(self) -> None:
        self._unsubscribe_location()

    def _on_location(self, location: Optional[Coordinate]) -> None:
        # Nothing to order until a batch has arrived.
        if not self.repository.stations:
            return
        with self._rank_lock:
            if self.state != ViewState.FETCHING:
                self.state = ViewState.READY
            self._rank_and_notify()

    def _publish(self) -> None:
        with self._rank_lock:
            self.state = ViewState.READY
            self._rank_and_notify()

    def _rank_and_notify(self) -> None:
        # Caller holds _rank_lock; always rank against the newest observer.
        observer = self.location_provider.current_location()
        ranked = tuple(self.ranker.rank(self.repository.stations, observer))
        self._ranked = ranked
        _notify(self._listeners, ranked)


def _notify(listeners: list, value: object) -> None:
    for listener in list(listeners):
        try:
            listener(value)
        except Exception:
            logger.warning("Listener %r failed", listener, exc_info=True)


def _attach(listeners: list, listener: Callable) -> Callable[[], None]:
    listeners.append(listener)

    def detach() -> None:
        if listener in listeners:
            listeners.remove(listener)

    return detach
