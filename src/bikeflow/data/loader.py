"""One-shot loader for the base station and trip data."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
import time

from bikeflow.data.feed_client import DataLoadError, FeedClient
from bikeflow.data.models import Station, Trip, parse_stations, parse_trips

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadResult:
    """Outcome of loading the base data: either both datasets or an error."""

    stations: list[Station]
    trips: list[Trip]
    skipped_rows: int
    loaded_at: float
    error: str | None

    @property
    def ok(self) -> bool:
        return self.error is None


class BaseDataLoader:
    """Loads stations, then trips, exactly once.

    ``load()`` runs on the calling thread. ``start()`` runs it on a background
    thread; callers collect the result with ``wait()`` and hand it to the
    controller on their own thread.
    """

    def __init__(self, client: FeedClient, stations_source: str, trips_source: str) -> None:
        self._client = client
        self._stations_source = stations_source
        self._trips_source = trips_source
        self._result: LoadResult | None = None
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._thread: threading.Thread | None = None

    def get_result(self) -> LoadResult | None:
        """Return the load result, if loading has finished."""
        with self._lock:
            return self._result

    def start(self) -> None:
        """Start loading on a background thread."""
        if self._thread or self._done.is_set():
            return
        self._thread = threading.Thread(target=self.load, daemon=True)
        self._thread.start()

    def wait(self, timeout: float | None = None) -> LoadResult | None:
        """Block until loading finishes; returns None on timeout."""
        self._done.wait(timeout=timeout)
        return self.get_result()

    def load(self) -> LoadResult:
        with self._lock:
            if self._result is not None:
                return self._result
        try:
            result = self._load_once()
            with self._lock:
                self._result = result
        finally:
            self._done.set()
        return result

    def _load_once(self) -> LoadResult:
        try:
            stations = parse_stations(self._client.get_station_records(self._stations_source))
            if not stations:
                raise DataLoadError(f"No usable stations in {self._stations_source}")
            logger.info("Stations loaded: %d", len(stations))

            trips, skipped = parse_trips(self._client.get_trip_rows(self._trips_source))
            logger.info("Trips loaded: %d (%d malformed rows skipped)", len(trips), skipped)
        except DataLoadError as exc:
            logger.error("Base data load failed: %s", exc)
            return LoadResult(stations=[], trips=[], skipped_rows=0, loaded_at=time.time(), error=str(exc))

        return LoadResult(
            stations=stations,
            trips=trips,
            skipped_rows=skipped,
            loaded_at=time.time(),
            error=None,
        )


__all__ = ["BaseDataLoader", "LoadResult"]
