"""Interaction controller: owns the cursor and drives the render pipeline."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Sequence

from bikeflow.data.models import Station, Trip
from bikeflow.logic.scales import RadiusScale, radius_scale_for
from bikeflow.logic.time_filter import (
    UNFILTERED,
    cursor_label,
    filter_trips_by_time,
    is_unfiltered,
    normalize_cursor,
)
from bikeflow.logic.traffic import AnnotatedStation, compute_station_traffic
from bikeflow.rendering.markers import Marker, MarkerSurface, apply_to_surface, reconcile
from bikeflow.rendering.projection import Viewport, update_positions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CursorState:
    """Either unfiltered (cursor == -1) or filtered at a minute of the day."""

    cursor: int = UNFILTERED

    @property
    def filtered(self) -> bool:
        return not is_unfiltered(self.cursor)

    @property
    def label(self) -> str:
        return cursor_label(self.cursor)


@dataclass(frozen=True)
class RenderState:
    """Output of the last pipeline run."""

    cursor: CursorState
    stations: list[AnnotatedStation]
    radius_scale: RadiusScale
    trip_count: int


class InteractionController:
    """Reacts to data-load, cursor and viewport notifications on a single thread."""

    def __init__(self, surface: MarkerSurface, viewport: Viewport) -> None:
        self._surface = surface
        self._viewport = viewport
        self._state = CursorState()
        self._stations: list[Station] | None = None
        self._trips: list[Trip] | None = None
        self._markers: dict[str, Marker] = {}
        self._last_render: RenderState | None = None
        self._load_error: str | None = None

    @property
    def state(self) -> CursorState:
        return self._state

    @property
    def label(self) -> str:
        return self._state.label

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def markers(self) -> dict[str, Marker]:
        return dict(self._markers)

    @property
    def last_render(self) -> RenderState | None:
        return self._last_render

    @property
    def load_error(self) -> str | None:
        return self._load_error

    @property
    def ready(self) -> bool:
        return self._stations is not None and self._trips is not None and self._load_error is None

    def on_data_loaded(self, stations: Sequence[Station], trips: Sequence[Trip]) -> None:
        """Accept the base data and draw the first frame."""
        if self._load_error is not None:
            logger.warning("Ignoring data after failed load: %s", self._load_error)
            return
        self._stations = list(stations)
        self._trips = list(trips)
        self._render()

    def on_load_failed(self, error: str) -> None:
        """Leave the controller inert; no partial data is ever rendered."""
        logger.error("Map initialization aborted: %s", error)
        self._load_error = error

    def on_cursor_change(self, value: int | str) -> CursorState:
        """Apply a new slider value; the pipeline only runs once data is loaded."""
        self._state = CursorState(cursor=normalize_cursor(value))
        if not self.ready:
            logger.debug("Data not loaded; cursor label set to %s", self._state.label)
            return self._state
        self._render()
        return self._state

    def on_viewport_change(self, viewport: Viewport) -> None:
        """Re-project markers for the new camera. Never re-aggregates."""
        self._viewport = viewport
        update_positions(self._markers.values(), viewport, self._surface)

    def _render(self) -> None:
        if self._stations is None or self._trips is None:
            return
        cursor = self._state.cursor
        trips = filter_trips_by_time(self._trips, cursor)
        stations = compute_station_traffic(self._stations, trips)
        radius_scale = radius_scale_for(stations, cursor)

        result = reconcile(self._markers, stations, radius_scale)
        apply_to_surface(result, self._surface)
        self._markers = result.markers
        update_positions(self._markers.values(), self._viewport, self._surface)

        self._last_render = RenderState(
            cursor=self._state,
            stations=stations,
            radius_scale=radius_scale,
            trip_count=len(trips),
        )
        logger.debug(
            "Rendered %s: %d trips, %d created, %d updated, %d removed",
            self._state.label,
            len(trips),
            len(result.created),
            len(result.updated),
            len(result.removed),
        )


__all__ = ["CursorState", "InteractionController", "RenderState"]
