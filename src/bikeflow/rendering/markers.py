"""Keyed reconciliation of station markers against the annotated station set."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Protocol, Sequence

from bikeflow.logic.scales import RadiusScale, station_flow
from bikeflow.logic.traffic import AnnotatedStation

STROKE_COLOR = (255, 255, 255)
STROKE_WIDTH = 1
FILL_OPACITY = 0.6


@dataclass
class Marker:
    """Visual state of one station circle. Identity is the station short name."""

    short_name: str
    lat: float
    lon: float
    radius: float = 0.0
    flow: float = 0.5
    tooltip: str = ""
    x: float = 0.0
    y: float = 0.0
    stroke_color: tuple[int, int, int] = STROKE_COLOR
    stroke_width: int = STROKE_WIDTH
    fill_opacity: float = FILL_OPACITY


class MarkerSurface(Protocol):
    """Anything that can display keyed circular markers."""

    def create(self, marker: Marker) -> None: ...

    def update(self, marker: Marker) -> None: ...

    def remove(self, short_name: str) -> None: ...

    def move(self, marker: Marker) -> None: ...


@dataclass
class ReconcileResult:
    """Markers after a reconcile pass plus the operations that produced them."""

    markers: dict[str, Marker]
    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)


def tooltip_text(station: AnnotatedStation) -> str:
    return (
        f"{station.total_traffic} trips "
        f"({station.departures} departures, {station.arrivals} arrivals)"
    )


def _apply_station(marker: Marker, station: AnnotatedStation, radius_scale: RadiusScale) -> None:
    marker.radius = radius_scale(station.total_traffic)
    marker.flow = station_flow(station)
    marker.tooltip = tooltip_text(station)


def reconcile(
    previous: Mapping[str, Marker],
    stations: Sequence[AnnotatedStation],
    radius_scale: RadiusScale,
) -> ReconcileResult:
    """Join markers to stations by short name.

    Existing markers are updated in place; ``previous`` itself is not
    modified, but the Marker objects it holds are.
    """
    result = ReconcileResult(markers={})
    for station in stations:
        if station.short_name in result.markers:
            continue
        marker = previous.get(station.short_name)
        if marker is None:
            marker = Marker(short_name=station.short_name, lat=station.lat, lon=station.lon)
            result.created.append(station.short_name)
        else:
            result.updated.append(station.short_name)
        _apply_station(marker, station, radius_scale)
        result.markers[station.short_name] = marker

    result.removed = [name for name in previous if name not in result.markers]
    return result


def apply_to_surface(result: ReconcileResult, surface: MarkerSurface) -> None:
    for name in result.removed:
        surface.remove(name)
    for name in result.created:
        surface.create(result.markers[name])
    for name in result.updated:
        surface.update(result.markers[name])


__all__ = [
    "FILL_OPACITY",
    "Marker",
    "MarkerSurface",
    "ReconcileResult",
    "STROKE_COLOR",
    "STROKE_WIDTH",
    "apply_to_surface",
    "reconcile",
    "tooltip_text",
]
