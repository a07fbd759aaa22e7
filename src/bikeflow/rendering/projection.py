"""Web Mercator viewport and geographic-to-screen projection."""

from __future__ import annotations

from dataclasses import dataclass, replace
import math
from typing import Iterable

from bikeflow.rendering.markers import Marker, MarkerSurface

TILE_SIZE = 512
MAX_LATITUDE = 85.051129


@dataclass(frozen=True)
class ScreenPoint:
    x: float
    y: float


@dataclass(frozen=True)
class Viewport:
    """Map camera: center, zoom and pixel size of the visible area."""

    center_lon: float
    center_lat: float
    zoom: float
    width: int
    height: int
    min_zoom: float = 0.0
    max_zoom: float = 22.0

    @property
    def world_size(self) -> float:
        return TILE_SIZE * 2**self.zoom

    def pan(self, dx: float, dy: float) -> Viewport:
        """Move the camera by a pixel offset."""
        center = _to_world(self.center_lat, self.center_lon, self.world_size)
        lat, lon = _from_world(center[0] + dx, center[1] + dy, self.world_size)
        return replace(self, center_lon=lon, center_lat=lat)

    def zoom_to(self, zoom: float) -> Viewport:
        return replace(self, zoom=max(self.min_zoom, min(self.max_zoom, zoom)))

    def resize(self, width: int, height: int) -> Viewport:
        return replace(self, width=width, height=height)


def _to_world(lat: float, lon: float, world_size: float) -> tuple[float, float]:
    lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))
    lat_rad = math.radians(lat)
    x = (lon + 180.0) / 360.0 * world_size
    y = (1.0 - math.log(math.tan(lat_rad) + 1.0 / math.cos(lat_rad)) / math.pi) / 2.0 * world_size
    return x, y


def _from_world(x: float, y: float, world_size: float) -> tuple[float, float]:
    lon = x / world_size * 360.0 - 180.0
    lat = math.degrees(math.atan(math.sinh(math.pi * (1 - 2 * y / world_size))))
    return lat, lon


def project(lat: float, lon: float, viewport: Viewport) -> ScreenPoint:
    """Pixel position of a coordinate, relative to the viewport's top-left corner."""
    world_size = viewport.world_size
    x, y = _to_world(lat, lon, world_size)
    center_x, center_y = _to_world(viewport.center_lat, viewport.center_lon, world_size)
    return ScreenPoint(
        x=x - center_x + viewport.width / 2,
        y=y - center_y + viewport.height / 2,
    )


def unproject(point: ScreenPoint, viewport: Viewport) -> tuple[float, float]:
    """Inverse of project(); returns (lat, lon)."""
    world_size = viewport.world_size
    center_x, center_y = _to_world(viewport.center_lat, viewport.center_lon, world_size)
    return _from_world(
        point.x - viewport.width / 2 + center_x,
        point.y - viewport.height / 2 + center_y,
        world_size,
    )


def update_positions(
    markers: Iterable[Marker],
    viewport: Viewport,
    surface: MarkerSurface | None = None,
) -> None:
    """Re-project every marker onto the current viewport."""
    for marker in markers:
        point = project(marker.lat, marker.lon, viewport)
        marker.x = point.x
        marker.y = point.y
        if surface is not None:
            surface.move(marker)


__all__ = ["ScreenPoint", "Viewport", "project", "unproject", "update_positions"]
