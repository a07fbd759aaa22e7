"""Marker reconciliation, projection and raster output."""

from bikeflow.rendering.composer import ImageSurface
from bikeflow.rendering.markers import Marker, MarkerSurface, reconcile
from bikeflow.rendering.projection import Viewport, project, update_positions

__all__ = [
    "ImageSurface",
    "Marker",
    "MarkerSurface",
    "Viewport",
    "project",
    "reconcile",
    "update_positions",
]
