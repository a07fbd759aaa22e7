from __future__ import annotations

import pytest
from PIL import Image

from bikeflow.rendering.composer import (
    COLOR_ARRIVALS,
    COLOR_BACKGROUND,
    COLOR_DEPARTURES,
    ImageSurface,
    flow_color,
)
from bikeflow.rendering.markers import Marker


def _marker(name: str, x: float, y: float, radius: float = 10.0, flow: float = 0.5) -> Marker:
    return Marker(short_name=name, lat=42.0, lon=-71.0, radius=radius, flow=flow, x=x, y=y)


def test_flow_color_endpoints() -> None:
    assert flow_color(1.0) == COLOR_DEPARTURES
    assert flow_color(0.0) == COLOR_ARRIVALS
    assert flow_color(0.5) == (162, 135, 90)


def test_compose_size_and_mode() -> None:
    image = ImageSurface(320, 240).compose()

    assert isinstance(image, Image.Image)
    assert image.size == (320, 240)
    assert image.mode == "RGB"
    assert image.getpixel((100, 100)) == COLOR_BACKGROUND


def test_marker_tinted_by_flow() -> None:
    surface = ImageSurface(200, 100)
    surface.create(_marker("dep", 50, 50, flow=1.0))
    surface.create(_marker("arr", 150, 50, flow=0.0))

    pixels = surface.compose().load()

    departures = pixels[50, 50]
    arrivals = pixels[150, 50]
    assert departures != COLOR_BACKGROUND
    assert arrivals != COLOR_BACKGROUND
    assert departures[2] > arrivals[2]
    assert arrivals[0] > departures[0]
    assert pixels[100, 50] == COLOR_BACKGROUND


def test_zero_radius_marker_is_not_drawn() -> None:
    surface = ImageSurface(100, 100)
    surface.create(_marker("idle", 50, 50, radius=0.0))

    assert surface.compose().getpixel((50, 50)) == COLOR_BACKGROUND


def test_move_and_remove() -> None:
    surface = ImageSurface(200, 100)
    marker = _marker("A", 50, 50)
    surface.create(marker)

    marker.x = 150
    surface.move(marker)
    pixels = surface.compose().load()
    assert pixels[50, 50] == COLOR_BACKGROUND
    assert pixels[150, 50] != COLOR_BACKGROUND

    surface.remove("A")
    assert surface.markers == {}
    assert surface.compose().getpixel((150, 50)) == COLOR_BACKGROUND


def test_markers_partly_off_screen_are_clipped() -> None:
    surface = ImageSurface(100, 100)
    surface.create(_marker("edge", -5, 50, radius=20))
    surface.create(_marker("gone", 500, 500, radius=20))

    image = surface.compose()

    assert image.getpixel((5, 50)) != COLOR_BACKGROUND
    assert image.getpixel((99, 99)) == COLOR_BACKGROUND


def test_surface_keeps_its_own_copy() -> None:
    surface = ImageSurface(100, 100)
    marker = _marker("A", 50, 50, radius=10)
    surface.create(marker)

    marker.radius = 40
    assert surface.markers["A"].radius == 10

    surface.update(marker)
    assert surface.markers["A"].radius == 40


def test_invalid_operations() -> None:
    surface = ImageSurface(100, 100)
    surface.create(_marker("A", 10, 10))

    with pytest.raises(ValueError):
        surface.create(_marker("A", 10, 10))
    with pytest.raises(KeyError):
        surface.update(_marker("B", 10, 10))
    with pytest.raises(KeyError):
        surface.move(_marker("B", 10, 10))
    with pytest.raises(ValueError):
        ImageSurface(0, 100)


def test_label_smoke() -> None:
    surface = ImageSurface(200, 100)
    image = surface.compose("8:30 AM")

    assert image.size == (200, 100)
    assert image.tobytes() != surface.compose().tobytes()


def test_save_png(tmp_path) -> None:
    path = ImageSurface(50, 40).save_png(tmp_path / "out" / "frame.png", "Any time")

    assert path.exists()
    with Image.open(path) as saved:
        assert saved.size == (50, 40)
