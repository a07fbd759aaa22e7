"""Raster rendering surface for station markers."""

from __future__ import annotations

from dataclasses import replace
import math
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from bikeflow.rendering.markers import Marker

COLOR_BACKGROUND = (242, 239, 233)
COLOR_DEPARTURES = (70, 130, 180)
COLOR_ARRIVALS = (255, 140, 0)
COLOR_LABEL = (40, 40, 40)
COLOR_LABEL_BACKGROUND = (255, 255, 255, 200)

LABEL_MARGIN = 8
LABEL_PADDING = 4


def flow_color(flow: float) -> tuple[int, int, int]:
    """Mix the departures and arrivals colors by flow bucket (1 = all departures)."""
    flow = max(0.0, min(1.0, flow))
    return tuple(
        round(dep * flow + arr * (1 - flow))
        for dep, arr in zip(COLOR_DEPARTURES, COLOR_ARRIVALS)
    )


class ImageSurface:
    """Keeps the displayed marker state and composes it into a Pillow image."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}.")
        self.width = width
        self.height = height
        self._markers: dict[str, Marker] = {}

    @property
    def markers(self) -> dict[str, Marker]:
        return dict(self._markers)

    def create(self, marker: Marker) -> None:
        if marker.short_name in self._markers:
            raise ValueError(f"Marker {marker.short_name} already exists.")
        self._markers[marker.short_name] = replace(marker)

    def update(self, marker: Marker) -> None:
        if marker.short_name not in self._markers:
            raise KeyError(marker.short_name)
        self._markers[marker.short_name] = replace(marker)

    def remove(self, short_name: str) -> None:
        self._markers.pop(short_name, None)

    def move(self, marker: Marker) -> None:
        current = self._markers.get(marker.short_name)
        if current is None:
            raise KeyError(marker.short_name)
        current.x = marker.x
        current.y = marker.y

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def compose(self, label: str | None = None) -> Image.Image:
        """Compose an RGB frame with every marker, largest first so small ones stay visible."""
        image = Image.new("RGBA", (self.width, self.height), COLOR_BACKGROUND + (255,))
        for marker in sorted(self._markers.values(), key=lambda m: -m.radius):
            self._draw_marker(image, marker)
        if label:
            self._draw_label(image, label)
        return image.convert("RGB")

    def save_png(self, path: str | Path, label: str | None = None) -> Path:
        """Compose the current markers and write them to a PNG file."""
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.compose(label).save(output_path, format="PNG")
        return output_path

    def _draw_marker(self, image: Image.Image, marker: Marker) -> None:
        if marker.radius <= 0:
            return
        size = int(math.ceil(2 * marker.radius)) + 2 * marker.stroke_width + 1
        patch = Image.new("RGBA", (size, size), (0, 0, 0, 0))
        draw = ImageDraw.Draw(patch)
        fill_alpha = round(255 * marker.fill_opacity)
        draw.ellipse(
            (0, 0, size - 1, size - 1),
            fill=flow_color(marker.flow) + (fill_alpha,),
            outline=marker.stroke_color + (255,),
            width=marker.stroke_width,
        )

        left = round(marker.x - size / 2)
        top = round(marker.y - size / 2)
        source = (max(0, -left), max(0, -top))
        dest = (max(0, left), max(0, top))
        if source[0] >= size or source[1] >= size:
            return
        if dest[0] >= self.width or dest[1] >= self.height:
            return
        image.alpha_composite(patch, dest=dest, source=source)

    def _draw_label(self, image: Image.Image, label: str) -> None:
        font = ImageFont.load_default()
        overlay = Image.new("RGBA", image.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        bbox = draw.textbbox((LABEL_MARGIN, LABEL_MARGIN), label, font=font)
        draw.rectangle(
            (
                bbox[0] - LABEL_PADDING,
                bbox[1] - LABEL_PADDING,
                bbox[2] + LABEL_PADDING,
                bbox[3] + LABEL_PADDING,
            ),
            fill=COLOR_LABEL_BACKGROUND,
        )
        draw.text((LABEL_MARGIN, LABEL_MARGIN), label, font=font, fill=COLOR_LABEL)
        image.alpha_composite(overlay)


__all__ = ["COLOR_ARRIVALS", "COLOR_BACKGROUND", "COLOR_DEPARTURES", "ImageSurface", "flow_color"]
