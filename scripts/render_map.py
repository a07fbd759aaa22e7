"""Render the station traffic map to PNG for one or more slider positions."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from bikeflow.config import load_config
from bikeflow.controller import InteractionController
from bikeflow.data import BaseDataLoader, FeedClient
from bikeflow.log import configure_logging
from bikeflow.logic.time_filter import UNFILTERED
from bikeflow.rendering import ImageSurface, Viewport

logger = logging.getLogger("render_map")


def _parse_cursor(value: str) -> int:
    """Accept 'any', minutes since midnight, or HH:MM."""
    text = value.strip().lower()
    if text in ("any", "-1"):
        return UNFILTERED
    try:
        if ":" not in text:
            return int(text)
        hours, minutes = (int(part) for part in text.split(":", 1))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid cursor: {value!r}") from exc
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise argparse.ArgumentTypeError(f"time out of range: {value!r}")
    return hours * 60 + minutes


def _output_name(cursor: int) -> str:
    if cursor == UNFILTERED:
        return "map_any.png"
    return f"map_{cursor // 60:02d}{cursor % 60:02d}.png"


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default="config/config.yaml")
    parser.add_argument(
        "--cursor",
        action="append",
        type=_parse_cursor,
        help="'any', minutes since midnight, or HH:MM; repeatable",
    )
    parser.add_argument("--output-dir", default="map_output")
    parser.add_argument("--zoom", type=float, default=None)
    parser.add_argument("--pan", type=float, nargs=2, metavar=("DX", "DY"), default=None)
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.log)

    viewport = Viewport(
        center_lon=config.map.center_lon,
        center_lat=config.map.center_lat,
        zoom=config.map.zoom,
        width=config.map.width,
        height=config.map.height,
        min_zoom=config.map.min_zoom,
        max_zoom=config.map.max_zoom,
    ).zoom_to(config.map.zoom)
    surface = ImageSurface(viewport.width, viewport.height)
    controller = InteractionController(surface, viewport)

    loader = BaseDataLoader(
        FeedClient(timeout_seconds=config.data.request_timeout_seconds),
        stations_source=config.data.stations_url,
        trips_source=config.data.trips_url,
    )
    loader.start()
    result = loader.wait()
    if result is None or not result.ok:
        controller.on_load_failed(result.error if result else "load did not finish")
        return 1
    controller.on_data_loaded(result.stations, result.trips)

    if args.zoom is not None:
        controller.on_viewport_change(controller.viewport.zoom_to(args.zoom))
    if args.pan is not None:
        controller.on_viewport_change(controller.viewport.pan(*args.pan))

    output_dir = Path(args.output_dir)
    for cursor in args.cursor or [UNFILTERED]:
        state = controller.on_cursor_change(cursor)
        path = surface.save_png(output_dir / _output_name(state.cursor), state.label)
        logger.info("Wrote %s (%s)", path, state.label)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
