"""Configuration loader for the bike-share traffic map."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any

from dotenv import load_dotenv
import yaml


@dataclass(frozen=True)
class DataConfig:
    """Sources for the station and trip feeds."""

    stations_url: str
    trips_url: str
    request_timeout_seconds: int


@dataclass(frozen=True)
class MapConfig:
    """Initial viewport for the map."""

    center_lon: float
    center_lat: float
    zoom: float
    min_zoom: float
    max_zoom: float
    width: int
    height: int


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    log_dir: str


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    data: DataConfig
    map: MapConfig
    log: LoggingConfig


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _require_section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = _require_key(data, name, name)
    if not isinstance(section, dict):
        raise ValueError(f"'{name}' config must be a mapping")
    return section


def load_config(path: str = "config/config.yaml") -> AppConfig:
    """Load application configuration from a YAML file.

    ``BIKEFLOW_STATIONS_URL`` and ``BIKEFLOW_TRIPS_URL`` (environment or
    ``.env``) override the feed sources from the file when non-empty.
    """
    load_dotenv()
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    data_section = _require_section(data, "data")
    map_section = _require_section(data, "map")
    logging_section = _require_section(data, "logging")

    stations_url = os.environ.get("BIKEFLOW_STATIONS_URL", "").strip()
    trips_url = os.environ.get("BIKEFLOW_TRIPS_URL", "").strip()

    feeds = DataConfig(
        stations_url=stations_url or _require_key(data_section, "stations_url", "data"),
        trips_url=trips_url or _require_key(data_section, "trips_url", "data"),
        request_timeout_seconds=data_section.get("request_timeout_seconds", 30),
    )

    map_config = MapConfig(
        center_lon=float(_require_key(map_section, "center_lon", "map")),
        center_lat=float(_require_key(map_section, "center_lat", "map")),
        zoom=float(_require_key(map_section, "zoom", "map")),
        min_zoom=float(map_section.get("min_zoom", 0)),
        max_zoom=float(map_section.get("max_zoom", 22)),
        width=_require_key(map_section, "width", "map"),
        height=_require_key(map_section, "height", "map"),
    )

    logging = LoggingConfig(
        level=_require_key(logging_section, "level", "logging"),
        log_dir=logging_section.get("log_dir", "") or "",
    )

    return AppConfig(data=feeds, map=map_config, log=logging)
