"""Station and trip records parsed from the raw feeds."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)

TRIP_COLUMNS = ("start_station_id", "end_station_id", "started_at", "ended_at")

# Bare "HH:MM" timestamps land on this date.
TIME_ONLY_DATE = date(1970, 1, 1)


class RowParseError(ValueError):
    """Raised when a station record or trip row cannot be parsed."""


@dataclass(frozen=True)
class Station:
    """Station metadata from the station feed."""

    short_name: str
    lat: float
    lon: float
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}), compare=False, repr=False)


@dataclass(frozen=True)
class Trip:
    """One trip from the trip log."""

    start_station_id: str
    end_station_id: str
    started_at: datetime
    ended_at: datetime


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO timestamp, or a bare time of day."""
    text = (value or "").strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.combine(TIME_ONLY_DATE, time.fromisoformat(text))
    except ValueError as exc:
        raise RowParseError(f"Unparseable timestamp: {value!r}") from exc


def parse_station(record: Mapping[str, Any]) -> Station:
    if not isinstance(record, Mapping):
        raise RowParseError(f"Station record is not an object: {record!r}")
    short_name = record.get("short_name", record.get("shortName"))
    if short_name is None or str(short_name).strip() == "":
        raise RowParseError("Station record has no short_name")
    try:
        lat = float(record["lat"])
        lon = float(record["lon"])
    except (KeyError, TypeError, ValueError) as exc:
        raise RowParseError(f"Station {short_name!r} has no usable lat/lon") from exc

    extra = MappingProxyType({
        key: value
        for key, value in record.items()
        if key not in ("short_name", "shortName", "lat", "lon")
    })
    return Station(short_name=str(short_name), lat=lat, lon=lon, extra=extra)


def parse_trip(row: Mapping[str, Any]) -> Trip:
    missing = [column for column in TRIP_COLUMNS if row.get(column) in (None, "")]
    if missing:
        raise RowParseError(f"Trip row missing {', '.join(missing)}")
    return Trip(
        start_station_id=str(row["start_station_id"]).strip(),
        end_station_id=str(row["end_station_id"]).strip(),
        started_at=parse_timestamp(row["started_at"]),
        ended_at=parse_timestamp(row["ended_at"]),
    )


def parse_stations(records: Iterable[Mapping[str, Any]]) -> list[Station]:
    """Parse station records, skipping malformed ones and duplicate short names."""
    stations: list[Station] = []
    seen: set[str] = set()
    for index, record in enumerate(records):
        try:
            station = parse_station(record)
        except RowParseError as exc:
            logger.warning("Skipping station record %d: %s", index, exc)
            continue
        if station.short_name in seen:
            logger.warning("Skipping duplicate station %s", station.short_name)
            continue
        seen.add(station.short_name)
        stations.append(station)
    return stations


def parse_trips(rows: Iterable[Mapping[str, Any]]) -> tuple[list[Trip], int]:
    """Parse trip rows; returns (trips, skipped_count)."""
    trips: list[Trip] = []
    skipped = 0
    for index, row in enumerate(rows):
        try:
            trips.append(parse_trip(row))
        except RowParseError as exc:
            skipped += 1
            logger.warning("Skipping trip row %d: %s", index, exc)
    return trips, skipped


__all__ = [
    "RowParseError",
    "Station",
    "Trip",
    "parse_timestamp",
    "parse_station",
    "parse_trip",
    "parse_stations",
    "parse_trips",
]
