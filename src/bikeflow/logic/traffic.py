"""Per-station arrival and departure counts."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Sequence

from bikeflow.data.models import Station, Trip


@dataclass(frozen=True)
class AnnotatedStation:
    """A station together with its traffic for the current time window."""

    short_name: str
    lat: float
    lon: float
    arrivals: int
    departures: int
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}), compare=False, repr=False)

    @property
    def total_traffic(self) -> int:
        return self.arrivals + self.departures


def count_departures(trips: Iterable[Trip]) -> Counter[str]:
    return Counter(trip.start_station_id for trip in trips)


def count_arrivals(trips: Iterable[Trip]) -> Counter[str]:
    return Counter(trip.end_station_id for trip in trips)


def compute_station_traffic(stations: Sequence[Station], trips: Sequence[Trip]) -> list[AnnotatedStation]:
    """Annotate every station with its arrivals and departures, in station order.

    Trips whose station ids are not in ``stations`` are counted but never
    show up in the result.
    """
    departures = count_departures(trips)
    arrivals = count_arrivals(trips)
    return [
        AnnotatedStation(
            short_name=station.short_name,
            lat=station.lat,
            lon=station.lon,
            arrivals=arrivals.get(station.short_name, 0),
            departures=departures.get(station.short_name, 0),
            extra=station.extra,
        )
        for station in stations
    ]


def max_traffic(stations: Iterable[AnnotatedStation]) -> int:
    return max((station.total_traffic for station in stations), default=0)


__all__ = [
    "AnnotatedStation",
    "compute_station_traffic",
    "count_arrivals",
    "count_departures",
    "max_traffic",
]
