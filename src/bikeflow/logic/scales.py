"""Size and color encodings derived from station traffic."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
import math
from typing import Iterable

from bikeflow.logic.time_filter import is_unfiltered
from bikeflow.logic.traffic import AnnotatedStation, max_traffic

RADIUS_RANGE_UNFILTERED = (0.0, 25.0)
RADIUS_RANGE_FILTERED = (3.0, 50.0)

FLOW_ARRIVALS = 0.0
FLOW_BALANCED = 0.5
FLOW_DEPARTURES = 1.0
FLOW_LEVELS = (FLOW_ARRIVALS, FLOW_BALANCED, FLOW_DEPARTURES)
FLOW_THRESHOLDS = (1 / 3, 2 / 3)


@dataclass(frozen=True)
class RadiusScale:
    """Square-root scale from [0, domain_max] onto (range_min, range_max)."""

    domain_max: float
    range_min: float
    range_max: float

    def __call__(self, traffic: float) -> float:
        fraction = math.sqrt(max(traffic, 0) / self.domain_max)
        return self.range_min + (self.range_max - self.range_min) * fraction


def radius_range(cursor: int) -> tuple[float, float]:
    """(0, 25) px without a time filter, (3, 50) px with one."""
    return RADIUS_RANGE_UNFILTERED if is_unfiltered(cursor) else RADIUS_RANGE_FILTERED


def radius_scale_for(stations: Iterable[AnnotatedStation], cursor: int) -> RadiusScale:
    range_min, range_max = radius_range(cursor)
    return RadiusScale(
        domain_max=max_traffic(stations) or 1,
        range_min=range_min,
        range_max=range_max,
    )


def quantize_flow(ratio: float) -> float:
    """Bucket a departure ratio; a ratio on a threshold goes to the upper bucket."""
    return FLOW_LEVELS[bisect_right(FLOW_THRESHOLDS, ratio)]


def station_flow(station: AnnotatedStation) -> float:
    if not station.total_traffic:
        return FLOW_BALANCED
    return quantize_flow(station.departures / station.total_traffic)


__all__ = [
    "FLOW_ARRIVALS",
    "FLOW_BALANCED",
    "FLOW_DEPARTURES",
    "RADIUS_RANGE_FILTERED",
    "RADIUS_RANGE_UNFILTERED",
    "RadiusScale",
    "quantize_flow",
    "radius_range",
    "radius_scale_for",
    "station_flow",
]
