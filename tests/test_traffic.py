from __future__ import annotations

from datetime import datetime

from bikeflow.data.models import Station, Trip
from bikeflow.logic.time_filter import filter_trips_by_time
from bikeflow.logic.traffic import AnnotatedStation, compute_station_traffic, max_traffic

STATIONS = [
    Station(short_name="A", lat=42.0, lon=-71.0),
    Station(short_name="B", lat=42.1, lon=-71.1),
]


def _trip(start_id: str, end_id: str, start: str = "08:00", end: str = "08:10") -> Trip:
    return Trip(
        start_station_id=start_id,
        end_station_id=end_id,
        started_at=datetime.fromisoformat(f"2024-03-01 {start}"),
        ended_at=datetime.fromisoformat(f"2024-03-01 {end}"),
    )


def _by_name(stations: list[AnnotatedStation]) -> dict[str, AnnotatedStation]:
    return {s.short_name: s for s in stations}


def test_every_station_appears_once_even_without_traffic() -> None:
    stations = STATIONS + [Station(short_name="C", lat=42.2, lon=-71.2)]

    annotated = compute_station_traffic(stations, [_trip("A", "B")])

    assert [s.short_name for s in annotated] == ["A", "B", "C"]
    assert annotated[2].arrivals == 0
    assert annotated[2].departures == 0
    assert annotated[2].total_traffic == 0


def test_counts_and_total() -> None:
    trips = [_trip("A", "B"), _trip("A", "B"), _trip("B", "A"), _trip("A", "A")]

    annotated = _by_name(compute_station_traffic(STATIONS, trips))

    assert annotated["A"].departures == 3
    assert annotated["A"].arrivals == 2
    assert annotated["A"].total_traffic == 5
    assert annotated["B"].departures == 1
    assert annotated["B"].arrivals == 2
    assert annotated["B"].total_traffic == 3


def test_unknown_stations_are_dropped_but_known_endpoint_counts() -> None:
    trips = [_trip("A", "Z9"), _trip("Z9", "B"), _trip("Y1", "Z9")]

    annotated = compute_station_traffic(STATIONS, trips)

    assert len(annotated) == 2
    assert sum(s.total_traffic for s in annotated) == 2
    assert _by_name(annotated)["A"].departures == 1
    assert _by_name(annotated)["B"].arrivals == 1


def test_conservation_over_filtered_subsets() -> None:
    trips = [
        _trip("A", "B", "08:00", "08:10"),
        _trip("B", "A", "20:00", "20:05"),
        _trip("A", "Z9", "08:30", "09:00"),
        _trip("Q", "Z9", "08:30", "09:00"),
    ]
    known = {s.short_name for s in STATIONS}

    for cursor in (-1, 0, 480, 540, 1200, 1439):
        subset = filter_trips_by_time(trips, cursor)
        expected = sum((t.start_station_id in known) + (t.end_station_id in known) for t in subset)
        assert sum(s.total_traffic for s in compute_station_traffic(STATIONS, subset)) == expected


def test_inputs_are_not_mutated() -> None:
    stations = list(STATIONS)
    trips = [_trip("A", "B")]

    annotated = compute_station_traffic(stations, trips)

    assert stations == STATIONS
    assert not hasattr(stations[0], "arrivals")
    assert annotated[0].short_name == "A"


def test_zero_stations() -> None:
    assert compute_station_traffic([], [_trip("A", "B")]) == []
    assert max_traffic([]) == 0


def test_max_traffic() -> None:
    annotated = compute_station_traffic(STATIONS, [_trip("A", "B"), _trip("A", "A")])

    assert max_traffic(annotated) == 3


def test_station_metadata_is_carried_through() -> None:
    stations = [Station(short_name="A", lat=42.0, lon=-71.0, extra={"name": "Central Sq", "capacity": 19})]

    annotated = compute_station_traffic(stations, [_trip("A", "B")])

    assert annotated[0].extra["name"] == "Central Sq"
    assert annotated[0].extra["capacity"] == 19
    assert dict(compute_station_traffic(STATIONS, [])[0].extra) == {}
