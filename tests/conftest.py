from __future__ import annotations

import pytest

from bikeflow.rendering.markers import Marker


class RecordingSurface:
    """MarkerSurface that records every operation it receives."""

    def __init__(self) -> None:
        self.ops: list[tuple[str, str]] = []
        self.positions: dict[str, tuple[float, float]] = {}

    def create(self, marker: Marker) -> None:
        self.ops.append(("create", marker.short_name))

    def update(self, marker: Marker) -> None:
        self.ops.append(("update", marker.short_name))

    def remove(self, short_name: str) -> None:
        self.ops.append(("remove", short_name))
        self.positions.pop(short_name, None)

    def move(self, marker: Marker) -> None:
        self.ops.append(("move", marker.short_name))
        self.positions[marker.short_name] = (marker.x, marker.y)

    def count(self, kind: str) -> int:
        return sum(1 for op, _ in self.ops if op == kind)


@pytest.fixture()
def surface() -> RecordingSurface:
    return RecordingSurface()
