"""The derived sub-polyline between the two handles."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from polyline_select.geometry import Point


@dataclass(eq=False)
class Selection:
    """Ordered coordinates from the start handle to the end handle.

    The entity is created once per session and updated in place so consumers
    holding a reference keep seeing the current coordinates.
    """

    coordinates: List[Point] = field(default_factory=list)
    first_vertex_index: int = 0
    last_vertex_index: int = 0

    def update(self, coordinates: List[Point], first_vertex: int, last_vertex: int) -> None:
        self.coordinates[:] = coordinates
        self.first_vertex_index = first_vertex
        self.last_vertex_index = last_vertex

    def to_geojson(self) -> dict[str, object]:
        return {
            "type": "Feature",
            "properties": {
                "first_vertex_index": self.first_vertex_index,
                "last_vertex_index": self.last_vertex_index,
            },
            "geometry": {
                "type": "LineString",
                "coordinates": [[x, y] for x, y in self.coordinates],
            },
        }
