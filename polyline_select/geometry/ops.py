"""Geometry operations bound to one distance and one projection strategy."""
from __future__ import annotations

from dataclasses import dataclass, field

from polyline_select.geometry import Point, interpolate
from polyline_select.geometry.distance import DistanceStrategy, haversine_distance
from polyline_select.geometry.projection import Projection, SphericalMercator, ViewContext


@dataclass(frozen=True)
class GeometryOps:
    """Distance and projection strategies, fixed for the lifetime of an engine.

    The defaults suit geographic ``(lng, lat)`` data: great-circle metres and
    web-mercator pixels. Pass ``planar_distance`` and ``PlanarProjection`` for
    data that is already in a flat coordinate system.
    """

    distance_strategy: DistanceStrategy = haversine_distance
    projection: Projection = field(default_factory=SphericalMercator)

    def distance(self, a: Point, b: Point) -> float:
        return self.distance_strategy(a, b)

    def project(self, coord: Point, view: ViewContext) -> Point:
        return self.projection.project(coord, view.zoom)

    def unproject(self, point: Point, view: ViewContext) -> Point:
        return self.projection.unproject(point, view.zoom)

    def point_at_distance_on_segment(
        self,
        start: Point,
        end: Point,
        m: float,
        segment_length: float,
        view: ViewContext,
    ) -> Point:
        """Point ``m`` distance units from ``start`` towards ``end``.

        Interpolation happens in projected space so that the step is linear on
        screen; the result is converted back to coordinates.
        """
        if segment_length <= 0 or m <= 0:
            return (start[0], start[1])
        if m >= segment_length:
            return (end[0], end[1])
        projected = interpolate(
            self.project(start, view), self.project(end, view), m / segment_length
        )
        return self.unproject(projected, view)
