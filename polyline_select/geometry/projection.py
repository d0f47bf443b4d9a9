"""Projection strategies mapping coordinates to view pixel space."""
from __future__ import annotations

from dataclasses import dataclass, replace
import math
from typing import Protocol, Tuple, runtime_checkable

from polyline_select.geometry import Point
from polyline_select.geometry.distance import EARTH_RADIUS_M


@dataclass(frozen=True)
class ViewContext:
    """Snapshot of the host view delivered with every pan/zoom/resize."""

    center: Point
    zoom: float
    size: Tuple[int, int] | None = None

    def zoomed(self, zoom: float) -> "ViewContext":
        return replace(self, zoom=zoom)


@runtime_checkable
class Projection(Protocol):
    def project(self, coord: Point, zoom: float) -> Point:
        ...

    def unproject(self, point: Point, zoom: float) -> Point:
        ...


class SphericalMercator:
    """EPSG:3857 pixel space with 256 px tiles, y growing southwards."""

    MAX_LATITUDE = 85.0511287798
    TILE_SIZE = 256.0

    def __init__(self, radius: float = EARTH_RADIUS_M) -> None:
        self._radius = radius
        self._scale_factor = 0.5 / (math.pi * radius)

    def _scale(self, zoom: float) -> float:
        return self.TILE_SIZE * math.pow(2.0, zoom)

    def project(self, coord: Point, zoom: float) -> Point:
        lng, lat = coord
        lat = max(-self.MAX_LATITUDE, min(self.MAX_LATITUDE, lat))
        x = self._radius * math.radians(lng)
        sin_lat = math.sin(math.radians(lat))
        y = self._radius * math.log((1 + sin_lat) / (1 - sin_lat)) / 2
        scale = self._scale(zoom)
        return (
            scale * (self._scale_factor * x + 0.5),
            scale * (-self._scale_factor * y + 0.5),
        )

    def unproject(self, point: Point, zoom: float) -> Point:
        scale = self._scale(zoom)
        x = (point[0] / scale - 0.5) / self._scale_factor
        y = (point[1] / scale - 0.5) / -self._scale_factor
        lng = math.degrees(x / self._radius)
        lat = math.degrees(2 * math.atan(math.exp(y / self._radius)) - math.pi / 2)
        return (lng, lat)


class PlanarProjection:
    """Coordinates are already planar; one unit spans ``2**zoom`` pixels."""

    def project(self, coord: Point, zoom: float) -> Point:
        scale = math.pow(2.0, zoom)
        return (coord[0] * scale, coord[1] * scale)

    def unproject(self, point: Point, zoom: float) -> Point:
        scale = math.pow(2.0, zoom)
        return (point[0] / scale, point[1] / scale)
