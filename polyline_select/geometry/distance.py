"""Distance strategies used for distance walks along the polyline."""
from __future__ import annotations

import math
from typing import Callable

from polyline_select.geometry import Point

EARTH_RADIUS_M = 6378137.0

DistanceStrategy = Callable[[Point, Point], float]


def haversine_distance(a: Point, b: Point) -> float:
    """Great-circle distance in metres between two ``(lng, lat)`` coordinates."""
    lng1, lat1 = math.radians(a[0]), math.radians(a[1])
    lng2, lat2 = math.radians(b[0]), math.radians(b[1])
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def planar_distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])
