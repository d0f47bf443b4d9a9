"""Shared segment helpers for hit-testing and distance walks."""
from __future__ import annotations

from typing import Tuple


Point = Tuple[float, float]
Bounds = Tuple[float, float, float, float]


def segment_bounds(start: Point, end: Point) -> Bounds:
    """Axis-aligned box ``(min_x, min_y, max_x, max_y)`` of a segment."""
    sx, sy = start
    ex, ey = end
    return (min(sx, ex), min(sy, ey), max(sx, ex), max(sy, ey))


def segment_parameter(point: Point, start: Point, end: Point) -> float:
    """Return the perpendicular foot of ``point`` on ``start``-``end`` as t in [0, 1]."""
    px, py = point
    sx, sy = start
    ex, ey = end
    vx = ex - sx
    vy = ey - sy
    if vx == 0 and vy == 0:
        return 0.0
    t = ((px - sx) * vx + (py - sy) * vy) / (vx * vx + vy * vy)
    return max(0.0, min(1.0, t))


def interpolate(start: Point, end: Point, t: float) -> Point:
    if t <= 0.0:
        return (start[0], start[1])
    if t >= 1.0:
        return (end[0], end[1])
    return (start[0] + (end[0] - start[0]) * t, start[1] + (end[1] - start[1]) * t)


def closest_point_on_segment(point: Point, start: Point, end: Point) -> Point:
    return interpolate(start, end, segment_parameter(point, start, end))


def point_segment_distance_sq(point: Point, start: Point, end: Point) -> float:
    proj_x, proj_y = closest_point_on_segment(point, start, end)
    dx = point[0] - proj_x
    dy = point[1] - proj_y
    return dx * dx + dy * dy


def point_segment_distance(point: Point, start: Point, end: Point) -> float:
    """Planar distance from ``point`` to the clamped closest point on the segment."""
    return point_segment_distance_sq(point, start, end) ** 0.5


def boxes_intersect(a: Bounds, b: Bounds) -> bool:
    return not (a[2] < b[0] or a[0] > b[2] or a[3] < b[1] or a[1] > b[3])
