from __future__ import annotations

import math

import pytest

from polyline_select.geometry import (
    boxes_intersect,
    closest_point_on_segment,
    point_segment_distance,
    segment_bounds,
    segment_parameter,
)
from polyline_select.geometry.distance import haversine_distance, planar_distance
from polyline_select.geometry.ops import GeometryOps
from polyline_select.geometry.projection import PlanarProjection, SphericalMercator, ViewContext


def test_segment_bounds_orders_axes():
    assert segment_bounds((5.0, -1.0), (2.0, 3.0)) == (2.0, -1.0, 5.0, 3.0)


def test_closest_point_projects_perpendicular():
    assert closest_point_on_segment((5.0, 3.0), (0.0, 0.0), (10.0, 0.0)) == (5.0, 0.0)


def test_closest_point_clamps_to_segment_ends():
    assert closest_point_on_segment((-4.0, 2.0), (0.0, 0.0), (10.0, 0.0)) == (0.0, 0.0)
    assert closest_point_on_segment((14.0, -2.0), (0.0, 0.0), (10.0, 0.0)) == (10.0, 0.0)
    assert segment_parameter((14.0, -2.0), (0.0, 0.0), (10.0, 0.0)) == 1.0


def test_degenerate_segment_resolves_to_its_start():
    assert segment_parameter((3.0, 4.0), (1.0, 1.0), (1.0, 1.0)) == 0.0
    assert point_segment_distance((4.0, 5.0), (1.0, 1.0), (1.0, 1.0)) == pytest.approx(5.0)


def test_point_segment_distance_uses_clamped_point():
    assert point_segment_distance((13.0, 4.0), (0.0, 0.0), (10.0, 0.0)) == pytest.approx(5.0)


def test_boxes_intersect_is_inclusive():
    assert boxes_intersect((0.0, 0.0, 1.0, 1.0), (1.0, 1.0, 2.0, 2.0))
    assert not boxes_intersect((0.0, 0.0, 1.0, 1.0), (1.1, 0.0, 2.0, 1.0))


def test_haversine_one_degree_at_equator():
    expected = 2 * math.pi * 6378137.0 / 360
    assert haversine_distance((0.0, 0.0), (1.0, 0.0)) == pytest.approx(expected)


def test_planar_distance():
    assert planar_distance((0.0, 0.0), (3.0, 4.0)) == 5.0


def test_spherical_mercator_origin_and_inverse():
    mercator = SphericalMercator()
    assert mercator.project((0.0, 0.0), 0) == pytest.approx((128.0, 128.0))

    lng, lat = mercator.unproject(mercator.project((13.4, 52.5), 12), 12)
    assert lng == pytest.approx(13.4)
    assert lat == pytest.approx(52.5)


def test_planar_projection_scales_with_zoom():
    projection = PlanarProjection()
    assert projection.project((1.5, -2.0), 2) == (6.0, -8.0)
    assert projection.unproject((6.0, -8.0), 2) == (1.5, -2.0)


def test_point_at_distance_on_segment_interpolates_in_projected_space():
    ops = GeometryOps(planar_distance, PlanarProjection())
    view = ViewContext(center=(0.0, 0.0), zoom=0)

    point = ops.point_at_distance_on_segment((0.0, 0.0), (0.0, 10.0), 2.5, 10.0, view)

    assert point == (0.0, 2.5)


def test_point_at_distance_on_segment_returns_endpoints_at_boundaries():
    ops = GeometryOps()
    view = ViewContext(center=(0.0, 0.0), zoom=10)
    start, end = (10.0, 50.0), (10.1, 50.1)
    length = ops.distance(start, end)

    assert ops.point_at_distance_on_segment(start, end, 0.0, length, view) == start
    assert ops.point_at_distance_on_segment(start, end, length, length, view) == end


def test_geographic_midpoint_is_close_to_halfway():
    ops = GeometryOps()
    view = ViewContext(center=(0.0, 0.0), zoom=18)
    start, end = (0.0, 0.0), (0.01, 0.0)
    length = ops.distance(start, end)

    lng, lat = ops.point_at_distance_on_segment(start, end, length / 2, length, view)

    assert lng == pytest.approx(0.005)
    assert lat == pytest.approx(0.0, abs=1e-9)
