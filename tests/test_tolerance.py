from __future__ import annotations

import pytest

from polyline_select.errors import ToleranceNotComputedError
from polyline_select.geometry.distance import planar_distance
from polyline_select.geometry.ops import GeometryOps
from polyline_select.geometry.projection import PlanarProjection, ViewContext
from polyline_select.tolerance import Tolerance, ToleranceCalculator


def _planar_calculator() -> ToleranceCalculator:
    return ToleranceCalculator(GeometryOps(planar_distance, PlanarProjection()))


def test_planar_tolerance_tracks_zoom():
    calculator = _planar_calculator()
    view = ViewContext(center=(3.0, 4.0), zoom=0)

    assert calculator.recompute(view, 7.0) == Tolerance(dlat=7.0, dlng=7.0)
    assert calculator.recompute(view.zoomed(1), 7.0) == Tolerance(dlat=3.5, dlng=3.5)
    assert calculator.tolerance == Tolerance(dlat=3.5, dlng=3.5)


def test_box_around_uses_latest_tolerance():
    calculator = _planar_calculator()
    calculator.recompute(ViewContext(center=(0.0, 0.0), zoom=0), 2.0)

    assert calculator.box_around((10.0, 20.0)) == (8.0, 18.0, 12.0, 22.0)


def test_mercator_tolerance_at_equator():
    calculator = ToleranceCalculator(GeometryOps())

    tolerance = calculator.recompute(ViewContext(center=(0.0, 0.0), zoom=0), 7.0)

    assert tolerance.dlng == pytest.approx(7.0 * 360.0 / 256.0)
    assert 0 < tolerance.dlat < tolerance.dlng


def test_mercator_tolerance_shrinks_towards_poles():
    calculator = ToleranceCalculator(GeometryOps())

    equator = calculator.recompute(ViewContext(center=(0.0, 0.0), zoom=10), 7.0)
    north = calculator.recompute(ViewContext(center=(0.0, 60.0), zoom=10), 7.0)

    assert north.dlng == pytest.approx(equator.dlng)
    assert north.dlat < equator.dlat


def test_box_requires_recompute():
    calculator = _planar_calculator()
    with pytest.raises(ToleranceNotComputedError):
        calculator.box_around((0.0, 0.0))

    calculator.recompute(ViewContext(center=(0.0, 0.0), zoom=0), 1.0)
    calculator.clear()

    with pytest.raises(ToleranceNotComputedError):
        calculator.box_around((0.0, 0.0))
