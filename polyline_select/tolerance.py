"""Pixel hit-radius to coordinate-space tolerance conversion."""
from __future__ import annotations

from dataclasses import dataclass
import logging

from polyline_select.errors import ToleranceNotComputedError
from polyline_select.geometry import Bounds, Point
from polyline_select.geometry.ops import GeometryOps
from polyline_select.geometry.projection import ViewContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tolerance:
    dlat: float
    dlng: float

    def box_around(self, point: Point) -> Bounds:
        x, y = point
        return (x - self.dlng, y - self.dlat, x + self.dlng, y + self.dlat)


class ToleranceCalculator:
    """Keeps the pointer tolerance in step with the current view.

    The pixel-to-coordinate ratio changes with every pan, zoom and resize, so
    callers must :meth:`recompute` on each of those events.
    """

    def __init__(self, ops: GeometryOps) -> None:
        self._ops = ops
        self._tolerance: Tolerance | None = None

    @property
    def tolerance(self) -> Tolerance | None:
        return self._tolerance

    def recompute(self, view: ViewContext, pixel_radius: float) -> Tolerance:
        center = view.center
        px, py = self._ops.project(center, view)
        shifted = self._ops.unproject((px + pixel_radius, py + pixel_radius), view)
        self._tolerance = Tolerance(
            dlat=abs(center[1] - shifted[1]),
            dlng=abs(center[0] - shifted[0]),
        )
        logger.debug(
            "Pointer tolerance recomputed at zoom %.2f radius %.1fpx: %s",
            view.zoom,
            pixel_radius,
            self._tolerance,
        )
        return self._tolerance

    def box_around(self, point: Point) -> Bounds:
        if self._tolerance is None:
            raise ToleranceNotComputedError("Pointer tolerance has not been computed.")
        return self._tolerance.box_around(point)

    def clear(self) -> None:
        self._tolerance = None
