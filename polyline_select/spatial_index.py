"""Bounding-box index over the segments of one polyline."""
from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

import numpy as np

from polyline_select.errors import IndexNotBuiltError, InvalidPolylineError
from polyline_select.geometry import Bounds, Point

logger = logging.getLogger(__name__)

_TARGET_CELLS = 64


class SegmentIndex:
    """Uniform-grid index of segment boxes.

    Segment ``i`` joins vertices ``i`` and ``i + 1``. The index is a snapshot of
    one polyline; a changed polyline needs a fresh :meth:`build`.
    """

    def __init__(self) -> None:
        self._boxes: np.ndarray | None = None
        self._grid: Dict[Tuple[int, int], List[int]] = {}
        self._origin: Tuple[float, float] | None = None
        self._cell_size: float | None = None

    @property
    def is_built(self) -> bool:
        return self._boxes is not None

    @property
    def segment_count(self) -> int:
        return 0 if self._boxes is None else int(self._boxes.shape[0])

    def build(self, polyline: Sequence[Point]) -> None:
        if len(polyline) < 2:
            raise InvalidPolylineError(
                f"A polyline needs at least two vertices, got {len(polyline)}."
            )

        coords = np.asarray(polyline, dtype=float).reshape(-1, 2)
        starts = coords[:-1]
        ends = coords[1:]
        boxes = np.column_stack(
            (
                np.minimum(starts[:, 0], ends[:, 0]),
                np.minimum(starts[:, 1], ends[:, 1]),
                np.maximum(starts[:, 0], ends[:, 0]),
                np.maximum(starts[:, 1], ends[:, 1]),
            )
        )

        self.clear()
        self._boxes = boxes

        min_x = float(boxes[:, 0].min())
        min_y = float(boxes[:, 1].min())
        span = max(float(boxes[:, 2].max()) - min_x, float(boxes[:, 3].max()) - min_y)
        if span > 0:
            cell_size = span / _TARGET_CELLS
            self._origin = (min_x, min_y)
            self._cell_size = cell_size
            for index, (bx0, by0, bx1, by1) in enumerate(boxes.tolist()):
                gx0, gy0 = self._cell(bx0, by0)
                gx1, gy1 = self._cell(bx1, by1)
                for gx in range(gx0, gx1 + 1):
                    for gy in range(gy0, gy1 + 1):
                        self._grid.setdefault((gx, gy), []).append(index)

        logger.debug(
            "SegmentIndex built: segments=%d cells=%d cell_size=%s",
            len(boxes),
            len(self._grid),
            self._cell_size,
        )

    def query(self, box: Bounds) -> list[int]:
        """Start indices of all segments whose box intersects ``box``, ascending."""
        if self._boxes is None:
            raise IndexNotBuiltError("Segment index has not been built.")

        qx0, qy0, qx1, qy1 = box
        if self._cell_size is None:
            candidates = np.arange(len(self._boxes))
        else:
            gx0, gy0 = self._cell(qx0, qy0)
            gx1, gy1 = self._cell(qx1, qy1)
            cell_count = (gx1 - gx0 + 1) * (gy1 - gy0 + 1)
            if cell_count > len(self._boxes):
                candidates = np.arange(len(self._boxes))
            else:
                found: set[int] = set()
                for gx in range(gx0, gx1 + 1):
                    for gy in range(gy0, gy1 + 1):
                        found.update(self._grid.get((gx, gy), ()))
                if not found:
                    return []
                candidates = np.fromiter(sorted(found), dtype=int, count=len(found))

        boxes = self._boxes[candidates]
        mask = (
            (boxes[:, 2] >= qx0)
            & (boxes[:, 0] <= qx1)
            & (boxes[:, 3] >= qy0)
            & (boxes[:, 1] <= qy1)
        )
        return [int(index) for index in candidates[mask]]

    def clear(self) -> None:
        self._boxes = None
        self._grid = {}
        self._origin = None
        self._cell_size = None

    def _cell(self, x: float, y: float) -> Tuple[int, int]:
        ox, oy = self._origin
        cell = self._cell_size
        return int((x - ox) // cell), int((y - oy) // cell)
