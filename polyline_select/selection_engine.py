"""Selection state machine: two handles, a moving marker and the derived selection."""
from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

from PyQt5 import QtCore

from polyline_select.config import SelectConfig
from polyline_select.errors import (
    InvalidPolylineError,
    NegativeDistanceError,
    SessionNotActiveError,
)
from polyline_select.geometry import (
    Point,
    boxes_intersect,
    interpolate,
    point_segment_distance,
    segment_parameter,
)
from polyline_select.geometry.ops import GeometryOps
from polyline_select.geometry.projection import ViewContext
from polyline_select.model.handles import Handle, HandleRole, MovingMarker, NearestPoint
from polyline_select.model.selection import Selection
from polyline_select.model.session import SelectionSession, SelectionState
from polyline_select.spatial_index import SegmentIndex
from polyline_select.tolerance import ToleranceCalculator

logger = logging.getLogger(__name__)


class SelectionEngine(QtCore.QObject):
    """Resolves pointer input onto a polyline and keeps the selection consistent.

    Signals carry plain values: handle positions for ``selectionStarted`` and
    ``selectionEnded``, the full coordinate list for ``selectionChanged`` and the
    :class:`MovingMarker` for ``movingMarkerMoved``. ``navigationLocked`` asks
    the host to stop (True) or resume (False) its own map dragging.
    """

    selectionStarted = QtCore.pyqtSignal(object)
    selectionEnded = QtCore.pyqtSignal(object)
    selectionChanged = QtCore.pyqtSignal(object)
    movingMarkerMoved = QtCore.pyqtSignal(object)
    navigationLocked = QtCore.pyqtSignal(bool)

    def __init__(
        self,
        config: SelectConfig | None = None,
        ops: GeometryOps | None = None,
        parent: QtCore.QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._config = config or SelectConfig()
        self._ops = ops or GeometryOps()
        self._index = SegmentIndex()
        self._tolerance = ToleranceCalculator(self._ops)
        self._session: SelectionSession | None = None
        self._drag_timer = QtCore.QTimer(self)
        self._drag_timer.setSingleShot(True)
        self._drag_timer.setInterval(int(self._config.drag_idle_ms))
        self._drag_timer.timeout.connect(self._on_drag_idle)

    @property
    def config(self) -> SelectConfig:
        return self._config

    @property
    def ops(self) -> GeometryOps:
        return self._ops

    @property
    def state(self) -> SelectionState:
        if self._session is None:
            return SelectionState.IDLE
        return self._session.state()

    @property
    def is_enabled(self) -> bool:
        return self._session is not None

    @property
    def start_handle(self) -> Handle | None:
        return None if self._session is None else self._session.start

    @property
    def end_handle(self) -> Handle | None:
        return None if self._session is None else self._session.end

    @property
    def moving_marker(self) -> MovingMarker | None:
        return None if self._session is None else self._session.moving_marker

    @property
    def selection(self) -> Selection | None:
        return None if self._session is None else self._session.selection

    @property
    def is_dragging(self) -> bool:
        return self._session is not None and self._session.dragging is not None

    def dragging_role(self) -> HandleRole | None:
        if self._session is None or self._session.dragging is None:
            return None
        return self._session.role_of(self._session.dragging)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------
    def enable(self, polyline: Sequence[Point], view: ViewContext) -> None:
        if len(polyline) < 2:
            raise InvalidPolylineError(
                f"A polyline needs at least two vertices, got {len(polyline)}."
            )
        try:
            vertices = [(float(x), float(y)) for x, y in polyline]
        except (TypeError, ValueError) as exc:
            raise InvalidPolylineError(f"Polyline vertices must be (x, y) pairs: {exc}") from exc
        if self._session is not None:
            self.disable()

        self._index.build(vertices)
        self._session = SelectionSession(
            polyline=vertices,
            view=view,
            moving_marker=MovingMarker(position=vertices[0]),
        )
        self._tolerance.recompute(view, self._config.pixel_radius)
        logger.debug("Selection enabled on polyline with %d vertices", len(vertices))
        self.movingMarkerMoved.emit(self._session.moving_marker)

    def disable(self) -> None:
        if self._session is None:
            return
        self.reset()
        self._index.clear()
        self._tolerance.clear()
        self._session = None
        logger.debug("Selection disabled")

    def update_view(self, view: ViewContext) -> None:
        session = self._require_session()
        session.view = view
        self._tolerance.recompute(view, self._config.pixel_radius)

    def reset(self) -> None:
        session = self._require_session()
        if session.dragging is not None:
            self._finish_drag(recompute=False)
        session.clear_handles()
        logger.debug("Selection reset")
        self.movingMarkerMoved.emit(session.moving_marker)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_selection(self) -> List[Point] | None:
        if self._session is None or self._session.selection is None:
            return None
        return list(self._session.selection.coordinates)

    def to_geojson(self) -> dict[str, object] | None:
        if self._session is None or self._session.selection is None:
            return None
        return self._session.selection.to_geojson()

    def nearest_point(self, pointer: Point) -> NearestPoint | None:
        """Closest point on the polyline within the pointer tolerance, or None.

        Equidistant candidates resolve to the lowest segment index.
        """
        session = self._require_session()
        candidates = self._index.query(self._tolerance.box_around(pointer))
        if not candidates:
            return None

        polyline = session.polyline
        if len(candidates) == 1:
            best = candidates[0]
            best_distance = point_segment_distance(
                pointer, polyline[best], polyline[best + 1]
            )
        else:
            best_distance, best = min(
                (
                    point_segment_distance(pointer, polyline[index], polyline[index + 1]),
                    index,
                )
                for index in candidates
            )

        start, end = polyline[best], polyline[best + 1]
        offset = segment_parameter(pointer, start, end)
        return NearestPoint(
            position=interpolate(start, end, offset),
            segment_start_index=best,
            segment_end_index=best + 1,
            offset=offset,
            distance=best_distance,
        )

    def handle_at(self, pointer: Point) -> HandleRole | None:
        session = self._require_session()
        box = self._tolerance.box_around(pointer)
        for role in (HandleRole.START, HandleRole.END):
            handle = session.handle(role)
            if handle is None:
                continue
            hx, hy = handle.position
            if boxes_intersect(box, (hx, hy, hx, hy)):
                return role
        return None

    def point_at_distance(self, m: float) -> Point:
        """Point ``m`` distance units along the polyline from its first vertex."""
        position, _ = self._walk_to_distance(self._require_session(), m)
        return position

    # ------------------------------------------------------------------
    # Handle placement
    # ------------------------------------------------------------------
    def place_point(self, candidate: NearestPoint) -> bool:
        session = self._require_session()
        if session.start is None:
            session.start = Handle.from_candidate(candidate)
            logger.debug(
                "Start handle placed at %s on segment %d",
                candidate.position,
                candidate.segment_start_index,
            )
            self.selectionStarted.emit(candidate.position)
            return True
        if session.end is None:
            session.end = Handle.from_candidate(candidate)
            session.moving_marker.visible = False
            logger.debug(
                "End handle placed at %s on segment %d",
                candidate.position,
                candidate.segment_start_index,
            )
            self.movingMarkerMoved.emit(session.moving_marker)
            self.selectionEnded.emit(candidate.position)
            self.recompute_selection()
            return True
        return False

    def select_by_distance(self, start_m: float, end_m: float) -> None:
        session = self._require_session()
        if not (math.isfinite(start_m) and math.isfinite(end_m)):
            raise NegativeDistanceError(
                f"Distance marks must be finite (start={start_m}, end={end_m})."
            )
        if start_m < 0 or end_m < 0:
            raise NegativeDistanceError(
                "Can't use negative distance values for distance selection "
                f"(start={start_m}, end={end_m})."
            )

        self.reset()
        candidates = [self._resolve_distance(session, m) for m in (start_m, end_m)]
        for candidate in candidates:
            self.place_point(candidate)

    def normalize_order(self) -> bool:
        """Swap handle roles so the start handle precedes the end handle."""
        session = self._require_session()
        if session.start is None or session.end is None:
            return False
        if session.start.order_key() <= session.end.order_key():
            return False
        session.start, session.end = session.end, session.start
        logger.debug("Handle roles swapped to keep start before end")
        return True

    def recompute_selection(self) -> Selection | None:
        session = self._require_session()
        self.normalize_order()
        start, end = session.start, session.end
        if start is None or end is None:
            return None

        first_vertex = start.segment_end_index
        last_vertex = end.segment_start_index
        coordinates = [start.position]
        coordinates.extend(session.polyline[first_vertex : last_vertex + 1])
        coordinates.append(end.position)

        if session.selection is None:
            session.selection = Selection(coordinates, first_vertex, last_vertex)
        else:
            session.selection.update(coordinates, first_vertex, last_vertex)
        self.selectionChanged.emit(list(session.selection.coordinates))
        return session.selection

    # ------------------------------------------------------------------
    # Pointer interaction
    # ------------------------------------------------------------------
    def track_pointer(self, pointer: Point) -> NearestPoint | None:
        session = self._require_session()
        if session.dragging is not None or session.has_both_handles:
            return None
        candidate = self.nearest_point(pointer)
        if candidate is not None:
            session.moving_marker.follow(candidate)
            self.movingMarkerMoved.emit(session.moving_marker)
        return candidate

    def click_layer(self, pointer: Point) -> bool:
        candidate = self.nearest_point(pointer)
        if candidate is None:
            logger.debug("Layer click at %s has no segment in range", pointer)
            return False
        return self.place_point(candidate)

    def click_map(self, pointer: Point) -> bool:
        session = self._require_session()
        if session.end is not None:
            return False
        view = session.view
        px, py = self._ops.project(pointer, view)
        mx, my = self._ops.project(session.moving_marker.position, view)
        if math.hypot(px - mx, py - my) > self._config.click_radius:
            return False
        candidate = self.nearest_point(session.moving_marker.position)
        if candidate is None:
            candidate = session.moving_marker.as_candidate()
        return self.place_point(candidate)

    def click_moving_marker(self) -> bool:
        session = self._require_session()
        return self.place_point(session.moving_marker.as_candidate())

    def begin_drag(self, role: HandleRole) -> bool:
        session = self._require_session()
        handle = session.handle(role)
        if handle is None:
            return False
        if session.dragging is handle:
            return True
        session.dragging = handle
        logger.debug("Drag started on %s handle", role.value)
        self.navigationLocked.emit(True)
        return True

    def drag(self, role: HandleRole, pointer: Point) -> NearestPoint | None:
        """Move the dragged handle towards ``pointer``.

        ``role`` only picks the handle when no drag is active yet; once a drag
        has started the same handle keeps moving even if roles get swapped.
        """
        session = self._require_session()
        if session.dragging is None and not self.begin_drag(role):
            return None

        candidate = self.nearest_point(pointer)
        if candidate is not None:
            session.dragging.move_to(candidate)
        if session.has_both_handles:
            self.recompute_selection()
        self._drag_timer.start()
        return candidate

    def end_drag(self) -> bool:
        session = self._require_session()
        if session.dragging is None:
            return False
        self._finish_drag(recompute=True)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _finish_drag(self, *, recompute: bool) -> None:
        session = self._session
        self._drag_timer.stop()
        session.dragging = None
        logger.debug("Drag finished")
        self.navigationLocked.emit(False)
        if recompute and session.has_both_handles:
            self.recompute_selection()

    def _on_drag_idle(self) -> None:
        if self._session is not None and self._session.dragging is not None:
            logger.debug("Drag released after %d ms without movement", self._drag_timer.interval())
            self._finish_drag(recompute=True)

    def _require_session(self) -> SelectionSession:
        if self._session is None:
            raise SessionNotActiveError("Selection is not enabled on a polyline.")
        return self._session

    def _walk_to_distance(self, session: SelectionSession, m: float) -> Tuple[Point, int]:
        """Walk the segments to mark ``m``; returns the point and its segment index."""
        polyline = session.polyline
        count = len(polyline)
        dist = 0.0
        index = 1
        while index < count:
            segment_length = self._ops.distance(polyline[index - 1], polyline[index])
            if dist + segment_length <= m:
                dist += segment_length
                index += 1
            else:
                break

        if index == count:
            return polyline[-1], count - 2
        if dist == m:
            return polyline[index - 1], index - 1

        start, end = polyline[index - 1], polyline[index]
        position = self._ops.point_at_distance_on_segment(
            start, end, m - dist, segment_length, session.view
        )
        return position, index - 1

    def _resolve_distance(self, session: SelectionSession, m: float) -> NearestPoint:
        """Resolve mark ``m`` to a handle candidate.

        The walked segment wins ties against ``nearest_point`` so a mark on a
        self-touching polyline (a closed ring's last vertex) stays where the
        walk put it.
        """
        position, segment = self._walk_to_distance(session, m)
        start, end = session.polyline[segment], session.polyline[segment + 1]
        walked_distance = point_segment_distance(position, start, end)
        candidate = self.nearest_point(position)
        if candidate is not None and candidate.distance < walked_distance:
            return candidate
        offset = segment_parameter(position, start, end)
        return NearestPoint(
            position=interpolate(start, end, offset),
            segment_start_index=segment,
            segment_end_index=segment + 1,
            offset=offset,
            distance=walked_distance,
        )
