"""Session context for one active selection on one polyline."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from polyline_select.geometry import Point
from polyline_select.geometry.projection import ViewContext
from polyline_select.model.handles import Handle, HandleRole, MovingMarker
from polyline_select.model.selection import Selection


class SelectionState(Enum):
    IDLE = "idle"
    AWAITING_START = "awaiting_start"
    AWAITING_END = "awaiting_end"
    SELECTED = "selected"
    DRAGGING = "dragging"


@dataclass
class SelectionSession:
    """All mutable state of an enabled engine.

    The engine threads this value through its operations instead of keeping
    loose fields on itself; a new session is created on every enable.
    """

    polyline: List[Point]
    view: ViewContext
    moving_marker: MovingMarker
    start: Handle | None = None
    end: Handle | None = None
    selection: Selection | None = None
    dragging: Handle | None = None

    @property
    def has_both_handles(self) -> bool:
        return self.start is not None and self.end is not None

    def handle(self, role: HandleRole) -> Handle | None:
        return self.start if role is HandleRole.START else self.end

    def role_of(self, handle: Handle) -> HandleRole | None:
        if handle is self.start:
            return HandleRole.START
        if handle is self.end:
            return HandleRole.END
        return None

    def state(self) -> SelectionState:
        if self.dragging is not None:
            return SelectionState.DRAGGING
        if self.start is None:
            return SelectionState.AWAITING_START
        if self.end is None:
            return SelectionState.AWAITING_END
        return SelectionState.SELECTED

    def clear_handles(self) -> None:
        self.start = None
        self.end = None
        self.selection = None
        self.dragging = None
        self.moving_marker.position = self.polyline[0]
        self.moving_marker.segment_start_index = 0
        self.moving_marker.segment_end_index = 1
        self.moving_marker.offset = 0.0
        self.moving_marker.visible = True
