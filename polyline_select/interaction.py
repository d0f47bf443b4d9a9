"""Routing of host pointer and view events to the selection engine."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Callable, Dict

from polyline_select.geometry import Point
from polyline_select.geometry.projection import ViewContext
from polyline_select.selection_engine import SelectionEngine

logger = logging.getLogger(__name__)


class PointerEventKind(Enum):
    MOVE = "move"
    PRESS = "press"
    RELEASE = "release"
    CLICK = "click"
    LAYER_CLICK = "layer_click"
    MARKER_CLICK = "marker_click"
    VIEW_CHANGED = "view_changed"


@dataclass(frozen=True)
class PointerEvent:
    kind: PointerEventKind
    position: Point | None = None
    view: ViewContext | None = None


class SelectionInputRouter:
    """Dispatches host events to engine operations by event kind.

    Each handler returns True when the event was consumed, so hosts can skip
    their own default handling (for example map panning on a handle press).
    """

    def __init__(self, engine: SelectionEngine) -> None:
        self._engine = engine
        self._handlers: Dict[PointerEventKind, Callable[[PointerEvent], bool]] = {
            PointerEventKind.MOVE: self._on_move,
            PointerEventKind.PRESS: self._on_press,
            PointerEventKind.RELEASE: self._on_release,
            PointerEventKind.CLICK: self._on_click,
            PointerEventKind.LAYER_CLICK: self._on_layer_click,
            PointerEventKind.MARKER_CLICK: self._on_marker_click,
            PointerEventKind.VIEW_CHANGED: self._on_view_changed,
        }

    def dispatch(self, event: PointerEvent) -> bool:
        if not self._engine.is_enabled:
            return False
        handler = self._handlers[event.kind]
        return handler(event)

    def _on_move(self, event: PointerEvent) -> bool:
        if event.position is None:
            return False
        role = self._engine.dragging_role()
        if role is not None:
            self._engine.drag(role, event.position)
            return True
        self._engine.track_pointer(event.position)
        return False

    def _on_press(self, event: PointerEvent) -> bool:
        if event.position is None:
            return False
        role = self._engine.handle_at(event.position)
        if role is None:
            return False
        return self._engine.begin_drag(role)

    def _on_release(self, event: PointerEvent) -> bool:
        return self._engine.end_drag()

    def _on_click(self, event: PointerEvent) -> bool:
        if event.position is None:
            return False
        return self._engine.click_map(event.position)

    def _on_layer_click(self, event: PointerEvent) -> bool:
        if event.position is None:
            return False
        return self._engine.click_layer(event.position)

    def _on_marker_click(self, event: PointerEvent) -> bool:
        return self._engine.click_moving_marker()

    def _on_view_changed(self, event: PointerEvent) -> bool:
        if event.view is None:
            logger.debug("View change without a view context ignored")
            return False
        self._engine.update_view(event.view)
        return False
