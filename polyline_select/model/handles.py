"""Records for handles, the moving marker and resolved nearest points."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from polyline_select.geometry import Point


class HandleRole(Enum):
    START = "start"
    END = "end"


@dataclass(frozen=True)
class NearestPoint:
    """A point resolved onto the polyline.

    ``offset`` is the clamped parameter along segment
    ``(segment_start_index, segment_end_index)``; ``distance`` is the planar
    distance from the query point.
    """

    position: Point
    segment_start_index: int
    segment_end_index: int
    offset: float = 0.0
    distance: float = 0.0


@dataclass
class Handle:
    """A fixed selection endpoint and the segment it was last resolved onto."""

    position: Point
    segment_start_index: int
    segment_end_index: int
    offset: float = 0.0

    @classmethod
    def from_candidate(cls, candidate: NearestPoint) -> "Handle":
        return cls(
            position=candidate.position,
            segment_start_index=candidate.segment_start_index,
            segment_end_index=candidate.segment_end_index,
            offset=candidate.offset,
        )

    def move_to(self, candidate: NearestPoint) -> None:
        self.position = candidate.position
        self.segment_start_index = candidate.segment_start_index
        self.segment_end_index = candidate.segment_end_index
        self.offset = candidate.offset

    def order_key(self) -> tuple[int, float]:
        return (self.segment_start_index, self.offset)


@dataclass
class MovingMarker:
    """Transient pointer-tracking marker shown until both handles exist."""

    position: Point
    segment_start_index: int = 0
    segment_end_index: int = 1
    offset: float = 0.0
    visible: bool = True

    def follow(self, candidate: NearestPoint) -> None:
        self.position = candidate.position
        self.segment_start_index = candidate.segment_start_index
        self.segment_end_index = candidate.segment_end_index
        self.offset = candidate.offset

    def as_candidate(self) -> NearestPoint:
        return NearestPoint(
            position=self.position,
            segment_start_index=self.segment_start_index,
            segment_end_index=self.segment_end_index,
            offset=self.offset,
        )
