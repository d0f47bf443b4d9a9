"""Exceptions raised for precondition violations."""
from __future__ import annotations


class InvalidPolylineError(ValueError):
    """Raised when a polyline has fewer than two vertices."""


class NegativeDistanceError(ValueError):
    """Raised when a distance selection is requested with a negative mark."""


class IndexNotBuiltError(RuntimeError):
    """Raised when a segment index is queried before it is built or after clear()."""


class ToleranceNotComputedError(RuntimeError):
    """Raised when a tolerance box is requested before the view was measured."""


class SessionNotActiveError(RuntimeError):
    """Raised when the engine is used before a polyline is enabled."""
