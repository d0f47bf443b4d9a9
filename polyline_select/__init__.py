"""Pick a contiguous stretch of a polyline between two draggable handles."""
from __future__ import annotations

__version__ = "0.3.0"
