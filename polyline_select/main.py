"""Command line entry point: select a stretch of a GeoJSON line by distance."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import List, Optional

from polyline_select.config import load_select_config
from polyline_select.geometry import Point
from polyline_select.geometry.distance import planar_distance
from polyline_select.geometry.ops import GeometryOps
from polyline_select.geometry.projection import PlanarProjection, ViewContext
from polyline_select.selection_engine import SelectionEngine

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False, log_path: Optional[Path] = None) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_path is not None:
        handlers.append(logging.FileHandler(log_path, mode="a", encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )


def load_line_coordinates(path: Path) -> List[Point]:
    """Read LineString coordinates from a geometry, Feature or FeatureCollection."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"{path} is not a GeoJSON object.")
    if payload.get("type") == "FeatureCollection":
        features = payload.get("features") or []
        if not features:
            raise ValueError(f"{path} contains no features.")
        payload = features[0]
    if payload.get("type") == "Feature":
        payload = payload.get("geometry") or {}
    if payload.get("type") != "LineString":
        raise ValueError(f"{path} does not contain a LineString geometry.")
    return [(float(coord[0]), float(coord[1])) for coord in payload["coordinates"]]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Select the part of a GeoJSON LineString between two distance marks."
    )
    parser.add_argument("path", type=Path, help="GeoJSON file with a LineString")
    parser.add_argument("--start", type=float, required=True, help="start mark")
    parser.add_argument("--end", type=float, required=True, help="end mark")
    parser.add_argument("--config", type=Path, default=None, help="selection INI file")
    parser.add_argument("--zoom", type=float, default=18.0, help="view zoom level")
    parser.add_argument(
        "--planar",
        action="store_true",
        help="treat coordinates as planar units instead of longitude/latitude",
    )
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    config = load_select_config(args.config)
    ops = GeometryOps(planar_distance, PlanarProjection()) if args.planar else GeometryOps()

    try:
        coords = load_line_coordinates(args.path)
        engine = SelectionEngine(config=config, ops=ops)
        engine.enable(coords, ViewContext(center=coords[0] if coords else (0.0, 0.0), zoom=args.zoom))
        engine.select_by_distance(args.start, args.end)
    except (OSError, ValueError, KeyError) as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(json.dumps(engine.to_geojson()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
