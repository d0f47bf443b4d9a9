"""Configuration helpers for selection settings persistence."""
from __future__ import annotations

from configparser import ConfigParser, Error
from dataclasses import dataclass, fields
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "polyline_select.ini"
_SECTION = "selection"


@dataclass
class SelectConfig:
    """Hit-testing and drag settings.

    ``line_weight`` is the rendered stroke width in pixels and
    ``line_tolerance`` the extra pixel slack around it.
    """

    line_weight: float = 4.0
    line_tolerance: float = 5.0
    drag_idle_ms: int = 750
    click_tolerance_factor: float = 2.0

    @property
    def pixel_radius(self) -> float:
        return self.line_weight * 0.5 + self.line_tolerance

    @property
    def click_radius(self) -> float:
        return self.line_tolerance * self.click_tolerance_factor


def config_path(directory: Optional[Path] = None) -> Path:
    return (directory or Path.cwd()) / CONFIG_FILENAME


def load_select_config(ini_path: Optional[Path]) -> SelectConfig:
    config = SelectConfig()
    if ini_path is None or not ini_path.exists():
        return config
    parser = ConfigParser()
    try:
        with ini_path.open("r", encoding="utf-8") as handle:
            parser.read_file(handle)
    except (OSError, Error):
        logger.warning("Could not read %s, using default selection settings", ini_path)
        return config
    if not parser.has_section(_SECTION):
        return config

    for item in fields(SelectConfig):
        raw = parser.get(_SECTION, item.name, fallback=None)
        if raw is None:
            continue
        convert = int if item.type in (int, "int") else float
        try:
            value = convert(raw)
        except ValueError:
            logger.warning("Ignoring invalid %s=%r in %s", item.name, raw, ini_path)
            continue
        if value < 0:
            logger.warning("Ignoring negative %s=%r in %s", item.name, raw, ini_path)
            continue
        setattr(config, item.name, value)
    return config


def save_select_config(config: SelectConfig, ini_path: Path) -> None:
    parser = ConfigParser()
    parser.optionxform = str
    if ini_path.exists():
        try:
            with ini_path.open("r", encoding="utf-8") as handle:
                parser.read_file(handle)
        except (OSError, Error):
            return
    parser[_SECTION] = {item.name: str(getattr(config, item.name)) for item in fields(config)}
    try:
        with ini_path.open("w", encoding="utf-8") as handle:
            parser.write(handle)
            handle.flush()
            os.fsync(handle.fileno())
    except OSError:
        return
