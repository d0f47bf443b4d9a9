from __future__ import annotations

from polyline_select.config import (
    CONFIG_FILENAME,
    SelectConfig,
    config_path,
    load_select_config,
    save_select_config,
)


def test_defaults_when_file_missing(tmp_path):
    config = load_select_config(tmp_path / "missing.ini")

    assert config == SelectConfig()
    assert config.pixel_radius == 7.0
    assert config.click_radius == 10.0


def test_loads_values_from_selection_section(tmp_path):
    ini_path = tmp_path / "select.ini"
    ini_path.write_text(
        "[selection]\nline_weight = 6\nline_tolerance = 3.5\ndrag_idle_ms = 400\n",
        encoding="utf-8",
    )

    config = load_select_config(ini_path)

    assert config.line_weight == 6.0
    assert config.line_tolerance == 3.5
    assert config.drag_idle_ms == 400
    assert isinstance(config.drag_idle_ms, int)
    assert config.pixel_radius == 6.5


def test_invalid_values_keep_defaults(tmp_path, caplog):
    ini_path = tmp_path / "select.ini"
    ini_path.write_text(
        "[selection]\nline_weight = wide\nline_tolerance = -2\ndrag_idle_ms = 100\n",
        encoding="utf-8",
    )

    config = load_select_config(ini_path)

    assert config.line_weight == SelectConfig.line_weight
    assert config.line_tolerance == SelectConfig.line_tolerance
    assert config.drag_idle_ms == 100
    assert "line_weight" in caplog.text


def test_unreadable_file_falls_back_to_defaults(tmp_path):
    ini_path = tmp_path / "select.ini"
    ini_path.write_text("line_weight = 6\n", encoding="utf-8")

    assert load_select_config(ini_path) == SelectConfig()


def test_save_preserves_other_sections(tmp_path):
    ini_path = config_path(tmp_path)
    ini_path.write_text("[colors]\nselection = #0ff\n", encoding="utf-8")

    save_select_config(SelectConfig(line_weight=8.0, drag_idle_ms=500), ini_path)

    assert ini_path.name == CONFIG_FILENAME
    assert "selection = #0ff" in ini_path.read_text(encoding="utf-8")
    loaded = load_select_config(ini_path)
    assert loaded.line_weight == 8.0
    assert loaded.drag_idle_ms == 500
