"""
Tests for the JSON-backed editor configuration.
"""

import json
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dataio.configuration import DEFAULT_PIXEL_TOLERANCE, Config


def test_defaults():
    cfg = Config()
    assert cfg.pixel_tolerance == DEFAULT_PIXEL_TOLERANCE == 10.0
    assert cfg.delete_condition == "single_click"
    assert cfg.smooth_new_chains is False


def test_save_and_load_round_trip(tmp_path):
    cfg = Config(config_folder=str(tmp_path))
    cfg.pixel_tolerance = 14.5
    cfg.delete_condition = "alt_click"
    cfg.smooth_new_chains = True
    cfg.last_scene_file = "scenes/roads.yaml"
    cfg.save()

    saved = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))
    assert "config_folder" not in saved
    assert not (tmp_path / "settings.json.tmp").exists()

    loaded = Config.load(tmp_path / "settings.json")
    assert loaded.pixel_tolerance == 14.5
    assert loaded.delete_condition == "alt_click"
    assert loaded.smooth_new_chains is True
    assert loaded.last_scene_file == "scenes/roads.yaml"
    assert loaded.config_folder == str(tmp_path)


def test_load_missing_file_gives_defaults(tmp_path):
    cfg = Config.load(tmp_path / "nope.json")
    assert cfg.pixel_tolerance == DEFAULT_PIXEL_TOLERANCE
    assert cfg.config_path == tmp_path / "nope.json"


def test_load_corrupt_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    cfg = Config.load(path)
    assert cfg.pixel_tolerance == DEFAULT_PIXEL_TOLERANCE
    assert cfg.config_folder == str(tmp_path)


def test_validate_replaces_bad_values(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "pixel_tolerance": -3,
        "delete_condition": "triple_click",
        "curve_samples": 0,
    }), encoding="utf-8")
    cfg = Config.load(path)
    assert cfg.pixel_tolerance == DEFAULT_PIXEL_TOLERANCE
    assert cfg.delete_condition == "single_click"
    assert cfg.curve_samples == 2
