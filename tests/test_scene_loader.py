#!/usr/bin/env python3
"""
Test script for YAML scene loading.
Tests parsing of features into geometry variants without requiring GUI.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
parent_dir = Path(__file__).parent.parent
sys.path.insert(0, str(parent_dir))

from dataio.scene_loader import get_default_scene_path, load_scene
from models import LineGeometry, PointGeometry, PolygonGeometry, UnknownGeometry


def write_scene(tmp_path, text):
    path = tmp_path / "scene.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_bundled_demo_scene():
    """The demo scene shipped in config/scenes loads and mixes geometry types."""
    print("=" * 60)
    print("Testing bundled demo scene...")
    print("=" * 60)

    path = get_default_scene_path()
    assert path is not None
    geometries = load_scene(path)
    kinds = [g.geometry_type for g in geometries]
    print(f"  ✓ Features: {kinds}")
    assert kinds.count("LineString") == 2
    assert "Point" in kinds and "Polygon" in kinds


def test_feature_variants(tmp_path):
    path = write_scene(tmp_path, """
features:
  - type: LineString
    coordinates: [[0, 0], [1, 2], [3, 1]]
  - geometry:
      type: Point
      coordinates: [4, 4]
  - type: Polygon
    coordinates: [[[0, 0], [1, 0], [1, 1], [0, 0]]]
  - type: MultiLineString
    coordinates: [[[0, 0], [1, 1]]]
""")
    line, point, polygon, other = load_scene(path)
    assert isinstance(line, LineGeometry)
    assert len(line.points) == 3
    assert tuple(line.points[1]) == (1.0, 2.0)
    assert isinstance(point, PointGeometry)
    assert isinstance(polygon, PolygonGeometry)
    assert len(polygon.rings[0]) == 4
    assert isinstance(other, UnknownGeometry)
    assert other.geometry_type == "MultiLineString"


def test_empty_scene(tmp_path):
    assert load_scene(write_scene(tmp_path, "name: nothing here\n")) == []


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_scene(tmp_path / "missing.yaml")


@pytest.mark.parametrize("text", [
    "- just\n- a list\n",
    "features: 3\n",
    "features:\n  - 12\n",
    "features:\n  - type: Point\n    coordinates: [1, 2, 3]\n",
    "features:\n  - type: LineString\n    coordinates: [[0, 0], [.nan, 1]]\n",
    "features: [unclosed\n",
])
def test_invalid_scenes_raise_value_error(tmp_path, text):
    with pytest.raises(ValueError):
        load_scene(write_scene(tmp_path, text))


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
