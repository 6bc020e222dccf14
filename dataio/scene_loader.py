"""
Scene loading for the curve editor.

A scene is a YAML file listing features by geometry, GeoJSON style:

    name: Demo
    features:
      - type: LineString
        coordinates: [[0, 0], [1, 1], [2, 0]]
      - type: Point
        coordinates: [5, 5]

Every feature becomes a geometry variant from :mod:`models.geometry`; types
the editor cannot edit are returned as placeholders so registration can
report and skip them.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, List, Optional
import yaml

from models.geometry import Geometry, geometry_from_dict


def _parse_feature(item: Any) -> Geometry:
    """Parse one feature entry; malformed coordinates raise ValueError."""
    if not isinstance(item, dict):
        raise ValueError(f"feature must be a mapping, got {type(item).__name__}")
    geometry = item.get("geometry", item)
    try:
        return geometry_from_dict(geometry)
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid feature geometry: {e}")


def load_scene(path: Path) -> List[Geometry]:
    """
    Load the features of a YAML scene file.

    Args:
        path: Path to the YAML scene file

    Returns:
        List of geometry variants in file order

    Raises:
        FileNotFoundError: If the scene file doesn't exist
        ValueError: If the file is not a valid scene
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scene file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML scene: {e}")

    if not isinstance(data, dict):
        raise ValueError("Invalid scene: expected a mapping at the top level")
    features = data.get("features", [])
    if not isinstance(features, list):
        raise ValueError("Invalid scene: 'features' must be a list")

    return [_parse_feature(item) for item in features]


def get_default_scene_path() -> Optional[Path]:
    """Path of the bundled demo scene, if present."""
    repo_root = Path(__file__).resolve().parent.parent
    path = repo_root / "config" / "scenes" / "demo.yaml"
    return path if path.exists() else None
