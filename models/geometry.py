# models/geometry.py
"""Input geometry variants accepted when registering editable features.

Only line geometry can become a :class:`~models.curve_chain.CurveChain`; the
other variants exist so callers can hand over whatever their feature source
holds and get a clean "unsupported" answer instead of a lookup failure.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

import numpy as np

from .curve import as_point
from .curve_chain import CurveChain
from .exceptions import UnsupportedGeometry


@dataclass
class LineGeometry:
    points: List[np.ndarray]
    geometry_type: str = field(default="LineString", init=False)

    def __post_init__(self):
        self.points = [as_point(p) for p in self.points]


@dataclass
class PointGeometry:
    point: np.ndarray
    geometry_type: str = field(default="Point", init=False)

    def __post_init__(self):
        self.point = as_point(self.point)


@dataclass
class PolygonGeometry:
    rings: List[List[np.ndarray]]
    geometry_type: str = field(default="Polygon", init=False)

    def __post_init__(self):
        self.rings = [[as_point(p) for p in ring] for ring in self.rings]


@dataclass
class UnknownGeometry:
    """Placeholder for a geometry type this package does not model."""
    type_name: str
    data: Any = None

    @property
    def geometry_type(self) -> str:
        return self.type_name


Geometry = Union[LineGeometry, PointGeometry, PolygonGeometry, UnknownGeometry]


def chain_from_geometry(geometry: Geometry, smooth: bool = False) -> CurveChain:
    """Convert *geometry* into an editable chain.

    Raises:
        UnsupportedGeometry: for anything other than a line with at least two
            distinct vertices.
    """
    if isinstance(geometry, LineGeometry):
        return CurveChain.from_line_geometry(geometry.points, smooth=smooth)
    type_name = getattr(geometry, "geometry_type", type(geometry).__name__)
    raise UnsupportedGeometry(f"cannot edit {type_name} geometry as a curve chain")


def geometry_from_dict(data: Dict[str, Any]) -> Geometry:
    """Build a geometry variant from a ``{"type": ..., "coordinates": ...}`` mapping."""
    if not isinstance(data, dict):
        raise ValueError(f"geometry must be a mapping, got {type(data).__name__}")
    type_name = str(data.get("type", ""))
    coords = data.get("coordinates")
    if type_name == "LineString":
        return LineGeometry(list(coords or []))
    if type_name == "Point":
        return PointGeometry(coords)
    if type_name == "Polygon":
        return PolygonGeometry([list(ring) for ring in (coords or [])])
    return UnknownGeometry(type_name or "<missing>", coords)
