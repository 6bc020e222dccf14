# models/__init__.py

"""Public API for the models package.

The models package holds the pure geometry of the editor; nothing here
imports Qt, so it can be used and tested headless.

Exports provided:
  - Curve, CurvePoint, PointKind - a single cubic Bézier and its query results
  - CurveChain, Handle, ChainEdit - ordered chains joined at shared anchors
  - BoundingBox - axis-aligned extents
  - SpatialIndex, IndexEntry - bounding-box index used for hit-testing
  - LineGeometry, PointGeometry, PolygonGeometry, UnknownGeometry,
    chain_from_geometry, geometry_from_dict - input geometry variants
  - AffineTransform - headless world <-> pixel mapping
  - CurveEditError, InvalidParameter, IndexConsistencyViolation,
    UnsupportedGeometry - error taxonomy
"""

from .exceptions import (
    CurveEditError,
    InvalidParameter,
    IndexConsistencyViolation,
    UnsupportedGeometry,
)
from .extent import BoundingBox
from .curve import Curve, CurvePoint, PointKind, as_point
from .curve_chain import CurveChain, Handle, ChainEdit
from .spatial_index import SpatialIndex, IndexEntry
from .geometry import (
    LineGeometry,
    PointGeometry,
    PolygonGeometry,
    UnknownGeometry,
    chain_from_geometry,
    geometry_from_dict,
)
from .transform import AffineTransform

__all__ = [
    "CurveEditError",
    "InvalidParameter",
    "IndexConsistencyViolation",
    "UnsupportedGeometry",
    "BoundingBox",
    "Curve",
    "CurvePoint",
    "PointKind",
    "as_point",
    "CurveChain",
    "Handle",
    "ChainEdit",
    "SpatialIndex",
    "IndexEntry",
    "LineGeometry",
    "PointGeometry",
    "PolygonGeometry",
    "UnknownGeometry",
    "chain_from_geometry",
    "geometry_from_dict",
    "AffineTransform",
]
