# models/curve.py
"""Single cubic Bézier segment and its geometric queries.

A :class:`Curve` holds four control points ``[p0, p1, p2, p3]``: ``p0`` and
``p3`` are the anchors (shared with the neighbouring segments of a chain),
``p1`` and ``p2`` are the control handles. The curve keeps a weak reference to
the :class:`~models.curve_chain.CurveChain` that owns it; its predecessor and
successor are looked up through that chain by position, never stored.
"""
from __future__ import annotations

import logging
import weakref
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np
from scipy.optimize import minimize_scalar

from .exceptions import InvalidParameter
from .extent import BoundingBox

logger = logging.getLogger(__name__)

# Uniform samples used to bracket the closest parameter before refinement.
CLOSEST_POINT_SAMPLES = 33
# Absolute tolerance on the Bézier parameter for the bounded refinement.
CLOSEST_POINT_XATOL = 1e-10
# Closest-point parameters this near 0 or 1 are hits on the anchor itself.
ANCHOR_PARAM_EPS = 1e-6

ANCHOR_INDICES = (0, 3)
CONTROL_INDICES = (1, 2)


class PointKind(Enum):
    """What a picked point is: a shared endpoint, a handle, or the curve body."""
    ANCHOR = "anchor"
    CONTROL = "control"
    CURVE = "curve"


def kind_for_index(index: int) -> PointKind:
    return PointKind.ANCHOR if index in ANCHOR_INDICES else PointKind.CONTROL


def as_point(value) -> np.ndarray:
    """Coerce *value* to a finite float array of shape (2,)."""
    arr = np.asarray(value, dtype=float).reshape(-1)
    if arr.shape != (2,):
        raise ValueError(f"expected a 2D point, got {value!r}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"point coordinates must be finite, got {value!r}")
    return arr.copy()


@dataclass
class CurvePoint:
    """Result of a closest-point query on a curve.

    ``index`` is the control point index for anchor/control hits and ``None``
    for hits on the curve body. ``param`` is the Bézier parameter of the hit;
    control handles report ``index / 3``.
    """
    point: np.ndarray
    param: float
    squared_distance: float
    kind: PointKind
    index: Optional[int] = None


def _bernstein(ts: np.ndarray) -> np.ndarray:
    mt = 1.0 - ts
    return np.stack([mt ** 3, 3.0 * mt ** 2 * ts, 3.0 * mt * ts ** 2, ts ** 3], axis=-1)


def _lerp(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    return a + (b - a) * t


class Curve:
    """A cubic Bézier segment with four mutable control points."""

    def __init__(self, points):
        arr = np.asarray(points, dtype=float)
        if arr.shape != (4, 2):
            raise ValueError(f"a cubic curve needs 4 two-dimensional points, got shape {arr.shape}")
        if not np.all(np.isfinite(arr)):
            raise ValueError("control point coordinates must be finite")
        self._points = arr.copy()
        self._chain_ref = None

    def __repr__(self):
        pts = ", ".join(f"({x:g}, {y:g})" for x, y in self._points)
        return f"Curve([{pts}])"

    # ------------------------------------------------------------------
    # Control points
    # ------------------------------------------------------------------
    @property
    def points(self) -> np.ndarray:
        """Copy of the 4x2 control point array."""
        return self._points.copy()

    def __getitem__(self, index: int) -> np.ndarray:
        return self._points[index].copy()

    @property
    def p0(self) -> np.ndarray:
        return self._points[0].copy()

    @property
    def p1(self) -> np.ndarray:
        return self._points[1].copy()

    @property
    def p2(self) -> np.ndarray:
        return self._points[2].copy()

    @property
    def p3(self) -> np.ndarray:
        return self._points[3].copy()

    def set_control_point(self, index: int, point) -> None:
        """Move control point *index* in place.

        Moving an anchor also moves the matching anchor of the adjacent curve
        in the owning chain so the joint stays shared. The spatial index is
        not touched; callers re-register the extent afterwards.
        """
        if index not in (0, 1, 2, 3):
            raise InvalidParameter(f"control point index must be 0..3, got {index!r}")
        p = as_point(point)
        self._points[index] = p
        if index == 0:
            neighbour = self.predecessor()
            if neighbour is not None:
                neighbour._points[3] = p
        elif index == 3:
            neighbour = self.successor()
            if neighbour is not None:
                neighbour._points[0] = p

    # ------------------------------------------------------------------
    # Chain membership
    # ------------------------------------------------------------------
    @property
    def chain(self):
        if self._chain_ref is None:
            return None
        return self._chain_ref()

    def _attach(self, chain) -> None:
        self._chain_ref = weakref.ref(chain)

    def _detach(self) -> None:
        self._chain_ref = None

    def predecessor(self) -> Optional["Curve"]:
        chain = self.chain
        if chain is None:
            return None
        return chain.predecessor_of(self)

    def successor(self) -> Optional["Curve"]:
        chain = self.chain
        if chain is None:
            return None
        return chain.successor_of(self)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def extent(self) -> BoundingBox:
        """Bounding box of the control points (a hull of the curve)."""
        return BoundingBox.from_points(self._points)

    def point_at(self, t: float) -> np.ndarray:
        t = float(t)
        if not 0.0 <= t <= 1.0:
            raise InvalidParameter(f"Bézier parameter must lie in [0, 1], got {t}")
        return _bernstein(np.asarray(t)) @ self._points

    def points_at(self, ts) -> np.ndarray:
        """Evaluate the curve at every parameter in *ts*; returns an (N, 2) array."""
        ts = np.clip(np.asarray(ts, dtype=float).reshape(-1), 0.0, 1.0)
        return _bernstein(ts) @ self._points

    def _squared_distance_at(self, t: float, query: np.ndarray) -> float:
        p = _bernstein(np.asarray(min(max(t, 0.0), 1.0))) @ self._points
        d = p - query
        return float(d @ d)

    def closest_point(self, query) -> CurvePoint:
        """Closest point on the curve body to *query*.

        A uniform sampling picks the bracket around the best sample and a
        bounded Brent search refines the parameter inside it. Hits at either
        end are reported as anchor hits.
        """
        q = as_point(query)
        ts = np.linspace(0.0, 1.0, CLOSEST_POINT_SAMPLES)
        diff = self.points_at(ts) - q
        d2 = np.einsum("ij,ij->i", diff, diff)
        i = int(np.argmin(d2))
        best_t, best_d2 = float(ts[i]), float(d2[i])

        lo = float(ts[max(i - 1, 0)])
        hi = float(ts[min(i + 1, len(ts) - 1)])
        res = minimize_scalar(self._squared_distance_at, bounds=(lo, hi), args=(q,),
                              method="bounded", options={"xatol": CLOSEST_POINT_XATOL})
        if res.success and float(res.fun) < best_d2:
            best_t, best_d2 = float(res.x), float(res.fun)

        if best_t <= ANCHOR_PARAM_EPS or best_t >= 1.0 - ANCHOR_PARAM_EPS:
            index = 0 if best_t <= ANCHOR_PARAM_EPS else 3
            anchor = self._points[index].copy()
            d = anchor - q
            return CurvePoint(point=anchor, param=0.0 if index == 0 else 1.0,
                              squared_distance=float(d @ d), kind=PointKind.ANCHOR, index=index)

        return CurvePoint(point=self.point_at(best_t), param=best_t,
                          squared_distance=best_d2, kind=PointKind.CURVE)

    def closest_control_point(self, query) -> CurvePoint:
        """Nearest of the four control points; ties go to the lowest index."""
        q = as_point(query)
        diff = self._points - q
        d2 = np.einsum("ij,ij->i", diff, diff)
        i = int(np.argmin(d2))
        return CurvePoint(point=self._points[i].copy(), param=i / 3.0,
                          squared_distance=float(d2[i]), kind=kind_for_index(i), index=i)

    def split_at(self, t: float) -> Tuple["Curve", "Curve"]:
        """De Casteljau subdivision at *t*; both halves share ``point_at(t)``."""
        t = float(t)
        if not 0.0 < t < 1.0:
            raise InvalidParameter(f"split parameter must lie strictly inside (0, 1), got {t}")
        p0, p1, p2, p3 = self._points
        q0 = _lerp(p0, p1, t)
        q1 = _lerp(p1, p2, t)
        q2 = _lerp(p2, p3, t)
        r0 = _lerp(q0, q1, t)
        r1 = _lerp(q1, q2, t)
        s = _lerp(r0, r1, t)
        return Curve([p0, q0, r0, s]), Curve([s, r1, q2, p3])

    def copy(self) -> "Curve":
        """Detached copy with the same control points."""
        return Curve(self._points)
