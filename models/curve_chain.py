# models/curve_chain.py
"""Ordered chains of cubic curves joined at shared anchors.

The chain owns its curves and is the single source of truth for their order;
a curve's predecessor/successor is simply the curve before/after it here.
Editable point markers (:class:`Handle`) are exposed as views onto the curves
and observers are told synchronously when handles appear or disappear.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .curve import Curve, PointKind, as_point, kind_for_index
from .exceptions import InvalidParameter, UnsupportedGeometry
from .extent import BoundingBox

logger = logging.getLogger(__name__)

HandleCallback = Callable[["Handle"], None]

# Shared anchors further apart than this are rejected when building a chain.
JOINT_TOLERANCE = 1e-9


class Handle:
    """Editable marker for one anchor or control handle of a chain.

    Shared anchors get a single handle, tagged with the right-hand curve and
    point index 0; the chain's final anchor is tagged ``(last curve, 3)``.
    """

    def __init__(self, chain: "CurveChain", curve: Curve, point_index: int):
        self.chain = chain
        self.curve = curve
        self.point_index = point_index

    def __repr__(self):
        x, y = self.position
        return f"Handle({self.kind.value}, curve={self.curve_index}, index={self.point_index}, at=({x:g}, {y:g}))"

    @property
    def kind(self) -> PointKind:
        return kind_for_index(self.point_index)

    @property
    def is_anchor(self) -> bool:
        return self.kind is PointKind.ANCHOR

    @property
    def curve_index(self) -> int:
        return self.chain.index_of(self.curve)

    @property
    def position(self) -> np.ndarray:
        return self.curve[self.point_index]

    def move_to(self, point) -> None:
        self.curve.set_control_point(self.point_index, point)


@dataclass
class ChainEdit:
    """Curves that left the chain, entered it, or changed shape in one edit."""
    removed: List[Curve] = field(default_factory=list)
    added: List[Curve] = field(default_factory=list)
    changed: List[Curve] = field(default_factory=list)


class CurveChain:
    """An open chain of cubic Bézier curves sharing their joints."""

    def __init__(self, curves: Sequence[Curve]):
        curves = list(curves)
        if not curves:
            raise ValueError("a curve chain needs at least one curve")
        for curve in curves:
            if curve.chain is not None:
                raise ValueError(f"{curve!r} already belongs to a chain")
        for left, right in zip(curves, curves[1:]):
            if not np.allclose(left.p3, right.p0, rtol=0.0, atol=JOINT_TOLERANCE):
                raise ValueError(f"curves do not share a joint: {left.p3} != {right.p0}")
            right._points[0] = left._points[3]

        self._curves: List[Curve] = []
        self._positions: Dict[int, int] = {}
        self._listeners: Dict[int, Tuple[Optional[HandleCallback], Optional[HandleCallback]]] = {}
        self._next_token = 0
        self._handles: List[Handle] = []
        self._set_curves(curves)
        self._handles = self._build_handles({})

    def __repr__(self):
        return f"CurveChain({len(self._curves)} curves)"

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_control_points(cls, segments) -> "CurveChain":
        return cls([Curve(seg) for seg in segments])

    @classmethod
    def from_line_geometry(cls, points, smooth: bool = False) -> "CurveChain":
        """Build one cubic per consecutive pair of line vertices.

        Handles sit at a third and two thirds of each chord, or follow
        Catmull-Rom tangents when *smooth* is set. Repeated vertices are
        collapsed.
        """
        pts = [as_point(p) for p in points]
        if not pts:
            raise UnsupportedGeometry("a line needs at least two distinct points")
        distinct = [pts[0]]
        for p in pts[1:]:
            if not np.array_equal(p, distinct[-1]):
                distinct.append(p)
        if len(distinct) < 2:
            raise UnsupportedGeometry("a line needs at least two distinct points")

        n = len(distinct)
        segments = []
        for i in range(n - 1):
            a, b = distinct[i], distinct[i + 1]
            if smooth:
                before = distinct[i - 1] if i > 0 else a
                after = distinct[i + 2] if i < n - 2 else b
                c1 = a + (b - before) / 6.0
                c2 = b - (after - a) / 6.0
            else:
                c1 = a + (b - a) / 3.0
                c2 = a + (b - a) * (2.0 / 3.0)
            segments.append([a, c1, c2, b])
        return cls.from_control_points(segments)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def curves(self) -> Tuple[Curve, ...]:
        return tuple(self._curves)

    @property
    def handles(self) -> Tuple[Handle, ...]:
        return tuple(self._handles)

    def __len__(self) -> int:
        return len(self._curves)

    def __iter__(self) -> Iterator[Curve]:
        return iter(list(self._curves))

    def __contains__(self, curve) -> bool:
        i = self._positions.get(id(curve))
        return i is not None and self._curves[i] is curve

    def index_of(self, curve: Curve) -> int:
        i = self._positions.get(id(curve))
        if i is None or self._curves[i] is not curve:
            raise ValueError(f"{curve!r} is not part of this chain")
        return i

    def predecessor_of(self, curve: Curve) -> Optional[Curve]:
        i = self.index_of(curve)
        return self._curves[i - 1] if i > 0 else None

    def successor_of(self, curve: Curve) -> Optional[Curve]:
        i = self.index_of(curve)
        return self._curves[i + 1] if i + 1 < len(self._curves) else None

    def handle_for(self, curve: Curve, point_index: int) -> Optional[Handle]:
        for handle in self._handles:
            if handle.curve is curve and handle.point_index == point_index:
                return handle
        return None

    def anchors(self) -> np.ndarray:
        """Anchor positions in chain order, shape (len + 1, 2)."""
        return np.array([c._points[0] for c in self._curves] + [self._curves[-1]._points[3]])

    def extent(self) -> BoundingBox:
        box = self._curves[0].extent()
        for curve in self._curves[1:]:
            box = box.union(curve.extent())
        return box

    def to_polyline(self, samples_per_curve: int = 32) -> np.ndarray:
        """Sampled outline of the whole chain for drawing, shape (N, 2)."""
        samples_per_curve = max(int(samples_per_curve), 2)
        ts = np.linspace(0.0, 1.0, samples_per_curve)
        parts = [self._curves[0].points_at(ts)]
        for curve in self._curves[1:]:
            parts.append(curve.points_at(ts)[1:])
        return np.vstack(parts)

    # ------------------------------------------------------------------
    # Handle observers
    # ------------------------------------------------------------------
    def subscribe(self, on_add: Optional[HandleCallback] = None,
                  on_remove: Optional[HandleCallback] = None) -> int:
        """Register callbacks for handle additions/removals; returns a token."""
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = (on_add, on_remove)
        return token

    def unsubscribe(self, token: int) -> None:
        self._listeners.pop(token, None)

    def _notify(self, removed: List[Handle], added: List[Handle]) -> None:
        for on_add, on_remove in list(self._listeners.values()):
            if on_remove is not None:
                for handle in removed:
                    on_remove(handle)
            if on_add is not None:
                for handle in added:
                    on_add(handle)

    # ------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------
    def _set_curves(self, curves: List[Curve]) -> None:
        self._curves = curves
        self._positions = {id(c): i for i, c in enumerate(curves)}
        for curve in curves:
            curve._attach(self)

    def _build_handles(self, reuse: Dict[Tuple[int, int], Handle]) -> List[Handle]:
        handles = []

        def make(curve, index):
            handle = reuse.get((id(curve), index))
            if handle is None or handle.curve is not curve:
                handle = Handle(self, curve, index)
            handles.append(handle)

        for curve in self._curves:
            make(curve, 0)
            make(curve, 1)
            make(curve, 2)
        make(self._curves[-1], 3)
        return handles

    def _replace(self, start: int, stop: int, new_curves: List[Curve]) -> None:
        old_curves = self._curves[start:stop]
        old_handles = list(self._handles)
        for curve in old_curves:
            curve._detach()
        self._set_curves(self._curves[:start] + list(new_curves) + self._curves[stop:])

        reuse = {(id(h.curve), h.point_index): h for h in old_handles}
        new_handles = self._build_handles(reuse)
        kept = {id(h) for h in new_handles}
        previous = {id(h) for h in old_handles}
        removed = [h for h in old_handles if id(h) not in kept]
        added = [h for h in new_handles if id(h) not in previous]
        self._handles = new_handles
        self._notify(removed, added)

    def split_curve(self, curve: Curve, t: float) -> Tuple[Curve, Curve]:
        """Replace *curve* by its two de Casteljau halves at *t*.

        Raises :class:`InvalidParameter` without touching the chain when *t*
        is not strictly inside (0, 1).
        """
        i = self.index_of(curve)
        left, right = curve.split_at(t)
        self._replace(i, i + 1, [left, right])
        logger.debug("split curve %d at t=%.6f; chain now has %d curves", i, t, len(self._curves))
        return left, right

    def merge_at_joint(self, joint_index: int) -> ChainEdit:
        """Remove the interior anchor between curves ``joint_index - 1`` and ``joint_index``.

        The two incident curves are replaced by one keeping their outer
        handles: ``[left.p0, left.p1, right.p2, right.p3]``.
        """
        if not 0 < joint_index < len(self._curves):
            raise InvalidParameter(f"joint {joint_index} is not an interior anchor")
        left = self._curves[joint_index - 1]
        right = self._curves[joint_index]
        merged = Curve([left._points[0], left._points[1], right._points[2], right._points[3]])
        self._replace(joint_index - 1, joint_index + 1, [merged])
        logger.debug("merged curves at joint %d", joint_index)
        return ChainEdit(removed=[left, right], added=[merged])

    def remove_end_curve(self, at_start: bool) -> ChainEdit:
        """Drop the first or last curve, removing that end anchor."""
        if len(self._curves) < 2:
            raise InvalidParameter("cannot remove the only curve of a chain")
        i = 0 if at_start else len(self._curves) - 1
        curve = self._curves[i]
        self._replace(i, i + 1, [])
        return ChainEdit(removed=[curve])

    def retract_handle(self, curve: Curve, index: int) -> ChainEdit:
        """Reset a control handle to its straight-line position on the chord."""
        if index not in (1, 2):
            raise InvalidParameter(f"only control handles (1, 2) can be retracted, got {index!r}")
        self.index_of(curve)
        p0, p3 = curve._points[0], curve._points[3]
        curve.set_control_point(index, p0 + (p3 - p0) * (index / 3.0))
        return ChainEdit(changed=[curve])

    def remove_point(self, curve: Curve, index: int) -> ChainEdit:
        """Delete the anchor or handle at *index* of *curve*, repairing the chain."""
        i = self.index_of(curve)
        if index in (1, 2):
            return self.retract_handle(curve, index)
        if index == 0:
            if i == 0:
                return self.remove_end_curve(at_start=True)
            return self.merge_at_joint(i)
        if index == 3:
            if i == len(self._curves) - 1:
                return self.remove_end_curve(at_start=False)
            return self.merge_at_joint(i + 1)
        raise InvalidParameter(f"control point index must be 0..3, got {index!r}")
