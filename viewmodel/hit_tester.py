# viewmodel/hit_tester.py
"""Pointer hit-testing against the indexed curves.

Candidates come from a world-space box around the pointer, are ranked by
world-space distance, and the winner is accepted only if it lies within the
pixel tolerance once both points are mapped to pixels. A control point (or
anchor) inside the tolerance beats a hit on the curve body.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from models import BoundingBox, Curve, CurveChain, CurvePoint, PointKind, SpatialIndex, as_point


@dataclass
class TargetPoint:
    chain: CurveChain
    curve: Curve
    point: np.ndarray
    kind: PointKind
    point_index: Optional[int]
    param: float

    @property
    def is_on_curve(self) -> bool:
        return self.kind is PointKind.CURVE

    @classmethod
    def from_hit(cls, chain: CurveChain, curve: Curve, hit: CurvePoint) -> "TargetPoint":
        return cls(chain=chain, curve=curve, point=np.array(hit.point, dtype=float),
                   kind=hit.kind, point_index=hit.index, param=float(hit.param))


def pixel_distance(a, b, transform) -> float:
    pa = np.asarray(transform.pixel_from_world(a), dtype=float)
    pb = np.asarray(transform.pixel_from_world(b), dtype=float)
    return float(np.hypot(*(pa - pb)))


def query_box(pointer, pixel_tolerance: float, transform) -> BoundingBox:
    """World-space box covering ``pointer ± pixel_tolerance`` pixels."""
    px = np.asarray(transform.pixel_from_world(pointer), dtype=float)
    tol = float(pixel_tolerance)
    corners = [transform.world_from_pixel(px + offset)
               for offset in ((-tol, -tol), (tol, -tol), (tol, tol), (-tol, tol))]
    return BoundingBox.from_points(corners)


class HitTester:
    def __init__(self, index: SpatialIndex):
        self.index = index

    def find_target(self, pointer, pixel_tolerance: float, transform) -> Optional[TargetPoint]:
        pointer = as_point(pointer)
        candidates = self.index.query_extent(query_box(pointer, pixel_tolerance, transform))
        if not candidates:
            return None

        ranked = sorted(((entry.curve.closest_point(pointer), entry) for entry in candidates),
                        key=lambda pair: pair[0].squared_distance)
        hit, entry = ranked[0]
        if pixel_distance(hit.point, pointer, transform) > pixel_tolerance:
            return None

        if hit.kind is PointKind.CURVE:
            control = entry.curve.closest_control_point(pointer)
            if pixel_distance(control.point, pointer, transform) <= pixel_tolerance:
                hit = control
        return TargetPoint.from_hit(entry.chain, entry.curve, hit)
