# models/extent.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box in world coordinates.

    Intervals are closed: boxes that only touch along an edge intersect.
    """
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_points(cls, points: Iterable) -> "BoundingBox":
        arr = np.asarray(list(points), dtype=float)
        if arr.size == 0:
            raise ValueError("cannot build a bounding box from no points")
        arr = arr.reshape(-1, 2)
        lo = arr.min(axis=0)
        hi = arr.max(axis=0)
        return cls(float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))

    def intersects(self, other: "BoundingBox") -> bool:
        return (self.min_x <= other.max_x and other.min_x <= self.max_x
                and self.min_y <= other.max_y and other.min_y <= self.max_y)

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(min(self.min_x, other.min_x), min(self.min_y, other.min_y),
                           max(self.max_x, other.max_x), max(self.max_y, other.max_y))

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)
