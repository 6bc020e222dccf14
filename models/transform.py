# models/transform.py
from __future__ import annotations

import numpy as np

from .curve import as_point


class AffineTransform:
    """World <-> pixel mapping for a view with uniform scale.

    ``scale`` is pixels per world unit and ``origin`` the world coordinate
    shown at pixel (0, 0). With ``flip_y`` the pixel y axis grows downwards,
    as on a screen.
    """

    def __init__(self, scale: float = 1.0, origin=(0.0, 0.0), flip_y: bool = True):
        if not scale > 0:
            raise ValueError(f"scale must be positive, got {scale!r}")
        self.scale = float(scale)
        self.origin = as_point(origin)
        self.flip_y = bool(flip_y)

    def pixel_from_world(self, point) -> np.ndarray:
        d = (as_point(point) - self.origin) * self.scale
        if self.flip_y:
            d[1] = -d[1]
        return d

    def world_from_pixel(self, pixel) -> np.ndarray:
        d = as_point(pixel) / self.scale
        if self.flip_y:
            d[1] = -d[1]
        return d + self.origin
