# models/spatial_index.py
"""Bounding-box index over the curves of all registered chains.

Extents live in a contiguous numpy table so a range query is one vectorised
interval test; entries are tracked by identity. Removal moves the last row
into the freed slot, so entry order is not stable (callers sort).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from .curve import Curve
from .curve_chain import CurveChain
from .exceptions import IndexConsistencyViolation
from .extent import BoundingBox

logger = logging.getLogger(__name__)

_INITIAL_CAPACITY = 16


@dataclass(eq=False)
class IndexEntry:
    """One indexed curve: the chain it belongs to, the curve and its stored extent."""
    chain: CurveChain
    curve: Curve
    extent: BoundingBox

    @classmethod
    def for_curve(cls, chain: CurveChain, curve: Curve) -> "IndexEntry":
        return cls(chain=chain, curve=curve, extent=curve.extent())


class SpatialIndex:
    """Insert/remove/update/range-query over :class:`IndexEntry` extents."""

    def __init__(self):
        self._boxes = np.empty((_INITIAL_CAPACITY, 4), dtype=float)
        self._entries: List[IndexEntry] = []
        self._rows: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry) -> bool:
        row = self._rows.get(id(entry))
        return row is not None and self._entries[row] is entry

    def _row_of(self, entry: IndexEntry) -> int:
        row = self._rows.get(id(entry))
        if row is None or self._entries[row] is not entry:
            raise IndexConsistencyViolation(f"entry for {entry.curve!r} is not in the spatial index")
        return row

    def insert(self, entry: IndexEntry) -> None:
        if entry in self:
            raise IndexConsistencyViolation(f"entry for {entry.curve!r} is already indexed")
        row = len(self._entries)
        if row >= self._boxes.shape[0]:
            grown = np.empty((self._boxes.shape[0] * 2, 4), dtype=float)
            grown[:row] = self._boxes[:row]
            self._boxes = grown
        self._boxes[row] = entry.extent.as_tuple()
        self._entries.append(entry)
        self._rows[id(entry)] = row

    def remove(self, entry: IndexEntry) -> None:
        row = self._row_of(entry)
        last = len(self._entries) - 1
        if row != last:
            moved = self._entries[last]
            self._entries[row] = moved
            self._boxes[row] = self._boxes[last]
            self._rows[id(moved)] = row
        self._entries.pop()
        del self._rows[id(entry)]

    def update(self, entry: IndexEntry, new_extent: BoundingBox) -> None:
        """Re-register *entry* under *new_extent* (remove + reinsert)."""
        self.remove(entry)
        entry.extent = new_extent
        self.insert(entry)

    def query_extent(self, box: BoundingBox) -> List[IndexEntry]:
        """All entries whose stored extent intersects *box*."""
        n = len(self._entries)
        if n == 0:
            return []
        b = self._boxes[:n]
        mask = ((b[:, 0] <= box.max_x) & (box.min_x <= b[:, 2])
                & (b[:, 1] <= box.max_y) & (box.min_y <= b[:, 3]))
        return [self._entries[i] for i in np.flatnonzero(mask)]

    def query_all(self) -> List[IndexEntry]:
        return list(self._entries)

    def find(self, curve: Curve) -> Optional[IndexEntry]:
        """Linear scan for the entry holding *curve*."""
        for entry in self._entries:
            if entry.curve is curve:
                return entry
        return None

    def entries_for_chain(self, chain: CurveChain) -> List[IndexEntry]:
        return [entry for entry in self._entries if entry.chain is chain]

    def clear(self) -> None:
        self._boxes = np.empty((_INITIAL_CAPACITY, 4), dtype=float)
        self._entries = []
        self._rows = {}
