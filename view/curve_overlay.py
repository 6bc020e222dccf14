# view/curve_overlay.py
"""PyQtGraph overlay drawing chains, their handles and the hover marker.

Implements the overlay collaborator used by the edit session
(show/move/remove marker, add/remove handle visual) on top of a ViewBox.
"""
import numpy as np
import pyqtgraph as pg

from view.constants import (
    ANCHOR_COLOR,
    CONTROL_COLOR,
    CURVE_COLOR,
    CURVE_WIDTH,
    HANDLE_ARM_COLOR,
    MARKER_COLOR,
)


class CurveOverlay:
    def __init__(self, viewbox, marker_size=10, handle_size=7, curve_samples=32):
        self.viewbox = viewbox
        self.marker_size = marker_size
        self.handle_size = handle_size
        self.curve_samples = curve_samples

        self._curve_items = {}   # id(chain) -> (chain, PlotDataItem)
        self._handles = []       # handles currently shown, in insertion order

        self._arms = pg.PlotDataItem(pen=pg.mkPen(HANDLE_ARM_COLOR, width=1), connect="pairs")
        self._arms.setZValue(5)
        self._handle_scatter = pg.ScatterPlotItem(size=self.handle_size, pxMode=True)
        self._handle_scatter.setZValue(10)
        self.viewbox.addItem(self._arms)
        self.viewbox.addItem(self._handle_scatter)

    # --------------------------
    # Marker
    # --------------------------
    def show_marker(self, point):
        marker = pg.ScatterPlotItem(
            [float(point[0])], [float(point[1])],
            size=self.marker_size, pen=pg.mkPen(MARKER_COLOR, width=2), brush=None, pxMode=True,
        )
        marker.setZValue(20)
        self.viewbox.addItem(marker)
        return marker

    def move_marker(self, marker, point):
        marker.setData([float(point[0])], [float(point[1])])

    def remove_marker(self, marker):
        self.viewbox.removeItem(marker)

    # --------------------------
    # Handles
    # --------------------------
    def add_handle_visual(self, handle):
        if not any(h is handle for h in self._handles):
            self._handles.append(handle)
        self.refresh_handles()

    def remove_handle_visual(self, handle):
        self._handles = [h for h in self._handles if h is not handle]
        self.refresh_handles()

    def refresh_handles(self):
        spots = []
        arms = []
        for handle in self._handles:
            x, y = handle.position
            color = ANCHOR_COLOR if handle.is_anchor else CONTROL_COLOR
            spots.append({"pos": (x, y), "brush": pg.mkBrush(color),
                          "symbol": "s" if handle.is_anchor else "o"})
            if not handle.is_anchor:
                # arm from the handle to the anchor it belongs to
                anchor = handle.curve[0 if handle.point_index == 1 else 3]
                arms.extend([(x, y), tuple(anchor)])
        self._handle_scatter.setData(spots)
        if arms:
            pts = np.asarray(arms, dtype=float)
            self._arms.setData(pts[:, 0], pts[:, 1])
        else:
            self._arms.setData([], [])

    # --------------------------
    # Curves
    # --------------------------
    def set_chains(self, chains):
        wanted = {id(chain) for chain in chains}
        for key in list(self._curve_items):
            if key not in wanted:
                _, item = self._curve_items.pop(key)
                self.viewbox.removeItem(item)
        for chain in chains:
            self.refresh_chain(chain)

    def refresh_chain(self, chain):
        entry = self._curve_items.get(id(chain))
        if entry is None or entry[0] is not chain:
            item = pg.PlotDataItem(pen=pg.mkPen(CURVE_COLOR, width=CURVE_WIDTH))
            self.viewbox.addItem(item)
            self._curve_items[id(chain)] = (chain, item)
        else:
            item = entry[1]
        outline = chain.to_polyline(self.curve_samples)
        item.setData(outline[:, 0], outline[:, 1])
        self.refresh_handles()
