"""
Custom ViewBox feeding pointer input to the curve editor.

This module provides a PyQtGraph ViewBox that:
- Translates hover, drag and click events into editor PointerEvents
- Falls back to the default pan/zoom behaviour whenever the editor does not
  consume a gesture
- Acts as the world <-> pixel coordinate transform the hit-tester needs
"""

import numpy as np
import pyqtgraph as pg
from PySide6 import QtCore

from viewmodel.logging_helpers import safe_call
from viewmodel.pointer import PointerEvent, PointerEventType

try:
    LeftButton = QtCore.Qt.MouseButton.LeftButton
except AttributeError:
    LeftButton = QtCore.Qt.LeftButton

_MODIFIER_FLAGS = (
    ("Shift", QtCore.Qt.KeyboardModifier.ShiftModifier),
    ("Ctrl", QtCore.Qt.KeyboardModifier.ControlModifier),
    ("Alt", QtCore.Qt.KeyboardModifier.AltModifier),
    ("Meta", QtCore.Qt.KeyboardModifier.MetaModifier),
)


def modifier_names(modifiers) -> frozenset:
    """Map a Qt modifier flag set to the names used by editor conditions."""
    return frozenset(name for name, flag in _MODIFIER_FLAGS if modifiers & flag)


class CurveViewBox(pg.ViewBox):
    """
    ViewBox that routes left-button gestures to a curve editor view model.

    The view model must provide ``on_pointer_event(PointerEvent) -> bool`` and
    ``clear_hover()``.
    Pixel coordinates are scene coordinates of the plot's graphics scene.
    """

    def __init__(self, viewmodel=None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.viewmodel = viewmodel
        self.setAspectLocked(True)
        # True while a drag gesture belongs to the editor
        self._editing = False
        # True while a pan/zoom drag owns the view
        self._panning = False

    def set_viewmodel(self, vm):
        self.viewmodel = vm

    # ---------------------
    # Coordinate transform
    # ---------------------
    def pixel_from_world(self, point):
        p = self.mapViewToScene(QtCore.QPointF(float(point[0]), float(point[1])))
        return np.array([p.x(), p.y()], dtype=float)

    def world_from_pixel(self, pixel):
        p = self.mapSceneToView(QtCore.QPointF(float(pixel[0]), float(pixel[1])))
        return np.array([p.x(), p.y()], dtype=float)

    # ---------------------
    # Event translation
    # ---------------------
    def _dispatch(self, kind, scene_pos, modifiers=None) -> bool:
        if self.viewmodel is None:
            return False
        pixel = (float(scene_pos.x()), float(scene_pos.y()))
        event = PointerEvent(
            type=kind,
            coordinate=self.world_from_pixel(pixel),
            pixel=pixel,
            modifiers=modifier_names(modifiers) if modifiers is not None else frozenset(),
            interacting=self._panning,
        )
        return bool(safe_call(self.viewmodel.on_pointer_event, event, default=False,
                              context=f"pointer {kind.value}", vm=self.viewmodel))

    def hoverEvent(self, ev):
        if ev.isExit():
            # pointer left the plot: drop the hover marker
            if self.viewmodel is not None:
                safe_call(self.viewmodel.clear_hover, context="pointer exit", vm=self.viewmodel)
            return
        self._dispatch(PointerEventType.MOVE, ev.scenePos(), ev.modifiers())

    def mouseClickEvent(self, ev):
        if ev.button() == LeftButton and not ev.double():
            if self._dispatch(PointerEventType.CLICK, ev.scenePos(), ev.modifiers()):
                ev.accept()
                return
        super().mouseClickEvent(ev)

    def mouseDragEvent(self, ev, axis=None):
        if ev.button() == LeftButton:
            if ev.isStart():
                self._editing = self._dispatch(PointerEventType.DOWN, ev.buttonDownScenePos(), ev.modifiers())

            if self._editing:
                ev.accept()
                self._dispatch(PointerEventType.DRAG, ev.scenePos(), ev.modifiers())
                if ev.isFinish():
                    self._dispatch(PointerEventType.UP, ev.scenePos(), ev.modifiers())
                    self._editing = False
                return

        # Default behavior (pan / zoom) when the editor did not claim the gesture
        self._panning = not ev.isFinish()
        super().mouseDragEvent(ev, axis=axis)

    def wheelEvent(self, ev, axis=None):
        # Keep the view fixed while a curve is being dragged
        if self._editing:
            ev.accept()
            return
        super().wheelEvent(ev, axis=axis)
