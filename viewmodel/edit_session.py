# viewmodel/edit_session.py
"""Interaction state machine for editing registered curve chains.

States:
  - IDLE: nothing under the pointer, no marker shown.
  - HOVERING: a target is within tolerance; the marker sits on it.
  - DRAGGING: the hovered target is being dragged.

A drag that starts on the curve body splits the curve at the hit parameter on
its first step and continues as a drag of the new left half's nearest
control handle, so the curve bends at the picked point. Releasing re-indexes
the dragged curve and, for an anchor, the neighbour sharing it.

Everything runs synchronously on the caller's thread; the overlay and the
coordinate transform are duck-typed collaborators:

  overlay.show_marker(point) -> marker
  overlay.move_marker(marker, point)
  overlay.remove_marker(marker)
  overlay.add_handle_visual(handle)
  overlay.remove_handle_visual(handle)

  transform.pixel_from_world(point) -> pixel
  transform.world_from_pixel(pixel) -> point
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from models import (
    Curve,
    CurveChain,
    IndexConsistencyViolation,
    IndexEntry,
    InvalidParameter,
    PointKind,
    SpatialIndex,
    UnsupportedGeometry,
    chain_from_geometry,
)
from .hit_tester import HitTester, TargetPoint
from .logging_helpers import log_exception, log_message
from .pointer import DEFAULT_DELETE_CONDITION, Condition, PointerEvent, PointerEventType

DEFAULT_PIXEL_TOLERANCE = 10.0


class SessionState(Enum):
    IDLE = "idle"
    HOVERING = "hovering"
    DRAGGING = "dragging"


class EditSession:
    """Single live editing interaction over a set of curve chains."""

    def __init__(self, overlay=None, transform=None, pixel_tolerance: float = DEFAULT_PIXEL_TOLERANCE,
                 delete_condition: Optional[Condition] = None, vm=None):
        self.overlay = overlay
        self.transform = transform
        self.pixel_tolerance = pixel_tolerance
        self.delete_condition: Condition = delete_condition or DEFAULT_DELETE_CONDITION
        self.vm = vm

        self.index = SpatialIndex()
        self.hit_tester = HitTester(self.index)

        self._chains: List[CurveChain] = []
        self._subscriptions: Dict[int, int] = {}

        self._state = SessionState.IDLE
        self._target: Optional[TargetPoint] = None
        self._marker = None
        self._marker_position: Optional[np.ndarray] = None
        # on-curve drag that has not split its curve yet
        self._split_pending = False
        self._last_pixel: Optional[np.ndarray] = None

        self._on_state_change: Optional[Callable[[SessionState], None]] = None
        self._on_geometry_change: Optional[Callable[[CurveChain], None]] = None

    # ------------------------------------------------------------------
    # Properties and hooks
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def target(self) -> Optional[TargetPoint]:
        return self._target

    @property
    def marker(self):
        return self._marker

    @property
    def marker_position(self) -> Optional[np.ndarray]:
        return None if self._marker_position is None else self._marker_position.copy()

    @property
    def chains(self) -> Tuple[CurveChain, ...]:
        return tuple(self._chains)

    @property
    def pixel_tolerance(self) -> float:
        return self._pixel_tolerance

    @pixel_tolerance.setter
    def pixel_tolerance(self, value: float) -> None:
        value = float(value)
        if not value > 0:
            raise ValueError(f"pixel tolerance must be positive, got {value!r}")
        self._pixel_tolerance = value

    def set_on_state_change(self, callback: Optional[Callable[[SessionState], None]]) -> None:
        self._on_state_change = callback

    def set_on_geometry_change(self, callback: Optional[Callable[[CurveChain], None]]) -> None:
        self._on_geometry_change = callback

    def _set_state(self, state: SessionState) -> None:
        if state is self._state:
            return
        self._state = state
        if self._on_state_change is not None:
            self._on_state_change(state)

    def _geometry_changed(self, chain: CurveChain) -> None:
        if self._on_geometry_change is not None:
            self._on_geometry_change(chain)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def is_registered(self, chain: CurveChain) -> bool:
        return any(c is chain for c in self._chains)

    def register_chain(self, chain: CurveChain) -> None:
        """Index every curve of *chain* and mirror its handles in the overlay."""
        if self.is_registered(chain):
            raise ValueError(f"{chain!r} is already registered")
        entries = [IndexEntry.for_curve(chain, curve) for curve in chain.curves]
        for entry in entries:
            self.index.insert(entry)
        self._chains.append(chain)
        for handle in chain.handles:
            self._add_handle_visual(handle)
        self._subscriptions[id(chain)] = chain.subscribe(self._add_handle_visual, self._remove_handle_visual)
        log_message(f"Registered chain with {len(chain)} curves", vm=self.vm)
        self._geometry_changed(chain)

        # a pointer resting over the new chain should see a marker right away
        if self._last_pixel is not None and self.transform is not None \
                and self._state is not SessionState.DRAGGING:
            self._handle_pointer_at(self.transform.world_from_pixel(self._last_pixel))

    def register_geometry(self, geometry, smooth: bool = False) -> Optional[CurveChain]:
        """Build a chain from *geometry* and register it.

        Returns ``None`` (and changes nothing) for unsupported geometry.
        """
        try:
            chain = chain_from_geometry(geometry, smooth=smooth)
        except UnsupportedGeometry as exc:
            log_message(f"Skipped feature: {exc}", vm=self.vm)
            return None
        self.register_chain(chain)
        return chain

    def deregister_chain(self, chain: CurveChain) -> None:
        """Drop *chain*'s index entries and handle visuals."""
        if not self.is_registered(chain):
            raise ValueError(f"{chain!r} is not registered")
        if self._target is not None and (self._target.chain is chain or self._state is not SessionState.DRAGGING):
            self._reset()

        chain.unsubscribe(self._subscriptions.pop(id(chain)))
        for entry in self.index.entries_for_chain(chain):
            self.index.remove(entry)
        for handle in chain.handles:
            self._remove_handle_visual(handle)
        self._chains = [c for c in self._chains if c is not chain]
        log_message(f"Deregistered chain with {len(chain)} curves", vm=self.vm)

    # ------------------------------------------------------------------
    # Event entry point
    # ------------------------------------------------------------------
    def on_pointer_event(self, event: PointerEvent) -> bool:
        """Feed one pointer event through the state machine.

        Returns True when the event was consumed (a drag gesture or a
        deletion); False lets other interactions claim it.
        """
        if event.type is PointerEventType.MOVE and self._state is not SessionState.DRAGGING \
                and not event.interacting:
            self._last_pixel = event.pixel
            self._handle_pointer_at(event.coordinate)

        if self._state is SessionState.HOVERING and self.delete_condition(event):
            return self._remove_target()

        if event.type is PointerEventType.DOWN:
            return self._handle_down(event)
        if event.type is PointerEventType.DRAG:
            return self._handle_drag(event)
        if event.type is PointerEventType.UP:
            return self._handle_up(event)
        return False

    # ------------------------------------------------------------------
    # Hover
    # ------------------------------------------------------------------
    def _handle_pointer_at(self, coordinate) -> None:
        if self.transform is None:
            return
        try:
            target = self.hit_tester.find_target(coordinate, self._pixel_tolerance, self.transform)
        except Exception as exc:
            log_exception("Hit test failed", exc, vm=self.vm)
            target = None
        if target is None:
            self._reset()
            return
        self._target = target
        self._show_marker(target.point)
        self._set_state(SessionState.HOVERING)

    # ------------------------------------------------------------------
    # Drag
    # ------------------------------------------------------------------
    def _handle_down(self, event: PointerEvent) -> bool:
        if self._state is not SessionState.HOVERING or self._target is None:
            return False
        self._split_pending = self._target.is_on_curve
        self._set_state(SessionState.DRAGGING)
        return True

    def _handle_drag(self, event: PointerEvent) -> bool:
        if self._state is not SessionState.DRAGGING:
            return False
        coordinate = event.coordinate
        self._show_marker(coordinate)
        try:
            if self._split_pending:
                self._split_pending = False
                self._split_target(coordinate)
            target = self._target
            target.curve.set_control_point(target.point_index, coordinate)
            target.point = coordinate.copy()
        except IndexConsistencyViolation as exc:
            log_exception("Drag aborted: spatial index out of sync with chains", exc, vm=self.vm)
            self._reset()
            return True
        self._geometry_changed(target.chain)
        return True

    def _split_target(self, coordinate: np.ndarray) -> None:
        target = self._target
        chain = target.chain
        old_entry = self._entry_for(target.curve)
        try:
            left, right = chain.split_curve(target.curve, target.param)
        except InvalidParameter as exc:
            log_message(f"Split skipped ({exc}); dragging nearest control point instead", vm=self.vm)
            fallback = target.curve.closest_control_point(coordinate)
            self._target = TargetPoint.from_hit(chain, target.curve, fallback)
            return

        self.index.remove(old_entry)
        for half in (left, right):
            self.index.insert(IndexEntry.for_curve(chain, half))

        # bend the curve at the new joint through the left half's nearest handle
        distances = [float(np.hypot(*(left[i] - coordinate))) for i in (1, 2)]
        index = 1 if distances[0] < distances[1] else 2
        self._target = TargetPoint(chain=chain, curve=left, point=left[index],
                                   kind=PointKind.CONTROL, point_index=index, param=index / 3.0)

    def _handle_up(self, event: PointerEvent) -> bool:
        if self._state is not SessionState.DRAGGING:
            return False
        target = self._target
        curves = [target.curve]
        if target.point_index == 0:
            curves.append(target.curve.predecessor())
        elif target.point_index == 3:
            curves.append(target.curve.successor())
        # a lost entry for one curve must not skip the other
        for curve in curves:
            if curve is None:
                continue
            try:
                self._refresh_extent(curve)
            except IndexConsistencyViolation as exc:
                log_exception("Could not re-index dragged curve", exc, vm=self.vm)
        self._reset()
        return True

    def clear_hover(self) -> None:
        """Forget the pointer (it left the view); a drag in progress is kept."""
        self._last_pixel = None
        if self._state is not SessionState.DRAGGING:
            self._reset()

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------
    def _remove_target(self) -> bool:
        target = self._target
        if target is None or target.point_index is None:
            return False
        chain = target.chain
        try:
            entries = {id(curve): self._entry_for(curve) for curve in self._curves_touched_by_delete(target)}
        except IndexConsistencyViolation as exc:
            log_exception("Delete aborted: spatial index out of sync with chains", exc, vm=self.vm)
            self._reset()
            return True

        try:
            edit = chain.remove_point(target.curve, target.point_index)
        except InvalidParameter as exc:
            log_message(f"Cannot delete point: {exc}", vm=self.vm)
            return False

        for curve in edit.removed:
            self.index.remove(entries[id(curve)])
        for curve in edit.added:
            self.index.insert(IndexEntry.for_curve(chain, curve))
        for curve in edit.changed:
            self.index.update(entries[id(curve)], curve.extent())
        self._reset()
        kind = "anchor" if target.kind is PointKind.ANCHOR else "handle"
        log_message(f"Deleted {kind}; chain now has {len(chain)} curves", vm=self.vm)
        self._geometry_changed(chain)
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _curves_touched_by_delete(target: TargetPoint) -> List[Curve]:
        """Curves whose index entries a delete of *target* removes or updates."""
        curve = target.curve
        if target.point_index in (1, 2):
            return [curve]
        neighbour = curve.predecessor() if target.point_index == 0 else curve.successor()
        return [curve] if neighbour is None else [curve, neighbour]

    def _entry_for(self, curve: Curve) -> IndexEntry:
        entry = self.index.find(curve)
        if entry is None:
            raise IndexConsistencyViolation(f"{curve!r} is not in the spatial index")
        return entry

    def _refresh_extent(self, curve: Curve) -> None:
        self.index.update(self._entry_for(curve), curve.extent())

    def _show_marker(self, point) -> None:
        point = np.array(point, dtype=float)
        self._marker_position = point
        if self.overlay is None:
            self._marker = point
            return
        if self._marker is None:
            self._marker = self.overlay.show_marker(point)
        else:
            self.overlay.move_marker(self._marker, point)

    def _remove_marker(self) -> None:
        if self._marker is not None and self.overlay is not None:
            self.overlay.remove_marker(self._marker)
        self._marker = None
        self._marker_position = None

    def _reset(self) -> None:
        self._target = None
        self._split_pending = False
        self._remove_marker()
        self._set_state(SessionState.IDLE)

    def _add_handle_visual(self, handle) -> None:
        if self.overlay is not None:
            self.overlay.add_handle_visual(handle)

    def _remove_handle_visual(self, handle) -> None:
        if self.overlay is not None:
            self.overlay.remove_handle_visual(handle)
