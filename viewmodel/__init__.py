"""Interaction logic: hit-testing, the edit session and the Qt view model.

``CurveEditorViewModel`` is not imported here so the Qt-free parts can be
used without PySide6 installed.
"""
from .edit_session import EditSession, SessionState, DEFAULT_PIXEL_TOLERANCE
from .hit_tester import HitTester, TargetPoint
from .pointer import PointerEvent, PointerEventType, condition_from_name

__all__ = [
    "EditSession",
    "SessionState",
    "DEFAULT_PIXEL_TOLERANCE",
    "HitTester",
    "TargetPoint",
    "PointerEvent",
    "PointerEventType",
    "condition_from_name",
]
