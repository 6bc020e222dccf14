"""
Dock widgets package for the curve editor.
"""

from .controls_dock import ControlsDock
from .log_dock import LogDock

__all__ = ["ControlsDock", "LogDock"]
