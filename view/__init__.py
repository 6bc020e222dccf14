# view/__init__.py
from .main_window import MainWindow
from .curve_viewbox import CurveViewBox
from .curve_overlay import CurveOverlay

__all__ = ["MainWindow", "CurveViewBox", "CurveOverlay"]
