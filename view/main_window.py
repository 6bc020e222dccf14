# view/main_window.py
# type: ignore
import os

from PySide6.QtWidgets import QMainWindow, QDockWidget, QFileDialog
from PySide6.QtCore import Qt
import pyqtgraph as pg

from view.constants import PLOT_BG
from view.curve_overlay import CurveOverlay
from view.curve_viewbox import CurveViewBox
from view.docks.controls_dock import ControlsDock
from view.docks.log_dock import LogDock

GRID_ALPHA = 0.3


class MainWindow(QMainWindow):
    def __init__(self, viewmodel=None):
        super().__init__()
        self.setWindowTitle("Bézier Chain Editor")
        self.viewmodel = viewmodel

        # --- Central Plot ---
        self._init_plot()

        # --- Docks ---
        self._init_docks()

        for dock in [self.controls_dock, self.log_dock]:
            dock.setFeatures(QDockWidget.DockWidgetMovable | QDockWidget.DockWidgetFloatable)

        if self.viewmodel is not None:
            self._connect_viewmodel()

        self.resize(1200, 800)

    # --------------------------
    # Plot setup
    # --------------------------
    def _init_plot(self):
        # Custom ViewBox turns mouse gestures into editor pointer events
        self.viewbox = CurveViewBox(self.viewmodel)
        self.plot_widget = pg.PlotWidget(viewBox=self.viewbox, title="Curves")
        self.plot_widget.setBackground(PLOT_BG)
        self.plot_widget.showGrid(x=True, y=True, alpha=GRID_ALPHA)
        self.setCentralWidget(self.plot_widget)

        cfg = getattr(self.viewmodel, "config", None)
        self.overlay = CurveOverlay(
            self.viewbox,
            marker_size=getattr(cfg, "marker_size", 10),
            handle_size=getattr(cfg, "handle_size", 7),
            curve_samples=getattr(cfg, "curve_samples", 32),
        )

    def _init_docks(self):
        self.controls_dock = ControlsDock(self)
        self.addDockWidget(Qt.LeftDockWidgetArea, self.controls_dock)
        self.log_dock = LogDock(self)
        self.addDockWidget(Qt.BottomDockWidgetArea, self.log_dock)

    def _connect_viewmodel(self):
        vm = self.viewmodel
        # the overlay and the ViewBox are the session's collaborators
        vm.set_overlay(self.overlay)
        vm.set_transform(self.viewbox)

        vm.chains_changed.connect(self._on_chains_changed)
        vm.curve_changed.connect(self.overlay.refresh_chain)
        vm.state_changed.connect(self.controls_dock.set_state)

        self.controls_dock.set_values(vm.config)
        self.controls_dock.load_scene_clicked.connect(self._on_load_scene)
        self.controls_dock.clear_clicked.connect(vm.clear)
        self.controls_dock.tolerance_changed.connect(vm.set_pixel_tolerance)
        self.controls_dock.delete_condition_changed.connect(vm.set_delete_condition)
        self.controls_dock.smooth_toggled.connect(vm.set_smooth_new_chains)

    # --------------------------
    # Slots
    # --------------------------
    def _on_chains_changed(self):
        self.overlay.set_chains(self.viewmodel.chains)
        if self.viewmodel.chains:
            self.viewbox.autoRange()

    def _on_load_scene(self):
        last = getattr(self.viewmodel.config, "last_scene_file", None)
        folder = os.path.dirname(last) if last else ""
        path, _ = QFileDialog.getOpenFileName(self, "Load Scene", folder, "YAML scenes (*.yaml *.yml)")
        if path:
            self.viewmodel.load_scene(path)

    def append_log(self, msg: str):
        self.log_dock.append_log(msg)
