"""
Controls dock widget for scene loading and editor settings.
"""

from PySide6.QtWidgets import (
    QDockWidget, QWidget, QVBoxLayout, QPushButton, QLabel,
    QFormLayout, QDoubleSpinBox, QComboBox, QCheckBox
)
from PySide6.QtCore import Signal

from dataio.configuration import DELETE_CONDITIONS


class ControlsDock(QDockWidget):
    """Dock widget for scene controls and hit-test settings."""

    # Signals
    load_scene_clicked = Signal()
    clear_clicked = Signal()
    tolerance_changed = Signal(float)        # pixels
    delete_condition_changed = Signal(str)   # name understood by condition_from_name
    smooth_toggled = Signal(bool)

    def __init__(self, parent=None):
        """
        Initialize the controls dock.

        Args:
            parent: Parent widget (typically the main window)
        """
        super().__init__("Controls", parent)
        self._init_ui()

    def _init_ui(self):
        """Initialize the UI components."""
        widget = QWidget()
        layout = QVBoxLayout(widget)

        self.load_btn = QPushButton("Load Scene...")
        self.clear_btn = QPushButton("Clear")
        layout.addWidget(QLabel("Scene"))
        layout.addWidget(self.load_btn)
        layout.addWidget(self.clear_btn)

        form = QFormLayout()
        self.tolerance_spin = QDoubleSpinBox()
        self.tolerance_spin.setRange(1.0, 50.0)
        self.tolerance_spin.setSingleStep(1.0)
        self.tolerance_spin.setSuffix(" px")
        form.addRow("Hit tolerance", self.tolerance_spin)

        self.delete_combo = QComboBox()
        self.delete_combo.addItems(list(DELETE_CONDITIONS))
        form.addRow("Delete gesture", self.delete_combo)

        self.smooth_check = QCheckBox("Smooth new chains")
        form.addRow(self.smooth_check)
        layout.addLayout(form)

        self.state_label = QLabel("idle")
        layout.addWidget(self.state_label)
        layout.addStretch(1)
        self.setWidget(widget)

        self.load_btn.clicked.connect(self.load_scene_clicked.emit)
        self.clear_btn.clicked.connect(self.clear_clicked.emit)
        self.tolerance_spin.valueChanged.connect(self.tolerance_changed.emit)
        self.delete_combo.currentTextChanged.connect(self.delete_condition_changed.emit)
        self.smooth_check.toggled.connect(self.smooth_toggled.emit)

    def set_values(self, config):
        """Show *config* values without re-emitting change signals."""
        for widget, setter, value in (
            (self.tolerance_spin, self.tolerance_spin.setValue, float(config.pixel_tolerance)),
            (self.delete_combo, self.delete_combo.setCurrentText, config.delete_condition),
            (self.smooth_check, self.smooth_check.setChecked, bool(config.smooth_new_chains)),
        ):
            was_blocked = widget.blockSignals(True)
            setter(value)
            widget.blockSignals(was_blocked)

    def set_state(self, state: str):
        self.state_label.setText(state)
