"""
Log dock widget for displaying editor log messages.
"""

from PySide6.QtWidgets import QDockWidget, QPlainTextEdit

from viewmodel.logging_helpers import logger

# Oldest lines are dropped beyond this
MAX_LOG_LINES = 2000


class LogDock(QDockWidget):
    """Dock widget for displaying log messages."""

    def __init__(self, parent=None):
        super().__init__("Log", parent)
        self.log_text = QPlainTextEdit()
        self.log_text.setReadOnly(True)
        self.log_text.setMaximumBlockCount(MAX_LOG_LINES)
        self.log_text.appendPlainText("Editor ready.")
        self.setWidget(self.log_text)

    def append_log(self, msg: str):
        """Append a message to the log, falling back to the logger if the widget is gone."""
        try:
            self.log_text.appendPlainText(msg)
        except RuntimeError:
            # underlying C++ widget already deleted during shutdown
            logger.info(msg)
