# main.py
import os
import sys

from PySide6.QtWidgets import QApplication

from dataio import get_config, get_default_scene_path
from view.main_window import MainWindow
from viewmodel.editor_vm import CurveEditorViewModel
from viewmodel.logging_helpers import log_exception, log_message


def _restore_scene(viewmodel):
    """Load the last scene from config, or the bundled demo scene."""
    try:
        cfg = viewmodel.config
        last = getattr(cfg, "last_scene_file", None)
        if last and os.path.isfile(last):
            return viewmodel.load_scene(last) > 0
        demo = get_default_scene_path()
        if demo is not None:
            return viewmodel.load_scene(demo) > 0
        log_message("No scene to restore; use Load Scene to open one.", vm=viewmodel)
        return False
    except Exception as e:
        log_exception("Failed to restore last scene", e, vm=viewmodel)
        return False


def main():
    app = QApplication(sys.argv)

    # Config + ViewModel + View
    config = get_config()
    viewmodel = CurveEditorViewModel(config)
    window = MainWindow(viewmodel)

    # Connect ViewModel → View signals
    viewmodel.log_message.connect(window.append_log)

    _restore_scene(viewmodel)

    window.show()
    exit_code = app.exec()

    try:
        config.save()
    except OSError as e:
        log_exception("Failed to save configuration", e)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
