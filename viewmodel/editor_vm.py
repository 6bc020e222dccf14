# viewmodel/editor_vm.py
from PySide6.QtCore import QObject, Signal

from dataio.configuration import Config
from dataio.scene_loader import load_scene
from models import CurveChain
from .edit_session import EditSession
from .logging_helpers import log_exception, log_message
from .pointer import PointerEvent, condition_from_name


class CurveEditorViewModel(QObject):
    """
    Qt-facing wrapper around the :class:`EditSession`: owns the session,
    turns its callbacks into signals for the view, and routes log output
    to the log dock.
    """

    log_message = Signal(str)
    chains_changed = Signal()                 # a chain was registered or dropped
    curve_changed = Signal(object)            # chain whose geometry was edited
    state_changed = Signal(str)               # "idle" / "hovering" / "dragging"

    def __init__(self, config=None, overlay=None, transform=None):
        super().__init__()
        if config is None:
            from dataio import get_config
            config = get_config()
        self.config = config.validate()
        self.session = EditSession(
            overlay=overlay,
            transform=transform,
            pixel_tolerance=self.config.pixel_tolerance,
            delete_condition=condition_from_name(self.config.delete_condition),
            vm=self,
        )
        self.session.set_on_state_change(lambda state: self.state_changed.emit(state.value))
        self.session.set_on_geometry_change(self.curve_changed.emit)

    # --------------------------
    # Collaborators
    # --------------------------
    def set_overlay(self, overlay):
        self.session.overlay = overlay

    def set_transform(self, transform):
        self.session.transform = transform

    @property
    def chains(self):
        return self.session.chains

    # --------------------------
    # Chains
    # --------------------------
    def register_chain(self, chain: CurveChain):
        self.session.register_chain(chain)
        self.chains_changed.emit()

    def deregister_chain(self, chain: CurveChain):
        self.session.deregister_chain(chain)
        self.chains_changed.emit()

    def register_geometry(self, geometry):
        chain = self.session.register_geometry(geometry, smooth=self.config.smooth_new_chains)
        if chain is not None:
            self.chains_changed.emit()
        return chain

    def clear(self):
        for chain in self.session.chains:
            self.session.deregister_chain(chain)
        self.chains_changed.emit()

    def load_scene(self, path) -> int:
        """Replace the current chains with the line features of a YAML scene.

        Returns the number of chains registered; unsupported features are
        skipped and logged.
        """
        try:
            geometries = load_scene(path)
        except (OSError, ValueError) as exc:
            log_exception(f"Failed to load scene '{path}'", exc, vm=self)
            return 0

        self.clear()
        registered = 0
        for geometry in geometries:
            chain = self.session.register_geometry(geometry, smooth=self.config.smooth_new_chains)
            if chain is not None:
                registered += 1
        skipped = len(geometries) - registered
        log_message(f"Loaded {registered} editable chains from {path}"
                    + (f" ({skipped} unsupported features skipped)" if skipped else ""), vm=self)
        self.chains_changed.emit()

        self.config.last_scene_file = str(path)
        try:
            self.config.save()
        except OSError as exc:
            log_exception("Could not save configuration", exc, vm=self)
        return registered

    # --------------------------
    # Interaction
    # --------------------------
    def on_pointer_event(self, event: PointerEvent) -> bool:
        return self.session.on_pointer_event(event)

    def clear_hover(self):
        self.session.clear_hover()

    def set_pixel_tolerance(self, value: float):
        self.session.pixel_tolerance = value
        self.config.pixel_tolerance = self.session.pixel_tolerance

    def set_delete_condition(self, name: str):
        try:
            self.session.delete_condition = condition_from_name(name)
        except ValueError as exc:
            log_exception("Ignored delete gesture setting", exc, vm=self)
            return
        self.config.delete_condition = name

    def set_smooth_new_chains(self, enabled: bool):
        self.config.smooth_new_chains = bool(enabled)
