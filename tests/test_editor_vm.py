"""
Tests for the Qt view model wrapping the edit session.

Skipped when PySide6 is not installed; no window is created.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

QtCore = pytest.importorskip("PySide6.QtCore")

from dataio.configuration import Config
from models import AffineTransform, CurveChain
from viewmodel.edit_session import SessionState
from viewmodel.editor_vm import CurveEditorViewModel
from viewmodel.pointer import PointerEvent, PointerEventType

TRANSFORM = AffineTransform(scale=100.0)

SCENE = """
features:
  - type: LineString
    coordinates: [[0, 0], [3, 0], [6, 0]]
  - type: LineString
    coordinates: [[0, 5], [4, 5]]
  - type: Point
    coordinates: [9, 9]
"""


@pytest.fixture(scope="module")
def qt_app():
    return QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])


@pytest.fixture
def vm(qt_app, tmp_path):
    model = CurveEditorViewModel(Config(config_folder=str(tmp_path)), transform=TRANSFORM)
    model.messages = []
    model.log_message.connect(model.messages.append)
    return model


def pointer(kind, x, y):
    return PointerEvent(kind, (x, y), TRANSFORM.pixel_from_world((x, y)))


def test_load_scene_registers_line_features(vm, tmp_path):
    scene = tmp_path / "scene.yaml"
    scene.write_text(SCENE, encoding="utf-8")
    changes = []
    vm.chains_changed.connect(lambda: changes.append(True))

    assert vm.load_scene(scene) == 2
    assert len(vm.chains) == 2
    assert changes
    assert any("1 unsupported" in m for m in vm.messages)
    assert vm.config.last_scene_file == str(scene)
    assert (tmp_path / "settings.json").exists()

    # loading again replaces rather than appends
    assert vm.load_scene(scene) == 2
    assert len(vm.chains) == 2


def test_load_missing_scene_keeps_chains(vm, tmp_path):
    vm.register_chain(CurveChain.from_line_geometry([(0, 0), (1, 0)]))
    assert vm.load_scene(tmp_path / "missing.yaml") == 0
    assert len(vm.chains) == 1
    assert any("Failed to load scene" in m for m in vm.messages)


def test_pointer_events_drive_session_and_signals(vm):
    chain = CurveChain.from_line_geometry([(0, 0), (3, 0), (6, 0)])
    vm.register_chain(chain)
    states = []
    edited = []
    vm.state_changed.connect(states.append)
    vm.curve_changed.connect(edited.append)

    vm.on_pointer_event(pointer(PointerEventType.MOVE, 3.0, 0.0))
    assert vm.session.state is SessionState.HOVERING
    assert vm.on_pointer_event(pointer(PointerEventType.CLICK, 3.0, 0.0)) is True
    assert len(chain) == 1
    assert states == ["hovering", "idle"]
    assert edited and edited[-1] is chain


def test_clear_hover_returns_to_idle(vm):
    vm.register_chain(CurveChain.from_line_geometry([(0, 0), (3, 0)]))
    states = []
    vm.state_changed.connect(states.append)
    vm.on_pointer_event(pointer(PointerEventType.MOVE, 1.5, 0.05))
    vm.clear_hover()
    assert vm.session.state is SessionState.IDLE
    assert states == ["hovering", "idle"]


def test_settings_update_session_and_config(vm):
    vm.set_pixel_tolerance(25)
    assert vm.session.pixel_tolerance == 25.0
    assert vm.config.pixel_tolerance == 25.0

    vm.set_delete_condition("never")
    assert vm.config.delete_condition == "never"
    vm.set_delete_condition("bogus")
    assert vm.config.delete_condition == "never"
    assert any("Ignored delete gesture" in m for m in vm.messages)

    vm.set_smooth_new_chains(True)
    assert vm.config.smooth_new_chains is True


def test_clear_drops_all_chains(vm):
    vm.register_chain(CurveChain.from_line_geometry([(0, 0), (1, 0)]))
    vm.register_chain(CurveChain.from_line_geometry([(0, 1), (1, 1)]))
    vm.clear()
    assert vm.chains == ()
    assert len(vm.session.index) == 0
