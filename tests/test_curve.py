"""
Geometry tests for a single cubic Bézier curve.

Covers evaluation, closest-point search, control point picking, splitting
and anchor propagation between neighbouring curves.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import Curve, CurveChain, InvalidParameter, PointKind

ARCH = [(0, 0), (1, 1), (2, 1), (3, 0)]
S_CURVE = [(0, 0), (4, 3), (-1, 3), (3, 0)]
EPS = 1e-6


def test_point_at_endpoints_and_middle():
    curve = Curve(ARCH)
    assert np.allclose(curve.point_at(0.0), (0, 0))
    assert np.allclose(curve.point_at(1.0), (3, 0))
    assert np.allclose(curve.point_at(0.5), (1.5, 0.75))


def test_point_at_rejects_out_of_range():
    curve = Curve(ARCH)
    with pytest.raises(InvalidParameter):
        curve.point_at(1.5)


def test_extent_encloses_control_points():
    curve = Curve(S_CURVE)
    box = curve.extent()
    assert box.as_tuple() == (-1.0, 0.0, 4.0, 3.0)
    curve.set_control_point(1, (10, -2))
    assert curve.extent().as_tuple() == (-1.0, -2.0, 10.0, 3.0)


@pytest.mark.parametrize("points", [ARCH, S_CURVE])
@pytest.mark.parametrize("t", [0.0, 0.1, 0.25, 0.5, 0.73, 0.9, 1.0])
def test_closest_point_recovers_point_on_curve(points, t):
    curve = Curve(points)
    on_curve = curve.point_at(t)
    hit = curve.closest_point(on_curve)
    assert np.linalg.norm(hit.point - on_curve) < EPS
    assert hit.squared_distance < EPS ** 2


def test_closest_point_is_deterministic():
    curve = Curve(S_CURVE)
    a = curve.closest_point((1.2, 1.7))
    b = curve.closest_point((1.2, 1.7))
    assert a.param == b.param
    assert np.array_equal(a.point, b.point)


def test_closest_point_classifies_kind():
    curve = Curve(ARCH)
    body = curve.closest_point((1.5, 0.9))
    assert body.kind is PointKind.CURVE
    assert body.index is None
    assert abs(body.param - 0.5) < 1e-4
    assert np.allclose(body.point, (1.5, 0.75), atol=1e-6)

    end = curve.closest_point((3.5, -0.5))
    assert end.kind is PointKind.ANCHOR
    assert end.index == 3
    assert end.param == 1.0
    assert np.array_equal(end.point, (3, 0))


def test_closest_control_point_prefers_lowest_index_on_tie():
    curve = Curve(ARCH)
    hit = curve.closest_control_point((1.5, 1.0))
    assert hit.index == 1
    assert hit.kind is PointKind.CONTROL
    assert hit.squared_distance == pytest.approx(0.25)

    anchor = curve.closest_control_point((-0.1, 0.0))
    assert anchor.index == 0
    assert anchor.kind is PointKind.ANCHOR


@pytest.mark.parametrize("t", [0.2, 0.5, 0.8])
def test_split_reproduces_original_curve(t):
    curve = Curve(S_CURVE)
    left, right = curve.split_at(t)
    joint = curve.point_at(t)
    assert np.allclose(left.point_at(1.0), joint)
    assert np.allclose(right.point_at(0.0), joint)
    for s in np.linspace(0.0, 1.0, 11):
        assert np.allclose(left.point_at(s), curve.point_at(s * t), atol=1e-9)
        assert np.allclose(right.point_at(s), curve.point_at(t + s * (1 - t)), atol=1e-9)


@pytest.mark.parametrize("t", [0.0, 1.0, -0.1, 1.2, float("nan")])
def test_split_rejects_parameters_outside_open_interval(t):
    curve = Curve(ARCH)
    before = curve.points
    with pytest.raises(InvalidParameter):
        curve.split_at(t)
    assert np.array_equal(curve.points, before)


def test_set_control_point_moves_shared_anchor_of_neighbour():
    chain = CurveChain.from_control_points([ARCH, [(3, 0), (4, -1), (5, -1), (6, 0)]])
    first, second = chain.curves
    first.set_control_point(3, (3, 1))
    assert np.array_equal(first.p3, (3, 1))
    assert np.array_equal(second.p0, (3, 1))

    second.set_control_point(0, (3, 2))
    assert np.array_equal(first.p3, (3, 2))

    # handles are never shared
    second.set_control_point(1, (4, 4))
    assert np.array_equal(first.p2, (2, 1))


def test_set_control_point_rejects_bad_index():
    curve = Curve(ARCH)
    with pytest.raises(InvalidParameter):
        curve.set_control_point(4, (0, 0))


def test_detached_curve_has_no_neighbours():
    curve = Curve(ARCH)
    assert curve.predecessor() is None
    assert curve.successor() is None
    curve.set_control_point(0, (-1, 0))
    assert np.array_equal(curve.p0, (-1, 0))
