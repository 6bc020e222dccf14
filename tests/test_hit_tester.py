"""
Hit-testing tests: pixel tolerance, ranking across chains and the
preference for control points over the curve body.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import AffineTransform, CurveChain, IndexEntry, PointKind, SpatialIndex
from viewmodel.hit_tester import HitTester, pixel_distance, query_box

ARCH = [(0, 0), (1, 1), (2, 1), (3, 0)]

# 100 pixels per world unit: 20 px tolerance is 0.2 world units
TRANSFORM = AffineTransform(scale=100.0)


def make_tester(*chains):
    index = SpatialIndex()
    for chain in chains:
        for curve in chain.curves:
            index.insert(IndexEntry.for_curve(chain, curve))
    return HitTester(index)


def test_transform_round_trip_and_pixel_distance():
    t = AffineTransform(scale=50.0, origin=(1.0, 2.0))
    pixel = t.pixel_from_world((3.0, 4.0))
    assert np.allclose(pixel, (100.0, -100.0))
    assert np.allclose(t.world_from_pixel(pixel), (3.0, 4.0))
    assert pixel_distance((0, 0), (0.3, 0.4), t) == pytest.approx(25.0)


def test_query_box_spans_tolerance():
    box = query_box((1.0, 1.0), 20, TRANSFORM)
    assert np.allclose(box.as_tuple(), (0.8, 0.8, 1.2, 1.2))


def test_hover_on_curve_body():
    chain = CurveChain.from_control_points([ARCH])
    target = make_tester(chain).find_target((1.5, 0.9), 20, TRANSFORM)
    assert target is not None
    assert target.kind is PointKind.CURVE
    assert target.is_on_curve
    assert target.point_index is None
    assert target.chain is chain
    assert target.curve is chain.curves[0]
    assert abs(target.param - 0.5) < 1e-3
    assert np.allclose(target.point, (1.5, 0.75), atol=1e-6)


def test_nothing_within_tolerance():
    chain = CurveChain.from_control_points([ARCH])
    tester = make_tester(chain)
    assert tester.find_target((10.0, 10.0), 20, TRANSFORM) is None
    # candidate by extent, but 21 px from the curve
    assert tester.find_target((1.5, 0.96), 20, TRANSFORM) is None


def test_empty_index_finds_nothing():
    assert make_tester().find_target((0, 0), 20, TRANSFORM) is None


def test_control_point_beats_curve_body():
    chain = CurveChain.from_control_points([ARCH])
    target = make_tester(chain).find_target((1.0, 0.85), 30, TRANSFORM)
    assert target.kind is PointKind.CONTROL
    assert target.point_index == 1
    assert np.array_equal(target.point, (1, 1))


def test_end_of_curve_is_an_anchor_hit():
    chain = CurveChain.from_control_points([ARCH])
    target = make_tester(chain).find_target((3.1, 0.0), 20, TRANSFORM)
    assert target.kind is PointKind.ANCHOR
    assert target.point_index == 3
    assert np.array_equal(target.point, (3, 0))


def test_nearest_chain_wins():
    below = CurveChain.from_line_geometry([(0, 0), (3, 0)])
    above = CurveChain.from_line_geometry([(0, 0.3), (3, 0.3)])
    target = make_tester(below, above).find_target((1.5, 0.2), 20, TRANSFORM)
    assert target.chain is above
    assert np.allclose(target.point, (1.5, 0.3))
