import numpy as np
import pytest

from meshtidy.controller.bounds import BoundsMode, compute_bounds, resolve_bounds_mode
from meshtidy.model.store import MeshStore

POINTS = np.array([
    [0.0, 0.0, 0.0],
    [4.0, 0.0, 0.0],
    [0.0, 2.0, 0.0],
    [0.0, 0.0, 0.0],
])


def test_centroid_mode():
    bounds = compute_bounds(POINTS, BoundsMode.CENTROID)
    assert bounds.center == pytest.approx((1.0, 0.5, 0.0))
    assert bounds.radius == pytest.approx(np.hypot(3.0, 0.5))


def test_box_center_mode():
    bounds = compute_bounds(POINTS, BoundsMode.BOX_CENTER)
    assert bounds.center == pytest.approx((2.0, 1.0, 0.0))
    assert bounds.radius == pytest.approx(np.hypot(2.0, 1.0))


def test_single_vertex_has_zero_radius():
    bounds = compute_bounds([[1.0, 2.0, 3.0]], BoundsMode.BOX_CENTER)
    assert bounds.center == pytest.approx((1.0, 2.0, 3.0))
    assert bounds.radius == 0.0


def test_empty_input_gives_no_bounds():
    assert compute_bounds(np.empty((0, 3))) is None


def test_recomputing_is_stable():
    assert compute_bounds(POINTS) == compute_bounds(POINTS)


def test_auto_must_be_resolved():
    with pytest.raises(ValueError):
        compute_bounds(POINTS, BoundsMode.AUTO)


def test_resolve_mode_from_header_and_flags():
    assert resolve_bounds_mode(MeshStore()) == BoundsMode.CENTROID
    assert resolve_bounds_mode(MeshStore(version=0x14000005, user_version=11)) == BoundsMode.BOX_CENTER
    assert resolve_bounds_mode(MeshStore(version=0x14000005, user_version=12)) == BoundsMode.CENTROID
    assert resolve_bounds_mode(MeshStore(), consistency_flags=0x8000) == BoundsMode.BOX_CENTER
