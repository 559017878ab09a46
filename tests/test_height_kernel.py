import math
import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from height_kernel import build_height_kernel


def _weight_map(kernel):
    return {(int(dx), int(dz)): w for (dx, dz), w in zip(kernel.offsets, kernel.weights)}


def test_weights_sum_to_one():
    kernel = build_height_kernel()
    assert abs(float(kernel.weights.sum()) - 1.0) < 1e-6


def test_offsets_stay_inside_disc():
    kernel = build_height_kernel(3)
    assert kernel.radius == 3
    for dx, dz in kernel.offsets:
        assert math.hypot(dx, dz) <= 3
    # every lattice point of the radius-3 disc
    assert len(kernel) == 29


def test_weight_grows_with_distance():
    weights = _weight_map(build_height_kernel(3))
    assert weights[(0, 0)] == 0.0
    assert weights[(1, 0)] < weights[(2, 0)] < weights[(3, 0)]
    assert weights[(0, 3)] == pytest.approx(weights[(3, 0)])
    assert (3, 1) not in weights


def test_symmetric_under_rotation_and_reflection():
    weights = _weight_map(build_height_kernel())
    transforms = [
        lambda dx, dz: (-dz, dx),
        lambda dx, dz: (-dx, -dz),
        lambda dx, dz: (dz, -dx),
        lambda dx, dz: (-dx, dz),
        lambda dx, dz: (dx, -dz),
        lambda dx, dz: (dz, dx),
    ]
    for transform in transforms:
        moved = {transform(dx, dz): w for (dx, dz), w in weights.items()}
        assert set(moved) == set(weights)
        for key, w in moved.items():
            assert weights[key] == pytest.approx(w)


def test_weighted_height_of_constant_field():
    kernel = build_height_kernel()
    assert kernel.weighted_height(lambda x, z: 0.75, 10, -4) == pytest.approx(0.75)


def test_weighted_height_is_rotation_invariant():
    kernel = build_height_kernel()
    rng = np.random.RandomState(1337)
    field = rng.uniform(0.0, 1.0, size=(7, 7))
    cx, cz = 40, -12

    def sampler(grid):
        return lambda x, z: float(grid[x - cx + 3, z - cz + 3])

    base = kernel.weighted_height(sampler(field), cx, cz)
    for k in (1, 2, 3):
        rotated = np.rot90(field, k)
        assert kernel.weighted_height(sampler(rotated), cx, cz) == pytest.approx(base, abs=1e-12)
    assert kernel.weighted_height(sampler(field.T), cx, cz) == pytest.approx(base, abs=1e-12)
    assert kernel.weighted_height(sampler(field[::-1, :]), cx, cz) == pytest.approx(base, abs=1e-12)


def test_weighted_height_visits_every_offset_once():
    kernel = build_height_kernel()
    seen = []

    def height(x, z):
        seen.append((x, z))
        return 1.0

    kernel.weighted_height(height, 5, 6)
    assert len(seen) == len(kernel)
    assert len(set(seen)) == len(kernel)
    assert all(math.hypot(x - 5, z - 6) <= 3 for x, z in seen)


def test_table_is_read_only():
    kernel = build_height_kernel()
    with pytest.raises(ValueError):
        kernel.weights[0] = 1.0
    with pytest.raises(ValueError):
        kernel.offsets[0, 0] = 7


def test_bad_radius():
    with pytest.raises(ValueError):
        build_height_kernel(0)
