from __future__ import annotations

import math

import numpy as np
import pytest

from galaxy.generator import VoidPolicy, arm_angle, generate, jitter
from galaxy.parameters import GalaxyParameters
from galaxy.random_source import RecordingRandomSource, SequenceRandomSource, SystemRandomSource


def test_single_point_on_first_branch(flat_params):
    rng = SequenceRandomSource([0.4, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0])
    cloud = generate(flat_params(), rng)

    assert len(cloud) == 1
    assert cloud[0].position == (4.0, 0.0, 0.0)
    assert rng.draws == 7


def test_each_axis_uses_its_own_magnitude_and_sign(flat_params):
    rng = SequenceRandomSource([0.4, 0.5, 0.9, 0.25, 0.1, 0.75, 0.9])
    cloud = generate(flat_params(randomness_power=1.0), rng)

    assert cloud[0].position == (4.5, -0.25, 0.75)
    assert rng.draws == 7


def test_point_inside_void_is_removed(flat_params):
    rng = SequenceRandomSource([0.4])
    cloud = generate(flat_params(void_size=5.0), rng)

    assert len(cloud) == 0
    assert rng.draws == 1


def test_point_inside_void_parked_at_origin(flat_params):
    params = flat_params(count=2, void_size=5.0)
    rng = SequenceRandomSource([0.4, 0.8, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0])
    cloud = generate(params, rng, VoidPolicy.ORIGIN)

    assert len(cloud) == 2
    assert cloud[0] == ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
    assert cloud[1].position == pytest.approx((8.0, 0.0, 0.0))


def test_two_branches_are_half_a_turn_apart(flat_params):
    params = flat_params(branches=2, spin=0.7)
    first, _ = arm_angle(0, 3.0, params)
    second, _ = arm_angle(1, 3.0, params)
    assert second - first == pytest.approx(math.pi)

    rng = SequenceRandomSource([0.5] + [0.0] * 6 + [0.5] + [0.0] * 6)
    cloud = generate(flat_params(count=2, branches=2), rng)
    assert cloud[0].position == pytest.approx((5.0, 0.0, 0.0))
    assert cloud[1].position == pytest.approx((-5.0, 0.0, 0.0), abs=1e-5)


def test_branches_cycle_in_index_order(flat_params):
    params = flat_params(branches=3)
    angles = [arm_angle(i, 1.0, params)[0] for i in range(6)]
    assert angles[:3] == angles[3:]
    assert angles[1] == pytest.approx(2 * math.pi / 3)


def test_twist_then_curl():
    params = GalaxyParameters(
        branches=4, spin=0.5, twist_factor=2.0, twist_amount=0.3, curl_frequency=1.5, curl_amplitude=-0.2
    )
    radius = 2.0
    spin_angle = radius * 0.5
    expected = 0.25 * 2 * math.pi
    expected += math.sin(spin_angle * 2.0) * 0.3
    expected += math.sin(expected * 1.5) * -0.2

    branch_angle, spin = arm_angle(1, radius, params)
    assert spin == spin_angle
    assert branch_angle == pytest.approx(expected)


@pytest.mark.parametrize("power", [1.0, 3.0, 10.0])
def test_zero_draws_give_zero_jitter(flat_params, zeros, power):
    cloud = generate(flat_params(count=20, randomness_power=power), zeros)
    assert len(cloud) == 20
    assert not np.any(cloud.positions)


def test_jitter_sign_follows_second_draw():
    assert jitter(SequenceRandomSource([0.5, 0.2]), 1.0) == -0.5
    assert jitter(SequenceRandomSource([0.5, 0.7]), 2.0) == 0.25


def test_color_runs_from_inside_to_outside(flat_params):
    params = flat_params(count=2)
    rng = SequenceRandomSource([0.0] * 7 + [0.5] + [0.0] * 6)
    cloud = generate(params, rng)

    np.testing.assert_array_equal(cloud.colors[0], np.float32(params.inside_color))
    np.testing.assert_allclose(cloud.colors[1], (0.5, 0.0, 0.5))


def test_colors_stay_in_unit_range():
    cloud = generate(GalaxyParameters(count=3000), SystemRandomSource(11))
    assert cloud.colors.min() >= 0.0
    assert cloud.colors.max() <= 1.0


def test_full_density_nebula_lies_on_its_ring(flat_params):
    params = flat_params(count=50, branches=5, spin=1.0, has_nebula=True, nebula_density=1.0)
    rng = RecordingRandomSource(SystemRandomSource(5))
    cloud = generate(params, rng)

    draws = np.array(rng.history).reshape(50, 9)
    ring = np.hypot(cloud.positions[:, 0], cloud.positions[:, 2])
    np.testing.assert_allclose(ring, draws[:, 8] * params.radius, rtol=1e-5)
    assert not np.any(cloud.positions[:, 1])
    np.testing.assert_array_equal(cloud.colors, np.tile(np.float32(params.nebula_color), (50, 1)))


def test_nebula_reuses_arm_angle(flat_params):
    params = flat_params(count=2, branches=2, has_nebula=True, nebula_density=1.0)
    draws = [0.3] + [0.0] * 6 + [0.0, 0.5]
    cloud = generate(params, SequenceRandomSource(draws * 2))
    assert cloud[0].position == pytest.approx((5.0, 0.0, 0.0))
    assert cloud[1].position == pytest.approx((-5.0, 0.0, 0.0), abs=1e-5)


def test_disabled_nebula_ignores_density():
    on = GalaxyParameters(count=500, has_nebula=False, nebula_density=1.0)
    off = GalaxyParameters(count=500, has_nebula=False, nebula_density=0.0)
    first = generate(on, SystemRandomSource(3))
    second = generate(off, SystemRandomSource(3))
    np.testing.assert_array_equal(first.positions, second.positions)
    np.testing.assert_array_equal(first.colors, second.colors)


def test_zero_density_matches_disabled_nebula():
    enabled = generate(GalaxyParameters(count=500, nebula_density=0.0), SystemRandomSource(9))
    disabled = generate(GalaxyParameters(count=500, has_nebula=False), SystemRandomSource(9))
    np.testing.assert_array_equal(enabled.positions, disabled.positions)
    np.testing.assert_array_equal(enabled.colors, disabled.colors)


def test_same_draws_same_cloud():
    params = GalaxyParameters(count=2000)
    first = generate(params, SystemRandomSource(42))
    second = generate(params, SystemRandomSource(42))
    assert first.positions.tobytes() == second.positions.tobytes()
    assert first.colors.tobytes() == second.colors.tobytes()


def test_replayed_draws_reproduce_cloud():
    params = GalaxyParameters(count=300)
    recorder = RecordingRandomSource(SystemRandomSource())
    original = generate(params, recorder)
    replayed = generate(params, recorder.replay())
    np.testing.assert_array_equal(original.positions, replayed.positions)


def test_empty_cloud():
    cloud = generate(GalaxyParameters(count=0), SequenceRandomSource([0.5]))
    assert len(cloud) == 0
    assert cloud.positions.shape == (0, 3)


def test_non_positive_radius_collapses_to_origin(flat_params):
    params = flat_params(count=200, radius=-4.0)
    cloud = generate(params, SystemRandomSource(1))
    assert len(cloud) == 200
    assert np.abs(cloud.positions).max() <= 1.0
    np.testing.assert_array_equal(cloud.colors, np.tile(np.float32(params.inside_color), (200, 1)))


def test_void_removes_inner_points():
    params = GalaxyParameters(count=2000, void_size=10.0, has_nebula=False, randomness_power=10.0)
    cloud = generate(params, SystemRandomSource(8))
    radii = np.hypot(cloud.positions[:, 0], cloud.positions[:, 2])
    assert 0 < len(cloud) < 2000
    assert radii.min() > 10.0 - 2.0


def test_material_carries_render_settings():
    params = GalaxyParameters(count=1, point_size=0.05, opacity=0.4)
    material = generate(params, SystemRandomSource(0)).material
    assert material.point_size == 0.05
    assert material.opacity == 0.4
    assert material.additive_blending
    assert not material.depth_write


def test_zero_density_nebula_takes_no_activation_draw(flat_params):
    rng = SequenceRandomSource([0.4] + [0.0] * 6)
    generate(flat_params(has_nebula=True, nebula_density=0.0), rng)
    assert rng.draws == 7


def test_void_still_applies_to_collapsed_disk():
    params = GalaxyParameters(count=50, radius=-4.0, void_size=2.5)
    assert len(generate(params, SystemRandomSource(1))) == 0

    parked = generate(params, SystemRandomSource(1), VoidPolicy.ORIGIN)
    assert len(parked) == 50
    assert not np.any(parked.positions)
    assert not np.any(parked.colors)
