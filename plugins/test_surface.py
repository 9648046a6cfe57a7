#!/usr/bin/env python3
"""
Tests for the FluidSurface simulation engine.

Verifies:
1. Reset / turbulence initialization
2. Point and splash impulses (splash is bounds-checked, point folds)
3. Step: clamp invariant, steady state, determinism, naive-loop agreement
4. Non-finite guard and configuration validation
"""

import math
import numpy as np
import pytest

from fluid_surface import FluidSurface, ConfigurationError, UniformSource
from fluid_surface import kernel as kernel_module


class SequenceSource:
    """uniform(low, high) driven by a fixed list of unit fractions."""

    def __init__(self, fractions):
        self.fractions = list(fractions)
        self.calls = 0

    def uniform(self, low, high):
        f = self.fractions[self.calls % len(self.fractions)]
        self.calls += 1
        return low + (high - low) * f


def _reference_surface(**overrides):
    return FluidSurface.from_preset("reference", rng=UniformSource(0), **overrides)


def _naive_step(s):
    """Straight double loop over Pass A then Pass B."""
    cur = s.current.copy()
    prev = s.previous.copy()
    vel = np.zeros(s.area)
    for i in range(s.area):
        vel[i] = (cur[i] - prev[i]
                  + s.gravity * (cur[i] / s.volume_target) ** math.e) * s.resistance_coefficient
    for z in range(s.height):
        for x in range(s.width):
            i = s.index(x, z)
            cur[i] += vel[i]
            for zv in range(s.height):
                for xv in range(s.width):
                    cur[i] -= vel[s.index(xv, zv)] * s.kernel.weights[s.index(xv - x, zv - z)]
            cur[i] = min(max(cur[i], s.volume_min), s.volume_max)
    return cur


def test_reset_and_turbulence():
    s = _reference_surface()
    assert s.current.shape == (16,)
    assert np.all(s.current == 15.0)
    assert np.all(s.previous == 15.0)

    s.rng = SequenceSource([0.0, 0.5, 0.75])
    s.apply_turbulence(10.0, 2.0)
    assert s.rng.calls == 16
    assert s.current[0] == 8.0
    assert s.current[1] == 10.0
    assert s.current[2] == 11.0
    # previous is untouched by turbulence
    assert np.all(s.previous == 15.0)

    s.reset(12.0)
    assert np.all(s.current == 12.0)
    assert np.all(s.previous == 12.0)


def test_turbulence_replays_with_same_seed():
    a = FluidSurface.from_preset("choppy", rng=UniformSource(11))
    b = FluidSurface.from_preset("choppy", rng=UniformSource(11))
    assert np.array_equal(a.current, b.current)
    assert np.any(a.current != a.volume_target)
    assert np.all(np.abs(a.current - a.volume_target) <= a.volume_turbulence + 1e-12)


def test_end_to_end_reference():
    """4x4 pool at 15, +5 at (1,1), one step."""
    s = _reference_surface()
    s.reset(15.0)
    s.inject_at(1, 1, 5.0)
    assert s.current[s.index(1, 1)] == 20.0

    s.step()
    hit = s.current[s.index(1, 1)]
    assert 15.0 < hit <= 20.0

    deficit = 0.0
    for z in range(4):
        for x in range(4):
            if (x, z) == (1, 1):
                continue
            value = s.current[s.index(x, z)]
            expected = 15.0 - 5.0 * s.kernel.at(1 - x, 1 - z)
            assert math.isclose(value, expected, rel_tol=1e-12)
            assert value < 15.0
            deficit += 15.0 - value
    # Roughly conserved, not exactly
    assert 0.0 < deficit < 5.0
    assert s.generation == 1


def test_step_matches_naive_loop():
    s = FluidSurface(width=5, height=4, volume_max=3.0, volume_min=0.2,
                     volume_target=1.0, volume_turbulence=0.3,
                     resistance_coefficient=0.8, gravity=-0.05,
                     rng=UniformSource(5))
    s.inject_splash(1, 2, 0.6, radius=1)
    for _ in range(4):
        expected = _naive_step(s)
        s.step()
        np.testing.assert_allclose(s.current, expected, rtol=1e-12, atol=1e-12)


def test_row_path_matches_dense_path():
    saved = kernel_module.DENSE_AREA_LIMIT
    a = FluidSurface.from_preset("lava", rng=UniformSource(9))
    try:
        kernel_module.DENSE_AREA_LIMIT = 0
        b = FluidSurface.from_preset("lava", rng=UniformSource(9))
    finally:
        kernel_module.DENSE_AREA_LIMIT = saved
    assert a.kernel._transfer is not None
    assert b.kernel._transfer is None

    a.inject_splash(5, 5, 2.0, radius=3)
    b.inject_splash(5, 5, 2.0, radius=3)
    for _ in range(5):
        a.step()
        b.step()
    np.testing.assert_allclose(a.current, b.current, rtol=1e-10, atol=1e-10)


def test_clamp_invariant():
    s = FluidSurface.from_preset("choppy", rng=UniformSource(1))
    for i in range(25):
        if i % 5 == 0:
            s.inject_random_splash(power=10.0, radius=6)
            s.inject_random_point(power=-20.0)
        s.step()
        assert np.all(s.current >= s.volume_min)
        assert np.all(s.current <= s.volume_max)


def test_steady_state():
    s = FluidSurface(width=6, height=5, volume_max=5.0, volume_min=1.0,
                     volume_target=3.0, volume_turbulence=0.0,
                     resistance_coefficient=0.5, gravity=0.0)
    s.step_n(10)
    assert np.all(s.current == 3.0)
    assert np.all(s.velocity == 0.0)


def test_determinism():
    def run():
        s = FluidSurface.from_preset("pond", rng=UniformSource(42))
        for i in range(12):
            if i % 4 == 0:
                s.inject_random_splash(radius=4)
            s.step()
        return s.current.copy()

    assert np.array_equal(run(), run())


def test_splash_at_corner_is_bounds_checked():
    s = FluidSurface(width=30, height=30, volume_turbulence=0.0, volume_target=1.0)
    before = s.current.copy()
    count = s.inject_splash(0, 0, 2.0, radius=20)
    changed = np.flatnonzero(s.current != before)
    # [-20, 20) window clipped to [0, 20) on both axes
    assert count == 400
    assert changed.size == 400
    assert np.all(s.volumes[:20, :20] == 3.0)
    assert np.all(s.volumes[20:, :] == 1.0)

    s.reset()
    assert s.inject_splash(29, 29, 1.0) == 21 * 21
    assert s.inject_splash(-30, 5, 1.0) == 0


def test_splash_default_power_and_radius():
    s = _reference_surface()
    count = s.inject_splash(2, 2)
    assert count == 16
    assert np.all(s.current == 15.0 + s.impact_power)


def test_inject_at_folds_out_of_grid():
    s = _reference_surface()
    i = s.inject_at(-1, 0, 1.0)
    assert i == s.index(1, 0)
    assert s.current[i] == 16.0
    # May exceed the bounds until the next step
    s.inject_at(2, 2, 100.0)
    assert s.current[s.index(2, 2)] == 115.0
    s.step()
    assert s.current.max() <= s.volume_max


def test_random_impulses_stay_in_grid():
    s = FluidSurface(width=7, height=3, rng=SequenceSource([0.999999, 0.0, 0.5]))
    x, z = s.inject_random_point(1.0)
    assert (x, z) == (6, 0)
    x, z = s.inject_random_splash(1.0, radius=1)
    assert 0 <= x < 7 and 0 <= z < 3


def test_non_finite_guard():
    """Negative ratio under the e exponent must not leak NaN."""
    s = FluidSurface(width=4, height=4, volume_max=10.0, volume_min=0.1,
                     volume_target=-1.0, gravity=-0.1)
    for _ in range(3):
        s.step()
        assert np.all(np.isfinite(s.current))
        assert np.all(s.current >= 0.1) and np.all(s.current <= 10.0)

    z = FluidSurface(width=3, height=3, volume_target=0.0, volume_max=2.0,
                     volume_min=0.5, gravity=-0.2)
    z.step_n(3)
    assert np.all(np.isfinite(z.current))
    assert np.all((z.current >= 0.5) & (z.current <= 2.0))


def test_configuration_errors():
    with pytest.raises(ConfigurationError):
        FluidSurface(width=1, height=4)
    with pytest.raises(ConfigurationError):
        FluidSurface(volume_min=5.0, volume_max=1.0)
    with pytest.raises(ConfigurationError):
        FluidSurface(resistance_coefficient=0.0)
    with pytest.raises(ConfigurationError):
        FluidSurface(resistance_coefficient=1.5)
    with pytest.raises(ConfigurationError):
        FluidSurface(gravity=float("nan"))
    with pytest.raises(ConfigurationError):
        FluidSurface(volume_turbulence=-1.0)
    with pytest.raises(ConfigurationError):
        FluidSurface.from_preset("no_such_preset")
    # ConfigurationError is a ValueError
    with pytest.raises(ValueError):
        FluidSurface(width=0, height=0)


def test_resize():
    s = _reference_surface()
    current = s.current
    assert s.resize(4, 4) is False
    assert s.current is current

    s.step()
    assert s.resize(6, 3) is True
    assert s.current.shape == (18,)
    assert s.volumes.shape == (3, 6)
    assert s.kernel.indexer.area == 18
    assert np.all(s.current == s.volume_target)
    assert np.array_equal(s.previous, s.current)
    assert s.generation == 0

    with pytest.raises(ConfigurationError):
        s.resize(1, 3)
    assert s.width == 6


def test_set_params():
    s = _reference_surface()
    s.set_params(gravity=-0.5, impact_power=None)
    assert s.gravity == -0.5
    assert s.impact_power == 5.0

    s.set_params(width=5)
    assert (s.width, s.height) == (5, 4)

    with pytest.raises(ConfigurationError):
        s.set_params(volume_min=50.0)
    with pytest.raises(ConfigurationError):
        s.set_params(viscosity=1.0)
    # Failed updates leave parameters alone
    assert s.volume_min == 10.0

    params = s.get_params()
    assert params["width"] == 5
    assert set(params) == {
        "width", "height", "volume_max", "volume_min", "volume_target",
        "volume_turbulence", "resistance_coefficient", "gravity", "impact_power",
    }


def test_stats():
    s = _reference_surface()
    stats = s.stats
    assert stats["generation"] == 0
    assert stats["mass"] == 16 * 15.0
    assert stats["spread"] == 0.0


if __name__ == "__main__":
    print("\n=== Testing FluidSurface ===\n")
    test_reset_and_turbulence()
    test_turbulence_replays_with_same_seed()
    test_end_to_end_reference()
    test_step_matches_naive_loop()
    test_row_path_matches_dense_path()
    test_clamp_invariant()
    test_steady_state()
    test_determinism()
    test_splash_at_corner_is_bounds_checked()
    test_splash_default_power_and_radius()
    test_inject_at_folds_out_of_grid()
    test_random_impulses_stay_in_grid()
    test_non_finite_guard()
    test_configuration_errors()
    test_resize()
    test_set_params()
    test_stats()
    print("\n✓ All tests passed!\n")
