import numpy as np
import pytest

from config import SOURCE_POSITION
from particles import ParticleField


def _field(n=6, seed=0):
    field = ParticleField(n)
    field.reset(np.random.default_rng(seed))
    return field


def test_initial_layout():
    field = _field(50)
    assert (field.x[0], field.y[0]) == SOURCE_POSITION
    assert (field.vx[0], field.vy[0]) == (0.0, 0.0)

    assert np.all(np.abs(field.x[1:]) <= 0.5)
    assert np.all(np.abs(field.y[1:]) <= 0.5)
    # initial velocity follows position with an outward x bias
    assert np.allclose(field.vx[1:], field.x[1:] + 0.1)
    assert np.allclose(field.vy[1:], field.y[1:])


def test_reset_reuses_arrays():
    field = _field(10)
    xs = field.x
    field.reset(np.random.default_rng(1))
    assert field.x is xs
    assert (field.x[0], field.y[0]) == SOURCE_POSITION


def test_pairwise_deltas_are_exact_negations():
    field = ParticleField(3)
    field.x[:] = [0.0, 0.3, -0.2]
    field.y[:] = [-1.0, 0.1, 0.4]
    field.vx[:] = 0.0
    field.vy[:] = 0.0

    field.apply_pairwise_forces(tick=5, strength_factor=100.0)

    assert field.vx[1] == -field.vx[2]
    assert field.vy[1] == -field.vy[2]
    # pushed apart along the line joining them
    assert field.vx[1] > 0 and field.vx[2] < 0
    # the source never moves in the force phase
    assert (field.vx[0], field.vy[0]) == (0.0, 0.0)


def test_pairwise_force_magnitude_and_damping():
    field = ParticleField(3)
    field.x[:] = [0.0, 0.0, 2.0]
    field.y[:] = [-1.0, 0.0, 0.0]
    field.vx[:] = 0.0
    field.vy[:] = 0.0

    field.apply_pairwise_forces(tick=0, strength_factor=100.0)
    # unit vector * 100 / dist / n / (tick + 200)
    expected = 100.0 / 2.0 / 3 / 200
    assert field.vx[2] == pytest.approx(expected)
    assert field.vy[2] == 0.0

    field.vx[:] = 0.0
    field.apply_pairwise_forces(tick=200, strength_factor=100.0)
    assert field.vx[2] == pytest.approx(expected / 2)


def test_total_momentum_is_conserved_by_pairwise_forces():
    field = _field(40, seed=7)
    before = (field.vx[1:].sum(), field.vy[1:].sum())
    field.apply_pairwise_forces(tick=0, strength_factor=100.0)
    after = (field.vx[1:].sum(), field.vy[1:].sum())
    assert after == pytest.approx(before, abs=1e-9)


def test_coincident_particles_stay_finite():
    field = ParticleField(3)
    field.x[:] = [0.0, 0.2, 0.2]
    field.y[:] = [-1.0, 0.2, 0.2]
    field.vx[:] = 0.0
    field.vy[:] = 0.0
    field.apply_pairwise_forces(tick=0, strength_factor=100.0)
    assert np.all(np.isfinite(field.vx))
    assert np.all(np.isfinite(field.vy))


def test_source_bias_is_constant_magnitude():
    field = ParticleField(3)
    field.x[:] = [0.0, 3.0, 0.0]
    field.y[:] = [-1.0, -1.0, 99.0]
    field.vx[:] = 0.0
    field.vy[:] = 0.0

    field.apply_source_bias()

    assert (field.vx[1], field.vy[1]) == pytest.approx((-0.01, 0.0))
    assert (field.vx[2], field.vy[2]) == pytest.approx((0.0, -0.01))
    assert (field.vx[0], field.vy[0]) == (0.0, 0.0)


def test_source_bias_on_top_of_source_is_zero():
    field = ParticleField(2)
    field.x[:] = [0.0, 0.0]
    field.y[:] = [-1.0, -1.0]
    field.vx[:] = 0.0
    field.vy[:] = 0.0
    field.apply_source_bias()
    assert (field.vx[1], field.vy[1]) == (0.0, 0.0)


def test_rejects_empty_field():
    with pytest.raises(ValueError):
        ParticleField(0)
