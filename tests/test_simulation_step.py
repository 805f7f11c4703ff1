import numpy as np
import pytest

from config import SOURCE_POSITION, BlastConfigError
from physics import PassThroughCollisionModel
from scenarios import load_and_apply_scenario
from simulation import BlastSimulation, SimulationState


def _small_sim(**overrides):
    params = dict(num_particles=60, tick_max=40, seed=0)
    params.update(overrides)
    return BlastSimulation(**params)


def test_state_machine():
    sim = _small_sim(tick_max=3)
    assert sim.state is SimulationState.IDLE

    # stepping while idle does nothing
    assert sim.step() == 0
    assert sim.tick == 0

    sim.start()
    assert sim.state is SimulationState.RUNNING
    assert sim.is_running()
    for _ in range(4):
        assert not sim.is_finished()
        sim.step()
    assert sim.is_finished()
    assert not sim.is_running()
    assert sim.tick == 4

    sim.step()
    assert sim.tick == 4

    sim.reset()
    assert sim.state is SimulationState.IDLE
    assert sim.tick == 0
    assert sim.query_flux_series()[0] == [0, 0, 0, 0]


def test_simulation_step_basic():
    sim = _small_sim()
    sim.start()
    initial_tick = sim.tick
    sim.step()
    assert sim.tick == initial_tick + 1

    # run a few more steps to ensure no exceptions and time advances
    for _ in range(5):
        sim.step()
    assert sim.tick == initial_tick + 6
    assert sim.flux.ticks_recorded() == 6


def test_source_never_moves():
    sim = _small_sim()
    sim.run()
    assert sim.query_particles()[0] == SOURCE_POSITION


def test_positions_stay_in_bounds():
    sim = _small_sim(force_factor=1e6, wall_strengths=[0, 0, 0, 0, 0])
    x_min, x_max, y_min, y_max = sim.params.bounds
    sim.start()
    while not sim.is_finished():
        sim.step()
        pts = np.array(sim.query_particles())
        assert np.all(pts[:, 0] >= x_min) and np.all(pts[:, 0] <= x_max)
        assert np.all(pts[:, 1] >= y_min) and np.all(pts[:, 1] <= y_max)


def test_wall_strength_non_increasing_across_ticks():
    sim = _small_sim(num_particles=120, tick_max=120, force_factor=400.0)
    sim.start()
    previous = [s for _, s in sim.query_walls()]
    while not sim.is_finished():
        sim.step()
        current = [s for _, s in sim.query_walls()]
        for before, after in zip(previous, current):
            assert after <= before
            if before == 0:
                assert after == 0
        previous = current


def test_wall_strength_scales_with_density():
    assert [s for _, s in _small_sim(num_particles=60).query_walls()] == [2] * 5
    assert [s for _, s in _small_sim(num_particles=901).query_walls()] == [6] * 5


def test_same_seed_same_run():
    a = _small_sim(seed=123)
    b = _small_sim(seed=123)
    a.run()
    b.run()
    assert a.query_particles() == b.query_particles()
    assert a.query_flux_series() == b.query_flux_series()
    assert a.query_walls() == b.query_walls()


def test_reset_replays_identically():
    sim = _small_sim(seed=5)
    sim.run()
    first = (sim.query_particles(), sim.query_flux_series())
    sim.reset()
    sim.run()
    assert (sim.query_particles(), sim.query_flux_series()) == first


def test_delta_sum_equals_final_impulse():
    sim = _small_sim(force_factor=2000.0, wall_strengths=[0, 0, 0, 0, 0])
    sim.run()
    counts, deltas = sim.query_flux_series()
    assert len(counts) == len(deltas) == sim.params.tick_max + 1
    assert sum(deltas) == counts[-1]
    assert counts[-1] > 0


def test_pass_through_model_ignores_walls():
    sim = _small_sim(collision_model=PassThroughCollisionModel(), tick_max=5)
    sim.run()
    assert sim.physics.total_hits == 0
    assert sim.walls.broken_count() == 0


def test_particle_backs_off_single_wall():
    sim = load_and_apply_scenario("single_wall")
    assert sim.params.num_particles == 11
    assert sim.params.force_factor == 100.0
    assert sim.params.tick_max == 50

    sim.start()
    sim.particles.x[1] = 70.0
    sim.particles.y[1] = 0.0
    sim.particles.vx[1] = 20.0
    sim.particles.vy[1] = 0.0

    hits = sim.step()

    x, _ = sim.query_particles()[1]
    assert x <= 79.0
    assert hits >= 1
    assert sim.particles.vx[1] == pytest.approx(0.0)
    assert abs(sim.particles.vy[1]) > 10.0
    # one hit against a wall of strength 2 does not break it
    assert sim.query_walls()[0][1] == 2


@pytest.mark.parametrize(
    "overrides",
    [
        {"num_particles": 0},
        {"num_particles": -5},
        {"num_particles": True},
        {"num_particles": 20.0},
        {"wall_vertices": [(80, 0)], "wall_strengths": []},
        {"wall_strengths": [1, 1]},
        {"tick_max": -1},
        {"flux_radius": 0},
        {"bounds": (10, 5, 0, 1)},
        {"no_such_param": 1},
    ],
)
def test_invalid_construction_fails_fast(overrides):
    with pytest.raises(BlastConfigError):
        BlastSimulation(**overrides)


def test_numpy_integer_particle_count():
    sim = _small_sim(num_particles=np.int64(20))
    assert sim.params.num_particles == 20
    assert type(sim.params.num_particles) is int
    assert len(sim.query_particles()) == 20
