import pytest

import config
from particles import ParticleField
from physics import PhysicsEngine, SlidingWallCollisionModel, WallSystem, truncate_velocity


def _single_wall(strength=2):
    # vertical wall at x=80 spanning y in [-50, 50]
    return WallSystem([(80, -50), (80, 50)], [strength])


def _wedge():
    # acute corner at (80, 50): vertical wall plus a steep wall back down to (70, -50)
    return WallSystem([(80, -50), (80, 50), (70, -50)], [5, 5])


# --------------------------------------------------
# INTERCEPT TEST
# --------------------------------------------------
def test_intercept_inside_bounding_box():
    model = SlidingWallCollisionModel()
    walls = WallSystem([(0, 0), (10, 10)], [1])
    # from below the line to above it, inside the segment's box
    assert model.find_intercept(6, 4, -2, 2, walls) == 0


def test_no_intercept_without_box_overlap():
    model = SlidingWallCollisionModel()
    walls = WallSystem([(0, 0), (10, 10)], [1])
    assert model.find_intercept(20, 0, 5, 1, walls) is None
    assert model.find_intercept(0, 20, 1, 5, walls) is None


def test_no_intercept_when_staying_on_one_side():
    model = SlidingWallCollisionModel()
    walls = WallSystem([(0, 0), (10, 10)], [1])
    assert model.find_intercept(6, 4, 1, 0, walls) is None


def test_vertical_wall_uses_x_crossing():
    model = SlidingWallCollisionModel()
    walls = _single_wall()
    assert model.find_intercept(70, 0, 20, 0, walls) == 0
    assert model.find_intercept(70, 0, 5, 0, walls) is None


def test_broken_walls_are_ignored():
    model = SlidingWallCollisionModel()
    walls = _single_wall(strength=0)
    assert model.find_intercept(70, 0, 20, 0, walls) is None


def test_first_segment_by_index_wins():
    model = SlidingWallCollisionModel()
    # two overlapping vertical walls at x=80
    walls = WallSystem([(80, -50), (80, 50), (80, -40)], [1, 1])
    assert model.find_intercept(70, 0, 20, 0, walls) == 0


# --------------------------------------------------
# SLIDE
# --------------------------------------------------
def test_perpendicular_hit_slides_along_wall():
    model = SlidingWallCollisionModel()
    walls = _single_wall()

    move = model.resolve(70.0, 0.0, 20.0, 0.0, walls)

    # backed off one unit from the intercept at x=80
    assert move.x == pytest.approx(79.0)
    # no component normal to the wall is left
    assert move.vx == 0.0
    # 20 units of speed minus the 9 already covered
    assert move.vy == pytest.approx(11.0)
    assert move.y == pytest.approx(11.0)
    assert move.hits == [0]
    assert not move.degenerate


def test_slide_keeps_forward_direction():
    model = SlidingWallCollisionModel()
    walls = _single_wall()

    move = model.resolve(70.0, 0.0, 20.0, -5.0, walls)
    assert move.vx == 0.0
    assert move.vy < 0


def test_slide_on_sloped_wall_follows_wall_direction():
    model = SlidingWallCollisionModel()
    walls = WallSystem([(0, 0), (10, 10)], [1])

    x, y, vx, vy = model.slide(8.0, 2.0, -4.0, 4.0, walls.segments[0])
    # perpendicular approach: dot product 0 keeps the segment's own direction
    assert vx == pytest.approx(vy)
    assert (x, y) == pytest.approx((6.0, 4.0))


def test_parallel_trajectory_does_not_divide_by_zero():
    model = SlidingWallCollisionModel()
    walls = WallSystem([(0, 0), (10, 10)], [1])
    xint, yint = model.intercept_point(2.0, 2.0, 1.0, 1.0, walls.segments[0])
    assert (xint, yint) == (2.0, 2.0)


def test_vertical_trajectory_on_vertical_wall():
    model = SlidingWallCollisionModel()
    walls = _single_wall()
    xint, yint = model.intercept_point(80.0, 0.0, 0.0, 5.0, walls.segments[0])
    assert (xint, yint) == (80.0, 0.0)


def test_truncate_velocity_toward_zero():
    assert truncate_velocity(1.239) == 1.23
    assert truncate_velocity(-1.239) == -1.23
    assert truncate_velocity(0.009) == 0.0
    assert truncate_velocity(-0.009) == 0.0


# --------------------------------------------------
# DEGENERATE CORNERS
# --------------------------------------------------
def test_same_wall_twice_stops_particle():
    model = SlidingWallCollisionModel()
    walls = _wedge()

    # hits the vertical wall, slides up into the steep wall, slides back
    # toward the corner and crosses the vertical wall again
    move = model.resolve(77.0, 0.0, 60.0, 0.0, walls)

    assert move.degenerate
    assert (move.vx, move.vy) == (0.0, 0.0)
    assert move.hits == [0, 1]
    assert move.x == pytest.approx(79.0)
    assert move.y == pytest.approx(39.0)


def test_no_degeneracy_with_short_slide():
    model = SlidingWallCollisionModel()
    walls = _wedge()

    move = model.resolve(77.0, 0.0, 10.0, 0.0, walls)
    assert not move.degenerate
    assert move.hits == [0]
    assert move.vx == 0.0
    assert move.vy == pytest.approx(8.0)


# --------------------------------------------------
# STARTING ON A WALL LINE
# --------------------------------------------------
def test_leaving_wall_line_is_not_a_hit():
    model = SlidingWallCollisionModel()
    walls = _single_wall()

    move = model.resolve(80.0, 0.0, -5.0, 0.0, walls)
    assert move.hits == []
    assert not move.degenerate
    assert (move.x, move.y) == (75.0, 0.0)
    assert (move.vx, move.vy) == (-5.0, 0.0)


def test_running_along_wall_line_is_not_a_hit():
    model = SlidingWallCollisionModel()
    walls = _single_wall()

    move = model.resolve(80.0, 0.0, 0.0, 5.0, walls)
    assert move.hits == []
    assert (move.x, move.y) == (80.0, 5.0)


def test_crossing_from_next_to_wall_backs_off_one_unit():
    model = SlidingWallCollisionModel()
    walls = _single_wall()

    move = model.resolve(79.995, 0.0, 5.0, 0.0, walls)
    assert move.hits == [0]
    assert not move.degenerate
    # stepped back against the motion, then slid along the wall
    assert move.x == pytest.approx(78.995)
    assert move.vx == 0.0
    assert move.vy == pytest.approx(4.0)


def test_particle_on_wall_line_keeps_moving_across_ticks():
    engine = PhysicsEngine(config.BOUNDS)
    walls = _single_wall()
    field = ParticleField(2)
    field.x[1], field.y[1] = 80.0, 0.0
    field.vx[1], field.vy[1] = -5.0, 0.0

    for _ in range(5):
        assert engine.step(field, walls).sum() == 0

    assert field.x[1] == pytest.approx(55.0)
    assert engine.hits_per_step == [0] * 5
    assert engine.degenerate_stops == 0
