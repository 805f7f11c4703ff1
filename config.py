# config.py
# =========
# Global configuration / experiment knobs for the blast flux simulation.
#
# Each block below is grouped by purpose. Every parameter has a comment
# explaining what it controls and how it interacts with other parameters.
#
# Keep this file under version control so experiments are reproducible.
# BlastSimulation reads these as defaults; pass keyword overrides to change a
# single engine without touching the globals.

import numbers
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

# -------------------------
# CORE RUN PARAMETERS
# -------------------------
NUM_PARTICLES = 1001
# - NUM_PARTICLES:
#   Total particle count including the source particle (index 0).
#   Cost per tick is O(n^2) in the pairwise force phase.

MAX_TICKS = 355
# - MAX_TICKS:
#   Last tick index that is simulated. The engine runs ticks 0..MAX_TICKS and
#   is Finished once the tick counter passes this value.

SEED = 42
# - SEED:
#   RNG seed for debris placement. Every reset()/start() re-seeds, so the same
#   seed gives identical runs. Set to None here, or pass seed=None to
#   BlastSimulation, for nondeterministic runs. Scenario and CLI overrides
#   treat None as "not given" and keep this value.

# -------------------------
# FORCES
# -------------------------
FORCE_FACTOR = 100.0
# - FORCE_FACTOR:
#   Scales pairwise repulsion between debris particles. The per-pair velocity
#   delta is FORCE_FACTOR / dist / n / (tick + DAMPING_OFFSET) along the unit
#   vector joining the pair.

DAMPING_OFFSET = 200
# - DAMPING_OFFSET:
#   Discrete-time damping added to the tick in the force denominator.
#   Larger values soften the initial burst.

DISTANCE_FLOOR = 0.01
# - DISTANCE_FLOOR:
#   Separations below this are floored before being used as a divisor.

SOURCE_BIAS = 0.01
# - SOURCE_BIAS:
#   Constant-magnitude nudge of every debris particle toward the source each
#   tick. Produces the negative (under-pressure) phase of the wave.

SOURCE_POSITION = (0.0, -1.0)
# - SOURCE_POSITION:
#   Fixed location of the source particle.

INITIAL_OUTWARD_BIAS = 0.1
# - INITIAL_OUTWARD_BIAS:
#   Added to the initial x velocity of every debris particle.

# -------------------------
# WALLS
# -------------------------
WALL_VERTICES = [
    (60.0, 75.0),
    (80.0, 45.0),
    (80.0, 15.0),
    (80.0, -15.0),
    (80.0, -45.0),
    (60.0, -75.0),
]
# - WALL_VERTICES:
#   Ordered polyline; consecutive vertices form the wall segments.

WALL_BASE_STRENGTHS = [2, 2, 2, 2, 2]
# - WALL_BASE_STRENGTHS:
#   One integer per segment. 0 means the segment starts broken (passable).

WALL_DENSITY_DIVISOR = 450
# - WALL_DENSITY_DIVISOR:
#   Wall strengths are scaled by 1 + NUM_PARTICLES // WALL_DENSITY_DIVISOR so
#   denser swarms face tougher walls.

# -------------------------
# FLUX
# -------------------------
FLUX_RADIUS = 70.0
# - FLUX_RADIUS:
#   Debris beyond this distance from the origin count towards the cumulative
#   (impulse proxy) count. The per-tick delta is the pressure proxy.

FLUX_MARGIN = 10
# - FLUX_MARGIN:
#   Extra slots allocated after MAX_TICKS in the flux arrays.

# -------------------------
# BOUNDING BOX
# -------------------------
BOUNDS = (-196.0, 202.0, -147.0, 150.0)
# - BOUNDS: (x_min, x_max, y_min, y_max)
#   Particles are clamped back inside after every tick. Crossing x_max puts
#   the particle at x_max - 1; the other sides snap to the bound.

# -------------------------
# OUTPUT / VISUALIZATION
# -------------------------
OUTPUT_DIR = "out"
# - OUTPUT_DIR:
#   Default directory for CSV / PNG output of the runners.

ANIMATION_INTERVAL_MS = 100
# - ANIMATION_INTERVAL_MS:
#   Delay between ticks in the matplotlib viewer.

# -------------------------
# NOTES & TUNING GUIDANCE
# -------------------------
# - For quick debugging use NUM_PARTICLES around 100-200 and MAX_TICKS ~100.
# - Raising FORCE_FACTOR speeds the front up and breaks walls earlier.
# - Walls break in a single tick once the hits in that tick reach the
#   remaining strength; they do not erode gradually.


class BlastConfigError(ValueError):
    """Raised when a blast simulation is constructed with invalid parameters."""


@dataclass
class BlastParams:
    """
    Fixed parameter set of one engine. Validated once at construction.
    """
    num_particles: int = NUM_PARTICLES
    force_factor: float = FORCE_FACTOR
    tick_max: int = MAX_TICKS
    flux_radius: float = FLUX_RADIUS
    wall_vertices: List[Tuple[float, float]] = field(default_factory=lambda: list(WALL_VERTICES))
    wall_strengths: List[int] = field(default_factory=lambda: list(WALL_BASE_STRENGTHS))
    bounds: Tuple[float, float, float, float] = BOUNDS
    seed: Optional[int] = SEED
    damping_offset: float = DAMPING_OFFSET
    source_bias: float = SOURCE_BIAS

    @classmethod
    def from_config(cls, **overrides) -> "BlastParams":
        unknown = set(overrides) - set(cls.__dataclass_fields__)
        if unknown:
            raise BlastConfigError(f"Unknown parameters: {sorted(unknown)}")
        params = cls(**{k: v for k, v in overrides.items() if v is not None or k == "seed"})
        params.validate()
        return params

    @property
    def wall_scale(self) -> int:
        return 1 + self.num_particles // WALL_DENSITY_DIVISOR

    def validate(self) -> None:
        if isinstance(self.num_particles, bool) or not isinstance(self.num_particles, numbers.Integral) \
                or self.num_particles < 1:
            raise BlastConfigError(f"num_particles must be a positive integer, got {self.num_particles!r}")
        self.num_particles = int(self.num_particles)
        if self.tick_max < 0:
            raise BlastConfigError(f"tick_max must be >= 0, got {self.tick_max}")
        if self.flux_radius <= 0:
            raise BlastConfigError(f"flux_radius must be > 0, got {self.flux_radius}")
        if self.damping_offset <= 0:
            raise BlastConfigError(f"damping_offset must be > 0, got {self.damping_offset}")

        x_min, x_max, y_min, y_max = self.bounds
        if x_min >= x_max - 1 or y_min >= y_max:
            raise BlastConfigError(f"Empty bounding box: {self.bounds}")

        validate_wall_geometry(self.wall_vertices, self.wall_strengths)


def validate_wall_geometry(vertices: Sequence[Tuple[float, float]], strengths: Sequence[int]) -> None:
    if len(vertices) < 2:
        raise BlastConfigError(f"Wall geometry needs at least 2 vertices, got {len(vertices)}")
    if len(strengths) != len(vertices) - 1:
        raise BlastConfigError(
            f"Expected {len(vertices) - 1} wall strengths for {len(vertices)} vertices, got {len(strengths)}"
        )
    for i, s in enumerate(strengths):
        if int(s) != s or s < 0:
            raise BlastConfigError(f"Wall strength {i} must be a non-negative integer, got {s!r}")
    for i in range(len(vertices) - 1):
        (x1, y1), (x2, y2) = vertices[i], vertices[i + 1]
        if x1 == x2 and y1 == y2:
            raise BlastConfigError(f"Wall segment {i} has zero length at ({x1}, {y1})")
