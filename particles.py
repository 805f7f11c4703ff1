# particles.py

from typing import List, Optional, Tuple

import numpy as np

from config import (
    DAMPING_OFFSET,
    DISTANCE_FLOOR,
    INITIAL_OUTWARD_BIAS,
    SOURCE_BIAS,
    SOURCE_POSITION,
)

SOURCE = 0


class ParticleField:
    """
    Positions and velocities of the swarm, stored as parallel numpy arrays
    indexed by particle id.

    Particle 0 is the source: it sits still at SOURCE_POSITION and only
    attracts the debris (1..n-1) through the source bias.
    """

    def __init__(self, n: int, damping_offset: float = DAMPING_OFFSET, source_bias: float = SOURCE_BIAS):
        self.n = 0
        self.damping_offset = float(damping_offset)
        self.source_bias = float(source_bias)
        self.initialize(n)

    def initialize(self, n: int, rng: Optional[np.random.Generator] = None):
        if n < 1:
            raise ValueError(f"ParticleField needs at least one particle, got {n}")
        self.n = int(n)
        self.x = np.zeros(self.n)
        self.y = np.zeros(self.n)
        self.vx = np.zeros(self.n)
        self.vy = np.zeros(self.n)
        self.reset(rng)

    def reset(self, rng: Optional[np.random.Generator] = None):
        """Place the source and scatter the debris around the origin."""
        if rng is None:
            rng = np.random.default_rng()

        self.x[SOURCE], self.y[SOURCE] = SOURCE_POSITION
        self.vx[SOURCE] = 0.0
        self.vy[SOURCE] = 0.0

        m = self.n - 1
        if m == 0:
            return
        self.x[1:] = rng.random(m) - 0.5
        self.y[1:] = rng.random(m) - 0.5
        self.vx[1:] = self.x[1:] + INITIAL_OUTWARD_BIAS
        self.vy[1:] = self.y[1:]

    @property
    def debris_count(self) -> int:
        return self.n - 1

    def apply_pairwise_forces(self, tick: int, strength_factor: float):
        """
        Repulsion between every pair of debris particles, decaying with the
        reciprocal of their separation.

        For i < j the delta applied to j is the exact negation of the delta
        applied to i.
        """
        if self.n < 3:
            return
        x = self.x[1:]
        y = self.y[1:]

        # dx[i, j] = x[j] - x[i]; antisymmetric bit-for-bit
        dx = x[np.newaxis, :] - x[:, np.newaxis]
        dy = y[np.newaxis, :] - y[:, np.newaxis]
        dist = np.sqrt(dx * dx + dy * dy)
        # floored value divides twice: once to normalise, once for the 1/d magnitude
        dist = np.maximum(dist, DISTANCE_FLOOR)

        scale = strength_factor / self.n / (tick + self.damping_offset)
        push_x = dx / dist / dist * scale
        push_y = dy / dist / dist * scale
        # the diagonal has dx == 0, so self-pushes vanish

        self.vx[1:] -= push_x.sum(axis=1)
        self.vy[1:] -= push_y.sum(axis=1)

    def apply_source_bias(self):
        """Constant-magnitude pull of every debris particle toward the source."""
        if self.n < 2:
            return
        dx = self.x[SOURCE] - self.x[1:]
        dy = self.y[SOURCE] - self.y[1:]
        mag = np.sqrt(dx * dx + dy * dy)
        # a particle sitting on the source has no direction to follow
        safe = np.where(mag > 0, mag, 1.0)
        self.vx[1:] += np.where(mag > 0, dx / safe, 0.0) * self.source_bias
        self.vy[1:] += np.where(mag > 0, dy / safe, 0.0) * self.source_bias

    def distances_from_origin(self) -> np.ndarray:
        return np.hypot(self.x, self.y)

    def positions(self) -> List[Tuple[float, float]]:
        return [(float(a), float(b)) for a, b in zip(self.x, self.y)]
