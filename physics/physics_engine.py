# physics/physics_engine.py

from typing import List, Optional, Tuple

import numpy as np

from .collision_models import (
    BaseCollisionModel,
    SlidingWallCollisionModel,
)
from .walls import WallSystem


class PhysicsEngine:
    """
    Wall phase of a tick.
    Moves every debris particle through the collision model, clamps it to the
    bounding box and aggregates the hits per wall segment.
    """

    def __init__(
        self,
        bounds: Tuple[float, float, float, float],
        collision_model: Optional[BaseCollisionModel] = None,
    ):
        # Default to sliding walls if none specified
        self.collision_model = collision_model or SlidingWallCollisionModel()
        self.bounds = bounds

        # Metrics
        self.total_hits = 0
        self.hits_per_step: List[int] = []
        self.degenerate_stops = 0

    def reset_metrics(self):
        self.total_hits = 0
        self.hits_per_step = []
        self.degenerate_stops = 0

    def clamp(self, x: float, y: float) -> Tuple[float, float]:
        x_min, x_max, y_min, y_max = self.bounds
        if x > x_max:
            x = x_max - 1
        if x < x_min:
            x = x_min
        if y < y_min:
            y = y_min
        if y > y_max:
            y = y_max
        return x, y

    def step(self, field, walls: WallSystem) -> np.ndarray:
        """
        Apply the wall phase for one tick.

        Args:
            field: ParticleField; index 0 (the source) is never moved
            walls: WallSystem, read-only here

        Returns:
            Hit counts per segment for this tick.
        """
        hits = np.zeros(len(walls), dtype=np.int64)
        xs, ys, vxs, vys = field.x, field.y, field.vx, field.vy

        for i in range(1, field.n):
            move = self.collision_model.resolve(
                float(xs[i]), float(ys[i]), float(vxs[i]), float(vys[i]), walls
            )
            xs[i], ys[i] = self.clamp(move.x, move.y)
            vxs[i] = move.vx
            vys[i] = move.vy

            for w in move.hits:
                hits[w] += 1
            if move.degenerate:
                self.degenerate_stops += 1

        # Record metrics
        step_hits = int(hits.sum())
        self.total_hits += step_hits
        self.hits_per_step.append(step_hits)

        return hits
