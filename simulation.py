# simulation.py

import enum
import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from config import BlastParams
from flux import FluxRecorder
from particles import ParticleField
from physics import BaseCollisionModel, PhysicsEngine, WallSystem

logger = logging.getLogger("blast_sim")

Point = Tuple[float, float]


class SimulationState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


class BlastSimulation:
    """Owns one blast engine: particles, walls, flux and the tick clock."""

    def __init__(self, collision_model: Optional[BaseCollisionModel] = None, **params):
        # fails fast with BlastConfigError on bad parameters
        self.params = BlastParams.from_config(**params)
        p = self.params

        self.particles = ParticleField(p.num_particles, damping_offset=p.damping_offset, source_bias=p.source_bias)
        self.walls = WallSystem(p.wall_vertices, p.wall_strengths)
        self.flux = FluxRecorder(p.tick_max)
        self.physics = PhysicsEngine(p.bounds, collision_model=collision_model)

        self.tick = 0
        self.state = SimulationState.IDLE
        self.broken_at: Dict[int, int] = {}
        self._reinitialize()

        logger.info(
            "BlastSimulation created: %d particles, %d wall segments, tick_max=%d",
            p.num_particles, len(self.walls), p.tick_max,
        )

    # ---------- control surface ----------
    def _reinitialize(self):
        rng = np.random.default_rng(self.params.seed)
        self.tick = 0
        self.particles.reset(rng)
        self.walls.reset_strengths(self.params.wall_scale)
        self.flux.clear()
        self.physics.reset_metrics()
        self.broken_at = {}

    def _set_state(self, state: SimulationState):
        if state is not self.state:
            logger.debug("state %s -> %s at tick %d", self.state.value, state.value, self.tick)
        self.state = state

    def start(self):
        """Reinitialise everything and begin ticking (restarts a running engine)."""
        self._reinitialize()
        self._set_state(SimulationState.RUNNING)

    def reset(self):
        """Reinitialise everything and go back to Idle."""
        self._reinitialize()
        self._set_state(SimulationState.IDLE)

    def is_finished(self) -> bool:
        return self.state is SimulationState.FINISHED

    def is_running(self) -> bool:
        return self.state is SimulationState.RUNNING

    # ---------- core step ----------
    def step(self) -> int:
        """
        Single sim tick.

        Returns the number of wall hits this tick; 0 (and nothing happens)
        unless the engine is Running.
        """
        if self.state is not SimulationState.RUNNING:
            return 0
        tick = self.tick

        # 1) forces
        self.particles.apply_pairwise_forces(tick, self.params.force_factor)
        self.particles.apply_source_bias()

        # 2) walls: resolve + clamp, aggregated hits
        hits = self.physics.step(self.particles, self.walls)

        # 3) flux
        self.flux.record_tick(tick, self.particles, self.params.flux_radius)

        # 4) wall breaking
        for w in self.walls.degrade(hits):
            self.broken_at[w] = tick

        self.tick += 1
        if self.tick > self.params.tick_max:
            self._set_state(SimulationState.FINISHED)

        return int(hits.sum())

    def run(self, max_ticks: Optional[int] = None) -> "BlastSimulation":
        """Start and step until Finished (or max_ticks steps were taken)."""
        self.start()
        steps = 0
        while not self.is_finished():
            if max_ticks is not None and steps >= max_ticks:
                break
            self.step()
            steps += 1
        return self

    # ---------- queries ----------
    def query_particles(self) -> List[Point]:
        return self.particles.positions()

    def query_walls(self) -> List[Tuple[Tuple[Point, Point], int]]:
        return [(ends, int(s)) for ends, s in zip(self.walls.endpoints(), self.walls.strengths)]

    def query_flux_series(self) -> Tuple[List[int], List[int]]:
        return self.flux.series(self.params.tick_max)

    # ---------- metrics & helpers ----------
    def get_metrics_summary(self) -> Dict[str, object]:
        counts, deltas = self.query_flux_series()
        debris = self.particles.debris_count
        # series position t holds the state after tick t
        last = counts[self.tick - 1] if self.tick > 0 else 0
        return {
            "num_particles": self.particles.n,
            "ticks": self.tick,
            "state": self.state.value,
            "total_wall_hits": int(self.physics.total_hits),
            "degenerate_stops": int(self.physics.degenerate_stops),
            "walls_broken": self.walls.broken_count(),
            "broken_at": dict(self.broken_at),
            "final_impulse": last,
            "peak_pressure": max(deltas) if deltas else 0,
            "escaped_fraction": last / debris if debris > 0 else 0.0,
        }

    def summary(self):
        m = self.get_metrics_summary()
        print("\n=== Blast Summary ===")
        print(f"Ticks: {m['ticks']} ({m['state']})")
        print(f"Particles: {m['num_particles']}")
        print(f"Total wall hits: {m['total_wall_hits']}")
        print(f"Degenerate corner stops: {m['degenerate_stops']}")
        print(f"Walls broken: {m['walls_broken']}/{len(self.walls)}")
        for w, t in sorted(m["broken_at"].items()):
            print(f"  segment {w} broke at tick {t}")
        print(f"Peak pressure (particles/tick): {m['peak_pressure']}")
        print(f"Final impulse (particles): {m['final_impulse']}")
        print(f"Escaped fraction: {m['escaped_fraction']:.2f}")
