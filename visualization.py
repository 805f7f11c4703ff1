# visualization.py
"""
Matplotlib viewer for a BlastSimulation.

The viewer is an outside collaborator: the animation timer calls step() and
everything drawn comes from the query_* surface.
"""

from typing import List, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.collections import LineCollection

import config
from simulation import BlastSimulation

# ---- visualization knobs ----
DEBRIS_COLOR = "red"
SOURCE_COLOR = "green"
WALL_WIDTH = 4
FLUX_CIRCLE_COLOR = "steelblue"


def wall_colors(walls) -> List[Tuple[float, float, float, float]]:
    """
    Black for healthy walls, green for walls one hit from breaking,
    fully transparent for broken ones.
    """
    colors = []
    for _, strength in walls:
        if strength > 1:
            colors.append((0.0, 0.0, 0.0, 1.0))
        elif strength == 1:
            colors.append((0.0, 0.6, 0.0, 1.0))
        else:
            colors.append((1.0, 1.0, 1.0, 0.0))
    return colors


def run_visual_simulation(sim: BlastSimulation, interval_ms: int = None):
    if interval_ms is None:
        interval_ms = config.ANIMATION_INTERVAL_MS

    fig = plt.figure(figsize=(11, 5))
    ax = fig.add_subplot(1, 2, 1)
    ax_p = fig.add_subplot(2, 2, 2)
    ax_i = fig.add_subplot(2, 2, 4)

    x_min, x_max, y_min, y_max = sim.params.bounds
    ax.set_xlim(x_min, x_max)
    ax.set_ylim(y_min, y_max)
    ax.set_aspect("equal")
    ax.set_title("Blast Animation")
    ax.add_patch(plt.Circle((0, 0), sim.params.flux_radius, fill=False, linestyle="--",
                            color=FLUX_CIRCLE_COLOR, alpha=0.5))

    tick_max = sim.params.tick_max
    for a, label in ((ax_p, "Pressure"), (ax_i, "Impulse")):
        a.set_xlim(0, tick_max + 1)
        a.set_xlabel("Time")
        a.set_ylabel(label)
        a.grid(True, alpha=0.3)
    ax_p.set_title("Blast Pressure")
    ax_i.set_title("Blast Impulse")
    ax_p.set_ylim(-0.05, 0.2)
    ax_i.set_ylim(0, 1.05)

    sim.start()

    walls = sim.query_walls()
    wall_lines = LineCollection([ends for ends, _ in walls], linewidths=WALL_WIDTH, colors=wall_colors(walls))
    ax.add_collection(wall_lines)

    pts = np.array(sim.query_particles())
    debris_sc = ax.scatter(pts[1:, 0], pts[1:, 1], s=4, c=DEBRIS_COLOR)
    source_sc = ax.scatter(pts[:1, 0], pts[:1, 1], s=60, c=SOURCE_COLOR)
    (pressure_line,) = ax_p.plot([], [], color="black", linewidth=1)
    (impulse_line,) = ax_i.plot([], [], color="black", linewidth=1)
    info = ax.text(0.02, 0.98, "", transform=ax.transAxes, va="top", fontsize=9)

    n = sim.particles.n

    def _update(frame):
        if not sim.is_finished():
            sim.step()

        pts = np.array(sim.query_particles())
        debris_sc.set_offsets(pts[1:])
        source_sc.set_offsets(pts[:1])
        wall_lines.set_color(wall_colors(sim.query_walls()))

        counts, deltas = sim.query_flux_series()
        ticks = np.arange(sim.tick)
        pressure_line.set_data(ticks, np.array(deltas[:sim.tick]) / n)
        impulse_line.set_data(ticks, np.array(counts[:sim.tick]) / n)

        state = "running" if sim.is_running() else sim.state.value
        info.set_text(f"tick {sim.tick}/{tick_max + 1} ({state})")
        return debris_sc, source_sc, wall_lines, pressure_line, impulse_line, info

    anim = FuncAnimation(fig, _update, interval=interval_ms, blit=False, cache_frame_data=False)
    plt.tight_layout()
    plt.show()
    return anim
