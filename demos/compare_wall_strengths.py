# demos/compare_wall_strengths.py
"""
Run the same blast against open, default and reinforced walls and save
snapshots plus an overlaid pressure plot.
This script prepends the project root to sys.path so project imports like
`import config` work when invoked as `python demos/compare_wall_strengths.py`.
"""

from pathlib import Path
import sys

# --- ensure repo root is on sys.path so imports like `import config` work ---
HERE = Path(__file__).resolve()
REPO_ROOT = HERE.parent.parent  # one level up from demos/
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

# now safe to import project modules
import numpy as np
import matplotlib.pyplot as plt

from scenarios import load_and_apply_scenario
from visualization import wall_colors

OUT_DIR = REPO_ROOT / "demos"
OUT_DIR.mkdir(parents=True, exist_ok=True)


def run_and_snapshot(scenario: str, particles=301, ticks=200, seed=42):
    print(f"[demo] running {scenario} particles={particles} ticks={ticks}")
    sim = load_and_apply_scenario(scenario, num_particles=particles, tick_max=ticks, seed=seed)
    sim.run()

    pts = np.array(sim.query_particles())
    walls = sim.query_walls()

    fig, ax = plt.subplots(figsize=(8, 6))
    ax.scatter(pts[1:, 0], pts[1:, 1], s=4, c="red")
    for (ends, _), color in zip(walls, wall_colors(walls)):
        (x1, y1), (x2, y2) = ends
        ax.plot([x1, x2], [y1, y2], color=color, linewidth=4)
    ax.set_title(f"Scenario: {scenario}  (after {sim.tick} ticks)")
    ax.set_aspect("equal")
    ax.set_xlabel("X")
    ax.set_ylabel("Y")

    out = OUT_DIR / f"compare_{scenario}.png"
    fig.savefig(out, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"[demo] saved {out}")

    _, deltas = sim.query_flux_series()
    return np.array(deltas) / sim.particles.n


if __name__ == "__main__":
    curves = {name: run_and_snapshot(name) for name in ("open_field", "default", "reinforced")}

    fig, ax = plt.subplots(figsize=(8, 4))
    for name, curve in curves.items():
        ax.plot(curve, linewidth=1, label=name)
    ax.set_xlabel("Time (tick)")
    ax.set_ylabel("Pressure")
    ax.legend()
    out = OUT_DIR / "compare_pressure.png"
    fig.savefig(out, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print("[demo] complete, check the demos/ folder for compare_*.png")
