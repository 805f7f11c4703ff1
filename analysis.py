# analysis.py

from typing import Dict, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt

from simulation import BlastSimulation


# =========================================================
# 1. Blast metrics from the flux series
# =========================================================

def compute_blast_metrics(counts: Sequence[int], deltas: Sequence[int], num_debris: int) -> Dict[str, Optional[float]]:
    """
    Summarise a flux series.

    Returns a dict with:
      - arrival_tick: first tick with a positive delta (None if none)
      - peak_pressure / peak_tick: largest delta and where it occurs
      - positive_phase_ticks: ticks from arrival until the delta first drops
        to 0 or below after the peak
      - min_pressure: most negative delta (particles pulled back inside)
      - final_impulse: last cumulative count
      - escaped_fraction: final_impulse / num_debris
    """
    counts = np.asarray(counts, dtype=np.int64)
    deltas = np.asarray(deltas, dtype=np.int64)

    if len(deltas) == 0:
        return {
            "arrival_tick": None,
            "peak_pressure": 0,
            "peak_tick": None,
            "positive_phase_ticks": 0,
            "min_pressure": 0,
            "final_impulse": 0,
            "escaped_fraction": 0.0,
        }

    positive = np.flatnonzero(deltas > 0)
    arrival = int(positive[0]) if len(positive) else None

    peak_tick = int(np.argmax(deltas))
    peak = int(deltas[peak_tick])

    positive_phase = 0
    if arrival is not None:
        after_peak = np.flatnonzero(deltas[peak_tick:] <= 0)
        end = peak_tick + int(after_peak[0]) if len(after_peak) else len(deltas)
        positive_phase = end - arrival

    final_impulse = int(counts[-1]) if len(counts) else 0

    return {
        "arrival_tick": arrival,
        "peak_pressure": peak,
        "peak_tick": peak_tick if peak > 0 else None,
        "positive_phase_ticks": positive_phase,
        "min_pressure": int(deltas.min()),
        "final_impulse": final_impulse,
        "escaped_fraction": final_impulse / num_debris if num_debris > 0 else 0.0,
    }


def compute_sim_metrics(sim: BlastSimulation) -> Dict[str, Optional[float]]:
    counts, deltas = sim.query_flux_series()
    # only ticks that actually ran
    ran = min(sim.tick, len(counts))
    return compute_blast_metrics(counts[:ran], deltas[:ran], sim.particles.debris_count)


def print_blast_report(sim: BlastSimulation):
    m = compute_sim_metrics(sim)
    print("\n=== Blast Wave Report ===")
    print(f"Arrival tick: {m['arrival_tick']}")
    print(f"Peak pressure: {m['peak_pressure']} particles/tick at tick {m['peak_tick']}")
    print(f"Positive phase: {m['positive_phase_ticks']} ticks")
    print(f"Min pressure: {m['min_pressure']}")
    print(f"Final impulse: {m['final_impulse']} ({m['escaped_fraction']:.1%} of debris)")


# =========================================================
# 2. Pressure / impulse plots
# =========================================================

def plot_pressure_history(sim: BlastSimulation, ax=None, normalize: bool = True):
    """
    Plot the per-tick delta (pressure proxy).
    With normalize=True values are divided by the particle count.
    """
    _, deltas = sim.query_flux_series()
    values = np.array(deltas, dtype=float)
    if normalize:
        values /= sim.particles.n

    if ax is None:
        _, ax = plt.subplots(figsize=(6, 3))
    ax.plot(np.arange(len(values)), values, color="black", linewidth=1)
    ax.set_xlabel("Time (tick)")
    ax.set_ylabel("Pressure")
    ax.set_title("Blast Pressure")
    ax.grid(True, alpha=0.3)
    return ax


def plot_impulse_history(sim: BlastSimulation, ax=None, normalize: bool = True):
    """
    Plot the cumulative count (impulse proxy).
    """
    counts, _ = sim.query_flux_series()
    values = np.array(counts, dtype=float)
    if normalize:
        values /= sim.particles.n

    if ax is None:
        _, ax = plt.subplots(figsize=(6, 3))
    ax.plot(np.arange(len(values)), values, color="black", linewidth=1)
    ax.set_xlabel("Time (tick)")
    ax.set_ylabel("Impulse")
    ax.set_title("Blast Impulse")
    ax.grid(True, alpha=0.3)
    return ax


def save_flux_plots(sim: BlastSimulation, out_path: str):
    fig, (ax_p, ax_i) = plt.subplots(2, 1, figsize=(6, 6))
    plot_pressure_history(sim, ax=ax_p)
    plot_impulse_history(sim, ax=ax_i)
    fig.tight_layout()
    fig.savefig(out_path, dpi=150)
    plt.close(fig)
