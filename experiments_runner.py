# experiments_runner.py
"""
Run repeated blast trials of one scenario with different seeds and
aggregate the flux series.

Usage: call `run_multiple_trials(...)` from main.py or a REPL.
"""

import csv
import os
import time
from typing import Dict, List, Optional

import numpy as np
import matplotlib.pyplot as plt

from analysis import compute_sim_metrics
from scenarios import load_and_apply_scenario


def run_single_trial(scenario_name: str, seed: Optional[int] = None, verbose: bool = False, **overrides) -> dict:
    """
    Run one trial of the scenario to completion.

    Returns a dict:
        {
            "seed": seed used,
            "counts": cumulative flux per tick (np.ndarray),
            "deltas": per-tick flux change (np.ndarray),
            "metrics": compute_blast_metrics(...) output,
            "ticks": ticks run,
            "total_wall_hits": int,
            "broken_at": {segment: tick},
            "elapsed_sec": float,
        }
    """
    sim = load_and_apply_scenario(scenario_name, seed=seed, **overrides)

    if verbose:
        print(f"[trial] starting: scenario={scenario_name}, seed={seed}, particles={sim.particles.n}, tick_max={sim.params.tick_max}")

    start = time.time()
    sim.start()
    while not sim.is_finished():
        sim.step()
        if verbose and sim.tick % 50 == 0:
            counts, _ = sim.query_flux_series()
            print(f" tick {sim.tick}  outside={counts[sim.tick - 1]}  broken={sim.walls.broken_count()}")
    elapsed = time.time() - start

    counts, deltas = sim.query_flux_series()
    if verbose:
        print(f"[trial] finished after {sim.tick} ticks in {elapsed:.1f}s")

    return {
        "seed": sim.params.seed,
        "num_particles": sim.particles.n,
        "counts": np.array(counts),
        "deltas": np.array(deltas),
        "metrics": compute_sim_metrics(sim),
        "ticks": sim.tick,
        "total_wall_hits": sim.physics.total_hits,
        "broken_at": dict(sim.broken_at),
        "elapsed_sec": elapsed,
    }


def aggregate_trials(trial_results: List[dict]) -> dict:
    """
    Aggregate multiple trial results.

    Returns summary dict:
      - mean_counts / std_counts: per-tick impulse proxy across trials
      - mean_deltas / std_deltas: per-tick pressure proxy across trials
      - per_trial_summary: list of useful per-trial stats
    """
    lengths = {len(tr["counts"]) for tr in trial_results}
    if len(lengths) != 1:
        raise ValueError(f"Inconsistent flux series lengths across trials: {lengths}")

    counts = np.stack([tr["counts"] for tr in trial_results], axis=0)  # (T, ticks)
    deltas = np.stack([tr["deltas"] for tr in trial_results], axis=0)

    per_trial_summary = []
    for i, tr in enumerate(trial_results):
        m = tr["metrics"]
        per_trial_summary.append({
            "trial": i,
            "seed": tr["seed"],
            "ticks": tr["ticks"],
            "arrival_tick": m["arrival_tick"],
            "peak_pressure": m["peak_pressure"],
            "peak_tick": m["peak_tick"],
            "final_impulse": m["final_impulse"],
            "total_wall_hits": tr["total_wall_hits"],
            "walls_broken": len(tr["broken_at"]),
            "elapsed_sec": round(tr["elapsed_sec"], 3),
        })

    return {
        "mean_counts": counts.mean(axis=0),
        "std_counts": counts.std(axis=0),
        "mean_deltas": deltas.mean(axis=0),
        "std_deltas": deltas.std(axis=0),
        "per_trial_summary": per_trial_summary,
    }


def save_aggregated_results(out_dir: str, aggregated: dict, trial_results: List[dict]):
    os.makedirs(out_dir, exist_ok=True)
    for key in ("mean_counts", "std_counts", "mean_deltas", "std_deltas"):
        np.save(os.path.join(out_dir, f"{key}.npy"), aggregated[key])

    with open(os.path.join(out_dir, "trial_summary.csv"), "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(aggregated["per_trial_summary"][0].keys()))
        writer.writeheader()
        for r in aggregated["per_trial_summary"]:
            writer.writerow(r)

    for i, tr in enumerate(trial_results):
        save_flux_csv(os.path.join(out_dir, f"trial_{i}_flux.csv"), tr["counts"], tr["deltas"])


def save_flux_csv(path: str, counts, deltas):
    with open(path, "w", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow(["tick", "cumulative", "delta"])
        for t, (c, d) in enumerate(zip(counts, deltas)):
            writer.writerow([t, int(c), int(d)])


def plot_aggregated_pressure(ax, aggregated: dict, num_particles: int):
    mean = aggregated["mean_deltas"] / num_particles
    std = aggregated["std_deltas"] / num_particles
    ticks = np.arange(len(mean))
    ax.plot(ticks, mean, color="black", linewidth=1, label="mean")
    ax.fill_between(ticks, mean - std, mean + std, color="grey", alpha=0.4, label="±1 std")
    ax.set_xlabel("Time (tick)")
    ax.set_ylabel("Pressure")
    ax.legend()
    return ax


def run_multiple_trials(scenario_name: str,
                        trials: int = 5,
                        base_seed: int = 0,
                        out_dir: str = "experiments/output",
                        verbose: bool = True,
                        **overrides) -> Dict[str, object]:
    """
    Run `trials` runs of the scenario with seeds base_seed..base_seed+trials-1,
    aggregate and save results to out_dir.
    """
    all_results = []
    for t in range(trials):
        if verbose:
            print(f"=== Running trial {t+1}/{trials} ===")
        all_results.append(run_single_trial(scenario_name, seed=base_seed + t, verbose=verbose, **overrides))

    aggregated = aggregate_trials(all_results)
    save_aggregated_results(out_dir, aggregated, all_results)

    report_lines = [
        f"Scenario: {scenario_name}",
        f"Trials: {trials}",
        f"Peak pressure (mean over trials): {np.mean([r['peak_pressure'] for r in aggregated['per_trial_summary']]):.2f}",
        f"Final impulse (mean over trials): {aggregated['mean_counts'][-1]:.2f}",
    ]
    report_txt = "\n".join(report_lines)
    with open(os.path.join(out_dir, "report.txt"), "w") as f:
        f.write(report_txt)
    if verbose:
        print(report_txt)

    num_particles = all_results[0]["num_particles"]
    fig, ax = plt.subplots(figsize=(8, 4))
    plt.title(f"Blast pressure across {trials} trials ({scenario_name})")
    plot_aggregated_pressure(ax, aggregated, num_particles)
    out_img = os.path.join(out_dir, "pressure_trials.png")
    plt.tight_layout()
    plt.savefig(out_img, dpi=150)
    plt.close(fig)
    if verbose:
        print(f"[saved] {out_img}")

    return {
        "trial_results": all_results,
        "aggregated": aggregated,
        "out_dir": out_dir,
    }
