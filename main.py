# main.py
"""
Main CLI for running the blast sim. Supports:
 - list
 - visual <scenario>
 - run <scenario>
 - batch <scenario>
"""

import argparse
import csv
import logging
import multiprocessing as mp
from functools import partial
from pathlib import Path
from typing import Optional

import config
from analysis import print_blast_report, save_flux_plots
from experiments_runner import run_single_trial, save_flux_csv
from scenarios import SCENARIO_PRESETS, load_and_apply_scenario


def list_scenarios():
    print("Available scenarios:")
    for k in sorted(SCENARIO_PRESETS.keys()):
        print(" -", k)


def _run_single_trial(
    scenario_name: str,
    particles: Optional[int],
    ticks: Optional[int],
    seed: Optional[int],
    trial_index: int,
    out_dir: Path = Path("."),
):
    print(f"[trial {trial_index}] running scenario '{scenario_name}'")

    # trials of a batch get consecutive seeds
    trial_seed = None if seed is None else seed + trial_index - 1
    res = run_single_trial(
        scenario_name,
        seed=trial_seed,
        num_particles=particles,
        tick_max=ticks,
    )

    out_dir.mkdir(parents=True, exist_ok=True)
    tag = f"{scenario_name}_trial{trial_index}"
    csv_path = out_dir / f"{tag}_flux.csv"
    save_flux_csv(str(csv_path), res["counts"], res["deltas"])
    print("Saved flux CSV to", csv_path)

    m = res["metrics"]
    return {
        "scenario": scenario_name,
        "trial": trial_index,
        "seed": res["seed"],
        "ticks": res["ticks"],
        "peak_pressure": m["peak_pressure"],
        "final_impulse": m["final_impulse"],
        "walls_broken": len(res["broken_at"]),
    }


def run_batch(
    scenario_name: str,
    trials: int = 5,
    workers: int = 2,
    particles: int = None,
    ticks: int = None,
    seed: int = None,
    out_dir: str = "out",
):
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    if seed is None:
        seed = config.SEED if config.SEED is not None else 0

    pool = mp.Pool(processes=workers)
    runner = partial(
        _run_single_trial,
        scenario_name,
        particles,
        ticks,
        seed,
        out_dir=out,
    )

    try:
        results = pool.map(runner, range(1, trials + 1))
    finally:
        pool.close()
        pool.join()

    summary_csv = out / f"{scenario_name}_batch_summary.csv"
    with open(summary_csv, "w", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow(["trial", "seed", "ticks", "peak_pressure", "final_impulse", "walls_broken"])
        for r in results:
            writer.writerow([r["trial"], r["seed"], r["ticks"], r["peak_pressure"], r["final_impulse"], r["walls_broken"]])

    print("Batch finished. Summary written to", summary_csv)
    return results


def run_single_visual(scenario_name: str, particles: int = None):
    from visualization import run_visual_simulation

    sim = load_and_apply_scenario(scenario_name, num_particles=particles)
    run_visual_simulation(sim)


def run_single_nonvisual(
    scenario_name: str,
    particles: int = None,
    ticks: int = None,
    seed: int = None,
    out_dir: str = "out",
):
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    sim = load_and_apply_scenario(scenario_name, num_particles=particles, tick_max=ticks, seed=seed)
    sim.run()
    sim.summary()
    print_blast_report(sim)

    counts, deltas = sim.query_flux_series()
    csv_path = out / f"{scenario_name}_flux.csv"
    save_flux_csv(str(csv_path), counts, deltas)
    png_path = out / f"{scenario_name}_flux.png"
    save_flux_plots(sim, str(png_path))
    print("Run complete:", csv_path, png_path)
    return sim


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main():
    p = argparse.ArgumentParser()
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list")
    v = sub.add_parser("visual")
    v.add_argument("scenario")
    v.add_argument("--particles", type=int)

    r = sub.add_parser("run")
    r.add_argument("scenario")
    r.add_argument("--particles", type=int)
    r.add_argument("--ticks", type=int)
    r.add_argument("--seed", type=int)
    r.add_argument("--out-dir", type=str, default=config.OUTPUT_DIR)

    b = sub.add_parser("batch")
    b.add_argument("scenario")
    b.add_argument("--trials", type=int, default=5)
    b.add_argument("--workers", type=int, default=2)
    b.add_argument("--particles", type=int)
    b.add_argument("--ticks", type=int)
    b.add_argument("--seed", type=int)
    b.add_argument("--out-dir", type=str, default="out_batch")

    args = p.parse_args()
    setup_logging(args.verbose)

    if args.cmd == "list":
        list_scenarios()
    elif args.cmd == "visual":
        run_single_visual(args.scenario, particles=args.particles)
    elif args.cmd == "run":
        run_single_nonvisual(
            args.scenario,
            particles=args.particles,
            ticks=args.ticks,
            seed=args.seed,
            out_dir=args.out_dir,
        )
    elif args.cmd == "batch":
        run_batch(
            args.scenario,
            trials=args.trials,
            workers=args.workers,
            particles=args.particles,
            ticks=args.ticks,
            seed=args.seed,
            out_dir=args.out_dir,
        )


if __name__ == "__main__":
    main()
