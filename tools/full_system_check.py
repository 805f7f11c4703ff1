import sys, os

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import time

import numpy as np

from particles import ParticleField
from scenarios import SCENARIO_PRESETS, load_and_apply_scenario


def run_short_sim(name, ticks=60, particles=None):
    sim = load_and_apply_scenario(name, tick_max=ticks, num_particles=particles, seed=0)
    sim.run()
    return sim


def check_scenario(name):
    print(f"\n=== Scenario = {name} ===")

    start = time.time()
    sim = run_short_sim(name)
    dt = time.time() - start

    m = sim.get_metrics_summary()
    counts, deltas = sim.query_flux_series()
    print(f"Particles: {m['num_particles']}   Ticks: {m['ticks']}   Runtime: {dt:.2f}s")
    print(f"Wall hits: {m['total_wall_hits']}   Broken: {m['walls_broken']}/{len(sim.walls)}")
    print(f"Flux: final={counts[sim.tick - 1]}  delta sum={sum(deltas)}")


def check_scaling(sizes=(101, 501, 1001), ticks=5):
    print("\n=== Pairwise force scaling ===")
    rng = np.random.default_rng(0)
    for n in sizes:
        field = ParticleField(n)
        field.reset(rng)
        start = time.time()
        for t in range(ticks):
            field.apply_pairwise_forces(t, 100.0)
        dt = (time.time() - start) / ticks
        print(f"n={n:5d}   {dt * 1000:.1f} ms/tick")


def main():
    print("==============================================")
    print("        FULL SYSTEM CHECK: BEGIN              ")
    print("==============================================")

    for name in sorted(SCENARIO_PRESETS):
        check_scenario(name)

    check_scaling()

    print("\n==============================================")
    print("        FULL SYSTEM CHECK: COMPLETE           ")
    print("==============================================")


if __name__ == "__main__":
    main()
