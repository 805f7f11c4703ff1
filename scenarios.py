# scenarios.py
"""
Scenario presets and helpers for building BlastSimulation instances.

Provides:
 - SCENARIO_PRESETS: mapping of names -> engine parameter overrides
 - get_scenario_params(name, **overrides): merged parameter dict
 - load_and_apply_scenario(name, **overrides): builds the engine and returns it
"""

from typing import Any, Dict

import config
from simulation import BlastSimulation

SINGLE_WALL_VERTICES = [(80.0, -50.0), (80.0, 50.0)]

# Each entry only lists what differs from config.py; everything else falls
# back to the module defaults.
SCENARIO_PRESETS: Dict[str, Dict[str, Any]] = {
    # the reference bunker: five-segment wall bent around the charge
    "default": {},
    "small": {"num_particles": 201, "tick_max": 150},
    # same geometry, walls that never break within a normal run
    "reinforced": {"wall_strengths": [x * 10 for x in config.WALL_BASE_STRENGTHS]},
    # every segment starts broken: free expansion through the flux circle
    "open_field": {"wall_strengths": [0] * len(config.WALL_BASE_STRENGTHS)},
    # one vertical wall in front of the charge
    "single_wall": {
        "num_particles": 11,
        "tick_max": 50,
        "wall_vertices": SINGLE_WALL_VERTICES,
        "wall_strengths": [2],
    },
}


def get_scenario_params(name: str, **overrides) -> Dict[str, Any]:
    """
    Merge a preset with keyword overrides. None-valued overrides are ignored
    so CLI options that were not given keep the preset value (this includes
    seed; build BlastSimulation(seed=None) directly for an unseeded run).
    """
    preset = SCENARIO_PRESETS.get(name)
    if preset is None:
        raise ValueError(f"Unknown scenario '{name}'")

    cfg = dict(preset)
    cfg.update({k: v for k, v in overrides.items() if v is not None})
    return cfg


def load_and_apply_scenario(name: str, **overrides) -> BlastSimulation:
    """
    Builds a BlastSimulation for the named preset (Idle, not started).
    """
    sim = BlastSimulation(**get_scenario_params(name, **overrides))
    sim.scenario_name = name  # store name for downstream code / logging
    return sim
