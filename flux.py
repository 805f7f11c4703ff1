# flux.py
"""
Flux accounting across the containment circle.

counts[t + 1] is the number of debris particles outside the flux radius after
tick t (impulse proxy); deltas[t + 1] = counts[t + 1] - counts[t] (pressure
proxy). Slot 0 is the pre-blast baseline and stays 0.
"""

from typing import List, Tuple

import numpy as np

from config import FLUX_MARGIN


class FluxRecorder:
    def __init__(self, tick_max: int, margin: int = FLUX_MARGIN):
        self.tick_max = int(tick_max)
        self.counts = np.zeros(self.tick_max + margin, dtype=np.int64)
        self.deltas = np.zeros(self.tick_max + margin, dtype=np.int64)
        self._written = np.zeros(self.tick_max + margin, dtype=bool)

    def clear(self):
        self.counts[:] = 0
        self.deltas[:] = 0
        self._written[:] = False

    def record_tick(self, tick: int, field, flux_radius: float) -> int:
        """
        Count debris beyond flux_radius and store it for this tick.

        Returns the pressure proxy (delta) for the tick.
        """
        slot = tick + 1
        if slot >= len(self.counts):
            raise IndexError(f"tick {tick} is beyond the flux buffer ({len(self.counts) - 1} ticks)")
        if self._written[slot]:
            raise RuntimeError(f"flux for tick {tick} was already recorded")

        dist = field.distances_from_origin()[1:]
        count = int(np.count_nonzero(dist > flux_radius))

        self.counts[slot] = count
        self.deltas[slot] = count - self.counts[tick]
        self._written[slot] = True
        return int(self.deltas[slot])

    def series(self, tick_max: int = None) -> Tuple[List[int], List[int]]:
        """
        Per-tick view: position t holds the state after tick t, for t in
        0..tick_max. Ticks not yet simulated read as 0.
        """
        if tick_max is None:
            tick_max = self.tick_max
        stop = tick_max + 2
        return (
            [int(c) for c in self.counts[1:stop]],
            [int(d) for d in self.deltas[1:stop]],
        )

    def ticks_recorded(self) -> int:
        return int(np.count_nonzero(self._written))
