# physics/walls.py

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from config import validate_wall_geometry

logger = logging.getLogger("blast_sim")

Point = Tuple[float, float]


@dataclass(frozen=True)
class WallSegment:
    """
    Geometry of one wall segment.

    slope / intercept are NaN for vertical segments; check `vertical` first.
    """
    index: int
    x1: float
    y1: float
    x2: float
    y2: float
    slope: float
    intercept: float
    vertical: bool

    @property
    def direction(self) -> Tuple[float, float]:
        return (self.x2 - self.x1, self.y2 - self.y1)

    @property
    def endpoints(self) -> Tuple[Point, Point]:
        return ((self.x1, self.y1), (self.x2, self.y2))


class WallSystem:
    """
    Breakable polyline walls.

    Geometry is fixed after build(); only the per-segment strengths change.
    A segment with strength 0 is broken and ignored by collision checks.
    """

    def __init__(self, vertices: Sequence[Point], base_strengths: Sequence[int]):
        self.segments: List[WallSegment] = []
        self.base_strengths = np.zeros(0, dtype=np.int64)
        self.strengths = np.zeros(0, dtype=np.int64)
        self.build(vertices, base_strengths)

    def build(self, vertices: Sequence[Point], base_strengths: Sequence[int]) -> None:
        validate_wall_geometry(vertices, base_strengths)

        segments = []
        for i in range(len(vertices) - 1):
            x1, y1 = (float(v) for v in vertices[i])
            x2, y2 = (float(v) for v in vertices[i + 1])
            vertical = x1 == x2
            if vertical:
                m = yint = math.nan
            else:
                m = (y2 - y1) / (x2 - x1)
                yint = y1 - x1 * m
            segments.append(WallSegment(i, x1, y1, x2, y2, m, yint, vertical))

        self.segments = segments
        self.base_strengths = np.array(base_strengths, dtype=np.int64)
        self.strengths = self.base_strengths.copy()

    def __len__(self) -> int:
        return len(self.segments)

    def reset_strengths(self, scale_factor: int) -> None:
        # in-place so external readers keep a valid reference
        self.strengths[:] = self.base_strengths * int(scale_factor)

    def degrade(self, hits_per_segment) -> List[int]:
        """
        Break every segment whose hits this tick meet or exceed its strength.

        Strength is not reduced by partial hits: a wall either survives the
        tick untouched or drops straight to 0.

        Returns the indices of the segments that broke during this call.
        """
        hits = np.asarray(hits_per_segment, dtype=np.int64)
        if hits.shape != self.strengths.shape:
            raise ValueError(f"Expected {len(self.strengths)} hit counts, got {hits.shape}")

        breaking = (self.strengths > 0) & (self.strengths - hits < 1)
        broken_now = [int(i) for i in np.flatnonzero(breaking)]
        self.strengths[breaking] = 0

        for i in broken_now:
            logger.info("wall segment %d broke (%d hits)", i, int(hits[i]))
        return broken_now

    def is_broken(self, index: int) -> bool:
        return self.strengths[index] < 1

    def broken_count(self) -> int:
        return int(np.count_nonzero(self.strengths < 1))

    def endpoints(self) -> List[Tuple[Point, Point]]:
        return [s.endpoints for s in self.segments]
