# physics/collision_models.py

import math
from typing import List, Optional, Tuple

from .walls import WallSegment, WallSystem

# sign-test tolerance for "both trajectory ends on the same side of the line"
SAME_SIDE_EPS = 0.0001
# offsets below this along an axis leave that axis where it was
BACKOFF_MIN_OFFSET = 0.01
# fixed back-off distance from the intercept, per axis
BACKOFF_STEP = 1.0


def truncate_velocity(v: float) -> float:
    """Truncate toward zero at 2 decimal digits (not rounding)."""
    return math.trunc(v * 100) / 100.0


class ResolvedMove:
    """Outcome of resolving one particle against the walls."""

    def __init__(self, x: float, y: float, vx: float, vy: float, hits: List[int], degenerate: bool = False):
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        # segment indices struck during the pass, in order, each at most once
        self.hits = hits
        self.degenerate = degenerate


class BaseCollisionModel:
    """
    Abstract particle/wall collision model.
    Subclasses must implement resolve().
    """

    def resolve(self, x: float, y: float, vx: float, vy: float, walls: WallSystem) -> ResolvedMove:
        """
        Resolve an intended displacement (vx, vy) from (x, y) against walls.

        Returns:
            ResolvedMove with the final position (after applying the
            displacement), the final velocity and the segments struck.
        """
        raise NotImplementedError


class PassThroughCollisionModel(BaseCollisionModel):
    """
    Ignores walls entirely. Useful as a free-expansion baseline.
    """

    def resolve(self, x, y, vx, vy, walls):
        return ResolvedMove(x + vx, y + vy, vx, vy, [])


class SlidingWallCollisionModel(BaseCollisionModel):
    """
    Slide-along-wall model:
    - The first unbroken segment crossed by the trajectory stops the particle
      one unit short of the intercept
    - What is left of the speed is redirected along the wall (no bounce)
    - Repeats until nothing is hit; striking the same segment twice in one
      pass (acute corners) stops the particle dead
    """

    def find_intercept(self, x: float, y: float, vx: float, vy: float, walls: WallSystem) -> Optional[int]:
        """
        Index of the first unbroken segment crossed by the path
        (x, y) -> (x + vx, y + vy), or None.
        """
        x11, y11 = x, y
        x12, y12 = x + vx, y + vy

        for seg in walls.segments:
            if walls.strengths[seg.index] < 1:
                continue
            x21, y21, x22, y22 = seg.x1, seg.y1, seg.x2, seg.y2

            # y ranges disjoint
            if y21 > y11 and y21 > y12 and y22 > y11 and y22 > y12:
                continue
            if y21 < y11 and y21 < y12 and y22 < y11 and y22 < y12:
                continue
            # x ranges disjoint
            if x21 > x11 and x21 > x12 and x22 > x11 and x22 > x12:
                continue
            if x21 < x11 and x21 < x12 and x22 < x11 and x22 < x12:
                continue

            # signed offsets of both ends from the wall line
            if seg.vertical:
                side1, side2 = x11 - x22, x12 - x22
                if side1 * side2 > 0:
                    continue
            else:
                m, b = seg.slope, seg.intercept
                side1, side2 = y11 - x11 * m - b, y12 - x12 * m - b
                if side1 * side2 > SAME_SIDE_EPS:
                    continue

            # starting on the line: leaving it or running along it is not a crossing
            if abs(side1) <= BACKOFF_MIN_OFFSET and (
                side1 == 0 or side1 * side2 >= 0 or abs(side2) <= BACKOFF_MIN_OFFSET
            ):
                continue

            return seg.index
        return None

    def intercept_point(self, x: float, y: float, vx: float, vy: float, seg: WallSegment) -> Tuple[float, float]:
        """Intersection of the trajectory line with the wall line."""
        xdir, ydir = seg.direction

        if vx != 0:
            if xdir != 0:
                traj_slope = vy / vx
                wall_slope = ydir / xdir
                if traj_slope == wall_slope:
                    # parallel lines: no single intersection
                    return x, y
                traj_b = y - x * traj_slope
                wall_b = seg.y1 - seg.x1 * wall_slope
                xint = (wall_b - traj_b) / (traj_slope - wall_slope)
                return xint, xint * traj_slope + traj_b
            # vertical wall
            xint = seg.x2
            return xint, y + vy * (xint - x) / vx

        # vertical trajectory
        if xdir == 0:
            return x, y
        return x, seg.y1 + ydir * (x - seg.x1) / xdir

    def slide(self, x: float, y: float, vx: float, vy: float, seg: WallSegment) -> Tuple[float, float, float, float]:
        """
        Move the particle next to the wall and redirect its velocity along it.

        Returns (x, y, vx, vy) where (x, y) is the backed-off position.
        """
        speed = math.sqrt(vx * vx + vy * vy)
        xint, yint = self.intercept_point(x, y, vx, vy, seg)

        if abs(xint - x) <= BACKOFF_MIN_OFFSET and abs(yint - y) <= BACKOFF_MIN_OFFSET:
            # intercept at the start point: step back against the motion instead
            xint = x - math.copysign(BACKOFF_STEP, vx) if vx != 0 else x
            yint = y - math.copysign(BACKOFF_STEP, vy) if vy != 0 else y
        else:
            if abs(xint - x) > BACKOFF_MIN_OFFSET:
                xint = x + (xint - x) - math.copysign(BACKOFF_STEP, xint - x)
            else:
                xint = x
            if abs(yint - y) > BACKOFF_MIN_OFFSET:
                yint = y + (yint - y) - math.copysign(BACKOFF_STEP, yint - y)
            else:
                yint = y

        xdir, ydir = seg.direction
        if vx * xdir + vy * ydir < 0:
            xdir, ydir = -xdir, -ydir
        wall_mag = math.sqrt(xdir * xdir + ydir * ydir)
        xdir, ydir = xdir / wall_mag, ydir / wall_mag

        remaining = speed - math.sqrt((yint - y) * (yint - y) + (xint - x) * (xint - x))
        return xint, yint, xdir * remaining, ydir * remaining

    def resolve(self, x, y, vx, vy, walls):
        hits: List[int] = []
        degenerate = False

        wall_num = self.find_intercept(x, y, vx, vy, walls)
        while wall_num is not None:
            if wall_num in hits:
                # acute corner: same segment struck twice in one pass
                vx, vy = 0.0, 0.0
                degenerate = True
                break
            hits.append(wall_num)

            x, y, vx, vy = self.slide(x, y, vx, vy, walls.segments[wall_num])
            vx = truncate_velocity(vx)
            vy = truncate_velocity(vy)

            if vx != 0 or vy != 0:
                wall_num = self.find_intercept(x, y, vx, vy, walls)
            else:
                wall_num = None

        return ResolvedMove(x + vx, y + vy, vx, vy, hits, degenerate)
