"""
Hill Profile Model
==================
Geometry of the Whistler HS140 jumping hill (Callaghan Valley), taken from the
hill certificate:

  - Altitude of the hill surface as a function of horizontal position,
    built from straight segments and circular arcs
  - The in-run (takeoff ramp) parametrised by distance travelled along it:
    35° straight, r = 100 m transition curve, 11.2° takeoff table

Coordinates: x = horizontal (towards the bottom of the hill), y = altitude,
both in metres. Angles are in radians relative to +x.
"""

import numpy as np
from dataclasses import dataclass
from typing import Sequence, Tuple

from .errors import ModelDomainError


# ── Key points ────────────────────────────────────────────────────────────
HILL_START_X      = 0.0
HILL_END_X        = 270.46     # m  end of the outrun arc
TAKEOFF_LIP_X     = 88.642     # m  end of the takeoff table
TAKEOFF_POINT     = (88.64, 88.15)   # reference for measuring the jump

# ── In-run geometry (distance along the ramp, m) ──────────────────────────
RAMP_STRAIGHT_END   = 54.1
RAMP_CURVE_END      = 95.55
RAMP_END            = 102.15
RAMP_STRAIGHT_ANGLE = 0.611    # rad  (35°)
RAMP_TABLE_ANGLE    = 0.196    # rad  (11.2°)
RAMP_CURVE_RADIUS   = 100.0
RAMP_CURVE_START_X  = 44.32
RAMP_CURVE_OFFSET   = 57.36    # horizontal offset of the curve centre
RAMP_CURVE_PHASE    = 0.96     # rad
RAMP_TABLE_START_X  = 82.17


@dataclass(frozen=True)
class LineSegment:
    """y = intercept + slope * x, valid up to ``upper``."""
    upper: float
    intercept: float
    slope: float

    def altitude(self, x: float) -> float:
        return self.intercept + self.slope * x


@dataclass(frozen=True)
class ArcSegment:
    """
    y = sign * sqrt(r² - (x - cx)²) + cy, valid up to ``upper``.

    sign = -1 gives the lower half of the circle (concave: in-run
    transition, outrun), +1 the upper half (convex: the knoll).
    """
    upper: float
    radius_sq: float
    cx: float
    cy: float
    sign: float = -1.0

    def altitude(self, x: float) -> float:
        return self.sign * np.sqrt(self.radius_sq - (x - self.cx) ** 2) + self.cy


# ══════════════════════════════════════════════════════════════════════════
#  Whistler HS140, ordered by upper bound
# ══════════════════════════════════════════════════════════════════════════
WHISTLER_HS140 = (
    LineSegment(44.32, 136.63, -0.7),                      # in-run straight
    ArcSegment(82.17, 10000.0, 101.68, 187.52, -1.0),      # in-run transition
    LineSegment(TAKEOFF_LIP_X, 105.87, -0.2),              # takeoff table
    ArcSegment(142.55, 8047.18, 88.64, -5.14, +1.0),       # knoll
    LineSegment(186.96, 174.04, -0.754),                   # landing slope
    ArcSegment(208.67, 113232.25, 389.47, 301.81, -1.0),   # landing transition
    ArcSegment(HILL_END_X, 13225.0, 270.46, 115.0, -1.0),  # outrun
)


class HillProfile:
    """
    Piecewise hill surface plus the in-run parametrisation.

    Stateless once constructed; every method is a pure function of its
    argument.
    """

    def __init__(self, segments: Sequence = WHISTLER_HS140,
                 start_x: float = HILL_START_X):
        if not segments:
            raise ValueError("A hill needs at least one segment")
        bounds = [s.upper for s in segments]
        if any(b2 <= b1 for b1, b2 in zip(bounds, bounds[1:])):
            raise ValueError(f"Segment bounds must be increasing: {bounds}")
        self.segments = tuple(segments)
        self.start_x = start_x
        self.end_x = bounds[-1]

    @property
    def boundaries(self) -> Tuple[float, ...]:
        """Upper bounds of every segment except the last."""
        return tuple(s.upper for s in self.segments[:-1])

    def hill_altitude(self, x: float) -> float:
        """
        Altitude of the hill surface (m) at horizontal position x (m).

        The first segment whose upper bound is >= x is used.
        """
        if not (self.start_x <= x <= self.end_x):
            raise ModelDomainError(
                f"x = {x} m is outside the hill profile "
                f"[{self.start_x}, {self.end_x}]"
            )
        for segment in self.segments:
            if x <= segment.upper:
                return segment.altitude(x)
        # unreachable: x <= end_x == last upper bound
        raise ModelDomainError(f"No hill segment covers x = {x} m")

    # ── In-run ────────────────────────────────────────────────────────────
    def position_for_slope_distance(self, slope_dist: float) -> float:
        """
        Horizontal position (m) reached after ``slope_dist`` metres along the
        in-run. Past the end of the ramp the position stays on the lip.
        """
        _check_slope_distance(slope_dist)
        if slope_dist <= RAMP_STRAIGHT_END:
            return np.cos(RAMP_STRAIGHT_ANGLE) * slope_dist
        elif slope_dist <= RAMP_CURVE_END:
            return (RAMP_CURVE_START_X + RAMP_CURVE_OFFSET
                    - np.cos(RAMP_CURVE_PHASE
                             + (slope_dist - RAMP_STRAIGHT_END) / RAMP_CURVE_RADIUS)
                    * RAMP_CURVE_RADIUS)
        elif slope_dist <= RAMP_END:
            return (RAMP_TABLE_START_X
                    + np.cos(RAMP_TABLE_ANGLE) * (slope_dist - RAMP_CURVE_END))
        else:
            return TAKEOFF_LIP_X

    def slope_angle(self, slope_dist: float) -> float:
        """
        Angle of the in-run surface (rad, relative to +x) at ``slope_dist``.

        Constant on the straight and on the table, rising linearly through
        the transition curve. Past the lip the surface is treated as level,
        which is the frame the takeoff push is resolved in.
        """
        _check_slope_distance(slope_dist)
        if slope_dist <= RAMP_STRAIGHT_END:
            return -RAMP_STRAIGHT_ANGLE
        elif slope_dist <= RAMP_CURVE_END:
            return -RAMP_STRAIGHT_ANGLE + (slope_dist - RAMP_STRAIGHT_END) / RAMP_CURVE_RADIUS
        elif slope_dist <= RAMP_END:
            return -RAMP_TABLE_ANGLE
        else:
            return 0.0

    # ── Vectorized versions for plotting ──────────────────────────────────
    def hill_profile(self, x_array: np.ndarray) -> np.ndarray:
        """Hill altitude for an array of horizontal positions."""
        return np.array([self.hill_altitude(x) for x in x_array])

    def in_run_profile(self, slope_dist_array: np.ndarray) -> dict:
        """
        Position, altitude and angle along the in-run for an array of
        slope distances.
        """
        x = np.array([self.position_for_slope_distance(d) for d in slope_dist_array])
        return {
            'slope_distance': np.asarray(slope_dist_array),
            'x': x,
            'y': self.hill_profile(x),
            'angle': np.array([self.slope_angle(d) for d in slope_dist_array]),
        }


def _check_slope_distance(slope_dist: float):
    if not slope_dist >= 0:
        raise ModelDomainError(
            f"slope distance {slope_dist} m is before the start of the in-run"
        )


if __name__ == "__main__":
    hill = HillProfile()
    print("Whistler HS140 Profile")
    print("=" * 40)
    print(f"{'x (m)':>10} {'y (m)':>10}")
    print("-" * 40)
    for x in np.arange(0.0, HILL_END_X, 20.0):
        print(f"{x:>10.1f} {hill.hill_altitude(x):>10.2f}")
