"""
Flight Aerodynamics
===================
Lift and drag on the skier-plus-skis system during flight.

The skier's posture changes through the flight: the skis are spread into the
V and the body folds forward over them. This is captured by a time-indexed
table of attack angles (skis and body relative to the velocity vector)
measured from competition footage, with empirical fits for the lift and drag
coefficients as functions of the ski attack angle.

References for the force model:
- http://e-jst.teiath.gr/issue_16/stathopoulos_16.pdf
- http://cds.cern.ch/record/1009275/files/p269.pdf
"""

import numpy as np
from typing import Tuple

from .parameters import SkierParameters, DEFAULT_PARAMETERS


# ══════════════════════════════════════════════════════════════════════════
#  Attack-angle windows: (t_upper s, ski offset rad, body posture offset rad)
#
#  ski  = |θ + ski_offset|
#  body = |θ + posture_offset + ski_offset|
# ══════════════════════════════════════════════════════════════════════════
ATTACK_ANGLE_WINDOWS = (
    (0.04,    0.209,   1.187),    # leaving the table, body upright
    (0.21,    0.087,  -1.047),    # extension, body rotating forward
    (0.63,   -0.209,  -0.349),    # skis into the V
    (1.05,   -0.122,  -0.349),
    (1.43,   -0.105,  -0.349),
    (2.04,   -0.035,  -0.349),    # stable flight
    (2.26,   -0.017,  -0.349),
    (2.71,   -0.017,  -0.349),
    (3.26,   -0.017,  -0.349),
)
LATE_FLIGHT_OFFSETS = (-0.035, -0.349)

# Radians to degrees as used when the coefficient curves were fitted.
FIT_DEGREES_PER_RADIAN = 180 / 3.14

# ── Coefficient fits (argument: ski attack angle in degrees) ──────────────
DRAG_SLOPE = 0.0103
LIFT_QUADRATIC = -0.00025
LIFT_LINEAR = 0.0228
LIFT_CONSTANT = -0.092


def attack_angle_offsets(t: float) -> Tuple[float, float]:
    """(ski_offset, posture_offset) for time ``t`` since takeoff."""
    for upper, ski_offset, posture_offset in ATTACK_ANGLE_WINDOWS:
        if t <= upper:
            return ski_offset, posture_offset
    return LATE_FLIGHT_OFFSETS


def attack_angles(vel_angle: float, t: float) -> Tuple[float, float]:
    """
    Attack angles (rad) of the skis and of the body.

    Parameters
    ----------
    vel_angle : direction of the velocity (rad, relative to +x)
    t : time since takeoff (s)

    Returns
    -------
    (ski, body) : both non-negative
    """
    ski_offset, posture_offset = attack_angle_offsets(t)
    ski = abs(vel_angle + ski_offset)
    body = abs(vel_angle + posture_offset + ski_offset)
    return ski, body


def drag_coefficient(ski_angle: float) -> float:
    """Linear fit in the ski attack angle."""
    return DRAG_SLOPE * ski_angle * FIT_DEGREES_PER_RADIAN


def lift_coefficient(ski_angle: float) -> float:
    """Quadratic fit in the ski attack angle (degrees), magnitude only."""
    deg = ski_angle * FIT_DEGREES_PER_RADIAN
    return abs(LIFT_QUADRATIC * deg ** 2 + LIFT_LINEAR * deg + LIFT_CONSTANT)


class AerodynamicModel:
    """
    Lift and drag magnitudes for one skier.

    Pure: holds only the (immutable) skier parameters.
    """

    def __init__(self, params: SkierParameters = DEFAULT_PARAMETERS):
        self.params = params

    def _dynamic_pressure_area(self, area: float, coeff: float, velocity: float) -> float:
        return abs(0.5 * self.params.air_density * area * coeff * velocity ** 2)

    def drag_area(self, ski: float, body: float) -> float:
        """Area projected normal to the velocity (m²)."""
        p = self.params
        return p.frontal_area_skis * np.sin(ski) + p.frontal_area_body * np.sin(body)

    def lift_area(self, ski: float, body: float) -> float:
        """Planform area seen by the lift (m²)."""
        p = self.params
        return p.frontal_area_skis * np.cos(ski) + p.frontal_area_body * np.cos(body)

    def drag_force(self, velocity: float, vel_angle: float, t: float) -> float:
        """Drag magnitude (N) at speed ``velocity``, ``t`` s after takeoff."""
        ski, body = attack_angles(vel_angle, t)
        return self._dynamic_pressure_area(
            self.drag_area(ski, body), drag_coefficient(ski), velocity)

    def lift_force(self, velocity: float, vel_angle: float, t: float) -> float:
        """Lift magnitude (N) at speed ``velocity``, ``t`` s after takeoff."""
        ski, body = attack_angles(vel_angle, t)
        return self._dynamic_pressure_area(
            self.lift_area(ski, body), lift_coefficient(ski), velocity)

    def forces(self, velocity: float, vel_angle: float, t: float) -> Tuple[float, float]:
        """(lift, drag) in one call."""
        return (self.lift_force(velocity, vel_angle, t),
                self.drag_force(velocity, vel_angle, t))


if __name__ == "__main__":
    model = AerodynamicModel()
    print("Attack angles & forces at 26 m/s, θ = -0.3 rad")
    print("=" * 60)
    print(f"{'t (s)':>8} {'ski (°)':>9} {'body (°)':>9} {'L (N)':>9} {'D (N)':>9}")
    print("-" * 60)
    for t in [0.0, 0.1, 0.5, 1.0, 1.3, 2.0, 2.5, 3.0, 4.0]:
        ski, body = attack_angles(-0.3, t)
        lift, drag = model.forces(26.0, -0.3, t)
        print(f"{t:>8.2f} {np.degrees(ski):>9.1f} {np.degrees(body):>9.1f} "
              f"{lift:>9.1f} {drag:>9.1f}")
