"""
Parameter Studies
=================
Re-runs the jump while varying one SkierParameters field and tabulates the
takeoff speed and distance, e.g. to see how much a lower start gate or a
heavier athlete costs.

Every run is independent: each gets its own parameters and hill instance.
"""

import numpy as np
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .hill import HillProfile
from .integrator import simulate_jump, IntegrationPolicy, REFERENCE_POLICY
from .parameters import SkierParameters, DEFAULT_PARAMETERS


@dataclass
class StudyRow:
    """Outcome of one run in a sweep."""
    parameter: str
    value: float
    takeoff_speed: float    # m/s
    final_distance: float   # m
    flight_time: float      # s
    max_height: float       # m above the hill


# Start gates and athlete variations worth comparing on this hill.
START_GATES = [0.0, 3.0, 6.25, 10.0, 15.0]
BODY_MASSES = [55.0, 60.0, 63.0, 68.0, 75.0]


def run_parameter_sweep(parameter: str, values: Iterable[float],
                        base: SkierParameters = DEFAULT_PARAMETERS,
                        hill: Optional[HillProfile] = None,
                        policy: IntegrationPolicy = REFERENCE_POLICY,
                        verbose: bool = True) -> List[StudyRow]:
    """
    Simulate once per value of ``parameter`` (a SkierParameters field name).

    Returns list of StudyRow in the order of ``values``.
    """
    if parameter not in SkierParameters.__dataclass_fields__:
        raise ValueError(
            f"Unknown parameter '{parameter}'. "
            f"Available: {list(SkierParameters.__dataclass_fields__)}"
        )

    rows = []

    if verbose:
        print(f"\n{'='*62}")
        print(f"  PARAMETER STUDY: {parameter}")
        print(f"{'='*62}")
        print(f"{'Value':>10} {'v_takeoff':>11} {'km/h':>7} {'Distance':>10} "
              f"{'Flight':>8} {'Max h':>8}")
        print("-" * 62)

    for value in values:
        params = base.with_overrides(**{parameter: value})
        traj = simulate_jump(params, hill=hill or HillProfile(), policy=policy)
        res = traj.result

        row = StudyRow(
            parameter=parameter,
            value=value,
            takeoff_speed=res.takeoff_speed,
            final_distance=res.final_distance,
            flight_time=res.flight_time,
            max_height=traj.max_height_above_hill,
        )
        rows.append(row)

        if verbose:
            print(f"{value:>10.2f} {row.takeoff_speed:>11.2f} "
                  f"{row.takeoff_speed*3.6:>7.1f} {row.final_distance:>10.2f} "
                  f"{row.flight_time:>8.2f} {row.max_height:>8.2f}")

    if verbose and len(rows) > 1:
        distances = np.array([r.final_distance for r in rows])
        print("-" * 62)
        print(f"  Distance spread: {distances.max() - distances.min():.2f} m "
              f"({distances.min():.1f} to {distances.max():.1f} m)")
        print(f"{'='*62}\n")

    return rows


def run_standard_studies(verbose: bool = True):
    """Start-gate and body-mass sweeps for the reference athlete."""
    return {
        'start_position': run_parameter_sweep('start_position', START_GATES, verbose=verbose),
        'body_mass': run_parameter_sweep('body_mass', BODY_MASSES, verbose=verbose),
    }


if __name__ == "__main__":
    run_standard_studies(verbose=True)
