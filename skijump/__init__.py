"""
Ski Jump Trajectory Simulator
=============================
Numerical reconstruction of one ski jump (Wolfgang Loitzl, Whistler HS140)
from the start gate to the landing:
  - In-run on the certified hill geometry with friction and air resistance
  - Takeoff push normal to the table
  - Flight with time-varying attack angles and fitted lift/drag curves

Explicit Euler integration with a selectable position-update order per
phase.
"""

from .errors import SkiJumpError, ConfigurationError, ModelDomainError
from .parameters import SkierParameters, DEFAULT_PARAMETERS
from .hill import HillProfile, LineSegment, ArcSegment, WHISTLER_HS140, TAKEOFF_POINT
from .aerodynamics import AerodynamicModel, attack_angles
from .integrator import (
    Phase, PositionUpdate, IntegrationPolicy, REFERENCE_POLICY,
    KinematicState, TrajectorySample, SimulationResult, TrajectoryResult,
    quadrant_naive_direction, four_quadrant_direction,
    run_on_track, apply_takeoff_impulse, run_airborne, simulate_jump,
)
from .export import write_trajectory_table, TABLE_COLUMNS
from .study import run_parameter_sweep, run_standard_studies, StudyRow

__version__ = "1.0.0"
__all__ = [
    'SkiJumpError', 'ConfigurationError', 'ModelDomainError',
    'SkierParameters', 'DEFAULT_PARAMETERS',
    'HillProfile', 'LineSegment', 'ArcSegment', 'WHISTLER_HS140', 'TAKEOFF_POINT',
    'AerodynamicModel', 'attack_angles',
    'Phase', 'PositionUpdate', 'IntegrationPolicy', 'REFERENCE_POLICY',
    'KinematicState', 'TrajectorySample', 'SimulationResult', 'TrajectoryResult',
    'quadrant_naive_direction', 'four_quadrant_direction',
    'run_on_track', 'apply_takeoff_impulse', 'run_airborne', 'simulate_jump',
    'write_trajectory_table', 'TABLE_COLUMNS',
    'run_parameter_sweep', 'run_standard_studies', 'StudyRow',
]
