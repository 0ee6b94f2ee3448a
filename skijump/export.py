"""
Trajectory Table Export
=======================
Writes one row per integration step as tab-separated text that can be opened
directly in a spreadsheet.
"""

import os
import numpy as np

from .integrator import TrajectoryResult


# (header, TrajectoryResult attribute)
TABLE_COLUMNS = (
    ('t',            'time'),
    ('slopeDist',    'slope_distance'),
    ('hillAltitude', 'hill_altitude'),
    ('posX',         'x'),
    ('posY',         'y'),
    ('velocity',     'velocity'),
    ('velX',         'vx'),
    ('velY',         'vy'),
    ('acceleration', 'acceleration'),
    ('accX',         'ax'),
    ('accY',         'ay'),
    ('velAngle',     'vel_angle'),
)


def trajectory_table(result: TrajectoryResult) -> np.ndarray:
    """(N, 12) array in TABLE_COLUMNS order."""
    return np.column_stack([getattr(result, attr) for _, attr in TABLE_COLUMNS])


def write_trajectory_table(result: TrajectoryResult,
                           path: str = 'outputs/SkiJumpResultsData.tsv') -> str:
    """Save the per-step table and return the path written."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    header = '\t'.join(name for name, _ in TABLE_COLUMNS)
    np.savetxt(path, trajectory_table(result), fmt='%f', delimiter='\t',
               header=header, comments='')
    return path
