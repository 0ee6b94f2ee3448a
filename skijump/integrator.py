"""
Trajectory Integration Engine
=============================
Explicit Euler simulation of the jump in three phases:

1. **On track**: motion along the in-run under gravity, ski friction and a
   quadratic air-resistance term. Integrated on the scalar speed along the
   slope; the slope distance is the position coordinate.
2. **Takeoff impulse**: instantaneous push normal to the takeoff table,
   sized so the skier could rise ``push_height`` metres.
3. **Airborne**: planar flight under gravity, lift and drag, integrated on
   the velocity components until the skis reach the landing hill.

Velocities are always advanced first-order (v += a·dt). The position update
order is chosen per phase by an ``IntegrationPolicy``; the reference run
adds the ½·a·dt² term in both phases.

Output: TrajectoryResult with every step's state plus the jump summary.
"""

import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from scipy.interpolate import interp1d

from .aerodynamics import AerodynamicModel
from .errors import ModelDomainError
from .hill import HillProfile, RAMP_END, TAKEOFF_POINT
from .parameters import SkierParameters, DEFAULT_PARAMETERS


MAX_TRACK_TIME = 120.0   # s
MAX_FLIGHT_TIME = 60.0   # s


class Phase(Enum):
    ON_TRACK = 'on_track'
    AIRBORNE = 'airborne'


class PositionUpdate(Enum):
    """How a phase advances position from the freshly updated velocity."""
    FIRST_ORDER = 'first_order'     # s += v·dt
    SECOND_ORDER = 'second_order'   # s += v·dt + ½·a·dt²

    def displacement(self, velocity: float, acceleration: float, dt: float) -> float:
        if self is PositionUpdate.FIRST_ORDER:
            return velocity * dt
        return velocity * dt + 0.5 * acceleration * dt ** 2


@dataclass(frozen=True)
class IntegrationPolicy:
    track: PositionUpdate = PositionUpdate.SECOND_ORDER
    flight: PositionUpdate = PositionUpdate.SECOND_ORDER

    @property
    def label(self) -> str:
        return f"track={self.track.value}, flight={self.flight.value}"


REFERENCE_POLICY = IntegrationPolicy()


# ══════════════════════════════════════════════════════════════════════════
#  Velocity direction
# ══════════════════════════════════════════════════════════════════════════

def quadrant_naive_direction(vx: float, vy: float) -> float:
    """
    atan(vy / vx): only correct while the skier moves towards +x, which is
    the case for every physical jump. The reference run uses this.
    """
    if vx == 0:
        raise ModelDomainError(
            f"Velocity direction undefined for vertical motion (vx = 0, vy = {vy})"
        )
    return np.arctan(vy / vx)


def four_quadrant_direction(vx: float, vy: float) -> float:
    """atan2(vy, vx); defined for any non-zero velocity."""
    if vx == 0 and vy == 0:
        raise ModelDomainError("Velocity direction undefined at rest")
    return np.arctan2(vy, vx)


DirectionFunction = Callable[[float, float], float]


# ══════════════════════════════════════════════════════════════════════════
#  Recorded data
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class KinematicState:
    """Snapshot of the skier's centre of mass at one instant."""
    time: float
    x: float
    y: float
    vx: float
    vy: float
    velocity: float       # |v|
    vel_angle: float      # direction of v (rad, from +x)
    ax: float
    ay: float
    acceleration: float   # |a|


@dataclass(frozen=True)
class TrajectorySample:
    """One integration step as seen by consumers."""
    state: KinematicState
    phase: Phase
    slope_distance: float   # ramp exit value once airborne
    hill_altitude: float


@dataclass(frozen=True)
class SimulationResult:
    """Summary of one jump."""
    mass: float
    height: float
    start_position: float
    takeoff_speed: float      # m/s, at the end of the in-run
    final_distance: float     # m, takeoff point to landing point
    landing_x: float
    landing_y: float
    landing_time: float
    flight_time: float

    def summary(self) -> str:
        """Human-readable summary string."""
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  JUMP SUMMARY{'':<40s}║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Mass          : {self.mass:>10.2f} kg{'':<23s}║",
            f"║  Height        : {self.height:>10.2f} m{'':<24s}║",
            f"║  Start position: {self.start_position:>10.2f} m{'':<24s}║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Takeoff speed : {self.takeoff_speed:>10.2f} m/s  ({self.takeoff_speed*3.6:>6.1f} km/h){'':<7s}║",
            f"║  Flight time   : {self.flight_time:>10.3f} s{'':<24s}║",
            f"║  Landing point : ({self.landing_x:>7.2f}, {self.landing_y:>6.2f}) m{'':<17s}║",
            f"║  DISTANCE      : {self.final_distance:>10.2f} m{'':<24s}║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)


@dataclass
class TrajectoryResult:
    """Complete jump output."""
    params: SkierParameters
    policy: IntegrationPolicy
    samples: Tuple[TrajectorySample, ...] = field(repr=False)
    result: SimulationResult

    # Arrays, each has shape (N,)
    time: np.ndarray = field(repr=False)
    slope_distance: np.ndarray = field(repr=False)
    hill_altitude: np.ndarray = field(repr=False)
    x: np.ndarray = field(repr=False)
    y: np.ndarray = field(repr=False)
    velocity: np.ndarray = field(repr=False)
    vx: np.ndarray = field(repr=False)
    vy: np.ndarray = field(repr=False)
    acceleration: np.ndarray = field(repr=False)
    ax: np.ndarray = field(repr=False)
    ay: np.ndarray = field(repr=False)
    vel_angle: np.ndarray = field(repr=False)
    airborne: np.ndarray = field(repr=False)   # bool mask

    @property
    def takeoff_index(self) -> int:
        """Index of the first airborne sample."""
        return int(np.argmax(self.airborne)) if self.airborne.any() else len(self.time)

    @property
    def track_time(self) -> float:
        """Time spent on the in-run (s)."""
        return float(self.time[self.takeoff_index - 1])

    @property
    def height_above_hill(self) -> np.ndarray:
        return self.y - self.hill_altitude

    @property
    def max_height_above_hill(self) -> float:
        """Largest centre-of-mass height over the surface during flight (m)."""
        if not self.airborne.any():
            return 0.0
        return float(np.max(self.height_above_hill[self.airborne]))

    def interpolate_at_x(self, column: str, x_station: float) -> float:
        """
        Value of ``column`` (any array attribute) where the flight path passes
        horizontal station ``x_station``. Flight samples only, since x is
        strictly increasing there.
        """
        xs = self.x[self.airborne]
        if len(xs) < 2 or not (xs[0] <= x_station <= xs[-1]):
            raise ModelDomainError(
                f"x = {x_station} m is not on the recorded flight path"
            )
        values = getattr(self, column)[self.airborne]
        return float(interp1d(xs, values, kind='linear', assume_sorted=True)(x_station))

    def summary(self) -> str:
        return self.result.summary()


# ══════════════════════════════════════════════════════════════════════════
#  Phases
# ══════════════════════════════════════════════════════════════════════════

def run_on_track(params: SkierParameters, hill: HillProfile,
                 policy: IntegrationPolicy = REFERENCE_POLICY,
                 max_track_time: float = MAX_TRACK_TIME
                 ) -> Tuple[List[TrajectorySample], float, float]:
    """
    Slide down the in-run from ``params.start_position`` until past the lip.

    a = g (sin(−θ) − μ cos(−θ)) − ½ ρ A_takeoff · ½ v² / m

    Raises ModelDomainError if the skier comes to a stop before the lip or is
    still on the in-run after ``max_track_time`` seconds.

    Returns
    -------
    samples, takeoff_speed, exit_slope_distance
    """
    g, dt, m = params.gravity, params.dt, params.mass
    mu = params.friction_coeff
    air_term = 0.5 * params.air_density * params.frontal_area_takeoff * 0.5

    slope_dist = params.start_position
    speed = 0.0
    t = 0.0
    samples = []

    while slope_dist <= RAMP_END:
        if t > max_track_time:
            raise ModelDomainError(
                f"Lip not reached within {max_track_time} s on the in-run "
                f"(slope distance {slope_dist:.2f} m)"
            )

        angle = hill.slope_angle(slope_dist)
        acceleration = (g * (np.sin(-angle) - mu * np.cos(-angle))
                        - (air_term * speed ** 2) / m)
        ax = acceleration * np.cos(angle)
        ay = acceleration * np.sin(angle)
        speed += acceleration * dt
        if speed <= 0:
            raise ModelDomainError(
                f"Skier stopped on the in-run at slope distance {slope_dist:.2f} m "
                f"(t = {t:.3f} s, friction {mu})"
            )
        vx = speed * np.cos(angle)
        vy = speed * np.sin(angle)

        slope_dist += policy.track.displacement(speed, acceleration, dt)
        x = hill.position_for_slope_distance(slope_dist)
        y = hill.hill_altitude(x)
        t += dt

        state = KinematicState(
            time=t, x=x, y=y, vx=vx, vy=vy,
            velocity=np.sqrt(vx * vx + vy * vy), vel_angle=angle,
            ax=ax, ay=ay, acceleration=np.sqrt(ax * ax + ay * ay),
        )
        samples.append(TrajectorySample(state, Phase.ON_TRACK, slope_dist, y))

    return samples, speed, slope_dist


def apply_takeoff_impulse(speed: float, slope_dist: float,
                          params: SkierParameters,
                          hill: HillProfile) -> Tuple[float, float]:
    """
    Velocity (vx, vy) just after the jump push.

    The in-run speed is resolved along the surface angle at the exit point and
    the push sqrt(2 g h) is added normal to it.
    """
    angle = hill.slope_angle(slope_dist)
    push = np.sqrt(2 * params.gravity * params.push_height)
    vx = speed * np.cos(angle) + push * np.sin(angle)
    vy = speed * -np.sin(angle) + push * np.cos(angle)
    return vx, vy


def run_airborne(params: SkierParameters, hill: HillProfile,
                 aero: AerodynamicModel, takeoff: KinematicState,
                 exit_slope_distance: float,
                 policy: IntegrationPolicy = REFERENCE_POLICY,
                 direction: DirectionFunction = quadrant_naive_direction,
                 max_flight_time: float = MAX_FLIGHT_TIME
                 ) -> Tuple[List[TrajectorySample], KinematicState]:
    """
    Fly from the takeoff state until the skis touch the landing hill.

    ax = (L·(−sin θ) + D·(−cos θ)) / m
    ay = −g + (L·cos θ + D·(−sin θ)) / m

    The skier has landed once the centre of mass is less than a third of its
    height above the surface. That step is returned as the landing state and
    not recorded as a sample.
    """
    g, dt, m = params.gravity, params.dt, params.mass
    clearance = params.landing_clearance
    order = policy.flight

    t0 = takeoff.time
    t, x, y = takeoff.time, takeoff.x, takeoff.y
    vx, vy = takeoff.vx, takeoff.vy
    speed = np.sqrt(vx * vx + vy * vy)
    vel_angle = direction(vx, vy)
    samples = []

    while True:
        if t - t0 > max_flight_time:
            raise ModelDomainError(
                f"No landing within {max_flight_time} s of flight "
                f"(x = {x:.2f} m, y = {y:.2f} m)"
            )

        lift, drag = aero.forces(speed, vel_angle, t - t0)
        ax = (lift * -np.sin(vel_angle) + drag * -np.cos(vel_angle)) / m
        ay = -g + (lift * np.cos(vel_angle) + drag * -np.sin(vel_angle)) / m
        acceleration = np.sqrt(ax * ax + ay * ay)

        vx += ax * dt
        vy += ay * dt
        speed = np.sqrt(vx * vx + vy * vy)
        x += order.displacement(vx, ax, dt)
        y += order.displacement(vy, ay, dt)
        t += dt

        ground = hill.hill_altitude(x)
        vel_angle = direction(vx, vy)
        state = KinematicState(
            time=t, x=x, y=y, vx=vx, vy=vy, velocity=speed, vel_angle=vel_angle,
            ax=ax, ay=ay, acceleration=acceleration,
        )
        if y < ground + clearance:
            return samples, state
        samples.append(TrajectorySample(state, Phase.AIRBORNE, exit_slope_distance, ground))


# ══════════════════════════════════════════════════════════════════════════
#  Full jump
# ══════════════════════════════════════════════════════════════════════════

def jump_distance(x: float, y: float) -> float:
    """Straight-line distance from the takeoff reference point (m)."""
    x0, y0 = TAKEOFF_POINT
    return np.sqrt((x - x0) ** 2 + (y0 - y) ** 2)


def simulate_jump(params: SkierParameters = DEFAULT_PARAMETERS,
                  hill: Optional[HillProfile] = None,
                  policy: IntegrationPolicy = REFERENCE_POLICY,
                  direction: DirectionFunction = quadrant_naive_direction,
                  max_flight_time: float = MAX_FLIGHT_TIME,
                  max_track_time: float = MAX_TRACK_TIME) -> TrajectoryResult:
    """
    Run in-run, takeoff and flight back to back.

    Raises ModelDomainError if the skier stops on the in-run, leaves the
    modelled hill or the flight direction becomes undefined.
    """
    hill = hill if hill is not None else HillProfile()
    aero = AerodynamicModel(params)

    track_samples, takeoff_speed, exit_dist = run_on_track(
        params, hill, policy, max_track_time=max_track_time)
    last = track_samples[-1].state

    vx, vy = apply_takeoff_impulse(takeoff_speed, exit_dist, params, hill)
    takeoff = KinematicState(
        time=last.time, x=last.x, y=last.y, vx=vx, vy=vy,
        velocity=np.sqrt(vx * vx + vy * vy), vel_angle=direction(vx, vy),
        ax=last.ax, ay=last.ay, acceleration=last.acceleration,
    )

    flight_samples, landing = run_airborne(
        params, hill, aero, takeoff, exit_dist,
        policy=policy, direction=direction, max_flight_time=max_flight_time,
    )

    summary = SimulationResult(
        mass=params.mass,
        height=params.height,
        start_position=params.start_position,
        takeoff_speed=float(takeoff_speed),
        final_distance=float(jump_distance(landing.x, landing.y)),
        landing_x=float(landing.x),
        landing_y=float(landing.y),
        landing_time=float(landing.time),
        flight_time=float(landing.time - takeoff.time),
    )
    return _build_result(track_samples + flight_samples, params, policy, summary)


def _build_result(samples, params, policy, summary):
    """Convert the sample list to TrajectoryResult."""
    states = [s.state for s in samples]

    def column(name):
        return np.array([getattr(st, name) for st in states], dtype=float)

    return TrajectoryResult(
        params=params,
        policy=policy,
        samples=tuple(samples),
        result=summary,
        time=column('time'),
        slope_distance=np.array([s.slope_distance for s in samples], dtype=float),
        hill_altitude=np.array([s.hill_altitude for s in samples], dtype=float),
        x=column('x'),
        y=column('y'),
        velocity=column('velocity'),
        vx=column('vx'),
        vy=column('vy'),
        acceleration=column('acceleration'),
        ax=column('ax'),
        ay=column('ay'),
        vel_angle=column('vel_angle'),
        airborne=np.array([s.phase is Phase.AIRBORNE for s in samples], dtype=bool),
    )
