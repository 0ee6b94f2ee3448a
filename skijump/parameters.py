"""
Skier & Run Parameters
======================
Physical constants for one simulated jump. Defaults reproduce Wolfgang Loitzl
on the Whistler HS140 hill (22 Feb 2010 competition conditions):

  - Air density from competition temperature/humidity and hill elevation
  - Ski mass and ski area from the FIS ski-length regulation (145 % of height)
  - Body frontal area from height and an average body width

All values are fixed for a run; derive a variant with ``with_overrides``.
"""

import dataclasses
from dataclasses import dataclass

from .errors import ConfigurationError
from .hill import RAMP_END


# ── Scenario constants ────────────────────────────────────────────────────
GRAVITY              = 9.81     # N/kg
AIR_DENSITY          = 1.13     # kg/m³
SKIER_HEIGHT         = 1.8      # m
BODY_MASS            = 63.0     # kg
EQUIPMENT_MASS       = 2.0      # kg   clothes, bindings, boots
FRICTION_COEFF       = 0.05     #      waxed skis on snow
TIME_STEP            = 0.001    # s
START_POSITION       = 6.25     # m along the in-run (from competition video)
JUMP_PUSH_HEIGHT     = 0.4      # m    vertical jump the skier can produce

SKI_LENGTH_RATIO     = 1.45     # ski length / skier height
SKI_WIDTH            = 0.1      # m
BODY_WIDTH_RATIO     = 0.3      # average body width / height
TAKEOFF_AREA_RATIO   = 0.5      # crouched in-run stance vs standing


@dataclass(frozen=True)
class SkierParameters:
    """
    Immutable configuration for one jump.

    Derived quantities (ski mass, total mass, frontal areas) are properties so
    that overriding ``height`` keeps them consistent.
    """
    body_mass: float = BODY_MASS
    height: float = SKIER_HEIGHT
    equipment_mass: float = EQUIPMENT_MASS
    friction_coeff: float = FRICTION_COEFF
    air_density: float = AIR_DENSITY
    gravity: float = GRAVITY
    dt: float = TIME_STEP
    start_position: float = START_POSITION
    push_height: float = JUMP_PUSH_HEIGHT

    def __post_init__(self):
        positive = {
            'body_mass': self.body_mass,
            'height': self.height,
            'air_density': self.air_density,
            'gravity': self.gravity,
            'dt': self.dt,
        }
        for name, value in positive.items():
            if not value > 0:
                raise ConfigurationError(f"{name} must be positive, got {value!r}")

        non_negative = {
            'equipment_mass': self.equipment_mass,
            'friction_coeff': self.friction_coeff,
            'start_position': self.start_position,
            'push_height': self.push_height,
        }
        for name, value in non_negative.items():
            if not value >= 0:
                raise ConfigurationError(f"{name} must be non-negative, got {value!r}")

        if self.start_position >= RAMP_END:
            raise ConfigurationError(
                f"start_position {self.start_position} m is at or past the takeoff "
                f"lip at {RAMP_END} m"
            )

    # ── Derived body model ────────────────────────────────────────────────
    @property
    def ski_mass(self) -> float:
        """Pair of skis, per the regulation length formula (kg)."""
        return 2 * (self.height * SKI_LENGTH_RATIO)

    @property
    def mass(self) -> float:
        """Total mass: skis + body + equipment (kg)."""
        return self.ski_mass + self.body_mass + self.equipment_mass

    @property
    def frontal_area_body(self) -> float:
        return self.height * BODY_WIDTH_RATIO

    @property
    def frontal_area_takeoff(self) -> float:
        """Frontal area in the crouched in-run position (m²)."""
        return self.frontal_area_body * TAKEOFF_AREA_RATIO

    @property
    def frontal_area_skis(self) -> float:
        return 2 * (self.height * SKI_LENGTH_RATIO * SKI_WIDTH)

    @property
    def landing_clearance(self) -> float:
        """Centre of mass to ski soles in the flight stance (m)."""
        return self.height / 3

    def with_overrides(self, **changes) -> 'SkierParameters':
        """Copy with some fields replaced (validated again)."""
        return dataclasses.replace(self, **changes)


DEFAULT_PARAMETERS = SkierParameters()
