"""
Simulation Errors
=================
Failures raised by the engine. Every run is one-shot and deterministic, so
nothing here is retried: any of these aborts the simulation.
"""


class SkiJumpError(Exception):
    """Base class for all simulator failures."""


class ConfigurationError(SkiJumpError, ValueError):
    """Skier or run parameters that cannot describe a physical jump."""


class ModelDomainError(SkiJumpError, ArithmeticError):
    """The state left the region the hill / flight model is defined on."""
