"""
Errors
======

Exception taxonomy for the simulation and estimation pipeline.

Geometry and input-shape errors are fatal to the current run. Numerical
edge cases inside per-step sampling are handled locally and never raised.
"""


class CamtrapError(Exception):
    """Base class for all camtrap_sim errors."""
    pass


class EmptyInputError(CamtrapError, ValueError):
    """Raised when no observation records (or no cameras) are available."""
    pass


class InvalidGeometryError(CamtrapError, ValueError):
    """Raised for a negative detection radius or an out-of-range bearing."""
    pass


class ShapeMismatchError(CamtrapError, ValueError):
    """Raised when observed and trained feature widths differ."""
    pass


class InvalidProbabilityError(CamtrapError, ValueError):
    """Raised when a mixture weight cannot be turned into a probability."""
    pass


class InvalidParameterError(CamtrapError, ValueError):
    """Raised when movement, estimator or input parameters are invalid."""
    pass


class SimulationCancelledError(CamtrapError):
    """Raised when a run is cancelled between trials."""
    pass
