"""
Detection Module
================

Cone-of-detection photo counting against a camera grid.
"""

from camtrap_sim.detection.counter import (
    DetectionCounter,
    angular_difference,
    random_bearings,
    detect,
    validate_geometry,
)

__all__ = [
    "DetectionCounter",
    "angular_difference",
    "random_bearings",
    "detect",
    "validate_geometry",
]
