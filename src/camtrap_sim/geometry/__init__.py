"""
Geometry Module
===============

Static survey geometry: the camera grid and the study extent.

Cameras are derived from the observation records and remain fixed for a
run; only their counts change.
"""

from camtrap_sim.geometry.camera_grid import CameraGrid, observed_counts
from camtrap_sim.geometry.extent import StudyExtent

__all__ = [
    "CameraGrid",
    "StudyExtent",
    "observed_counts",
]
