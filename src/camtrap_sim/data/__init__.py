"""
Data Module
===========

Loading camera-trap results into ObservationRecords.
"""

from camtrap_sim.data.observations import load_observations, observations_from_frame

__all__ = [
    "load_observations",
    "observations_from_frame",
]
