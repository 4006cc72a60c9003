"""
Data Models
===========

Typed data passed between pipeline stages.

This module re-exports all data models for convenient access.

Models:
    Input:
        - ObservationRecord: One camera-trap record

    Grid:
        - Camera: Unique trap location with a running count

    Movement:
        - TrajectoryPoint, Trajectory: Path of one simulated individual

    Simulation:
        - SimulationRecord: (label, sorted counts) training example
        - SimulationTable: Training set for the estimator

    Output:
        - AbundanceEstimate: Median and interval of population size
"""

from camtrap_sim.models.observation import ObservationRecord
from camtrap_sim.models.camera import Camera
from camtrap_sim.models.trajectory import Trajectory, TrajectoryPoint
from camtrap_sim.models.simulation import SimulationRecord, SimulationTable
from camtrap_sim.models.estimate import AbundanceEstimate

__all__ = [
    # Input
    "ObservationRecord",
    # Grid
    "Camera",
    # Movement
    "Trajectory",
    "TrajectoryPoint",
    # Simulation
    "SimulationRecord",
    "SimulationTable",
    # Output
    "AbundanceEstimate",
]
