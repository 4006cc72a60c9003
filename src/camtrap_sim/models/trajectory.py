"""
Trajectory Models
=================

Positions produced by the movement simulator for one individual.

Trajectories are diagnostic output only (plotting is done elsewhere); the
count vector accumulated by the detection counter is the required result.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np


@dataclass(frozen=True, slots=True)
class TrajectoryPoint:
    """
    One step of a walk.
    
    Attributes:
        step_index: 1-based step number
        x: Position after the step
        y: Position after the step
    """
    
    step_index: int
    x: float
    y: float


@dataclass(frozen=True)
class Trajectory:
    """
    Full path of one simulated individual.
    
    Attributes:
        start: Starting point (the home-range origin)
        xs: x position after each step
        ys: y position after each step
    """
    
    start: Tuple[float, float]
    xs: np.ndarray
    ys: np.ndarray
    
    def __len__(self) -> int:
        return int(self.xs.shape[0])
    
    @property
    def end(self) -> Tuple[float, float]:
        """Final position (the start point when no steps were taken)."""
        if len(self) == 0:
            return self.start
        return (float(self.xs[-1]), float(self.ys[-1]))
    
    def points(self) -> Iterator[TrajectoryPoint]:
        """Iterate over the path as TrajectoryPoint objects."""
        for i, (x, y) in enumerate(zip(self.xs, self.ys), start=1):
            yield TrajectoryPoint(step_index=i, x=float(x), y=float(y))
    
    def as_array(self) -> np.ndarray:
        """Path as an (n_steps, 2) array."""
        return np.column_stack([self.xs, self.ys])
