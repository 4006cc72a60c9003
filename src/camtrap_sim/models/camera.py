"""
Camera Models
=============

A camera is one unique trap location plus its running photo count.

Cameras carry an explicit `camera_id` (their position in the grid), so
count vectors can be traced back to a camera until the final sort step.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True)
class Camera:
    """
    Camera location with a cumulative photo count.
    
    Mutable only during a simulation run: the count accumulates while an
    individual walks and is reset between individuals.
    
    Attributes:
        camera_id: Stable index of this camera in its grid
        longitude: Camera x coordinate
        latitude: Camera y coordinate
        count: Cumulative number of photos (>= 0)
    """
    
    camera_id: int
    longitude: float
    latitude: float
    count: int = 0
    
    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.camera_id < 0:
            raise ValueError("camera_id must be non-negative")
        if self.count < 0:
            raise ValueError("count must be non-negative")
    
    @property
    def location(self) -> Tuple[float, float]:
        """(longitude, latitude) of the camera."""
        return (self.longitude, self.latitude)
    
    def __repr__(self) -> str:
        return (
            f"Camera(id={self.camera_id}, "
            f"x={self.longitude:.2f}, y={self.latitude:.2f}, "
            f"count={self.count})"
        )
