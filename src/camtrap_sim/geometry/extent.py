"""
Study Extent
============

Bounding box of the camera grid, used to place simulated individuals.

Starting points are drawn uniformly from the central 50% of each axis
(25%-75% of the range) so individuals do not start at the survey edge.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from camtrap_sim.errors import EmptyInputError
from camtrap_sim.models.observation import ObservationRecord


@dataclass(frozen=True, slots=True)
class StudyExtent:
    """
    Axis-aligned bounding box of the survey.
    
    Attributes:
        min_x, max_x: Longitude range
        min_y, max_y: Latitude range
    """
    
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    
    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError("extent minimum exceeds maximum")
    
    @classmethod
    def from_observations(cls, records: Iterable[ObservationRecord]) -> "StudyExtent":
        """Bounding box of all record locations."""
        coords = np.array([r.location for r in records], dtype=float)
        if coords.size == 0:
            raise EmptyInputError("no observation records to derive an extent from")
        return cls(
            min_x=float(coords[:, 0].min()),
            max_x=float(coords[:, 0].max()),
            min_y=float(coords[:, 1].min()),
            max_y=float(coords[:, 1].max()),
        )
    
    @property
    def width(self) -> float:
        return self.max_x - self.min_x
    
    @property
    def height(self) -> float:
        return self.max_y - self.min_y
    
    def central_window(self, margin: float = 0.25) -> "StudyExtent":
        """Extent shrunk by `margin` of the range on every side."""
        if not 0 <= margin < 0.5:
            raise ValueError("margin must be in [0, 0.5)")
        dx = margin * self.width
        dy = margin * self.height
        return StudyExtent(
            min_x=self.min_x + dx,
            max_x=self.max_x - dx,
            min_y=self.min_y + dy,
            max_y=self.max_y - dy,
        )
    
    def sample_start(
        self,
        rng: np.random.Generator,
        margin: float = 0.25,
    ) -> Tuple[float, float]:
        """Uniform random starting point inside the central window."""
        window = self.central_window(margin)
        x = rng.uniform(window.min_x, window.max_x)
        y = rng.uniform(window.min_y, window.max_y)
        return (float(x), float(y))
