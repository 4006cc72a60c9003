"""
Detection Counter
=================

Tests a position against every camera's detection cone and accumulates
per-camera photo counts.

Detection Rule:
    A position is photographed by camera j when
        d_j < detection_radius
    and
        |wrap(bear_j - bearing_j)| < half_cone
    where
        d_j    = Euclidean distance from camera j to the position
        bear_j = atan2(dy, dx), the bearing from camera j to the position
        wrap   = difference wrapped into [-pi, pi)

Notes:
    - atan2 handles positions due north/south of a camera (dx == 0)
      without dividing by zero.
    - One position may trigger several cameras in the same step.
    - A detection radius of 0 is valid and never detects anything.

Example:
    counter = DetectionCounter(grid, detection_radius=50.0, bearings=bearings)
    for x, y in path:
        counter.detect((x, y))
    print(grid.counts)
"""

import logging
import math
from typing import Sequence, Tuple

import numpy as np

from camtrap_sim.errors import InvalidGeometryError
from camtrap_sim.geometry.camera_grid import CameraGrid


logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi
DEFAULT_HALF_CONE_DEGREES = 50.0


def angular_difference(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Absolute circular difference between angles (radians).
    
    Returns:
        Values in [0, pi]
    """
    diff = np.mod(np.asarray(a) - np.asarray(b) + math.pi, TWO_PI) - math.pi
    return np.abs(diff)


def validate_geometry(
    detection_radius: float,
    camera_bearings: Sequence[float],
    n_cameras: int,
    half_cone_degrees: float = DEFAULT_HALF_CONE_DEGREES,
) -> np.ndarray:
    """
    Validate detection geometry. Fail fast.
    
    Args:
        detection_radius: Must be >= 0
        camera_bearings: One bearing per camera, each in [0, 2*pi)
        n_cameras: Number of cameras in the grid
        half_cone_degrees: Must be in (0, 180]
        
    Returns:
        Bearings as a float array
        
    Raises:
        InvalidGeometryError: Listing every problem found
    """
    errors = []
    bearings = np.asarray(camera_bearings, dtype=float).reshape(-1)
    
    if not math.isfinite(detection_radius) or detection_radius < 0:
        errors.append(f"detection_radius must be >= 0, got {detection_radius}")
    if not 0 < half_cone_degrees <= 180:
        errors.append(f"half_cone_degrees must be in (0, 180], got {half_cone_degrees}")
    if bearings.shape[0] != n_cameras:
        errors.append(
            f"expected {n_cameras} camera bearings, got {bearings.shape[0]}"
        )
    out_of_range = np.flatnonzero(~((bearings >= 0) & (bearings < TWO_PI)))
    if out_of_range.size:
        errors.append(
            f"camera bearings must be in [0, 2*pi), bad indices: {out_of_range.tolist()}"
        )
    
    if errors:
        raise InvalidGeometryError(
            "Detection geometry validation failed:\n" + "\n".join(errors)
        )
    return bearings


def random_bearings(
    n_cameras: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Random camera bearings, Uniform[0, 2*pi), one per camera."""
    return rng.uniform(0.0, TWO_PI, size=n_cameras)


def _in_cone(
    position: Tuple[float, float],
    camera_positions: np.ndarray,
    detection_radius: float,
    bearings: np.ndarray,
    half_cone: float,
) -> np.ndarray:
    """Boolean mask of cameras whose cone contains `position`."""
    dx = position[0] - camera_positions[:, 0]
    dy = position[1] - camera_positions[:, 1]
    distance = np.hypot(dx, dy)
    bear = np.arctan2(dy, dx)
    return (distance < detection_radius) & (angular_difference(bear, bearings) < half_cone)


def detect(
    position: Tuple[float, float],
    camera_grid: CameraGrid,
    detection_radius: float,
    camera_bearings: Sequence[float],
    half_cone_degrees: float = DEFAULT_HALF_CONE_DEGREES,
) -> np.ndarray:
    """
    Count one position against every camera in the grid.
    
    Increments the count of each camera whose cone contains the position.
    
    Args:
        position: (x, y) of the animal
        camera_grid: Grid whose counts are updated in place
        detection_radius: Detection distance
        camera_bearings: Fixed bearing of each camera (radians)
        half_cone_degrees: Half-width of the cone
        
    Returns:
        camera_ids that detected the position
        
    Raises:
        InvalidGeometryError: If the geometry is invalid
    """
    bearings = validate_geometry(
        detection_radius, camera_bearings, len(camera_grid), half_cone_degrees
    )
    hits = np.flatnonzero(
        _in_cone(
            position,
            camera_grid.positions,
            detection_radius,
            bearings,
            math.radians(half_cone_degrees),
        )
    )
    camera_grid.increment(hits)
    return hits


class DetectionCounter:
    """
    Stateful detector bound to one camera grid.
    
    Validates geometry once at construction so the per-step call does no
    checking. Counts are written into the grid's cameras.
    
    Attributes:
        grid: Camera grid being counted into
        detection_radius: Detection distance
        bearings: Camera bearings (radians)
        half_cone_degrees: Half-width of the detection cone
    """
    
    def __init__(
        self,
        grid: CameraGrid,
        detection_radius: float,
        bearings: Sequence[float],
        half_cone_degrees: float = DEFAULT_HALF_CONE_DEGREES,
    ) -> None:
        """
        Initialize detection counter.
        
        Raises:
            InvalidGeometryError: If radius, cone or bearings are invalid
        """
        self.grid = grid
        self.bearings = validate_geometry(
            detection_radius, bearings, len(grid), half_cone_degrees
        )
        self.detection_radius = detection_radius
        self.half_cone_degrees = half_cone_degrees
        
        self._half_cone = math.radians(half_cone_degrees)
        self._positions = grid.positions
        self._positions_tested: int = 0
    
    def detect(self, position: Tuple[float, float]) -> np.ndarray:
        """
        Test one position and increment the matching cameras.
        
        Returns:
            camera_ids that detected the position
        """
        self._positions_tested += 1
        mask = _in_cone(
            position,
            self._positions,
            self.detection_radius,
            self.bearings,
            self._half_cone,
        )
        if mask.any():
            hits = np.flatnonzero(mask)
            self.grid.increment(hits)
            return hits
        return np.empty(0, dtype=int)
    
    @property
    def counts(self) -> np.ndarray:
        """Current grid counts, indexed by camera_id."""
        return self.grid.counts
    
    @property
    def positions_tested(self) -> int:
        """Number of positions tested."""
        return self._positions_tested
    
    def reset(self) -> None:
        """Zero this counter and the grid's counts."""
        self._positions_tested = 0
        self.grid.reset_counts()
    
    def get_metrics(self) -> dict:
        """Get counter metrics for observability."""
        counts = self.grid.counts
        return {
            "positions_tested": self._positions_tested,
            "total_detections": int(counts.sum()),
            "cameras_hit": int(np.count_nonzero(counts)),
            "detection_radius": self.detection_radius,
            "half_cone_degrees": self.half_cone_degrees,
        }
