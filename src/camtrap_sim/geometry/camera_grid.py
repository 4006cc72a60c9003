"""
Camera Grid
===========

The fixed set of unique camera locations derived from observation records.

This module handles:
    - Deduplicating records into cameras (exact coordinate equality)
    - Holding per-camera counts during a simulation run
    - Aggregating observed group sizes per camera

Camera order is first-occurrence order and is stable: every count vector is
indexed against it until the final sort step.

Example:
    from camtrap_sim.geometry import CameraGrid
    
    grid = CameraGrid.build(records)
    worker_grid = grid.clone()      # zeroed, independent copy
    worker_grid.increment([0, 2])
    print(worker_grid.counts)       # array([1, 0, 1, ...])
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from camtrap_sim.errors import EmptyInputError
from camtrap_sim.models.camera import Camera
from camtrap_sim.models.observation import ObservationRecord


logger = logging.getLogger(__name__)


class CameraGrid:
    """
    Ordered collection of cameras with mutable counts.
    
    A grid is owned by a single simulation trial. Use `clone()` to give each
    trial (or worker) its own zero-initialized count state.
    
    Attributes:
        cameras: Cameras in first-occurrence order; camera_id == position
    """
    
    def __init__(self, cameras: Sequence[Camera]) -> None:
        """
        Initialize a grid from cameras.
        
        Args:
            cameras: Cameras with camera_id equal to their position
            
        Raises:
            EmptyInputError: If no cameras are given
            ValueError: If camera ids do not match positions
        """
        if not cameras:
            raise EmptyInputError("camera grid needs at least one camera")
        for position, camera in enumerate(cameras):
            if camera.camera_id != position:
                raise ValueError(
                    f"camera_id {camera.camera_id} does not match position {position}"
                )
        
        self.cameras: List[Camera] = list(cameras)
        self._positions = np.array(
            [[c.longitude, c.latitude] for c in self.cameras],
            dtype=float,
        )
        self._index: Dict[Tuple[float, float], int] = {
            c.location: c.camera_id for c in self.cameras
        }
    
    @classmethod
    def build(cls, records: Iterable[ObservationRecord]) -> "CameraGrid":
        """
        Derive the grid of unique camera locations.
        
        Args:
            records: Observation records (many may share a location)
            
        Returns:
            Grid with one zero-count camera per distinct (lon, lat)
            
        Raises:
            EmptyInputError: If there are no records
        """
        cameras: List[Camera] = []
        seen = set()
        for record in records:
            if record.location in seen:
                continue
            seen.add(record.location)
            cameras.append(
                Camera(
                    camera_id=len(cameras),
                    longitude=record.longitude,
                    latitude=record.latitude,
                )
            )
        
        if not cameras:
            raise EmptyInputError("no observation records to derive cameras from")
        
        logger.debug(f"Built camera grid: cameras={len(cameras)}")
        return cls(cameras)
    
    def __len__(self) -> int:
        return len(self.cameras)
    
    def __iter__(self) -> Iterator[Camera]:
        return iter(self.cameras)
    
    @property
    def positions(self) -> np.ndarray:
        """Camera coordinates as an (n_cameras, 2) array (read-only view)."""
        view = self._positions.view()
        view.flags.writeable = False
        return view
    
    @property
    def counts(self) -> np.ndarray:
        """Current counts, indexed by camera_id."""
        return np.array([c.count for c in self.cameras], dtype=int)
    
    def sorted_counts(self) -> np.ndarray:
        """Current counts sorted ascending (the rank-based signature)."""
        return np.sort(self.counts)
    
    def index_of(self, longitude: float, latitude: float) -> int:
        """camera_id of the camera at exactly this location."""
        return self._index[(longitude, latitude)]
    
    def increment(self, camera_ids: Iterable[int], amount: int = 1) -> None:
        """Add `amount` to the count of each listed camera."""
        for camera_id in camera_ids:
            self.cameras[int(camera_id)].count += amount
    
    def reset_counts(self) -> None:
        """Zero every camera's count."""
        for camera in self.cameras:
            camera.count = 0
    
    def clone(self) -> "CameraGrid":
        """Independent copy of the grid with all counts zeroed."""
        return CameraGrid(
            [
                Camera(camera_id=c.camera_id, longitude=c.longitude, latitude=c.latitude)
                for c in self.cameras
            ]
        )
    
    def __repr__(self) -> str:
        return f"CameraGrid(cameras={len(self)}, total_count={int(self.counts.sum())})"


def observed_counts(
    records: Sequence[ObservationRecord],
    grid: Optional[CameraGrid] = None,
) -> np.ndarray:
    """
    Sum group sizes per unique camera location.
    
    Args:
        records: Real observation records
        grid: Grid to index against; built from `records` when omitted
        
    Returns:
        Total group size per camera, indexed by camera_id (unsorted)
        
    Raises:
        EmptyInputError: If there are no records
        KeyError: If a record lies outside the given grid
    """
    if not records:
        raise EmptyInputError("no observation records to aggregate")
    if grid is None:
        grid = CameraGrid.build(records)
    
    totals = np.zeros(len(grid), dtype=int)
    for record in records:
        totals[grid.index_of(record.longitude, record.latitude)] += record.group_size
    return totals
