"""
Camera Grid Tests
=================

Tests for grid construction, count state and observed count aggregation.
"""

import numpy as np
import pytest

from camtrap_sim.errors import EmptyInputError
from camtrap_sim.geometry import CameraGrid, StudyExtent, observed_counts
from camtrap_sim.models.observation import ObservationRecord


class TestCameraGrid:
    """Tests for CameraGrid."""
    
    def test_one_camera_per_distinct_location(self, sample_records):
        """Camera count equals the number of distinct (lon, lat) pairs."""
        grid = CameraGrid.build(sample_records)
        distinct = {r.location for r in sample_records}
        assert len(grid) == len(distinct) == 4
    
    def test_first_occurrence_order(self, sample_records):
        """Cameras keep first-occurrence order with matching ids."""
        grid = CameraGrid.build(sample_records)
        assert [c.location for c in grid] == [
            (0.0, 0.0),
            (400.0, 0.0),
            (0.0, 400.0),
            (400.0, 400.0),
        ]
        assert [c.camera_id for c in grid] == [0, 1, 2, 3]
    
    def test_counts_start_at_zero(self, sample_records):
        """Freshly built cameras have no photos."""
        grid = CameraGrid.build(sample_records)
        assert grid.counts.tolist() == [0, 0, 0, 0]
    
    def test_empty_input_raises(self):
        """No records means no cameras."""
        with pytest.raises(EmptyInputError):
            CameraGrid.build([])
    
    def test_increment_and_reset(self, sample_records):
        """reset_counts zeroes every camera."""
        grid = CameraGrid.build(sample_records)
        grid.increment([0, 2, 2])
        assert grid.counts.tolist() == [1, 0, 2, 0]
        assert grid.sorted_counts().tolist() == [0, 0, 1, 2]
        
        grid.reset_counts()
        assert grid.counts.tolist() == [0, 0, 0, 0]
    
    def test_clone_is_independent(self, sample_records):
        """A clone starts at zero and does not share count state."""
        grid = CameraGrid.build(sample_records)
        grid.increment([1])
        
        copy = grid.clone()
        assert copy.counts.tolist() == [0, 0, 0, 0]
        
        copy.increment([3])
        assert grid.counts.tolist() == [0, 1, 0, 0]
        assert copy.counts.tolist() == [0, 0, 0, 1]
    
    def test_index_of(self, sample_records):
        """Locations map back to camera ids."""
        grid = CameraGrid.build(sample_records)
        assert grid.index_of(400.0, 400.0) == 3


class TestObservedCounts:
    """Tests for observed_counts aggregation."""
    
    def test_sums_group_size_per_camera(self, sample_records):
        """Group sizes are summed per unique location."""
        counts = observed_counts(sample_records)
        assert counts.tolist() == [3, 3, 0, 3]
    
    def test_empty_raises(self):
        """No records cannot be aggregated."""
        with pytest.raises(EmptyInputError):
            observed_counts([])


class TestStudyExtent:
    """Tests for StudyExtent."""
    
    def test_from_observations(self, sample_records):
        """Extent spans every record location."""
        extent = StudyExtent.from_observations(sample_records)
        assert (extent.min_x, extent.max_x) == (0.0, 400.0)
        assert (extent.min_y, extent.max_y) == (0.0, 400.0)
    
    def test_start_points_in_central_window(self, sample_records, rng):
        """Starting points fall within 25%-75% of each axis."""
        extent = StudyExtent.from_observations(sample_records)
        points = np.array([extent.sample_start(rng) for _ in range(500)])
        assert points[:, 0].min() >= 100.0
        assert points[:, 0].max() <= 300.0
        assert points[:, 1].min() >= 100.0
        assert points[:, 1].max() <= 300.0
    
    def test_single_location_extent(self):
        """A degenerate extent always starts at the single camera."""
        extent = StudyExtent.from_observations(
            [ObservationRecord(longitude=5.0, latitude=7.0)]
        )
        assert extent.sample_start(np.random.default_rng(1)) == (5.0, 7.0)
