"""
Detection Counter Tests
=======================

Tests for the cone-of-detection rule and count accumulation.
"""

import math

import numpy as np
import pytest

from camtrap_sim.detection import DetectionCounter, angular_difference, detect
from camtrap_sim.errors import InvalidGeometryError


class TestAngularDifference:
    """Tests for wrapped angle differences."""
    
    def test_wraps_across_zero(self):
        """Angles either side of 0 are close, not 2*pi apart."""
        diff = angular_difference(0.1, 2 * math.pi - 0.1)
        assert diff == pytest.approx(0.2)
    
    def test_opposite_directions(self):
        """Opposite headings differ by pi."""
        assert angular_difference(0.0, math.pi) == pytest.approx(math.pi)


class TestDetect:
    """Tests for the detect() function."""
    
    def test_position_inside_cone(self, line_grid):
        """A position straight ahead and in range is photographed."""
        hits = detect((20.0, 0.0), line_grid, 50.0, [0.0, 0.0, 0.0])
        assert hits.tolist() == [0]
        assert line_grid.counts.tolist() == [1, 0, 0]
    
    def test_position_behind_camera(self, line_grid):
        """A position behind the camera is outside the cone."""
        hits = detect((120.0, 0.0), line_grid, 50.0, [0.0, math.pi, 0.0])
        assert hits.size == 0
        assert line_grid.counts.tolist() == [0, 0, 0]
    
    def test_position_out_of_range(self, line_grid):
        """Distance must be strictly below the radius."""
        detect((50.0, 0.0), line_grid, 50.0, [0.0, 0.0, 0.0])
        assert line_grid.counts.tolist() == [0, 0, 0]
    
    def test_due_north_of_camera(self, line_grid):
        """dx == 0 is handled without error."""
        bearings = [math.pi / 2, 0.0, 0.0]
        hits = detect((0.0, 10.0), line_grid, 50.0, bearings)
        assert hits.tolist() == [0]
        
        hits = detect((0.0, -10.0), line_grid, 50.0, bearings)
        assert hits.size == 0
    
    def test_multiple_cameras_same_step(self, line_grid):
        """One position may hit several cameras."""
        bearings = [0.0, math.pi, 0.0]
        hits = detect((50.0, 1.0), line_grid, 60.0, bearings)
        assert hits.tolist() == [0, 1]
    
    def test_repeat_detection_increments_by_one(self, line_grid):
        """Each call on the same position adds exactly one photo."""
        bearings = [0.0, 0.0, 0.0]
        detect((10.0, 0.0), line_grid, 50.0, bearings)
        first = line_grid.counts[0]
        detect((10.0, 0.0), line_grid, 50.0, bearings)
        assert line_grid.counts[0] == first + 1
    
    def test_zero_radius_never_detects(self, line_grid):
        """detection_radius=0 photographs nothing, even at the camera."""
        for x in np.linspace(-10, 210, 45):
            detect((float(x), 0.0), line_grid, 0.0, [0.0, 0.0, 0.0])
        assert line_grid.counts.tolist() == [0, 0, 0]
    
    def test_negative_radius_raises(self, line_grid):
        """A negative radius is invalid geometry."""
        with pytest.raises(InvalidGeometryError):
            detect((0.0, 0.0), line_grid, -1.0, [0.0, 0.0, 0.0])
    
    def test_bearing_out_of_range_raises(self, line_grid):
        """Bearings must lie in [0, 2*pi)."""
        with pytest.raises(InvalidGeometryError):
            detect((0.0, 0.0), line_grid, 50.0, [0.0, 2 * math.pi, 0.0])
    
    def test_bearing_count_mismatch_raises(self, line_grid):
        """One bearing per camera is required."""
        with pytest.raises(InvalidGeometryError):
            detect((0.0, 0.0), line_grid, 50.0, [0.0, 0.0])


class TestDetectionCounter:
    """Tests for DetectionCounter."""
    
    def test_counts_written_to_grid(self, line_grid):
        """Counter and grid agree after a series of positions."""
        counter = DetectionCounter(line_grid, 50.0, [0.0, 0.0, 0.0])
        for x in (10.0, 20.0, 110.0):
            counter.detect((x, 0.0))
        assert counter.counts.tolist() == [2, 1, 0]
        assert line_grid.counts.tolist() == [2, 1, 0]
        assert counter.positions_tested == 3
    
    def test_reset(self, line_grid):
        """reset zeroes both counter and grid."""
        counter = DetectionCounter(line_grid, 50.0, [0.0, 0.0, 0.0])
        counter.detect((10.0, 0.0))
        counter.reset()
        assert counter.counts.tolist() == [0, 0, 0]
        assert line_grid.counts.tolist() == [0, 0, 0]
    
    def test_metrics(self, line_grid):
        """Metrics summarize detections."""
        counter = DetectionCounter(line_grid, 50.0, [0.0, 0.0, 0.0])
        counter.detect((10.0, 0.0))
        metrics = counter.get_metrics()
        assert metrics["total_detections"] == 1
        assert metrics["cameras_hit"] == 1
    
    def test_follows_grid_reset(self, line_grid):
        """Resetting the grid directly is visible through the counter."""
        counter = DetectionCounter(line_grid, 50.0, [0.0, 0.0, 0.0])
        counter.detect((10.0, 0.0))
        counter.detect((110.0, 0.0))
        line_grid.reset_counts()
        assert counter.counts.tolist() == [0, 0, 0]
        assert counter.get_metrics()["total_detections"] == 0
        counter.detect((10.0, 0.0))
        assert counter.counts.tolist() == [1, 0, 0]
    
    def test_invalid_geometry_at_construction(self, line_grid):
        """Geometry is validated before any position is tested."""
        with pytest.raises(InvalidGeometryError):
            DetectionCounter(line_grid, 50.0, [0.0, 0.0, -0.1])
