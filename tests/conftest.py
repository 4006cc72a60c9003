"""
Test Configuration
==================

Pytest fixtures and test configuration for camtrap_sim.
"""

import math

import numpy as np
import pytest


@pytest.fixture
def sample_records():
    """Trap result with 4 cameras, repeated detections at some of them."""
    from camtrap_sim.models.observation import ObservationRecord
    
    rows = [
        (0.0, 0.0, 2, "2015-06-01", "20:11:00"),
        (400.0, 0.0, 1, "2015-06-01", "21:40:12"),
        (0.0, 0.0, 1, "2015-06-02", "05:02:30"),
        (0.0, 400.0, 0, "2015-06-02", "12:00:00"),
        (400.0, 400.0, 3, "2015-06-03", "22:15:47"),
        (400.0, 0.0, 2, "2015-06-04", "23:59:59"),
    ]
    return [
        ObservationRecord(longitude=x, latitude=y, group_size=g, date=d, time=t)
        for x, y, g, d, t in rows
    ]


@pytest.fixture
def line_grid():
    """Three cameras on the x-axis at 0, 100 and 200."""
    from camtrap_sim.geometry.camera_grid import CameraGrid
    from camtrap_sim.models.observation import ObservationRecord
    
    records = [
        ObservationRecord(longitude=0.0, latitude=0.0),
        ObservationRecord(longitude=100.0, latitude=0.0),
        ObservationRecord(longitude=200.0, latitude=0.0),
    ]
    return CameraGrid.build(records)


@pytest.fixture
def short_movement():
    """Movement parameters small enough for fast simulation tests."""
    from camtrap_sim.config import MovementConfig
    
    return MovementConfig(
        step_count=300,
        mean_step_length=10.0,
        step_length_std=0.2,
        turn_bias_std=math.radians(30),
        home_range_radius=300.0,
    )


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(20150601)
