"""
Footprint Chain Statistics
==========================

Step length and turning angle statistics from a GPS footprint chain.

A footprint chain is a track recorded at one fix per second, with columns
Lon and Lat in degrees. Steps are taken every `scale` fixes.

Formulas:
    dy_km  = dLat * 39946.79 / 360
    dx_km  = dLon * pi * 12756.32 / 360 * cos(lat)
    dist   = sqrt(dx_km^2 + dy_km^2) * 1000          (metres)
    theta  = asin(dy_km / dist_km)                   (degrees)
    turn   = theta[i+1] - theta[i]

Zero-length steps (undefined bearing) and steps over 400 m (jumps between
survey regions) are dropped before turning angles are taken.
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
import pandas as pd

from camtrap_sim.config import MovementConfig
from camtrap_sim.errors import EmptyInputError, InvalidParameterError


logger = logging.getLogger(__name__)

KM_PER_DEGREE_LAT = 39946.79 / 360.0
EQUATOR_KM_PER_DEGREE = math.pi * 12756.32 / 360.0
MAX_STEP_METRES = 400.0


@dataclass(frozen=True, slots=True)
class FootprintStatistics:
    """
    Movement statistics of one footprint chain.
    
    Attributes:
        mean_step_length: Mean step length (metres)
        step_length_std: SD of step length (metres)
        turn_angle_std: SD of turning angle (degrees)
        n_steps: Number of steps the statistics cover
    """
    
    mean_step_length: float
    step_length_std: float
    turn_angle_std: float
    n_steps: int
    
    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "mean_step_length": round(self.mean_step_length, 2),
            "step_length_std": round(self.step_length_std, 2),
            "turn_angle_std": round(self.turn_angle_std, 2),
            "n_steps": self.n_steps,
        }


def footprint_statistics(chain: pd.DataFrame, scale: int = 1) -> FootprintStatistics:
    """
    Compute step and turning statistics from a footprint chain.
    
    Args:
        chain: Track with Lon and Lat columns, ordered by time
        scale: Take one fix every `scale` seconds as a step
        
    Returns:
        FootprintStatistics
        
    Raises:
        InvalidParameterError: If scale < 1 or columns are missing
        EmptyInputError: If fewer than two steps survive filtering
    """
    if scale < 1:
        raise InvalidParameterError(f"scale must be >= 1, got {scale}")
    columns = {str(c).lower(): c for c in chain.columns}
    if "lon" not in columns or "lat" not in columns:
        raise InvalidParameterError("footprint chain needs Lon and Lat columns")
    
    sampled = chain.iloc[::scale]
    lon = sampled[columns["lon"]].to_numpy(dtype=float)
    lat = sampled[columns["lat"]].to_numpy(dtype=float)
    
    dy_km = np.diff(lat) * KM_PER_DEGREE_LAT
    dx_km = np.diff(lon) * EQUATOR_KM_PER_DEGREE * np.cos(np.radians(lat[:-1]))
    dist_km = np.hypot(dx_km, dy_km)
    
    moving = dist_km > 0
    dist_m = dist_km[moving] * 1000.0
    theta = np.degrees(np.arcsin(np.clip(dy_km[moving] / dist_km[moving], -1.0, 1.0)))
    
    kept = dist_m <= MAX_STEP_METRES
    dist_m = dist_m[kept]
    theta = theta[kept]
    
    if dist_m.size < 2:
        raise EmptyInputError("footprint chain has fewer than two usable steps")
    
    # The first step has no turning angle and is left out of every statistic.
    turns = np.diff(theta)
    steps = dist_m[1:]
    
    stats = FootprintStatistics(
        mean_step_length=float(steps.mean()),
        step_length_std=float(steps.std(ddof=1)) if steps.size > 1 else 0.0,
        turn_angle_std=float(turns.std(ddof=1)) if turns.size > 1 else 0.0,
        n_steps=int(steps.size),
    )
    logger.info(f"Footprint statistics: {stats.to_dict()}")
    return stats


def suggest_movement_config(
    stats: FootprintStatistics,
    step_count: int = 5000,
    home_range_radius: float = 4000.0,
) -> MovementConfig:
    """
    Random walk parameters matching a footprint chain.
    
    The simulator multiplies the mean step by Normal(1, step_length_std), so
    the observed SD is expressed relative to the mean.
    """
    return MovementConfig(
        step_count=step_count,
        mean_step_length=stats.mean_step_length,
        step_length_std=stats.step_length_std / stats.mean_step_length,
        turn_bias_std=math.radians(stats.turn_angle_std),
        home_range_radius=home_range_radius,
    )
