"""
Rowcliffe Density
=================

Random encounter model (Rowcliffe et al. 2008) density from trap counts.

Per camera:
    D = count * pi / (duration * v * r * (2 + theta * 2 * pi / 360))

Where:
    count    = summed group size at the camera
    r        = detection range (km)
    theta    = detection angle (degrees)
    v        = mean animal speed (km/h)
    duration = survey length (days)

The result is the mean and sample SD of D across cameras.
"""

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from camtrap_sim.errors import InvalidParameterError
from camtrap_sim.geometry.camera_grid import observed_counts
from camtrap_sim.models.observation import ObservationRecord


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RowcliffeDensity:
    """Mean and SD of per-camera density."""
    
    density: float
    sd: float
    
    def rounded(self, digits: int = 2) -> dict:
        return {"Density": round(self.density, digits), "SD": round(self.sd, digits)}


def rowcliffe_density(
    records: Sequence[ObservationRecord],
    radius_km: float,
    angle_deg: float,
    speed_kmh: float,
    duration_days: float,
) -> RowcliffeDensity:
    """
    Random encounter model density.
    
    Raises:
        InvalidParameterError: If any parameter is not positive
        EmptyInputError: If there are no records
    """
    params = {
        "radius_km": radius_km,
        "angle_deg": angle_deg,
        "speed_kmh": speed_kmh,
        "duration_days": duration_days,
    }
    bad = [f"{name} must be > 0, got {value}" for name, value in params.items() if not value > 0]
    if bad:
        raise InvalidParameterError("\n".join(bad))
    
    counts = observed_counts(records).astype(float)
    denominator = duration_days * speed_kmh * radius_km * (2 + angle_deg * 2 * math.pi / 360)
    per_camera = counts * math.pi / denominator
    
    sd = float(per_camera.std(ddof=1)) if per_camera.size > 1 else 0.0
    result = RowcliffeDensity(density=float(per_camera.mean()), sd=sd)
    logger.info(f"Rowcliffe density: {result.rounded()}")
    return result
