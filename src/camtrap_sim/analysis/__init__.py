"""
Analysis Module
===============

Descriptive helpers around the simulation core:
    - footprint: step length / turning angle statistics of footprint chains,
      used to parameterize the random walk
    - rowcliffe: closed-form random encounter model density
"""

from camtrap_sim.analysis.footprint import (
    FootprintStatistics,
    footprint_statistics,
    suggest_movement_config,
)
from camtrap_sim.analysis.rowcliffe import RowcliffeDensity, rowcliffe_density

__all__ = [
    "FootprintStatistics",
    "footprint_statistics",
    "suggest_movement_config",
    "RowcliffeDensity",
    "rowcliffe_density",
]
