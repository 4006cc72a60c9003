"""
Estimation Module
=================

Random forest mapping from sorted photo-count vectors to population size.
"""

from camtrap_sim.estimation.forest import AbundanceEstimator, summarize_predictions

__all__ = [
    "AbundanceEstimator",
    "summarize_predictions",
]
