"""
Abundance Estimate Model
========================

Summary of the per-tree abundance predictions for the observed data.
"""

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class AbundanceEstimate:
    """
    Point estimate and interval of population size.
    
    Attributes:
        mean: Ensemble (mean of trees) prediction
        median: Median of per-tree predictions
        lower: Lower empirical quantile (2.5% by default)
        upper: Upper empirical quantile (97.5% by default)
        tree_predictions: One prediction per ensemble member
    """
    
    mean: float
    median: float
    lower: float
    upper: float
    tree_predictions: np.ndarray = field(repr=False, compare=False)
    
    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.lower <= self.median <= self.upper:
            raise ValueError("expected lower <= median <= upper")
    
    def __repr__(self) -> str:
        return (
            f"AbundanceEstimate(median={self.median:.1f}, "
            f"interval=[{self.lower:.1f}, {self.upper:.1f}], "
            f"mean={self.mean:.2f})"
        )
    
    @property
    def n_members(self) -> int:
        """Number of ensemble members that contributed a prediction."""
        return int(self.tree_predictions.shape[0])
    
    def rounded(self, digits: int = 1) -> dict:
        """Presentation summary {lower, median, upper} rounded to `digits`."""
        return {
            "lower": round(self.lower, digits),
            "median": round(self.median, digits),
            "upper": round(self.upper, digits),
        }
    
    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "mean": round(self.mean, 4),
            "median": round(self.median, 4),
            "lower": round(self.lower, 4),
            "upper": round(self.upper, 4),
            "n_members": self.n_members,
        }
