"""
Abundance Estimator
===================

Matches real camera-trap counts against simulated ones with a random forest.

Training:
    features = sorted per-camera counts of each SimulationRecord
    target   = individual-count label (regression)
    ~1000 trees, each split trying a third of the cameras; the spread of
    per-tree predictions is then stable enough to read an interval from.

Prediction:
    1. Sum observed group sizes per unique camera and sort ascending
       (exactly the signature the simulation stores).
    2. Ask every tree for a prediction.
    3. Report the ensemble mean, the per-tree median and the
       [2.5%, 97.5%] empirical quantiles.

Example:
    estimator = AbundanceEstimator(n_trees=1000, random_state=0)
    estimator.fit(table)
    estimate = estimator.predict(records)
    print(estimate.rounded())   # {'lower': 3.0, 'median': 5.1, 'upper': 8.0}
"""

import logging
from typing import Optional, Sequence, Union

import numpy as np
from sklearn.ensemble import RandomForestRegressor

from camtrap_sim.errors import (
    EmptyInputError,
    InvalidParameterError,
    ShapeMismatchError,
)
from camtrap_sim.geometry.camera_grid import observed_counts
from camtrap_sim.models.estimate import AbundanceEstimate
from camtrap_sim.models.observation import ObservationRecord
from camtrap_sim.models.simulation import SimulationTable


logger = logging.getLogger(__name__)


def summarize_predictions(
    predictions: np.ndarray,
    mean: Optional[float] = None,
    lower_quantile: float = 0.025,
    upper_quantile: float = 0.975,
) -> AbundanceEstimate:
    """
    Summarize per-member predictions into an AbundanceEstimate.
    
    Args:
        predictions: One scalar prediction per ensemble member
        mean: Ensemble aggregate; the mean of `predictions` if None
        lower_quantile: Lower interval bound
        upper_quantile: Upper interval bound
    """
    predictions = np.asarray(predictions, dtype=float).reshape(-1)
    if predictions.size == 0:
        raise EmptyInputError("no predictions to summarize")
    
    lower, median, upper = np.quantile(
        predictions, [lower_quantile, 0.5, upper_quantile]
    )
    return AbundanceEstimate(
        mean=float(predictions.mean() if mean is None else mean),
        median=float(median),
        lower=float(lower),
        upper=float(upper),
        tree_predictions=predictions,
    )


class AbundanceEstimator:
    """
    Random forest estimator of population size.
    
    Attributes:
        n_trees: Number of trees
        lower_quantile: Lower interval quantile
        upper_quantile: Upper interval quantile
        max_features: Fraction of features tried at each split
        random_state: Forest random state
        n_jobs: Parallel jobs (scikit-learn semantics)
    """
    
    def __init__(
        self,
        n_trees: int = 1000,
        lower_quantile: float = 0.025,
        upper_quantile: float = 0.975,
        max_features: float = 1.0 / 3.0,
        random_state: Optional[int] = None,
        n_jobs: Optional[int] = None,
    ) -> None:
        """
        Initialize abundance estimator.
        
        Raises:
            InvalidParameterError: If tree count or quantiles are invalid
        """
        errors = []
        if n_trees < 1:
            errors.append(f"n_trees must be >= 1, got {n_trees}")
        if not 0 <= lower_quantile < 0.5 < upper_quantile <= 1:
            errors.append(
                f"quantiles must satisfy 0 <= lower < 0.5 < upper <= 1, "
                f"got {lower_quantile}, {upper_quantile}"
            )
        if not 0 < max_features <= 1:
            errors.append(f"max_features must be in (0, 1], got {max_features}")
        if errors:
            raise InvalidParameterError(
                "Estimator parameter validation failed:\n" + "\n".join(errors)
            )
        
        self.n_trees = n_trees
        self.lower_quantile = lower_quantile
        self.upper_quantile = upper_quantile
        self.max_features = max_features
        self.random_state = random_state
        self.n_jobs = n_jobs
        
        self._model: Optional[RandomForestRegressor] = None
        self._n_features: Optional[int] = None
        self._max_label: Optional[int] = None
    
    @classmethod
    def from_settings(cls, settings) -> "AbundanceEstimator":
        """Build from the global Settings."""
        return cls(
            n_trees=settings.estimator.n_trees,
            lower_quantile=settings.estimator.lower_quantile,
            upper_quantile=settings.estimator.upper_quantile,
            max_features=settings.estimator.max_features,
            random_state=settings.estimator.random_state,
            n_jobs=settings.estimator.n_jobs,
        )
    
    @property
    def is_fitted(self) -> bool:
        return self._model is not None
    
    @property
    def model(self) -> RandomForestRegressor:
        """The fitted forest."""
        if self._model is None:
            raise RuntimeError("estimator is not fitted; call fit() first")
        return self._model
    
    @property
    def n_features(self) -> int:
        """Feature width (number of cameras) seen during training."""
        if self._n_features is None:
            raise RuntimeError("estimator is not fitted; call fit() first")
        return self._n_features
    
    def fit(self, table: SimulationTable) -> "AbundanceEstimator":
        """
        Train the forest on a simulation table.
        
        Raises:
            EmptyInputError: If the table has no rows
        """
        if len(table) == 0:
            raise EmptyInputError("simulation table is empty")
        
        features = table.features.astype(float)
        labels = table.labels.astype(float)
        
        model = RandomForestRegressor(
            n_estimators=self.n_trees,
            max_features=self.max_features,
            random_state=self.random_state,
            n_jobs=self.n_jobs,
        )
        model.fit(features, labels)
        
        self._model = model
        self._n_features = features.shape[1]
        self._max_label = int(labels.max())
        
        logger.info(
            f"AbundanceEstimator fitted: rows={len(table)}, "
            f"cameras={self._n_features}, trees={self.n_trees}"
        )
        return self
    
    def predict(
        self,
        observations: Sequence[ObservationRecord],
    ) -> AbundanceEstimate:
        """
        Estimate abundance from real observation records.
        
        Raises:
            EmptyInputError: If there are no records
            ShapeMismatchError: If the number of cameras differs from training
        """
        counts = observed_counts(observations)
        return self.predict_counts(counts)
    
    def predict_counts(
        self,
        counts: Union[Sequence[int], np.ndarray],
    ) -> AbundanceEstimate:
        """
        Estimate abundance from a per-camera count vector (any order).
        
        Raises:
            ShapeMismatchError: If the vector width differs from training
        """
        vector = np.sort(np.asarray(counts, dtype=float).reshape(-1))
        if vector.shape[0] != self.n_features:
            raise ShapeMismatchError(
                f"observed data has {vector.shape[0]} cameras, "
                f"model was trained on {self.n_features}"
            )
        
        features = vector.reshape(1, -1)
        tree_predictions = self.per_tree_predictions(features)[:, 0]
        mean = float(self.model.predict(features)[0])
        
        estimate = summarize_predictions(
            tree_predictions,
            mean=mean,
            lower_quantile=self.lower_quantile,
            upper_quantile=self.upper_quantile,
        )
        logger.info(f"Predicted abundance: {estimate!r}")
        return estimate
    
    def predict_many(self, features: np.ndarray) -> np.ndarray:
        """Ensemble (mean) prediction for rows of sorted count vectors."""
        features = np.sort(np.asarray(features, dtype=float), axis=1)
        if features.shape[1] != self.n_features:
            raise ShapeMismatchError(
                f"features have {features.shape[1]} columns, "
                f"model was trained on {self.n_features}"
            )
        return self.model.predict(features)
    
    def per_tree_predictions(self, features: np.ndarray) -> np.ndarray:
        """
        Predictions of every tree.
        
        Returns:
            Array of shape (n_trees, n_rows)
        """
        features = np.asarray(features, dtype=float)
        return np.stack([tree.predict(features) for tree in self.model.estimators_])
    
    def get_metrics(self) -> dict:
        """Get estimator metrics for observability."""
        return {
            "fitted": self.is_fitted,
            "n_trees": self.n_trees,
            "n_features": self._n_features,
            "max_label": self._max_label,
        }
