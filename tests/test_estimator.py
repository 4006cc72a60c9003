"""
Abundance Estimator Tests
=========================

Tests for random forest training and abundance prediction.
"""

import numpy as np
import pytest

from camtrap_sim.errors import EmptyInputError, InvalidParameterError, ShapeMismatchError
from camtrap_sim.estimation import AbundanceEstimator, summarize_predictions
from camtrap_sim.models.simulation import SimulationRecord, SimulationTable


@pytest.fixture
def monotone_table():
    """Labels 1..10 (3 replicates) with features strictly increasing in the label."""
    records = [
        SimulationRecord.from_counts(k, [k, 2 * k, 3 * k], iteration=ite)
        for ite in range(1, 4)
        for k in range(1, 11)
    ]
    return SimulationTable(records)


@pytest.fixture
def fitted(monotone_table):
    return AbundanceEstimator(n_trees=60, random_state=0).fit(monotone_table)


class TestAbundanceEstimator:
    """Tests for AbundanceEstimator."""
    
    def test_predictions_follow_label_order(self, fitted):
        """Held-out vectors further along the curve predict more individuals."""
        held_out = np.array(
            [
                [1.5, 3.0, 4.5],
                [5.5, 11.0, 16.5],
                [9.5, 19.0, 28.5],
            ]
        )
        predictions = fitted.predict_many(held_out)
        assert predictions[0] <= predictions[1] <= predictions[2]
        assert predictions[0] < predictions[2]
    
    def test_interval_brackets_median(self, fitted):
        """lower <= median <= upper, one prediction per tree."""
        estimate = fitted.predict_counts([6, 4, 2])
        assert estimate.lower <= estimate.median <= estimate.upper
        assert estimate.n_members == 60
        assert 1.0 <= estimate.mean <= 10.0
    
    def test_input_order_does_not_matter(self, fitted):
        """Observed counts are sorted before prediction."""
        a = fitted.predict_counts([9, 3, 6])
        b = fitted.predict_counts([3, 6, 9])
        assert a.median == b.median
        assert a.mean == b.mean
    
    def test_predict_from_records(self, sample_records, short_movement):
        """End to end: simulate, fit, predict on the real records."""
        from camtrap_sim.simulation import SimulationDriver
        
        table = SimulationDriver(detection_radius=200.0, movement=short_movement).run(
            sample_records, individuals=3, iterations=2, seed=1
        )
        estimate = AbundanceEstimator(n_trees=25, random_state=1).fit(table).predict(sample_records)
        
        summary = estimate.rounded()
        assert set(summary) == {"lower", "median", "upper"}
        assert 1.0 <= estimate.median <= 3.0
    
    def test_camera_count_mismatch(self, fitted):
        """A different number of cameras than in training is rejected."""
        with pytest.raises(ShapeMismatchError):
            fitted.predict_counts([1, 2])
    
    def test_empty_table(self):
        """Fitting needs at least one row."""
        with pytest.raises(EmptyInputError):
            AbundanceEstimator(n_trees=5).fit(SimulationTable(width=3))
    
    def test_unfitted_model(self):
        """Predicting before fitting is an error."""
        with pytest.raises(RuntimeError):
            AbundanceEstimator(n_trees=5).predict_counts([1, 2, 3])
    
    def test_invalid_parameters(self):
        """Quantiles and tree count are validated."""
        with pytest.raises(InvalidParameterError):
            AbundanceEstimator(n_trees=0)
        with pytest.raises(InvalidParameterError):
            AbundanceEstimator(lower_quantile=0.6, upper_quantile=0.9)
        with pytest.raises(InvalidParameterError):
            AbundanceEstimator(max_features=0.0)
    
    def test_splits_try_a_third_of_cameras(self, fitted):
        """Each split samples a third of the cameras by default."""
        assert fitted.model.max_features == pytest.approx(1.0 / 3.0)
        assert AbundanceEstimator(max_features=1.0).max_features == 1.0


class TestSummarizePredictions:
    """Tests for summarize_predictions."""
    
    def test_quantiles(self):
        """Median and 95% interval of a known sample."""
        estimate = summarize_predictions(np.arange(1, 1002, dtype=float))
        assert estimate.median == pytest.approx(501.0)
        assert estimate.lower == pytest.approx(26.0)
        assert estimate.upper == pytest.approx(976.0)
        assert estimate.mean == pytest.approx(501.0)
    
    def test_rounded(self):
        """Presentation values are rounded to one decimal."""
        estimate = summarize_predictions(np.array([2.04, 2.26, 2.51]))
        assert estimate.rounded() == {
            "lower": round(estimate.lower, 1),
            "median": 2.3,
            "upper": round(estimate.upper, 1),
        }
    
    def test_empty(self):
        """No predictions, no estimate."""
        with pytest.raises(EmptyInputError):
            summarize_predictions(np.array([]))
