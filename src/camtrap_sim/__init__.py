"""
camtrap_sim
===========

Simulation-based abundance estimation from camera-trap photo counts.

This package simulates animal movement across a camera-trap grid to build
synthetic photo-count datasets for known population sizes, then learns a
mapping from the observed count pattern back to population size.

Components:
    - geometry: Camera grid and study extent
    - movement: Correlated random walk with home-range attraction
    - detection: Cone-of-detection photo counting
    - simulation: Trial orchestration and the simulation table
    - estimation: Random forest abundance estimator
    - analysis: Footprint-chain statistics and Rowcliffe density

Example:
    from camtrap_sim.data import load_observations
    from camtrap_sim.simulation import SimulationDriver
    from camtrap_sim.estimation import AbundanceEstimator

    records = load_observations("trapresult.csv")
    table = SimulationDriver().run(records, individuals=10, iterations=3)
    estimate = AbundanceEstimator().fit(table).predict(records)
    print(estimate.rounded())
"""

__version__ = "0.1.0"
__author__ = "camtrap-sim developers"

__all__ = [
    "__version__",
]
