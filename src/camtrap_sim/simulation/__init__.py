"""
Simulation Module
=================

Orchestrates simulated camera-trap trials into a SimulationTable.
"""

from camtrap_sim.simulation.driver import SimulationDriver, TrialContext, TrialSpec, run_trial

__all__ = [
    "SimulationDriver",
    "TrialContext",
    "TrialSpec",
    "run_trial",
]
