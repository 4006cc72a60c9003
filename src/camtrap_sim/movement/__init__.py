"""
Movement Module
===============

Correlated random walk with home-range attraction.
"""

from camtrap_sim.movement.walker import MovementSimulator, home_return_probability

__all__ = [
    "MovementSimulator",
    "home_return_probability",
]
