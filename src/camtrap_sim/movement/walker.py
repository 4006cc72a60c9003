"""
Movement Simulator
==================

Biased correlated random walk for one individual.

Each step:
    1. Move by `mean_step_length * Normal(1, step_length_std)` along the
       current heading `theta` (the first heading is Uniform(0, 2*pi)).
    2. Report the new position to the detection counter, if any.
    3. Pick the next heading from two candidates:
           theta_forward = theta + Normal(0, turn_bias_std)
           theta_back    = atan2(y0 - y, x0 - x) + Normal(0, 2 * turn_bias_std)
       choosing theta_back with probability p = clamp(dist / home_range_radius)
       where dist is the distance from the origin (start point).

The further the individual wanders, the more likely it turns home. Beyond
`home_range_radius` the return probability is clamped to 1.

Step Length Note:
    The normal multiplier can be negative, which reverses a step. This is
    kept by default; set `allow_reverse_steps=False` to clip at zero.

Randomness:
    All draws for a walk come from the single Generator passed to
    `simulate()`, in a fixed order, so a seed fully determines the path.
"""

import logging
import math
from typing import Optional, Protocol, Tuple

import numpy as np

from camtrap_sim.errors import InvalidParameterError, InvalidProbabilityError
from camtrap_sim.models.trajectory import Trajectory


logger = logging.getLogger(__name__)


class PositionObserver(Protocol):
    """Anything that wants to see each new position (e.g. DetectionCounter)."""
    
    def detect(self, position: Tuple[float, float]) -> object:
        ...


def home_return_probability(distance: float, home_range_radius: float) -> float:
    """
    Probability of heading back to the origin.
    
    Args:
        distance: Current distance from the origin
        home_range_radius: Distance at which return becomes certain
        
    Returns:
        distance / home_range_radius clamped into [0, 1]
        
    Raises:
        InvalidProbabilityError: If the inputs are negative or not numbers
    """
    if math.isnan(distance) or distance < 0:
        raise InvalidProbabilityError(f"distance must be >= 0, got {distance}")
    if math.isnan(home_range_radius) or home_range_radius <= 0:
        raise InvalidProbabilityError(
            f"home_range_radius must be > 0, got {home_range_radius}"
        )
    if math.isinf(home_range_radius):
        return 0.0
    return min(1.0, distance / home_range_radius)


class MovementSimulator:
    """
    Generator of home-range-biased correlated random walks.
    
    Attributes:
        step_count: Number of steps per walk
        mean_step_length: Mean step length
        step_length_std: SD of the step-length multiplier
        turn_bias_std: SD of the turning angle (radians)
        home_range_radius: Distance at which return becomes certain
        allow_reverse_steps: Keep negative step lengths
        
    Example:
        walker = MovementSimulator(step_count=3000, mean_step_length=10.0)
        rng = np.random.default_rng(7)
        trajectory = walker.simulate((0.0, 0.0), rng, observer=counter)
    """
    
    def __init__(
        self,
        step_count: int = 5000,
        mean_step_length: float = 10.0,
        step_length_std: float = 2.0,
        turn_bias_std: float = 30.0 / 360.0 * 2.0 * math.pi,
        home_range_radius: float = 4000.0,
        allow_reverse_steps: bool = True,
    ) -> None:
        """
        Initialize movement simulator.
        
        Raises:
            InvalidParameterError: If parameters are invalid
        """
        self._validate_parameters(
            step_count,
            mean_step_length,
            step_length_std,
            turn_bias_std,
            home_range_radius,
        )
        
        self.step_count = step_count
        self.mean_step_length = mean_step_length
        self.step_length_std = step_length_std
        self.turn_bias_std = turn_bias_std
        self.home_range_radius = home_range_radius
        self.allow_reverse_steps = allow_reverse_steps
        
        logger.debug(
            f"MovementSimulator initialized: steps={step_count}, "
            f"step={mean_step_length}±{step_length_std}, "
            f"bias={math.degrees(turn_bias_std):.1f}deg, range={home_range_radius}"
        )
    
    @classmethod
    def from_config(cls, config) -> "MovementSimulator":
        """Build from a MovementConfig."""
        return cls(
            step_count=config.step_count,
            mean_step_length=config.mean_step_length,
            step_length_std=config.step_length_std,
            turn_bias_std=config.turn_bias_std,
            home_range_radius=config.home_range_radius,
            allow_reverse_steps=config.allow_reverse_steps,
        )
    
    @staticmethod
    def _validate_parameters(
        step_count: int,
        mean_step_length: float,
        step_length_std: float,
        turn_bias_std: float,
        home_range_radius: float,
    ) -> None:
        """Validate parameters at startup. Fail fast."""
        errors = []
        
        if step_count <= 0:
            errors.append(f"step_count must be > 0, got {step_count}")
        if not mean_step_length > 0:
            errors.append(f"mean_step_length must be > 0, got {mean_step_length}")
        if not step_length_std >= 0:
            errors.append(f"step_length_std must be >= 0, got {step_length_std}")
        if not turn_bias_std >= 0:
            errors.append(f"turn_bias_std must be >= 0, got {turn_bias_std}")
        if not home_range_radius > 0:
            errors.append(f"home_range_radius must be > 0, got {home_range_radius}")
        
        if errors:
            raise InvalidParameterError(
                "Movement parameter validation failed:\n" + "\n".join(errors)
            )
    
    def simulate(
        self,
        start: Tuple[float, float],
        rng: np.random.Generator,
        observer: Optional[PositionObserver] = None,
        initial_heading: Optional[float] = None,
    ) -> Trajectory:
        """
        Walk one individual from `start`.
        
        Args:
            start: Origin of the walk (home-range centre)
            rng: Source of all randomness for this walk
            observer: Called with every new position (detection counting)
            initial_heading: Fixed first heading in radians; random if None
            
        Returns:
            Trajectory with the position after every step
        """
        n = self.step_count
        x0, y0 = float(start[0]), float(start[1])
        
        if initial_heading is None:
            theta = rng.uniform(0.0, 2.0 * math.pi)
        else:
            theta = float(initial_heading)
        
        # Draw everything up front; the order is part of the seed contract.
        multipliers = rng.normal(1.0, self.step_length_std, size=n)
        forward_noise = rng.normal(0.0, self.turn_bias_std, size=n)
        back_noise = rng.normal(0.0, 2.0 * self.turn_bias_std, size=n)
        choices = rng.random(size=n)
        
        if not self.allow_reverse_steps:
            np.maximum(multipliers, 0.0, out=multipliers)
        step_lengths = self.mean_step_length * multipliers
        
        xs = np.empty(n, dtype=float)
        ys = np.empty(n, dtype=float)
        x, y = x0, y0
        
        for i in range(n):
            move = step_lengths[i]
            x += move * math.cos(theta)
            y += move * math.sin(theta)
            xs[i] = x
            ys[i] = y
            
            if observer is not None:
                observer.detect((x, y))
            
            theta_forward = theta + forward_noise[i]
            theta_back = math.atan2(y0 - y, x0 - x) + back_noise[i]
            dist = math.hypot(x - x0, y - y0)
            p_back = home_return_probability(dist, self.home_range_radius)
            theta = theta_back if choices[i] < p_back else theta_forward
        
        return Trajectory(start=(x0, y0), xs=xs, ys=ys)
