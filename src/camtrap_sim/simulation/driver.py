"""
Simulation Driver
=================

Runs (iteration, individual) trials and assembles the training table.

For each iteration 1..K and each assumed individual count k in 1..N:
    - start from a zeroed copy of the camera grid
    - walk ONE individual from a random point in the central window
    - count detections at every step
    - store the sorted count vector with label k

The table therefore has exactly N * K rows and K rows per label.

Parallelism:
    Trials share no mutable state: each one clones the grid template and
    owns a Generator spawned from the run's SeedSequence. With workers > 1
    trials run in a ProcessPoolExecutor; the seeds do not depend on the
    worker count, so sequential and parallel runs give identical tables.

Cancellation:
    An optional threading.Event is checked between trials. When set, the
    run stops and SimulationCancelledError is raised; no partial table is
    returned because missing trials would bias the label distribution.
"""

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ProcessPoolExecutor, wait
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from camtrap_sim.config import MovementConfig
from camtrap_sim.detection.counter import (
    DEFAULT_HALF_CONE_DEGREES,
    DetectionCounter,
    random_bearings,
    validate_geometry,
)
from camtrap_sim.errors import (
    EmptyInputError,
    InvalidParameterError,
    SimulationCancelledError,
)
from camtrap_sim.geometry.camera_grid import CameraGrid
from camtrap_sim.geometry.extent import StudyExtent
from camtrap_sim.models.observation import ObservationRecord
from camtrap_sim.models.simulation import SimulationRecord, SimulationTable
from camtrap_sim.movement.walker import MovementSimulator


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrialContext:
    """
    Read-only inputs shared by every trial of a run.
    
    Picklable, so it can be shipped to worker processes.
    """
    
    grid: CameraGrid
    extent: StudyExtent
    bearings: np.ndarray
    detection_radius: float
    half_cone_degrees: float
    movement: MovementConfig


@dataclass(frozen=True)
class TrialSpec:
    """One (iteration, individual) pair with its own seed."""
    
    iteration: int
    label: int
    seed: np.random.SeedSequence


def run_trial(context: TrialContext, trial: TrialSpec) -> SimulationRecord:
    """
    Simulate one individual and return its sorted count record.
    
    Module-level so it can run in a worker process.
    """
    rng = np.random.default_rng(trial.seed)
    grid = context.grid.clone()
    counter = DetectionCounter(
        grid,
        detection_radius=context.detection_radius,
        bearings=context.bearings,
        half_cone_degrees=context.half_cone_degrees,
    )
    walker = MovementSimulator.from_config(context.movement)
    
    start = context.extent.sample_start(rng)
    walker.simulate(start, rng, observer=counter)
    
    return SimulationRecord.from_counts(
        label=trial.label,
        counts=grid.counts,
        iteration=trial.iteration,
    )


class SimulationDriver:
    """
    Builds a SimulationTable from repeated movement trials.
    
    Attributes:
        detection_radius: Camera detection distance
        half_cone_degrees: Half-width of the detection cone
        movement: Random walk parameters
        workers: Worker processes (1 = sequential, in-process)
        log_every_n_trials: Progress logging interval
        
    Example:
        driver = SimulationDriver(detection_radius=50.0, workers=4)
        table = driver.run(records, individuals=10, iterations=3, seed=42)
    """
    
    def __init__(
        self,
        detection_radius: float = 50.0,
        half_cone_degrees: float = DEFAULT_HALF_CONE_DEGREES,
        movement: Optional[MovementConfig] = None,
        workers: int = 1,
        log_every_n_trials: int = 1,
    ) -> None:
        """
        Initialize simulation driver.
        
        Raises:
            InvalidParameterError: If workers or logging interval are < 1
        """
        if workers < 1:
            raise InvalidParameterError(f"workers must be >= 1, got {workers}")
        if log_every_n_trials < 1:
            raise InvalidParameterError(
                f"log_every_n_trials must be >= 1, got {log_every_n_trials}"
            )
        
        self.detection_radius = detection_radius
        self.half_cone_degrees = half_cone_degrees
        self.movement = movement or MovementConfig()
        self.workers = workers
        self.log_every_n_trials = log_every_n_trials
        
        # Validate movement parameters before any trial runs
        MovementSimulator.from_config(self.movement)
        
        logger.info(
            f"SimulationDriver initialized: radius={detection_radius}, "
            f"cone=±{half_cone_degrees}deg, steps={self.movement.step_count}, "
            f"workers={workers}"
        )
    
    @classmethod
    def from_settings(cls, settings) -> "SimulationDriver":
        """Build from the global Settings."""
        return cls(
            detection_radius=settings.survey.detection_radius,
            half_cone_degrees=settings.survey.half_cone_degrees,
            movement=settings.movement,
            workers=settings.simulation.workers,
            log_every_n_trials=settings.simulation.log_every_n_trials,
        )
    
    def run(
        self,
        observations: Iterable[ObservationRecord],
        camera_grid: Optional[CameraGrid] = None,
        individuals: int = 10,
        iterations: int = 3,
        bearings: Optional[Sequence[float]] = None,
        seed: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> SimulationTable:
        """
        Run every trial and return the labelled table.
        
        Args:
            observations: Real records (define the cameras and the extent);
                any iterable, read once
            camera_grid: Grid template; built from `observations` if None
            individuals: N, labels run 1..N
            iterations: K replicates per label
            bearings: Camera bearings in radians; random per run if None
            seed: Root seed; the same seed gives the same table
            cancel_event: Checked between trials
            
        Returns:
            Table with individuals * iterations rows
            
        Raises:
            EmptyInputError: If there are no observations
            InvalidGeometryError: If the detection geometry is invalid
            InvalidParameterError: If individuals or iterations are < 1
            SimulationCancelledError: If `cancel_event` is set mid-run
        """
        observations = list(observations)
        if not observations:
            raise EmptyInputError("no observation records to simulate against")
        if individuals < 1 or iterations < 1:
            raise InvalidParameterError(
                f"individuals and iterations must be >= 1, got {individuals}, {iterations}"
            )
        
        grid = camera_grid if camera_grid is not None else CameraGrid.build(observations)
        root = np.random.SeedSequence(seed)
        bearing_seed, trial_root = root.spawn(2)
        
        if bearings is None:
            bearings = random_bearings(len(grid), np.random.default_rng(bearing_seed))
        bearings = validate_geometry(
            self.detection_radius, bearings, len(grid), self.half_cone_degrees
        )
        
        context = TrialContext(
            grid=grid.clone(),
            extent=StudyExtent.from_observations(observations),
            bearings=bearings,
            detection_radius=self.detection_radius,
            half_cone_degrees=self.half_cone_degrees,
            movement=self.movement,
        )
        
        seeds = trial_root.spawn(individuals * iterations)
        trials = [
            TrialSpec(iteration=ite, label=k, seed=seeds[(ite - 1) * individuals + (k - 1)])
            for ite in range(1, iterations + 1)
            for k in range(1, individuals + 1)
        ]
        
        logger.info(
            f"Simulation started: cameras={len(grid)}, individuals={individuals}, "
            f"iterations={iterations}, trials={len(trials)}"
        )
        
        if self.workers == 1:
            records = self._run_sequential(context, trials, cancel_event)
        else:
            records = self._run_parallel(context, trials, cancel_event)
        
        table = SimulationTable(records, width=len(grid))
        logger.info(f"Simulation finished: rows={len(table)}")
        return table
    
    def _run_sequential(
        self,
        context: TrialContext,
        trials: List[TrialSpec],
        cancel_event: Optional[threading.Event],
    ) -> List[SimulationRecord]:
        records = []
        for done, trial in enumerate(trials, start=1):
            self._check_cancelled(cancel_event, done - 1, len(trials))
            records.append(run_trial(context, trial))
            self._log_progress(trial, done, len(trials))
        return records
    
    def _run_parallel(
        self,
        context: TrialContext,
        trials: List[TrialSpec],
        cancel_event: Optional[threading.Event],
    ) -> List[SimulationRecord]:
        results: Dict[int, SimulationRecord] = {}
        with ProcessPoolExecutor(max_workers=self.workers) as executor:
            pending: Dict[Future, int] = {
                executor.submit(run_trial, context, trial): index
                for index, trial in enumerate(trials)
            }
            try:
                while pending:
                    self._check_cancelled(cancel_event, len(results), len(trials))
                    done, _ = wait(pending, timeout=0.5, return_when=FIRST_COMPLETED)
                    for future in done:
                        index = pending.pop(future)
                        results[index] = future.result()
                        self._log_progress(trials[index], len(results), len(trials))
            except BaseException:
                for future in pending:
                    future.cancel()
                raise
        
        # Row order carries no meaning; keep trial order for reproducibility.
        return [results[i] for i in range(len(trials))]
    
    @staticmethod
    def _check_cancelled(
        cancel_event: Optional[threading.Event],
        completed: int,
        total: int,
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            logger.warning(f"Simulation cancelled after {completed}/{total} trials")
            raise SimulationCancelledError(
                f"simulation cancelled after {completed} of {total} trials"
            )
    
    def _log_progress(self, trial: TrialSpec, done: int, total: int) -> None:
        if done % self.log_every_n_trials == 0 or done == total:
            logger.info(f"Iteration {trial.iteration}; Ind. {trial.label} ({done}/{total})")
