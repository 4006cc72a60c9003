"""
Command Line Entry Point
========================

Runs the simulation and estimation pipeline from the shell.

Usage:
    camtrap-sim simulate --observations trapresult.csv --output sim.csv
    camtrap-sim estimate --simulation sim.csv --observations trapresult.csv
    camtrap-sim density --observations trapresult.csv --radius-km 0.02 \
        --angle 40 --speed 2 --duration 40
    camtrap-sim movement --chain footprintchain.csv --scale 2

Defaults come from config.yaml / CAMTRAP_* environment variables; command
line flags override them.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import pandas as pd

from camtrap_sim.analysis import footprint_statistics, rowcliffe_density, suggest_movement_config
from camtrap_sim.config import Settings, load_config, setup_logging
from camtrap_sim.data import load_observations
from camtrap_sim.errors import CamtrapError
from camtrap_sim.estimation import AbundanceEstimator
from camtrap_sim.models.simulation import SimulationTable
from camtrap_sim.simulation import SimulationDriver


logger = logging.getLogger(__name__)


def _cmd_simulate(args: argparse.Namespace, settings: Settings) -> int:
    sim = settings.simulation
    if args.individuals is not None:
        sim.individuals = args.individuals
    if args.iterations is not None:
        sim.iterations = args.iterations
    if args.workers is not None:
        sim.workers = args.workers
    if args.seed is not None:
        sim.seed = args.seed
    if args.steps is not None:
        settings.movement.step_count = args.steps
    
    records = load_observations(args.observations)
    driver = SimulationDriver.from_settings(settings)
    table = driver.run(
        records,
        individuals=sim.individuals,
        iterations=sim.iterations,
        bearings=settings.survey.bearings,
        seed=sim.seed,
    )
    table.to_csv(args.output)
    return 0


def _cmd_estimate(args: argparse.Namespace, settings: Settings) -> int:
    if args.trees is not None:
        settings.estimator.n_trees = args.trees
    
    table = SimulationTable.read_csv(args.simulation)
    records = load_observations(args.observations)
    estimate = AbundanceEstimator.from_settings(settings).fit(table).predict(records)
    
    summary = estimate.rounded(1)
    summary["mean"] = round(estimate.mean, 1)
    print(json.dumps(summary))
    return 0


def _cmd_density(args: argparse.Namespace, settings: Settings) -> int:
    records = load_observations(args.observations)
    result = rowcliffe_density(
        records,
        radius_km=args.radius_km,
        angle_deg=args.angle,
        speed_kmh=args.speed,
        duration_days=args.duration,
    )
    print(json.dumps(result.rounded()))
    return 0


def _cmd_movement(args: argparse.Namespace, settings: Settings) -> int:
    chain = pd.read_csv(args.chain)
    stats = footprint_statistics(chain, scale=args.scale)
    config = suggest_movement_config(
        stats,
        step_count=settings.movement.step_count,
        home_range_radius=settings.movement.home_range_radius,
    )
    print(json.dumps({"statistics": stats.to_dict(), "movement": config.model_dump()}))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="camtrap-sim",
        description="Estimate population size from camera-trap counts by simulation",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.yaml (default: search common locations)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    
    simulate = subparsers.add_parser("simulate", help="Build a simulation table")
    simulate.add_argument("--observations", required=True, help="Trap result CSV")
    simulate.add_argument("--output", required=True, help="Where to write the table CSV")
    simulate.add_argument("--individuals", type=int, default=None, help="Max individuals N")
    simulate.add_argument("--iterations", type=int, default=None, help="Replicates K")
    simulate.add_argument("--workers", type=int, default=None, help="Worker processes")
    simulate.add_argument("--seed", type=int, default=None, help="Root random seed")
    simulate.add_argument("--steps", type=int, default=None, help="Steps per walk")
    simulate.set_defaults(handler=_cmd_simulate)
    
    estimate = subparsers.add_parser("estimate", help="Estimate abundance")
    estimate.add_argument("--simulation", required=True, help="Simulation table CSV")
    estimate.add_argument("--observations", required=True, help="Trap result CSV")
    estimate.add_argument("--trees", type=int, default=None, help="Number of trees")
    estimate.set_defaults(handler=_cmd_estimate)
    
    density = subparsers.add_parser("density", help="Rowcliffe random encounter density")
    density.add_argument("--observations", required=True, help="Trap result CSV")
    density.add_argument("--radius-km", type=float, required=True, help="Detection range (km)")
    density.add_argument("--angle", type=float, required=True, help="Detection angle (degrees)")
    density.add_argument("--speed", type=float, required=True, help="Animal speed (km/h)")
    density.add_argument("--duration", type=float, required=True, help="Survey length (days)")
    density.set_defaults(handler=_cmd_density)
    
    movement = subparsers.add_parser("movement", help="Footprint chain movement statistics")
    movement.add_argument("--chain", required=True, help="Footprint chain CSV (Lon, Lat)")
    movement.add_argument("--scale", type=int, default=1, help="Seconds per step")
    movement.set_defaults(handler=_cmd_movement)
    
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_config(args.config)
    setup_logging(settings)
    
    try:
        return args.handler(args, settings)
    except (CamtrapError, FileNotFoundError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
