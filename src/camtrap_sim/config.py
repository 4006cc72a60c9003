"""
camtrap_sim Configuration
=========================

This module handles configuration loading for simulation and estimation.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    CAMTRAP_DETECTION_RADIUS -> survey.detection_radius
    CAMTRAP_STEP_COUNT       -> movement.step_count
    CAMTRAP_INDIVIDUALS      -> simulation.individuals
    CAMTRAP_ITERATIONS       -> simulation.iterations
    CAMTRAP_WORKERS          -> simulation.workers
    CAMTRAP_SEED             -> simulation.seed
    CAMTRAP_N_TREES          -> estimator.n_trees
    CAMTRAP_LOG_LEVEL        -> logging.level

Example:
    from camtrap_sim.config import settings
    
    print(settings.survey.detection_radius)
    print(settings.movement.step_count)
    print(settings.estimator.n_trees)
"""

import math
import os
import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class SurveyConfig(BaseModel):
    """Camera detection geometry."""
    
    detection_radius: float = Field(
        default=50.0,
        ge=0,
        description="Detection radius of a camera (projected units, e.g. metres)",
    )
    half_cone_degrees: float = Field(
        default=50.0,
        gt=0,
        le=180,
        description="Half-width of the detection cone in degrees",
    )
    bearings: Optional[List[float]] = Field(
        default=None,
        description="Fixed camera bearings in radians; drawn at random when unset",
    )


class MovementConfig(BaseModel):
    """Correlated random walk parameters."""
    
    step_count: int = Field(
        default=5000,
        gt=0,
        description="Number of steps the animal walks during the survey",
    )
    mean_step_length: float = Field(
        default=10.0,
        gt=0,
        description="Mean step length (projected units)",
    )
    step_length_std: float = Field(
        default=2.0,
        ge=0,
        description="SD of the normal multiplier applied to the mean step length",
    )
    turn_bias_std: float = Field(
        default=30.0 / 360.0 * 2.0 * math.pi,
        ge=0,
        description="SD of the turning angle between two steps (radians)",
    )
    home_range_radius: float = Field(
        default=4000.0,
        gt=0,
        description="Distance from the origin at which the pull home is certain",
    )
    allow_reverse_steps: bool = Field(
        default=True,
        description="Keep negative step lengths (reversed steps) instead of clipping at 0",
    )


class SimulationConfig(BaseModel):
    """Trial orchestration."""
    
    individuals: int = Field(
        default=10,
        ge=1,
        description="Largest assumed number of individuals (labels 1..N)",
    )
    iterations: int = Field(
        default=3,
        ge=1,
        description="Number of replicates per label",
    )
    workers: int = Field(
        default=1,
        ge=1,
        description="Worker processes (1 = sequential)",
    )
    seed: Optional[int] = Field(
        default=None,
        ge=0,
        description="Root random seed (None = fresh entropy)",
    )
    log_every_n_trials: int = Field(
        default=1,
        ge=1,
        description="Log progress every N trials",
    )


class EstimatorConfig(BaseModel):
    """Random forest estimator configuration."""
    
    n_trees: int = Field(
        default=1000,
        ge=1,
        description="Number of trees in the ensemble",
    )
    lower_quantile: float = Field(
        default=0.025,
        ge=0,
        lt=0.5,
        description="Lower interval quantile of per-tree predictions",
    )
    upper_quantile: float = Field(
        default=0.975,
        gt=0.5,
        le=1.0,
        description="Upper interval quantile of per-tree predictions",
    )
    max_features: float = Field(
        default=1.0 / 3.0,
        gt=0,
        le=1.0,
        description="Fraction of cameras tried at each split (1/3 as in R randomForest regression)",
    )
    random_state: Optional[int] = Field(
        default=None,
        description="Random state passed to the forest",
    )
    n_jobs: Optional[int] = Field(
        default=None,
        description="Parallel jobs for fitting/prediction (scikit-learn semantics)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""
    
    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for camtrap_sim.
    
    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """
    
    survey: SurveyConfig = Field(default_factory=SurveyConfig)
    movement: MovementConfig = Field(default_factory=MovementConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    estimator: EstimatorConfig = Field(default_factory=EstimatorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.
    
    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values
        
    Args:
        config_path: Path to config.yaml. If None, searches common locations.
        
    Returns:
        Settings: Loaded configuration
    """
    # Find config file
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break
    
    # Load from YAML if exists
    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")
    
    # Apply environment variable overrides
    _apply_env_overrides(config_data)
    
    # Build settings object
    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""
    
    # Survey settings
    if env_radius := os.environ.get("CAMTRAP_DETECTION_RADIUS"):
        config_data.setdefault("survey", {})["detection_radius"] = float(env_radius)
    
    # Movement settings
    if env_steps := os.environ.get("CAMTRAP_STEP_COUNT"):
        config_data.setdefault("movement", {})["step_count"] = int(env_steps)
    
    # Simulation settings
    if env_ind := os.environ.get("CAMTRAP_INDIVIDUALS"):
        config_data.setdefault("simulation", {})["individuals"] = int(env_ind)
    if env_iter := os.environ.get("CAMTRAP_ITERATIONS"):
        config_data.setdefault("simulation", {})["iterations"] = int(env_iter)
    if env_workers := os.environ.get("CAMTRAP_WORKERS"):
        config_data.setdefault("simulation", {})["workers"] = int(env_workers)
    if env_seed := os.environ.get("CAMTRAP_SEED"):
        config_data.setdefault("simulation", {})["seed"] = int(env_seed)
    
    # Estimator settings
    if env_trees := os.environ.get("CAMTRAP_N_TREES"):
        config_data.setdefault("estimator", {})["n_trees"] = int(env_trees)
    
    # Logging settings
    if env_log := os.environ.get("CAMTRAP_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)
    
    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    
    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
