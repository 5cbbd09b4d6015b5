"""Planner configuration with environment variable loading."""

import os
import logging
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from dotenv import load_dotenv
from ..models.planning_models import Granularity

# Load environment variables from .env file
load_dotenv()


class PlannerConfig(BaseModel):
    """Configuration for task breakdown, validation and estimation."""

    # Breakdown Configuration
    max_depth: int = Field(
        default_factory=lambda: int(os.getenv("PLANNER_MAX_DEPTH", "3")),
        description="Maximum refinement depth",
    )
    max_subtasks_per_task: int = Field(
        default_factory=lambda: int(os.getenv("PLANNER_MAX_SUBTASKS_PER_TASK", "10")),
        description="Soft limit on generated subtasks per parent (logged when exceeded)",
    )
    refine_threshold_hours: float = Field(
        default_factory=lambda: float(os.getenv("PLANNER_REFINE_THRESHOLD_HOURS", "16")),
        description="Subtasks larger than this are decomposed again",
    )
    enable_grouping: bool = Field(
        default_factory=lambda: os.getenv("PLANNER_ENABLE_GROUPING", "true").lower() == "true",
        description="Merge same-category subtasks before refinement",
    )
    granularity: Granularity = Field(
        default_factory=lambda: Granularity(os.getenv("PLANNER_GRANULARITY", "medium")),
        description="Default granularity preference",
    )

    # Validation Bounds
    min_task_size: float = Field(
        default_factory=lambda: float(os.getenv("PLANNER_MIN_TASK_SIZE", "0.5")),
        description="Minimum task size in hours",
    )
    max_task_size: float = Field(
        default_factory=lambda: float(os.getenv("PLANNER_MAX_TASK_SIZE", "40")),
        description="Maximum task size in hours",
    )

    # Estimator Configuration
    estimator_timeout: float = Field(
        default_factory=lambda: float(os.getenv("PLANNER_ESTIMATOR_TIMEOUT", "5.0")),
        description="Timeout for the predictive estimator in seconds",
    )
    estimator_model: str = Field(
        default_factory=lambda: os.getenv("PLANNER_ESTIMATOR_MODEL", "pattern"),
        description="Name reported by the default pattern estimator",
    )
    similar_task_limit: int = Field(
        default_factory=lambda: int(os.getenv("PLANNER_SIMILAR_TASK_LIMIT", "5")),
        description="Maximum similar tasks fed to the estimator",
    )

    # Logging
    log_level: str = Field(
        default_factory=lambda: os.getenv("PLANNER_LOG_LEVEL", "INFO"),
        description="Log level used by configure_logging()",
    )

    @field_validator("max_depth")
    @classmethod
    def _check_max_depth(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_depth must be at least 1")
        return value

    @field_validator("estimator_timeout")
    @classmethod
    def _check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("estimator_timeout must be positive")
        return value

    @model_validator(mode="after")
    def _check_size_bounds(self) -> "PlannerConfig":
        if self.min_task_size > self.max_task_size:
            raise ValueError(
                f"min_task_size ({self.min_task_size}) exceeds "
                f"max_task_size ({self.max_task_size})"
            )
        return self


def get_planner_config() -> PlannerConfig:
    """
    Build a planner configuration from the current environment.

    Returns:
        PlannerConfig instance
    """
    return PlannerConfig()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for applications embedding the planner.

    The library itself never installs handlers; call this from entry points.

    Args:
        level: Log level name (defaults to PLANNER_LOG_LEVEL)
    """
    level_name = (level or os.getenv("PLANNER_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
