"""Task planning engine.

Breaks high-level tasks into validated, dependency-ordered subtasks with
complexity and duration estimates.
"""

from .config import PlannerConfig, get_planner_config, configure_logging
from .exceptions import (
    PlanningError,
    TaskValidationError,
    EstimatorUnavailableError,
    PlanningInvariantError,
)
from .services import TaskPlanningService

__version__ = "0.1.0"

__all__ = [
    "PlannerConfig",
    "get_planner_config",
    "configure_logging",
    "PlanningError",
    "TaskValidationError",
    "EstimatorUnavailableError",
    "PlanningInvariantError",
    "TaskPlanningService",
]
