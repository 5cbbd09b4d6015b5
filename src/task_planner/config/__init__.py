"""Configuration for the task planning engine."""

from .planner_config import PlannerConfig, get_planner_config, configure_logging

__all__ = [
    "PlannerConfig",
    "get_planner_config",
    "configure_logging",
]
