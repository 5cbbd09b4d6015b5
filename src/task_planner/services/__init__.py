"""Services package for the task planning engine."""

from .planning_service import TaskPlanningService

__all__ = [
    "TaskPlanningService",
]
