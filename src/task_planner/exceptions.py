"""Error types raised by the task planning engine."""

from typing import Optional


class PlanningError(Exception):
    """Base class for planning engine errors."""

    def __init__(self, message: str, task_id: Optional[str] = None):
        self.task_id = task_id
        if task_id:
            message = f"{message} (task: {task_id})"
        super().__init__(message)


class TaskValidationError(PlanningError):
    """Raised when an input task is malformed (missing category, bad hours)."""

    pass


class EstimatorUnavailableError(PlanningError):
    """Raised internally when the predictive estimator fails or times out."""

    pass


class PlanningInvariantError(PlanningError):
    """Raised when an internal invariant is breached."""

    pass
