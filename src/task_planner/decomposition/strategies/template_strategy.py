"""Template-driven decomposition strategy."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence
from ..base import BaseDecomposer
from ...models.planning_models import Task, TaskCategory


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateStep:
    """
    One step of a category template.

    Hours are either flat (``hours``) or a fraction of the parent's hours
    (``fraction``), optionally capped by ``cap``.
    """

    name: str
    category: TaskCategory
    hours: Optional[float] = None
    fraction: Optional[float] = None
    cap: Optional[float] = None

    def allocate(self, parent_hours: float) -> float:
        """Hours assigned to this step for a parent of the given size."""
        if self.fraction is not None:
            allocated = parent_hours * self.fraction
        else:
            allocated = self.hours
        if self.cap is not None:
            allocated = min(allocated, self.cap)
        return allocated


class TemplateDecompositionStrategy(BaseDecomposer):
    """
    Decomposition strategy that expands a fixed list of template steps.

    PATTERN: One instance per category, steps kept in declaration order
    """

    def __init__(
        self,
        category: Optional[TaskCategory],
        steps: Sequence[TemplateStep],
        max_subtasks: int = 10,
    ):
        super().__init__(category=category, max_subtasks=max_subtasks)
        self.steps = tuple(steps)

    def generate(self, parent: Task) -> List[Task]:
        """
        Expand the template for a parent task.

        Args:
            parent: Task to decompose

        Returns:
            List of subtasks in template order
        """
        subtasks = [
            self._create_subtask(
                name=step.name,
                category=step.category,
                estimated_hours=step.allocate(parent.estimated_hours),
                parent=parent,
            )
            for step in self.steps
        ]

        self.validate_subtasks(subtasks)

        self.logger.debug(
            f"Generated {len(subtasks)} subtasks for '{parent.name}' "
            f"({parent.estimated_hours:g}h)"
        )

        return subtasks
