"""Base decomposer abstract class for category decomposition strategies."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import uuid4
from ..models.planning_models import (
    Task,
    TaskCategory,
    TaskMetadata,
    ComplexityScore,
)


logger = logging.getLogger(__name__)


class BaseDecomposer(ABC):
    """
    Abstract base class for category decomposition strategies.

    All decomposition strategies must:
    - Implement generate() as a pure function of the parent task
    - Return fresh Task objects in a fixed, deterministic order
    - Leave relationship wiring to the RelationshipBuilder
    """

    def __init__(
        self,
        category: Optional[TaskCategory],
        max_subtasks: int = 10,
    ):
        """
        Initialize base decomposer.

        Args:
            category: Category this decomposer handles (None for the fallback)
            max_subtasks: Soft limit on subtasks per decomposition
        """
        self.category = category
        self.max_subtasks = max_subtasks
        label = category.value if category else "generic"
        self.logger = logging.getLogger(f"{__name__}.{label}")

    @abstractmethod
    def generate(self, parent: Task) -> List[Task]:
        """
        Generate the initial flat list of subtasks for a parent.

        Only the task IDs may differ between two calls with the same parent.

        Args:
            parent: Task to decompose

        Returns:
            List of subtasks in template order
        """
        pass

    def _create_subtask(
        self,
        name: str,
        category: TaskCategory,
        estimated_hours: float,
        parent: Task,
    ) -> Task:
        """
        Create a subtask with default estimates.

        Args:
            name: Subtask name
            category: Subtask category
            estimated_hours: Hour allocation
            parent: Parent task

        Returns:
            New Task object
        """
        return Task(
            id=str(uuid4()),
            name=name,
            description=f"{name} for parent task",
            category=category,
            estimated_hours=estimated_hours,
            depth=parent.depth + 1,
            complexity_score=ComplexityScore(),
            confidence=0.7,
            acceptance_criteria=[f"Complete {name}"],
            test_criteria=[f"Verify {name} completion"],
            metadata=TaskMetadata(created_by="task_breaker"),
        )

    def validate_subtasks(self, subtasks: List[Task]) -> bool:
        """
        Check generated subtasks.

        Exceeding max_subtasks only logs a warning; templates are fixed policy.

        Args:
            subtasks: List of generated subtasks

        Returns:
            True if valid, False otherwise
        """
        if not subtasks:
            self.logger.warning("Decomposition generated no subtasks")
            return False

        if len(subtasks) > self.max_subtasks:
            self.logger.warning(
                f"Decomposition generated {len(subtasks)} subtasks, "
                f"exceeds soft limit of {self.max_subtasks}"
            )

        ids = [t.id for t in subtasks]
        if len(ids) != len(set(ids)):
            self.logger.error("Duplicate subtask IDs detected")
            return False

        return True
