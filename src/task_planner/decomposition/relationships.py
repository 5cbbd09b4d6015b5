"""Relationship builder - wires dependencies and parent provenance links."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from ..models.planning_models import Task, TaskCategory


logger = logging.getLogger(__name__)


class RelationshipStrategy(ABC):
    """Policy deciding which blocking dependencies to add to a fresh task set."""

    @abstractmethod
    def link(self, tasks: List[Task]) -> int:
        """
        Append dependencies in place.

        Args:
            tasks: Freshly generated tasks, in generation order

        Returns:
            Number of dependency edges added
        """
        pass


class SameCategoryChainStrategy(RelationshipStrategy):
    """
    Chain tasks of the same category in generation order.

    A simplifying heuristic: it does not infer real data or control flow and
    may serialize work that could run in parallel.
    """

    def link(self, tasks: List[Task]) -> int:
        by_category: Dict[TaskCategory, List[Task]] = {}
        for task in tasks:
            by_category.setdefault(task.category, []).append(task)

        added = 0
        for category_tasks in by_category.values():
            for previous, current in zip(category_tasks, category_tasks[1:]):
                if previous.id not in current.dependencies:
                    current.add_dependency(previous.id)
                    added += 1

        return added


class NoDependencyStrategy(RelationshipStrategy):
    """Leave every task independent so all of them can run in parallel."""

    def link(self, tasks: List[Task]) -> int:
        return 0


class RelationshipBuilder:
    """
    Wires a freshly generated task set.

    PATTERN: Pluggable dependency policy + parent backlink in prerequisites
    CRITICAL: Only appends; never removes relations or tasks
    GOTCHA: Run on the fresh set only, never on an already validated plan
    """

    def __init__(self, strategy: Optional[RelationshipStrategy] = None):
        """
        Initialize relationship builder.

        Args:
            strategy: Dependency policy (same-category chain if None)
        """
        self.strategy = strategy or SameCategoryChainStrategy()
        self.logger = logging.getLogger(__name__)

    def wire(self, tasks: List[Task], parent_id: str) -> None:
        """
        Add dependencies and parent prerequisites in place.

        Args:
            tasks: Tasks to wire
            parent_id: ID of the task they were derived from
        """
        edges = self.strategy.link(tasks)

        for task in tasks:
            task.add_prerequisite(parent_id)

        self.logger.debug(
            f"Wired {len(tasks)} tasks under {parent_id}: {edges} dependencies "
            f"({type(self.strategy).__name__})"
        )
