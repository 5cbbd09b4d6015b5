"""Registry mapping task categories to decomposition strategies."""

import logging
from typing import Dict, Optional
from .base import BaseDecomposer
from .strategies import (
    CATEGORY_TEMPLATES,
    TemplateDecompositionStrategy,
    GenericDecompositionStrategy,
)
from ..exceptions import PlanningInvariantError
from ..models.planning_models import Task, TaskCategory


logger = logging.getLogger(__name__)


class StrategyRegistry:
    """
    Category -> strategy lookup with a generic fallback.

    New categories are supported by registering a strategy; the dispatcher
    never changes.
    """

    def __init__(
        self,
        fallback: Optional[BaseDecomposer] = None,
        max_subtasks: int = 10,
    ):
        self.max_subtasks = max_subtasks
        self.strategies: Dict[TaskCategory, BaseDecomposer] = {}
        self.fallback = fallback
        self.logger = logging.getLogger(__name__)

    @classmethod
    def default(cls, max_subtasks: int = 10) -> "StrategyRegistry":
        """Registry populated with the built-in category templates."""
        registry = cls(
            fallback=GenericDecompositionStrategy(max_subtasks=max_subtasks),
            max_subtasks=max_subtasks,
        )
        for category, steps in CATEGORY_TEMPLATES.items():
            registry.register(
                category,
                TemplateDecompositionStrategy(
                    category=category,
                    steps=steps,
                    max_subtasks=max_subtasks,
                ),
            )

        registry.logger.debug(
            f"Registered {len(registry.strategies)} decomposition strategies"
        )
        return registry

    def register(self, category: TaskCategory, strategy: BaseDecomposer) -> None:
        """Register (or replace) the strategy for a category."""
        self.strategies[category] = strategy

    def resolve(self, task: Task) -> BaseDecomposer:
        """
        Select the strategy for a task.

        Raises:
            PlanningInvariantError: If neither a category strategy nor a
                fallback is available
        """
        strategy = self.strategies.get(task.category) or self.fallback

        if strategy is None:
            self.logger.error(
                f"No decomposition strategy for category {task.category}"
            )
            raise PlanningInvariantError(
                f"No decomposition strategy for category '{task.category}'",
                task_id=task.id,
            )

        return strategy
