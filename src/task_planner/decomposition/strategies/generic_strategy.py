"""Fallback decomposition strategy for categories without a template."""

import logging
from typing import List
from .template_strategy import TemplateDecompositionStrategy
from .category_templates import GENERIC_STEPS
from ...models.planning_models import Task


logger = logging.getLogger(__name__)


class GenericDecompositionStrategy(TemplateDecompositionStrategy):
    """
    Plan / implement / test / document breakdown used for any category
    that has no dedicated template.
    """

    def __init__(self, max_subtasks: int = 10):
        """Initialize generic decomposition strategy."""
        super().__init__(category=None, steps=GENERIC_STEPS, max_subtasks=max_subtasks)

    def generate(self, parent: Task) -> List[Task]:
        self.logger.debug(
            f"Using generic template for '{parent.name}' ({parent.category.value})"
        )
        return super().generate(parent)
