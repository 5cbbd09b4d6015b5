"""Task decomposer - category-driven breakdown with bounded refinement."""

import logging
from typing import Dict, List, Optional
from .strategy_registry import StrategyRegistry
from .task_ops import merge_tasks
from ..models.planning_models import Task, TaskCategory


logger = logging.getLogger(__name__)


class TaskDecomposer:
    """
    Turns one parent task into a flat list of subtasks.

    PATTERN: Registry lookup -> template expansion -> optional grouping ->
    recursive refinement of large subtasks
    CRITICAL: Recursion is bounded by a strictly decreasing depth budget
    GOTCHA: Only IDs differ between two runs on the same parent
    """

    def __init__(
        self,
        registry: Optional[StrategyRegistry] = None,
        max_depth: int = 3,
        refine_threshold_hours: float = 16.0,
        enable_grouping: bool = True,
    ):
        """
        Initialize task decomposer.

        Args:
            registry: Category strategy registry (built-in templates if None)
            max_depth: Upper bound for breakdown depth
            refine_threshold_hours: Subtasks above this size are decomposed again
            enable_grouping: Merge same-category subtasks before refinement
        """
        self.registry = registry or StrategyRegistry.default()
        self.max_depth = max_depth
        self.refine_threshold_hours = refine_threshold_hours
        self.enable_grouping = enable_grouping
        self.logger = logging.getLogger(__name__)

    def generate(self, parent: Task) -> List[Task]:
        """
        Generate the initial subtasks for a parent using its category strategy.

        Args:
            parent: Task to decompose

        Returns:
            Subtasks in template order
        """
        strategy = self.registry.resolve(parent)
        return strategy.generate(parent)

    def breakdown_depth(self, parent: Task) -> int:
        """
        Decide how many refinement levels a parent deserves.

        Size adds up to two levels, high complexity and a long dependency
        list add one each. Clamped to max_depth.

        Args:
            parent: Task being broken down

        Returns:
            Depth in [1, max_depth]
        """
        depth = 1

        if parent.estimated_hours > 40:
            depth += 2
        elif parent.estimated_hours > 16:
            depth += 1

        if parent.complexity_score.overall > 0.8:
            depth += 1

        if len(parent.dependencies) > 5:
            depth += 1

        return min(depth, self.max_depth)

    def refine(self, subtasks: List[Task], depth: int) -> List[Task]:
        """
        Group and recursively decompose oversized subtasks.

        While depth > 1 every subtask larger than refine_threshold_hours is
        generated again with a depth - 1 budget; its children replace it.

        Args:
            subtasks: Subtasks produced by generate()
            depth: Remaining refinement budget

        Returns:
            Refined flat list of subtasks
        """
        tasks = self.group_related(subtasks) if self.enable_grouping else list(subtasks)

        if depth <= 1:
            return tasks

        refined: List[Task] = []
        for subtask in tasks:
            if subtask.estimated_hours > self.refine_threshold_hours:
                self.logger.debug(
                    f"Refining '{subtask.name}' ({subtask.estimated_hours:g}h) "
                    f"with depth budget {depth - 1}"
                )
                children = self.generate(subtask)
                refined.extend(self.refine(children, depth - 1))
            else:
                refined.append(subtask)

        return refined

    def group_related(self, subtasks: List[Task]) -> List[Task]:
        """
        Merge subtasks that share a category.

        Groups appear in order of each category's first occurrence. Total
        hours are preserved exactly.

        Args:
            subtasks: Subtasks to group

        Returns:
            One task per category
        """
        grouped: Dict[TaskCategory, List[Task]] = {}
        for subtask in subtasks:
            grouped.setdefault(subtask.category, []).append(subtask)

        result: List[Task] = []
        for tasks in grouped.values():
            if len(tasks) > 1:
                result.append(merge_tasks(tasks))
            else:
                result.extend(tasks)

        return result

    def decompose(self, parent: Task) -> List[Task]:
        """
        Generate and refine subtasks for a parent.

        Args:
            parent: Task to decompose

        Returns:
            Refined subtasks (not yet transformed or wired)
        """
        depth = self.breakdown_depth(parent)
        initial = self.generate(parent)
        refined = self.refine(initial, depth)

        self.logger.info(
            f"Decomposed '{parent.name}': {len(initial)} initial subtasks, "
            f"{len(refined)} after refinement (depth {depth})"
        )

        return refined
