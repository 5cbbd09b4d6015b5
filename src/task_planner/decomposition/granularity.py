"""Granularity transformer - merge/split pass adjusting task size."""

import logging
import math
from typing import Dict, List, Tuple
from .task_ops import merge_tasks, split_task
from ..models.planning_models import Task, TaskCategory, Granularity


logger = logging.getLogger(__name__)

# preference -> bucket size in hours
MERGE_BUCKETS: Dict[Granularity, float] = {
    Granularity.VERY_COARSE: 8.0,
    Granularity.COARSE: 4.0,
}

# preference -> (split threshold, max part size, part label)
SPLIT_RULES: Dict[Granularity, Tuple[float, float, str]] = {
    Granularity.FINE: (4.0, 2.0, "Part"),
    Granularity.VERY_FINE: (1.0, 1.0, "Step"),
}


class GranularityTransformer:
    """
    Deterministic merge/split pass applied after refinement.

    Coarse levels merge tasks of the same category and size bucket, fine
    levels split anything over a threshold, medium is the identity.
    Split parts carry hours / parts each, so totals can drift from the
    original by floating point rounding only.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def apply(self, tasks: List[Task], preference: Granularity) -> List[Task]:
        """
        Apply a granularity preference.

        Args:
            tasks: Tasks to transform
            preference: Target granularity

        Returns:
            New task list (inputs are not mutated)
        """
        preference = Granularity(preference)

        if preference in MERGE_BUCKETS:
            result = self.merge(tasks, MERGE_BUCKETS[preference])
        elif preference in SPLIT_RULES:
            threshold, max_part, label = SPLIT_RULES[preference]
            result = self.split(tasks, threshold, max_part, label)
        else:
            result = list(tasks)

        self.logger.debug(
            f"Granularity '{preference.value}': {len(tasks)} -> {len(result)} tasks"
        )

        return result

    def merge(self, tasks: List[Task], bucket_size: float) -> List[Task]:
        """
        Merge tasks bucketed by (category, floor(hours / bucket_size)).

        Single-member buckets pass through unchanged. Buckets keep the order
        of their first member.
        """
        buckets: Dict[Tuple[TaskCategory, int], List[Task]] = {}
        for task in tasks:
            key = (task.category, math.floor(task.estimated_hours / bucket_size))
            buckets.setdefault(key, []).append(task)

        return [
            members[0] if len(members) == 1 else merge_tasks(members)
            for members in buckets.values()
        ]

    def split(
        self,
        tasks: List[Task],
        threshold: float,
        max_part: float,
        label: str = "Part",
    ) -> List[Task]:
        """Split every task above threshold into parts of at most max_part hours."""
        result: List[Task] = []
        for task in tasks:
            if task.estimated_hours > threshold:
                result.extend(split_task(task, max_part, label))
            else:
                result.append(task)
        return result
