"""Merge and split primitives shared by the decomposer and granularity pass."""

import math
from typing import List
from uuid import uuid4
from ..models.planning_models import Task


def merge_tasks(tasks: List[Task]) -> Task:
    """
    Merge tasks into one composite task.

    The first task provides name, category and priority. Hours are summed
    exactly, descriptions joined with "; ", deliverables, criteria and
    complexity factors concatenated. The result has a fresh ID; the inputs
    are left untouched.

    Args:
        tasks: Non-empty list of tasks to merge

    Returns:
        New merged Task

    Raises:
        ValueError: If tasks is empty
    """
    if not tasks:
        raise ValueError("Cannot merge an empty task list")

    main_task = tasks[0]
    member_ids = {t.id for t in tasks}

    dependencies: List[str] = []
    prerequisites: List[str] = []
    subtasks: List[str] = []
    for task in tasks:
        dependencies.extend(
            d for d in task.dependencies
            if d not in member_ids and d not in dependencies
        )
        prerequisites.extend(p for p in task.prerequisites if p not in prerequisites)
        subtasks.extend(s for s in task.subtasks if s not in subtasks)

    complexity_score = main_task.complexity_score.model_copy(
        update={
            "factors": [
                f.model_copy() for t in tasks for f in t.complexity_score.factors
            ]
        }
    )

    return main_task.model_copy(
        deep=True,
        update={
            "id": str(uuid4()),
            "description": "; ".join(t.description for t in tasks),
            "estimated_hours": sum(t.estimated_hours for t in tasks),
            "deliverables": [d.model_copy() for t in tasks for d in t.deliverables],
            "acceptance_criteria": [c for t in tasks for c in t.acceptance_criteria],
            "test_criteria": [c for t in tasks for c in t.test_criteria],
            "dependencies": dependencies,
            "prerequisites": prerequisites,
            "subtasks": subtasks,
            "depth": min(t.depth for t in tasks),
            "complexity_score": complexity_score,
        },
    )


def split_task(task: Task, max_part: float, label: str = "Part") -> List[Task]:
    """
    Split a task into ceil(hours / max_part) equally sized parts.

    Each part gets min(max_part, hours / parts) hours, a fresh ID, the name
    "<name> (<label> i)" and no subtasks. The parts' total matches the
    original up to floating point rounding.

    Args:
        task: Task to split
        max_part: Largest allowed part size in hours
        label: Word used in part names ("Part" or "Step")

    Returns:
        List of new tasks
    """
    if max_part <= 0:
        raise ValueError("max_part must be positive")

    num_splits = math.ceil(task.estimated_hours / max_part)
    part_hours = min(max_part, task.estimated_hours / num_splits)

    return [
        task.model_copy(
            deep=True,
            update={
                "id": str(uuid4()),
                "name": f"{task.name} ({label} {i + 1})",
                "estimated_hours": part_hours,
                "subtasks": [],
            },
        )
        for i in range(num_splits)
    ]
