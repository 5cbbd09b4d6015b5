"""Dependency graph validation with cycle detection and topological ordering."""

import logging
from graphlib import TopologicalSorter
from typing import Dict, List, Optional, Set, Tuple
from ..models.planning_models import Task, ValidationReport


logger = logging.getLogger(__name__)


class DependencyGraphValidator:
    """
    Non-mutating diagnostics over a task set.

    PATTERN: Independent checks, every problem reported, nothing raised
    CRITICAL: Must find every cycle, not just detect that one exists
    GOTCHA: Execution order helpers are only meaningful on a valid graph
    """

    def __init__(self, min_task_size: float = 0.5, max_task_size: float = 40.0):
        """
        Initialize dependency graph validator.

        Args:
            min_task_size: Default minimum task size in hours
            max_task_size: Default maximum task size in hours
        """
        self.min_task_size = min_task_size
        self.max_task_size = max_task_size
        self.logger = logging.getLogger(__name__)

    def validate(
        self,
        tasks: List[Task],
        min_task_size: Optional[float] = None,
        max_task_size: Optional[float] = None,
    ) -> ValidationReport:
        """
        Validate size bounds, cycles and referential integrity.

        Args:
            tasks: Tasks to validate (not modified)
            min_task_size: Override for the minimum size bound
            max_task_size: Override for the maximum size bound

        Returns:
            ValidationReport, valid when no issue was found
        """
        min_size = self.min_task_size if min_task_size is None else min_task_size
        max_size = self.max_task_size if max_task_size is None else max_task_size
        issues: List[str] = []

        # Check 1: minimum size
        undersized = [t.id for t in tasks if t.estimated_hours < min_size]
        if undersized:
            issues.append(
                f"{len(undersized)} tasks are below minimum size of {min_size:g} hours"
            )

        # Check 2: maximum size
        oversized = [t.id for t in tasks if t.estimated_hours > max_size]
        if oversized:
            issues.append(
                f"{len(oversized)} tasks exceed maximum size of {max_size:g} hours"
            )

        # Check 3: cycles
        graph = self.build_graph(tasks)
        cycles = self.find_cycles(graph)
        for cycle in cycles:
            issues.append(f"Circular dependency detected: {' -> '.join(cycle)}")

        # Check 4: dangling references
        known_ids = set(graph)
        dangling: Dict[str, List[str]] = {}
        for task in tasks:
            missing = [d for d in task.dependencies if d not in known_ids]
            if missing:
                dangling[task.id] = missing
                issues.append(
                    f"Task {task.name} ({task.id}) has invalid dependencies: "
                    f"{', '.join(missing)}"
                )

        report = ValidationReport(
            valid=not issues,
            issues=issues,
            undersized=undersized,
            oversized=oversized,
            cycles=cycles,
            dangling=dangling,
        )

        if report.valid:
            self.logger.debug(f"Dependency validation passed for {len(tasks)} tasks")
        else:
            self.logger.info(
                f"Dependency validation found {len(issues)} issues "
                f"({len(cycles)} cycles, {len(dangling)} tasks with dangling references)"
            )

        return report

    def build_graph(self, tasks: List[Task]) -> Dict[str, List[str]]:
        """
        Build the adjacency map task_id -> dependency IDs.

        Args:
            tasks: Tasks to index

        Returns:
            Adjacency map in task order
        """
        return {task.id: list(task.dependencies) for task in tasks}

    def find_cycles(self, graph: Dict[str, List[str]]) -> List[List[str]]:
        """
        Find circular dependency chains using depth-first search.

        The DFS keeps an explicit stack so long dependency chains cannot
        exhaust the interpreter's recursion limit. When a neighbor is found on
        the current path, the slice from its first occurrence to the end of
        the path, closed with the neighbor, is recorded.

        Args:
            graph: Adjacency map from build_graph()

        Returns:
            List of distinct cycles, each a list of task IDs
        """
        cycles: List[List[str]] = []
        seen: Set[Tuple[str, ...]] = set()
        visited: Set[str] = set()

        for start in graph:
            if start in visited:
                continue

            visited.add(start)
            path = [start]
            on_path = {start}
            stack = [iter(graph.get(start, ()))]

            while stack:
                neighbor = next(stack[-1], None)

                if neighbor is None:
                    stack.pop()
                    on_path.discard(path.pop())
                    continue

                if neighbor not in visited:
                    visited.add(neighbor)
                    path.append(neighbor)
                    on_path.add(neighbor)
                    stack.append(iter(graph.get(neighbor, ())))
                elif neighbor in on_path:
                    cycle = path[path.index(neighbor):] + [neighbor]
                    key = self._cycle_key(cycle)
                    if key not in seen:
                        seen.add(key)
                        cycles.append(cycle)

        return cycles

    @staticmethod
    def _cycle_key(cycle: List[str]) -> Tuple[str, ...]:
        """Rotation-independent identity of a closed cycle."""
        nodes = cycle[:-1]
        pivot = nodes.index(min(nodes))
        return tuple(nodes[pivot:] + nodes[:pivot])

    def _sorter(self, tasks: List[Task]) -> TopologicalSorter:
        known_ids = {t.id for t in tasks}
        return TopologicalSorter(
            {t.id: [d for d in t.dependencies if d in known_ids] for t in tasks}
        )

    def execution_order(self, tasks: List[Task]) -> List[str]:
        """
        Get topologically sorted execution order.

        Dependencies outside the set are ignored.

        Raises:
            CycleError: If circular dependencies exist
        """
        return list(self._sorter(tasks).static_order())

    def execution_batches(self, tasks: List[Task]) -> List[List[str]]:
        """
        Get batches of tasks that can execute in parallel.

        Tasks in the same batch have no dependencies on each other; batches
        run in order.

        Raises:
            CycleError: If circular dependencies exist
        """
        dependencies = {t.id: t.dependencies for t in tasks}
        levels: Dict[str, int] = {}
        batches: List[List[str]] = []

        # Dependencies precede dependents in topological order, so every
        # known dependency already has a level.
        for task_id in self.execution_order(tasks):
            level = max(
                (levels[d] + 1 for d in dependencies[task_id] if d in levels),
                default=0,
            )
            levels[task_id] = level
            if level == len(batches):
                batches.append([])
            batches[level].append(task_id)

        self.logger.debug(
            f"Generated {len(batches)} execution batches "
            f"with {sum(len(b) for b in batches)} tasks"
        )

        return batches
