"""High-level task planning service."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Union
from pydantic import ValidationError
from ..config.planner_config import PlannerConfig, get_planner_config
from ..decomposition.task_decomposer import TaskDecomposer
from ..decomposition.strategy_registry import StrategyRegistry
from ..decomposition.granularity import GranularityTransformer
from ..decomposition.relationships import RelationshipBuilder
from ..decomposition.dependency_validator import DependencyGraphValidator
from ..decomposition.complexity_scorer import ComplexityScorer
from ..decomposition.estimators import (
    PredictiveEstimator,
    SimilarTaskFinder,
    StaticSimilarTaskFinder,
    PatternEstimator,
)
from ..exceptions import TaskValidationError
from ..models.planning_models import (
    Task,
    TaskCategory,
    Granularity,
    PlanningContext,
    BreakdownResult,
    ComplexityEstimate,
)


logger = logging.getLogger(__name__)


class TaskPlanningService:
    """
    High-level planning service for task breakdown and estimation.

    PATTERN: Facade coordinating decomposer, transformer, builder,
    validator and scorer
    CRITICAL: Single entry point; every result has a validation report
    GOTCHA: Holds no per-request state, so independent roots can be planned
    concurrently
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        decomposer: Optional[TaskDecomposer] = None,
        transformer: Optional[GranularityTransformer] = None,
        builder: Optional[RelationshipBuilder] = None,
        validator: Optional[DependencyGraphValidator] = None,
        scorer: Optional[ComplexityScorer] = None,
        estimator: Optional[PredictiveEstimator] = None,
        similar_task_finder: Optional[SimilarTaskFinder] = None,
    ):
        """
        Initialize task planning service.

        Args:
            config: Planner configuration (loaded from environment if None)
            decomposer: Task decomposer (built from config if None)
            transformer: Granularity transformer
            builder: Relationship builder (same-category chaining if None)
            validator: Dependency graph validator (config bounds if None)
            scorer: Complexity scorer (built from config if None)
            estimator: Predictive estimator (pattern estimator if None)
            similar_task_finder: Similar task lookup (empty history if None)
        """
        self.logger = logging.getLogger(__name__)
        self.config = config or get_planner_config()

        self.decomposer = decomposer or TaskDecomposer(
            registry=StrategyRegistry.default(self.config.max_subtasks_per_task),
            max_depth=self.config.max_depth,
            refine_threshold_hours=self.config.refine_threshold_hours,
            enable_grouping=self.config.enable_grouping,
        )
        self.transformer = transformer or GranularityTransformer()
        self.builder = builder or RelationshipBuilder()
        self.validator = validator or DependencyGraphValidator(
            min_task_size=self.config.min_task_size,
            max_task_size=self.config.max_task_size,
        )

        self.similar_task_finder = similar_task_finder or StaticSimilarTaskFinder(
            limit=self.config.similar_task_limit
        )
        self.scorer = scorer or ComplexityScorer(
            estimator=estimator or PatternEstimator(model=self.config.estimator_model),
            similar_task_finder=self.similar_task_finder,
            estimator_timeout=self.config.estimator_timeout,
            similar_task_limit=self.config.similar_task_limit,
        )

        self.logger.info(
            f"Task planning service initialized (max_depth: {self.config.max_depth}, "
            f"granularity: {self.config.granularity.value})"
        )

    def plan(
        self,
        task: Union[Task, Dict[str, Any]],
        context: Optional[PlanningContext] = None,
        granularity: Optional[Granularity] = None,
    ) -> BreakdownResult:
        """
        Break a task down into a validated set of subtasks.

        PATTERN: Validate -> Score -> Decompose -> Transform -> Wire -> Validate
        CRITICAL: Graph problems are reported in the result, never raised

        Args:
            task: Parent task or a dict describing one
            context: Optional planning context
            granularity: Granularity preference (config default if None)

        Returns:
            BreakdownResult with subtasks, validation report and, for valid
            graphs, execution batches

        Raises:
            TaskValidationError: If the input task is malformed
        """
        parent = self.validate_input(task)
        preference = Granularity(granularity or self.config.granularity)

        self.logger.info(
            f"Planning task: '{parent.name[:50]}' ({parent.category.value}, "
            f"{parent.estimated_hours:g}h, granularity: {preference.value})"
        )

        if not parent.complexity_score.factors:
            parent.complexity_score = self.scorer.score(parent, context)

        depth = self.decomposer.breakdown_depth(parent)
        subtasks = self.decomposer.decompose(parent)
        subtasks = self.transformer.apply(subtasks, preference)
        self.builder.wire(subtasks, parent.id)

        report = self.validator.validate(subtasks)
        execution_batches = (
            self.validator.execution_batches(subtasks) if report.valid else []
        )

        parent.subtasks = [t.id for t in subtasks]

        result = BreakdownResult(
            parent=parent,
            tasks=subtasks,
            report=report,
            depth=depth,
            granularity=preference,
            execution_batches=execution_batches,
        )

        if report.valid:
            self.logger.info(
                f"Planning complete: {len(subtasks)} tasks, "
                f"{result.total_hours:.1f}h total, "
                f"{len(execution_batches)} execution batches"
            )
        else:
            self.logger.warning(
                f"Planning complete with {len(report.issues)} validation issues: "
                f"{'; '.join(report.issues)}"
            )

        return result

    def plan_many(
        self,
        tasks: List[Union[Task, Dict[str, Any]]],
        context: Optional[PlanningContext] = None,
        granularity: Optional[Granularity] = None,
        max_workers: Optional[int] = None,
    ) -> List[BreakdownResult]:
        """
        Plan independent root tasks in parallel.

        Args:
            tasks: Root tasks
            context: Optional planning context shared by all roots
            granularity: Granularity preference
            max_workers: Thread pool size (executor default if None)

        Returns:
            One BreakdownResult per task, in input order
        """
        self.logger.info(f"Planning {len(tasks)} root tasks")

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(
                executor.map(lambda t: self.plan(t, context, granularity), tasks)
            )

    async def estimate(
        self,
        task: Task,
        context: Optional[PlanningContext] = None,
    ) -> ComplexityEstimate:
        """
        Estimate duration and confidence for a task.

        Args:
            task: Task to estimate
            context: Optional planning context

        Returns:
            ComplexityEstimate (heuristic only if the estimator is unavailable)
        """
        return await self.scorer.estimate(self.validate_input(task), context)

    async def estimate_breakdown(
        self,
        result: BreakdownResult,
        context: Optional[PlanningContext] = None,
    ) -> List[ComplexityEstimate]:
        """
        Estimate every subtask of a breakdown.

        Args:
            result: Result of plan()
            context: Optional planning context

        Returns:
            One estimate per subtask, in result order
        """
        estimates = await self.scorer.estimate_many(result.tasks, context)

        total = sum(e.estimated_hours for e in estimates)
        self.logger.info(
            f"Estimated breakdown of {result.parent.id}: {len(estimates)} tasks, "
            f"{total:.1f}h total"
        )

        return estimates

    def record_outcome(self, task: Task, actual_complexity: float) -> int:
        """
        Record the observed complexity of a completed task.

        Updates the learned pattern table and, for the in-memory finder,
        makes the task available as a similar task for later estimates.

        Args:
            task: Completed task
            actual_complexity: Observed complexity (0-1)

        Returns:
            Version of the published pattern table
        """
        version = self.scorer.record_outcome(task, actual_complexity)

        if isinstance(self.similar_task_finder, StaticSimilarTaskFinder):
            self.similar_task_finder.add(task)

        return version

    def validate_input(self, task: Union[Task, Dict[str, Any]]) -> Task:
        """
        Check an input task and return a private copy of it.

        Args:
            task: Task or dict describing one

        Returns:
            Deep copy of the validated task

        Raises:
            TaskValidationError: If the task is malformed
        """
        if isinstance(task, dict):
            try:
                return Task.model_validate(task)
            except ValidationError as e:
                raise TaskValidationError(
                    f"Invalid task: {e.error_count()} validation errors",
                    task_id=task.get("id"),
                ) from e

        if not isinstance(task, Task):
            raise TaskValidationError(
                f"Expected Task or dict, got {type(task).__name__}"
            )

        if not isinstance(task.category, TaskCategory):
            raise TaskValidationError("Task has no valid category", task_id=task.id)

        if not task.estimated_hours or task.estimated_hours <= 0:
            raise TaskValidationError(
                f"Task estimated_hours must be positive, got {task.estimated_hours}",
                task_id=task.id,
            )

        return task.model_copy(deep=True)
