"""Multi-factor complexity scoring with optional predictive estimator blending."""

import asyncio
import logging
from typing import Dict, List, Optional, Tuple
from .estimators import PredictiveEstimator, SimilarTaskFinder
from .weight_table import WeightTable
from ..exceptions import EstimatorUnavailableError
from ..models.planning_models import (
    Task,
    TaskCategory,
    ComplexityFactor,
    ComplexityScore,
    ComplexityEstimate,
    HeuristicAnalysis,
    EstimatorAnalysis,
    PlanningContext,
    DeliverableType,
    SkillLevel,
    RiskImpact,
    RiskProbability,
    ToolCategory,
)


logger = logging.getLogger(__name__)

# Versioned policy table: category -> (score, weight, description).
# Weights intentionally do not sum to 1 across factors.
CATEGORY_COMPLEXITY: Dict[TaskCategory, Tuple[float, float, str]] = {
    TaskCategory.DEVELOPMENT: (0.6, 0.15, "Development tasks involve coding and implementation"),
    TaskCategory.TESTING: (0.5, 0.12, "Testing requires systematic validation and debugging"),
    TaskCategory.DESIGN: (0.7, 0.14, "Design involves creativity and stakeholder communication"),
    TaskCategory.DEPLOYMENT: (0.4, 0.10, "Deployment is mostly automation with some manual steps"),
    TaskCategory.DOCUMENTATION: (0.3, 0.08, "Documentation is structured writing with some research"),
    TaskCategory.ANALYSIS: (0.8, 0.18, "Analysis requires deep thinking and pattern recognition"),
    TaskCategory.INTEGRATION: (0.9, 0.20, "Integration is complex due to external dependencies"),
    TaskCategory.SECURITY: (0.85, 0.16, "Security requires specialized knowledge and thorough testing"),
    TaskCategory.PERFORMANCE: (0.75, 0.15, "Performance optimization requires deep technical expertise"),
    TaskCategory.MAINTENANCE: (0.4, 0.09, "Maintenance involves understanding existing code and fixes"),
    TaskCategory.OPTIMIZATION: (0.7, 0.13, "Optimization requires analysis and careful implementation"),
    TaskCategory.CONFIGURATION: (0.3, 0.07, "Configuration is straightforward setup and parameters"),
    TaskCategory.MIGRATION: (0.8, 0.17, "Migration involves data transformation and testing"),
    TaskCategory.RESEARCH: (0.6, 0.11, "Research requires investigation and documentation"),
}
CATEGORY_TABLE_VERSION = 1

SKILL_LEVEL_VALUES = {
    SkillLevel.BEGINNER: 0.2,
    SkillLevel.INTERMEDIATE: 0.5,
    SkillLevel.ADVANCED: 0.8,
    SkillLevel.EXPERT: 1.0,
}

RISK_IMPACT_VALUES = {
    RiskImpact.MINOR: 0.2,
    RiskImpact.MODERATE: 0.4,
    RiskImpact.MAJOR: 0.7,
    RiskImpact.SEVERE: 0.9,
    RiskImpact.CRITICAL: 1.0,
}

HIGH_PROBABILITY = {RiskProbability.MEDIUM, RiskProbability.HIGH, RiskProbability.VERY_HIGH}

COMPLEX_DELIVERABLE_TYPES = {
    DeliverableType.CODE,
    DeliverableType.DOCUMENTATION,
    DeliverableType.TEST,
    DeliverableType.INTEGRATION,
}

COMPLEX_TOOL_CATEGORIES = {
    ToolCategory.IDE,
    ToolCategory.TESTING,
    ToolCategory.DEPLOYMENT,
    ToolCategory.MONITORING,
}

INTEGRATION_KEYWORDS = ("api", "service", "external", "third-party", "integration", "interface")

HEURISTIC_WEIGHT = 0.6
ESTIMATOR_WEIGHT = 0.4


class ComplexityScorer:
    """
    Scores tasks and estimates their duration.

    PATTERN: Independent heuristic factors, weighted sum, optional blend with
    an external estimator
    CRITICAL: The heuristic path always completes; the estimator is the only
    suspension point and runs under a timeout
    GOTCHA: overall is an unnormalized weighted signal, not a probability
    """

    def __init__(
        self,
        estimator: Optional[PredictiveEstimator] = None,
        similar_task_finder: Optional[SimilarTaskFinder] = None,
        weight_table: Optional[WeightTable] = None,
        estimator_timeout: float = 5.0,
        similar_task_limit: int = 5,
    ):
        """
        Initialize complexity scorer.

        Args:
            estimator: Default predictive estimator (heuristic only if None)
            similar_task_finder: Source of similar tasks for the estimator
            weight_table: Learned pattern table (fresh defaults if None)
            estimator_timeout: Seconds to wait for the estimator
            similar_task_limit: Maximum similar tasks passed to the estimator
        """
        self.estimator = estimator
        self.similar_task_finder = similar_task_finder
        self.weight_table = weight_table or WeightTable()
        self.estimator_timeout = estimator_timeout
        self.similar_task_limit = similar_task_limit
        self.logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Heuristic scoring
    # ------------------------------------------------------------------

    def score(self, task: Task, context: Optional[PlanningContext] = None) -> ComplexityScore:
        """
        Heuristic complexity score for a task.

        Args:
            task: Task to score
            context: Optional planning context

        Returns:
            ComplexityScore with overall, dimensions and factors
        """
        factors = self.analyze_factors(task, context)
        by_name = {f.name: f for f in factors}
        overall = self.calculate_overall(factors)

        learned = self.weight_table.snapshot().weighted_score(task.category)
        category_score = by_name["task_category"].score
        technical = category_score if learned is None else (category_score + learned) / 2

        return ComplexityScore(
            overall=overall,
            cognitive=by_name["skill_complexity"].score,
            technical=technical,
            business=by_name["deliverable_complexity"].score,
            uncertainty=by_name["risk_complexity"].score,
            dependencies=by_name["dependency_complexity"].score,
            factors=factors,
        )

    def analyze(self, task: Task, context: Optional[PlanningContext] = None) -> HeuristicAnalysis:
        """Run the heuristic factors and describe the main drivers."""
        factors = self.analyze_factors(task, context)
        return HeuristicAnalysis(
            algorithm="multi_factor_heuristic",
            factors=factors,
            scoring=self.calculate_overall(factors),
            reasoning=self._heuristic_reasoning(factors),
        )

    def analyze_factors(
        self,
        task: Task,
        context: Optional[PlanningContext] = None,
    ) -> List[ComplexityFactor]:
        """All heuristic factors for a task, in a fixed order."""
        dependency_count = len(task.dependencies)
        if context is not None:
            dependency_count += len(
                [d for d in context.dependency_hints if d not in task.dependencies]
            )

        return [
            self._category_factor(task.category),
            self._dependency_factor(dependency_count),
            self._deliverable_factor(task),
            self._skill_factor(task),
            self._tool_factor(task),
            self._risk_factor(task),
            self._size_factor(task.estimated_hours),
            self._integration_factor(task),
        ]

    @staticmethod
    def calculate_overall(factors: List[ComplexityFactor]) -> float:
        total = sum(f.score * f.weight for f in factors)
        return max(0.0, min(1.0, total))

    def _category_factor(self, category: TaskCategory) -> ComplexityFactor:
        score, weight, description = CATEGORY_COMPLEXITY.get(
            category, (0.5, 0.10, "Unknown category")
        )
        return ComplexityFactor(
            name="task_category",
            description=description,
            weight=weight,
            score=score,
            reasoning=(
                f"{category.value} tasks typically have "
                f"{score * 100:.0f}% complexity level"
            ),
        )

    def _dependency_factor(self, count: int) -> ComplexityFactor:
        score = min(0.9, count * 0.1 + 0.1)
        return ComplexityFactor(
            name="dependency_complexity",
            description=f"Task has {count} dependencies",
            weight=0.12,
            score=score,
            reasoning=(
                "More dependencies increase coordination complexity. "
                f"{count} dependencies score {score * 100:.0f}%"
            ),
        )

    def _deliverable_factor(self, task: Task) -> ComplexityFactor:
        count = len(task.deliverables)
        complex_count = len(
            [
                d for d in task.deliverables
                if d.type in COMPLEX_DELIVERABLE_TYPES and d.format == "complex"
            ]
        )
        score = min(0.9, count * 0.1 + complex_count * 0.15)
        return ComplexityFactor(
            name="deliverable_complexity",
            description=f"Task produces {count} deliverables, {complex_count} complex",
            weight=0.10,
            score=score,
            reasoning="Multiple and complex deliverables increase effort and coordination needs",
        )

    def _skill_factor(self, task: Task) -> ComplexityFactor:
        if not task.skills:
            return ComplexityFactor(
                name="skill_complexity",
                description="No specific skills required",
                weight=0.08,
                score=0.2,
                reasoning="Basic task with minimal skill requirements",
            )

        avg_level = sum(SKILL_LEVEL_VALUES[s.level] for s in task.skills) / len(task.skills)
        required = len([s for s in task.skills if s.required])
        score = min(0.9, avg_level * 0.6 + required * 0.1)

        return ComplexityFactor(
            name="skill_complexity",
            description=f"{len(task.skills)} skills required, {required} mandatory",
            weight=0.13,
            score=score,
            reasoning=(
                "Skill requirements complexity based on level and count: "
                f"{score * 100:.0f}%"
            ),
        )

    def _tool_factor(self, task: Task) -> ComplexityFactor:
        count = len(task.tools)
        complex_count = len([t for t in task.tools if t.category in COMPLEX_TOOL_CATEGORIES])
        required = len([t for t in task.tools if t.required])
        score = min(0.8, count * 0.05 + complex_count * 0.15)

        return ComplexityFactor(
            name="tool_complexity",
            description=f"{count} tools, {complex_count} complex, {required} required",
            weight=0.08,
            score=score,
            reasoning="Tool complexity affects setup and learning curve",
        )

    def _risk_factor(self, task: Task) -> ComplexityFactor:
        if not task.risks:
            return ComplexityFactor(
                name="risk_complexity",
                description="No identified risks",
                weight=0.10,
                score=0.2,
                reasoning="Low risk task with clear mitigation paths",
            )

        avg_impact = sum(RISK_IMPACT_VALUES[r.impact] for r in task.risks) / len(task.risks)
        high_probability = len([r for r in task.risks if r.probability in HIGH_PROBABILITY])
        score = min(0.95, avg_impact * 0.7 + high_probability * 0.1)

        return ComplexityFactor(
            name="risk_complexity",
            description=f"{len(task.risks)} risks, {high_probability} high probability",
            weight=0.15,
            score=score,
            reasoning="Risk complexity affects planning and contingency requirements",
        )

    def _size_factor(self, hours: float) -> ComplexityFactor:
        if hours <= 4:
            score, description = 0.2, "Small task (<=4 hours)"
            reasoning = "Small tasks are typically straightforward and well-defined"
        elif hours <= 16:
            score, description = 0.4, "Medium task (4-16 hours)"
            reasoning = "Medium tasks require planning and may have multiple components"
        elif hours <= 40:
            score, description = 0.6, "Large task (16-40 hours)"
            reasoning = "Large tasks require significant planning and likely multiple iterations"
        else:
            score, description = 0.8, "Very large task (>40 hours)"
            reasoning = "Very large tasks are complex and require detailed breakdown"

        return ComplexityFactor(
            name="task_size",
            description=description,
            weight=0.12,
            score=score,
            reasoning=f"Task size complexity: {reasoning}",
        )

    def _integration_factor(self, task: Task) -> ComplexityFactor:
        has_integration = "integration" in task.description.lower() or any(
            keyword in d.type.value
            for d in task.deliverables
            for keyword in INTEGRATION_KEYWORDS
        )

        if has_integration:
            return ComplexityFactor(
                name="integration_complexity",
                description="Task involves integration with external systems",
                weight=0.18,
                score=0.8,
                reasoning="Integration tasks involve external dependencies and compatibility concerns",
            )

        return ComplexityFactor(
            name="integration_complexity",
            description="No external integration required",
            weight=0.05,
            score=0.2,
            reasoning="Self-contained task with no external dependencies",
        )

    def _heuristic_reasoning(self, factors: List[ComplexityFactor]) -> str:
        top = sorted(factors, key=lambda f: f.score * f.weight, reverse=True)[:3]
        drivers = ", ".join(f"{f.name} ({f.score * 100:.0f}%)" for f in top)
        return (
            f"Primary complexity drivers: {drivers}. "
            "Overall complexity assessment based on multi-factor analysis."
        )

    # ------------------------------------------------------------------
    # Estimation
    # ------------------------------------------------------------------

    async def estimate(
        self,
        task: Task,
        context: Optional[PlanningContext] = None,
        estimator: Optional[PredictiveEstimator] = None,
    ) -> ComplexityEstimate:
        """
        Full estimation pipeline: heuristic analysis plus optional estimator.

        Estimator errors and timeouts are logged and the heuristic-only
        result is returned.

        Args:
            task: Task to estimate
            context: Optional planning context
            estimator: Estimator for this call (defaults to the scorer's)

        Returns:
            ComplexityEstimate
        """
        self.logger.debug(f"Estimating task complexity for '{task.name}' ({task.id})")

        heuristic = self.analyze(task, context)

        estimator = estimator or self.estimator
        estimator_analysis: Optional[EstimatorAnalysis] = None
        if estimator is not None:
            try:
                estimator_analysis = await self._run_estimator(task, estimator)
            except EstimatorUnavailableError as e:
                self.logger.warning(f"Estimator unavailable, using heuristic only: {e}")

        estimate = self.combine(task, heuristic, estimator_analysis)

        self.logger.info(
            f"Task complexity estimated for {task.id}: "
            f"{estimate.estimated_hours:.2f}h (confidence {estimate.confidence:.2f})"
        )

        return estimate

    async def estimate_many(
        self,
        tasks: List[Task],
        context: Optional[PlanningContext] = None,
        estimator: Optional[PredictiveEstimator] = None,
    ) -> List[ComplexityEstimate]:
        """
        Estimate several tasks; a failing task gets a minimal fallback estimate.

        Args:
            tasks: Tasks to estimate
            context: Optional planning context
            estimator: Estimator for these calls

        Returns:
            One estimate per task, in input order
        """
        self.logger.info(f"Estimating complexity for {len(tasks)} tasks")

        estimates: List[ComplexityEstimate] = []
        for task in tasks:
            try:
                estimates.append(await self.estimate(task, context, estimator))
            except Exception as e:
                self.logger.error(f"Failed to estimate task complexity for {task.id}: {e}")
                estimates.append(
                    ComplexityEstimate(
                        task_id=task.id,
                        estimated_hours=task.estimated_hours or 1,
                        confidence=0.1,
                        factors=[],
                        heuristic_analysis=HeuristicAnalysis(
                            algorithm="fallback",
                            factors=[],
                            scoring=0.5,
                            reasoning="Estimation failed, using minimal baseline",
                        ),
                    )
                )

        return estimates

    async def _run_estimator(
        self,
        task: Task,
        estimator: PredictiveEstimator,
    ) -> EstimatorAnalysis:
        """
        Look up similar tasks and call the estimator under one deadline.

        The finder runs in a worker thread so a slow lookup cannot block the
        event loop past the timeout. The estimator's result is validated
        before it leaves the guard.

        Raises:
            EstimatorUnavailableError: On timeout, any estimator or finder
                error, or a malformed estimator result
        """

        async def consult() -> EstimatorAnalysis:
            similar: List[Task] = []
            if self.similar_task_finder is not None:
                found = await asyncio.to_thread(self.similar_task_finder.find, task)
                similar = list(found)[: self.similar_task_limit]

            result = await estimator.estimate(task, similar)
            return EstimatorAnalysis.model_validate(result)

        try:
            return await asyncio.wait_for(consult(), timeout=self.estimator_timeout)
        except asyncio.TimeoutError as e:
            raise EstimatorUnavailableError(
                f"Estimator timed out after {self.estimator_timeout:g}s",
                task_id=task.id,
            ) from e
        except Exception as e:
            raise EstimatorUnavailableError(
                f"Estimator failed: {e}",
                task_id=task.id,
            ) from e

    def combine(
        self,
        task: Task,
        heuristic: HeuristicAnalysis,
        estimator_analysis: Optional[EstimatorAnalysis] = None,
    ) -> ComplexityEstimate:
        """
        Blend heuristic and estimator results into a final estimate.

        With an estimator: hours = h * 0.6 + e * (0.4 * c), confidence blended
        the same way from the heuristic score and the estimator confidence c.
        Hours are clamped to >= 0.5 and confidence to [0.1, 0.95].
        """
        heuristic_hours = self.hours_from_score(task.estimated_hours, heuristic.scoring)

        if estimator_analysis is not None:
            estimator_weight = ESTIMATOR_WEIGHT * estimator_analysis.confidence
            estimator_hours = self.hours_from_score(
                task.estimated_hours, estimator_analysis.confidence * 0.8
            )
            final_hours = heuristic_hours * HEURISTIC_WEIGHT + estimator_hours * estimator_weight
            final_confidence = (
                heuristic.scoring * HEURISTIC_WEIGHT
                + estimator_analysis.confidence * estimator_weight
            )
        else:
            final_hours = heuristic_hours
            final_confidence = heuristic.scoring

        return ComplexityEstimate(
            task_id=task.id,
            estimated_hours=max(0.5, final_hours),
            confidence=max(0.1, min(0.95, final_confidence)),
            factors=list(heuristic.factors),
            heuristic_analysis=heuristic,
            estimator_analysis=estimator_analysis,
        )

    @staticmethod
    def hours_from_score(base_hours: float, complexity_score: float) -> float:
        """Scale base hours by a 0.5x-2.0x multiplier driven by the score."""
        return base_hours * (0.5 + complexity_score * 1.5)

    # ------------------------------------------------------------------
    # Learning from outcomes
    # ------------------------------------------------------------------

    def record_outcome(
        self,
        task: Task,
        actual_complexity: float,
        factors: Optional[List[ComplexityFactor]] = None,
    ) -> int:
        """
        Feed an observed complexity back into the pattern table.

        Args:
            task: Completed task
            actual_complexity: Observed complexity (0-1)
            factors: Factors used for the estimate (task's own if None)

        Returns:
            Version of the published pattern table
        """
        factors = factors if factors is not None else task.complexity_score.factors
        snapshot = self.weight_table.record_outcome(task.category, actual_complexity, factors)

        error = abs(actual_complexity - task.complexity_score.overall)
        self.logger.info(
            f"Complexity outcome recorded for {task.id}: "
            f"estimated={task.complexity_score.overall:.2f}, "
            f"actual={actual_complexity:.2f}, error={error:.2f}"
        )

        return snapshot.version
