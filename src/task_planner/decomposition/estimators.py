"""Predictive estimator collaborators used by the complexity scorer."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional
from ..models.planning_models import (
    Task,
    TaskCategory,
    EstimatorAnalysis,
    AlternativeEstimate,
)


logger = logging.getLogger(__name__)


class PredictiveEstimator(ABC):
    """
    External estimator consulted on top of the heuristic score.

    Implementations may fail or hang; callers must treat them as best-effort.
    """

    @abstractmethod
    async def estimate(self, task: Task, similar_tasks: List[Task]) -> EstimatorAnalysis:
        """
        Produce an analysis for a task.

        Args:
            task: Task to analyze
            similar_tasks: Historical tasks judged similar

        Returns:
            EstimatorAnalysis with reasoning, confidence and alternatives
        """
        pass


class SimilarTaskFinder(ABC):
    """Read-only lookup of historical tasks similar to a given one."""

    @abstractmethod
    def find(self, task: Task) -> List[Task]:
        """Return a bounded list of similar tasks."""
        pass


class StaticSimilarTaskFinder(SimilarTaskFinder):
    """
    In-memory finder matching on category.

    PATTERN: Bounded, read-only; the task being estimated is never returned
    """

    def __init__(self, history: Optional[Iterable[Task]] = None, limit: int = 5):
        self.history = list(history or [])
        self.limit = limit

    def add(self, task: Task) -> None:
        """Remember a completed task for future lookups."""
        self.history.append(task)

    def find(self, task: Task) -> List[Task]:
        matches = [
            t for t in self.history
            if t.category == task.category and t.id != task.id
        ]
        return matches[: self.limit]


CATEGORY_REASONING: Dict[TaskCategory, str] = {
    TaskCategory.DEVELOPMENT: "Coding complexity varies with feature scope and integration needs.",
    TaskCategory.TESTING: "Testing complexity depends on test coverage requirements and automation level.",
    TaskCategory.DESIGN: "Design complexity relates to stakeholder alignment and iteration cycles.",
    TaskCategory.DEPLOYMENT: "Deployment complexity is influenced by infrastructure dependencies.",
    TaskCategory.DOCUMENTATION: "Documentation complexity varies with audience and technical depth.",
    TaskCategory.ANALYSIS: "Analysis complexity depends on data availability and decision impact.",
    TaskCategory.INTEGRATION: "Integration complexity is driven by external system dependencies.",
    TaskCategory.SECURITY: "Security complexity involves threat modeling and compliance requirements.",
    TaskCategory.PERFORMANCE: "Performance complexity relates to optimization scope and measurement.",
    TaskCategory.MAINTENANCE: "Maintenance complexity depends on system age and documentation quality.",
    TaskCategory.OPTIMIZATION: "Optimization complexity varies with performance goals and constraints.",
    TaskCategory.CONFIGURATION: "Configuration complexity is typically straightforward setup work.",
    TaskCategory.MIGRATION: "Migration complexity involves data transformation and testing scope.",
    TaskCategory.RESEARCH: "Research complexity depends on available information and decision urgency.",
}


class PatternEstimator(PredictiveEstimator):
    """
    Reference estimator based on similarity counts and category patterns.

    Confidence starts at 0.5, gains 0.1 per similar task (up to 0.3) and
    loses 0.1 each for very long dependency lists and many risks.
    """

    def __init__(self, model: str = "pattern"):
        self.model = model
        self.logger = logging.getLogger(__name__)

    async def estimate(self, task: Task, similar_tasks: List[Task]) -> EstimatorAnalysis:
        category_reasoning = CATEGORY_REASONING.get(
            task.category,
            "Task complexity requires detailed analysis of scope and constraints.",
        )
        reasoning = (
            f"Based on pattern analysis and similarity to {len(similar_tasks)} "
            f"previous tasks: {category_reasoning} Task complexity is primarily "
            f"driven by {task.category.value} nature and estimated "
            f"{task.estimated_hours:g} hours of effort."
        )

        alternatives = [
            AlternativeEstimate(
                task_id=similar.id,
                estimated_hours=similar.estimated_hours,
                confidence=0.6,
                scoring=similar.complexity_score.overall,
                reasoning="Estimate based on similar historical task",
            )
            for similar in similar_tasks
        ]

        confidence = self.confidence(task, similar_tasks)
        self.logger.debug(
            f"Pattern estimate for {task.id}: {len(similar_tasks)} similar tasks, "
            f"confidence {confidence:.2f}"
        )

        return EstimatorAnalysis(
            model=self.model,
            reasoning=reasoning,
            confidence=confidence,
            alternatives=alternatives,
            similar_tasks=[t.id for t in similar_tasks],
        )

    def confidence(self, task: Task, similar_tasks: List[Task]) -> float:
        confidence = 0.5
        confidence += min(0.3, len(similar_tasks) * 0.1)

        if len(task.dependencies) > 10:
            confidence -= 0.1
        if len(task.risks) > 5:
            confidence -= 0.1

        return max(0.1, min(0.9, confidence))
