"""Versioned complexity pattern table with copy-on-write updates."""

import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple
from ..models.planning_models import ComplexityFactor, TaskCategory


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternEntry:
    """A learned complexity pattern for one category."""

    name: str
    weight: float
    score: float
    reasoning: str = ""


@dataclass(frozen=True)
class WeightTableSnapshot:
    """Immutable view of the pattern table at one version."""

    version: int
    patterns: Mapping[TaskCategory, Tuple[PatternEntry, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def for_category(self, category: TaskCategory) -> Tuple[PatternEntry, ...]:
        return self.patterns.get(category, ())

    def weighted_score(self, category: TaskCategory) -> Optional[float]:
        """Weighted mean pattern score for a category, None when unknown."""
        entries = self.for_category(category)
        total_weight = sum(e.weight for e in entries)
        if not entries or total_weight <= 0:
            return None
        return sum(e.score * e.weight for e in entries) / total_weight


DEFAULT_PATTERNS: Dict[TaskCategory, Tuple[PatternEntry, ...]] = {
    TaskCategory.DEVELOPMENT: (
        PatternEntry("code_organization", 0.2, 0.6, "Code structure affects maintainability"),
        PatternEntry("algorithm_complexity", 0.3, 0.7, "Algorithm choice impacts development time"),
        PatternEntry("integration_points", 0.3, 0.8, "External integrations add complexity"),
        PatternEntry("testing_requirements", 0.2, 0.5, "Test coverage affects development effort"),
    ),
    TaskCategory.TESTING: (
        PatternEntry("test_coverage", 0.4, 0.7, "High coverage requirements increase effort"),
        PatternEntry("test_automation", 0.3, 0.6, "Automation setup adds initial complexity"),
        PatternEntry("environment_setup", 0.3, 0.4, "Test environment configuration"),
    ),
}


class WeightTable:
    """
    Holder of the current pattern snapshot.

    PATTERN: Copy-on-write; readers take the current snapshot reference
    without locking, writers build a new snapshot and swap the reference
    CRITICAL: Snapshots are never mutated after publication
    GOTCHA: The writer lock only serializes concurrent updates
    """

    def __init__(
        self,
        patterns: Optional[Mapping[TaskCategory, Iterable[PatternEntry]]] = None,
        learning_rate: float = 0.2,
    ):
        """
        Initialize weight table.

        Args:
            patterns: Initial patterns (built-in defaults if None)
            learning_rate: Share of a new observation blended into a pattern
        """
        initial = DEFAULT_PATTERNS if patterns is None else patterns
        self._snapshot = WeightTableSnapshot(
            version=1,
            patterns=MappingProxyType({c: tuple(p) for c, p in initial.items()}),
        )
        self.learning_rate = learning_rate
        self._write_lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

    @property
    def version(self) -> int:
        return self._snapshot.version

    def snapshot(self) -> WeightTableSnapshot:
        """Current immutable snapshot."""
        return self._snapshot

    def record_outcome(
        self,
        category: TaskCategory,
        actual_complexity: float,
        factors: Iterable[ComplexityFactor],
    ) -> WeightTableSnapshot:
        """
        Blend an observed outcome into the category's patterns.

        Known factors move towards the observation by learning_rate
        (weight towards the factor's weight, score towards the actual
        complexity); unknown factors are appended as-is.

        Args:
            category: Category of the completed task
            actual_complexity: Observed complexity (0-1)
            factors: Factors that were used for the estimate

        Returns:
            The newly published snapshot
        """
        actual = max(0.0, min(1.0, actual_complexity))
        keep = 1.0 - self.learning_rate

        with self._write_lock:
            current = self._snapshot
            entries = list(current.for_category(category))
            index = {entry.name: i for i, entry in enumerate(entries)}

            for factor in factors:
                if factor.name in index:
                    old = entries[index[factor.name]]
                    entries[index[factor.name]] = PatternEntry(
                        name=old.name,
                        weight=old.weight * keep + factor.weight * self.learning_rate,
                        score=old.score * keep + actual * self.learning_rate,
                        reasoning=old.reasoning,
                    )
                else:
                    index[factor.name] = len(entries)
                    entries.append(
                        PatternEntry(
                            name=factor.name,
                            weight=factor.weight,
                            score=factor.score,
                            reasoning=factor.reasoning,
                        )
                    )

            patterns = dict(current.patterns)
            patterns[category] = tuple(entries)
            published = WeightTableSnapshot(
                version=current.version + 1,
                patterns=MappingProxyType(patterns),
            )
            self._snapshot = published

        self.logger.debug(
            f"Updated complexity patterns for {category.value}: "
            f"{len(entries)} patterns, version {published.version}"
        )

        return published
