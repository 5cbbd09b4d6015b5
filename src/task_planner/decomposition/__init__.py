"""Task decomposition subsystem.

This module provides category-driven task breakdown, granularity adjustment,
dependency wiring and validation, and complexity scoring with an optional
predictive estimator.
"""

from .base import BaseDecomposer
from .strategy_registry import StrategyRegistry
from .task_decomposer import TaskDecomposer
from .task_ops import merge_tasks, split_task
from .granularity import GranularityTransformer
from .relationships import (
    RelationshipStrategy,
    SameCategoryChainStrategy,
    NoDependencyStrategy,
    RelationshipBuilder,
)
from .dependency_validator import DependencyGraphValidator
from .weight_table import PatternEntry, WeightTable, WeightTableSnapshot
from .estimators import (
    PredictiveEstimator,
    SimilarTaskFinder,
    StaticSimilarTaskFinder,
    PatternEstimator,
)
from .complexity_scorer import ComplexityScorer

__all__ = [
    "BaseDecomposer",
    "StrategyRegistry",
    "TaskDecomposer",
    "merge_tasks",
    "split_task",
    "GranularityTransformer",
    "RelationshipStrategy",
    "SameCategoryChainStrategy",
    "NoDependencyStrategy",
    "RelationshipBuilder",
    "DependencyGraphValidator",
    "PatternEntry",
    "WeightTable",
    "WeightTableSnapshot",
    "PredictiveEstimator",
    "SimilarTaskFinder",
    "StaticSimilarTaskFinder",
    "PatternEstimator",
    "ComplexityScorer",
]
