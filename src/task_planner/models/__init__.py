"""Models package for the task planning engine."""

from .planning_models import (
    TaskCategory,
    Priority,
    TaskStatus,
    Granularity,
    DeliverableType,
    RiskProbability,
    RiskImpact,
    RiskSeverity,
    SkillLevel,
    ToolCategory,
    ProjectType,
    ComplexityFactor,
    ComplexityScore,
    Deliverable,
    Risk,
    Skill,
    Tool,
    TaskMetadata,
    Task,
    PlanningContext,
    ValidationReport,
    HeuristicAnalysis,
    AlternativeEstimate,
    EstimatorAnalysis,
    ComplexityEstimate,
    BreakdownResult,
)

__all__ = [
    # Enumerations
    "TaskCategory",
    "Priority",
    "TaskStatus",
    "Granularity",
    "DeliverableType",
    "RiskProbability",
    "RiskImpact",
    "RiskSeverity",
    "SkillLevel",
    "ToolCategory",
    "ProjectType",
    # Task records
    "ComplexityFactor",
    "ComplexityScore",
    "Deliverable",
    "Risk",
    "Skill",
    "Tool",
    "TaskMetadata",
    "Task",
    "PlanningContext",
    # Results
    "ValidationReport",
    "HeuristicAnalysis",
    "AlternativeEstimate",
    "EstimatorAnalysis",
    "ComplexityEstimate",
    "BreakdownResult",
]
