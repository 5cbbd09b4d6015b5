"""Data models for the task planning engine."""

from pydantic import BaseModel, Field
from typing import Dict, List, Any, Optional
from enum import Enum
from datetime import datetime
from uuid import uuid4


class TaskCategory(str, Enum):
    """Kinds of work a task can represent."""

    ANALYSIS = "analysis"
    DESIGN = "design"
    DEVELOPMENT = "development"
    TESTING = "testing"
    DEPLOYMENT = "deployment"
    DOCUMENTATION = "documentation"
    RESEARCH = "research"
    CONFIGURATION = "configuration"
    MIGRATION = "migration"
    INTEGRATION = "integration"
    OPTIMIZATION = "optimization"
    MAINTENANCE = "maintenance"
    SECURITY = "security"
    PERFORMANCE = "performance"


class Priority(str, Enum):
    """Task priority."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(str, Enum):
    """Status of a task in a plan."""

    NOT_STARTED = "not_started"
    READY = "ready"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    IN_REVIEW = "in_review"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ON_HOLD = "on_hold"


class Granularity(str, Enum):
    """Target size/fan-out policy for a breakdown."""

    VERY_COARSE = "very_coarse"  # weeks
    COARSE = "coarse"  # multi-day
    MEDIUM = "medium"  # daily
    FINE = "fine"  # hourly
    VERY_FINE = "very_fine"  # sub-hourly


class DeliverableType(str, Enum):
    """Kinds of artifact a task produces."""

    CODE = "code"
    DOCUMENTATION = "documentation"
    TEST = "test"
    CONFIGURATION = "configuration"
    DATA = "data"
    IMAGE = "image"
    PRESENTATION = "presentation"
    REPORT = "report"
    INTEGRATION = "integration"
    API = "api"
    SERVICE = "service"


class RiskProbability(str, Enum):
    """Likelihood of a risk materialising."""

    VERY_LOW = "very_low"  # 0-10%
    LOW = "low"  # 10-30%
    MEDIUM = "medium"  # 30-50%
    HIGH = "high"  # 50-70%
    VERY_HIGH = "very_high"  # 70-90%


class RiskImpact(str, Enum):
    """Impact of a risk if it materialises."""

    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    SEVERE = "severe"
    CRITICAL = "critical"


class RiskSeverity(str, Enum):
    """Overall severity classification for a risk."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class SkillLevel(str, Enum):
    """Proficiency required for a skill."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class ToolCategory(str, Enum):
    """Kinds of tooling a task may require."""

    IDE = "ide"
    VERSION_CONTROL = "version_control"
    BUILD_TOOL = "build_tool"
    TESTING = "testing"
    DEPLOYMENT = "deployment"
    MONITORING = "monitoring"
    DESIGN = "design"
    DOCUMENTATION = "documentation"
    COMMUNICATION = "communication"
    PROJECT_MANAGEMENT = "project_management"


class ProjectType(str, Enum):
    """Project type hint supplied with a planning context."""

    WEB_APPLICATION = "web_application"
    MOBILE_APPLICATION = "mobile_application"
    DESKTOP_APPLICATION = "desktop_application"
    API_SERVICE = "api_service"
    LIBRARY = "library"
    CLI_TOOL = "cli_tool"
    DATA_ANALYSIS = "data_analysis"
    MACHINE_LEARNING = "machine_learning"
    DEVOPS = "devops"
    MIGRATION = "migration"
    REFACTORING = "refactoring"
    DOCUMENTATION = "documentation"
    RESEARCH = "research"
    OTHER = "other"


class ComplexityFactor(BaseModel):
    """One named, weighted contributor to an overall complexity number."""

    name: str = Field(description="Factor identifier")
    description: str = Field(default="", description="What was measured")
    weight: float = Field(ge=0, description="Weight in the aggregate score")
    score: float = Field(ge=0, le=1, description="Factor score")
    reasoning: str = Field(default="", description="Why the score was assigned")


class ComplexityScore(BaseModel):
    """Multi-dimensional complexity assessment of a task."""

    overall: float = Field(default=0.5, ge=0, le=1)
    cognitive: float = Field(default=0.5, ge=0, le=1)
    technical: float = Field(default=0.5, ge=0, le=1)
    business: float = Field(default=0.5, ge=0, le=1)
    uncertainty: float = Field(default=0.3, ge=0, le=1)
    dependencies: float = Field(default=0.4, ge=0, le=1)
    factors: List[ComplexityFactor] = Field(default_factory=list)


class Deliverable(BaseModel):
    """An artifact produced by a task."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    type: DeliverableType = Field(default=DeliverableType.CODE)
    format: str = Field(default="standard", description="'complex' marks heavy deliverables")


class Risk(BaseModel):
    """A risk attached to a task."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    description: str = ""
    probability: RiskProbability = RiskProbability.MEDIUM
    impact: RiskImpact = RiskImpact.MODERATE
    severity: RiskSeverity = RiskSeverity.MEDIUM
    mitigation: str = ""


class Skill(BaseModel):
    """A skill needed to carry out a task."""

    name: str
    level: SkillLevel = SkillLevel.INTERMEDIATE
    category: str = "programming"
    required: bool = True


class Tool(BaseModel):
    """A tool needed to carry out a task."""

    name: str
    category: ToolCategory
    required: bool = False


class TaskMetadata(BaseModel):
    """Bookkeeping attached to every task."""

    created_by: str = "task_planner"
    created_at: datetime = Field(default_factory=datetime.now)
    version: int = 1
    tags: List[str] = Field(default_factory=list)
    labels: List[str] = Field(default_factory=list)
    custom_fields: Dict[str, Any] = Field(default_factory=dict)


class Task(BaseModel):
    """A unit of work. Hierarchy is expressed through id lists, never nesting."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Unique task ID")
    name: str = Field(description="Task name/title")
    description: str = Field(default="", description="Detailed task description")
    category: TaskCategory = Field(description="Category used for strategy selection")
    priority: Priority = Field(default=Priority.MEDIUM)
    status: TaskStatus = Field(default=TaskStatus.NOT_STARTED)
    estimated_hours: float = Field(gt=0, description="Estimated effort in hours")

    # Graph relations
    dependencies: List[str] = Field(
        default_factory=list, description="Blocking task IDs that must finish first"
    )
    prerequisites: List[str] = Field(
        default_factory=list, description="Non-blocking provenance IDs (e.g. parent)"
    )
    subtasks: List[str] = Field(default_factory=list, description="Child task IDs")
    depth: int = Field(default=0, ge=0, description="Refinement level below the root")

    # Estimates
    complexity_score: ComplexityScore = Field(default_factory=ComplexityScore)
    confidence: float = Field(default=0.7, ge=0, le=1)

    # Scope
    deliverables: List[Deliverable] = Field(default_factory=list)
    acceptance_criteria: List[str] = Field(default_factory=list)
    test_criteria: List[str] = Field(default_factory=list)
    risks: List[Risk] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)
    tools: List[Tool] = Field(default_factory=list)

    metadata: TaskMetadata = Field(default_factory=TaskMetadata)

    def add_dependency(self, task_id: str) -> None:
        """Append a blocking dependency unless already present."""
        if task_id not in self.dependencies:
            self.dependencies.append(task_id)

    def add_prerequisite(self, task_id: str) -> None:
        """Append a provenance link unless already present."""
        if task_id not in self.prerequisites:
            self.prerequisites.append(task_id)


class PlanningContext(BaseModel):
    """Optional hints that accompany a planning or estimation request."""

    project_type: Optional[ProjectType] = None
    dependency_hints: List[str] = Field(default_factory=list)
    prior_complexity: Optional[ComplexityScore] = None


class ValidationReport(BaseModel):
    """Result of validating a task set as a dependency graph."""

    valid: bool = Field(description="True when no issues were found")
    issues: List[str] = Field(default_factory=list, description="Human-readable issues")
    undersized: List[str] = Field(
        default_factory=list, description="IDs of tasks below the minimum size"
    )
    oversized: List[str] = Field(
        default_factory=list, description="IDs of tasks above the maximum size"
    )
    cycles: List[List[str]] = Field(
        default_factory=list, description="Circular dependency chains"
    )
    dangling: Dict[str, List[str]] = Field(
        default_factory=dict, description="Task ID -> referenced but missing IDs"
    )


class HeuristicAnalysis(BaseModel):
    """Output of the multi-factor heuristic scorer."""

    algorithm: str = "multi_factor_heuristic"
    factors: List[ComplexityFactor] = Field(default_factory=list)
    scoring: float = Field(ge=0, le=1)
    reasoning: str = ""


class AlternativeEstimate(BaseModel):
    """Estimate derived from a similar historical task."""

    task_id: str
    estimated_hours: float
    confidence: float = Field(ge=0, le=1)
    scoring: float = Field(default=0.5, ge=0, le=1)
    reasoning: str = ""


class EstimatorAnalysis(BaseModel):
    """Output of an external predictive estimator."""

    model: str = "external"
    reasoning: str = ""
    confidence: float = Field(ge=0, le=1)
    alternatives: List[AlternativeEstimate] = Field(default_factory=list)
    similar_tasks: List[str] = Field(default_factory=list)


class ComplexityEstimate(BaseModel):
    """Duration and confidence estimate for a single task."""

    task_id: str
    estimated_hours: float = Field(ge=0)
    confidence: float = Field(ge=0, le=1)
    factors: List[ComplexityFactor] = Field(default_factory=list)
    heuristic_analysis: HeuristicAnalysis
    estimator_analysis: Optional[EstimatorAnalysis] = None


class BreakdownResult(BaseModel):
    """Output of a full planning run for one parent task."""

    parent: Task = Field(description="Copy of the parent with subtask IDs filled in")
    tasks: List[Task] = Field(default_factory=list, description="Generated subtasks")
    report: ValidationReport
    depth: int = Field(description="Breakdown depth used for refinement")
    granularity: Granularity
    execution_batches: List[List[str]] = Field(
        default_factory=list,
        description="Batches of task IDs that can run in parallel (valid graphs only)",
    )

    @property
    def total_hours(self) -> float:
        return sum(t.estimated_hours for t in self.tasks)
