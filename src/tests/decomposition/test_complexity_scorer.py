"""Tests for complexity scoring and estimation."""

import asyncio
import logging
import random
import time
import pytest
from task_planner.decomposition import (
    ComplexityScorer,
    PredictiveEstimator,
    SimilarTaskFinder,
    PatternEstimator,
    StaticSimilarTaskFinder,
)
from task_planner.models import (
    Task,
    TaskCategory,
    EstimatorAnalysis,
    PlanningContext,
    Deliverable,
    DeliverableType,
    Risk,
    RiskImpact,
    RiskProbability,
    Skill,
    SkillLevel,
    Tool,
    ToolCategory,
)


class FixedEstimator(PredictiveEstimator):
    """Estimator returning a fixed confidence."""

    def __init__(self, confidence: float):
        self.confidence = confidence
        self.calls = 0

    async def estimate(self, task, similar_tasks):
        self.calls += 1
        return EstimatorAnalysis(model="fixed", confidence=self.confidence)


class SlowEstimator(PredictiveEstimator):
    async def estimate(self, task, similar_tasks):
        await asyncio.sleep(5)
        return EstimatorAnalysis(model="slow", confidence=0.9)


class BrokenEstimator(PredictiveEstimator):
    async def estimate(self, task, similar_tasks):
        raise RuntimeError("model offline")


class MalformedEstimator(PredictiveEstimator):
    """Estimator resolving to something that is not an analysis."""

    def __init__(self, result):
        self.result = result

    async def estimate(self, task, similar_tasks):
        return self.result


class SlowFinder(SimilarTaskFinder):
    def find(self, task):
        time.sleep(0.5)
        return []


def bare_configuration_task():
    return Task(name="Set flags", category=TaskCategory.CONFIGURATION, estimated_hours=2)


def heavy_integration_task():
    return Task(
        name="Connect payment provider",
        description="Third-party integration with the payment gateway",
        category=TaskCategory.INTEGRATION,
        estimated_hours=50,
        dependencies=[f"dep-{i}" for i in range(10)],
        risks=[
            Risk(
                name="Provider outage",
                impact=RiskImpact.CRITICAL,
                probability=RiskProbability.HIGH,
            ),
            Risk(
                name="Contract change",
                impact=RiskImpact.CRITICAL,
                probability=RiskProbability.HIGH,
            ),
        ],
        skills=[
            Skill(name="payments", level=SkillLevel.EXPERT),
            Skill(name="security", level=SkillLevel.EXPERT),
        ],
    )


class TestHeuristicScore:
    """Tests for the multi-factor heuristic."""

    def setup_method(self):
        self.scorer = ComplexityScorer()

    def test_simple_configuration_task_scores_low(self):
        score = self.scorer.score(bare_configuration_task())

        assert score.overall < 0.35
        assert score.overall == pytest.approx(0.103)

    def test_heavy_integration_task_scores_high(self):
        score = self.scorer.score(heavy_integration_task())

        assert score.overall > 0.7

    def test_factor_order(self):
        factors = self.scorer.analyze_factors(bare_configuration_task())

        assert [f.name for f in factors] == [
            "task_category",
            "dependency_complexity",
            "deliverable_complexity",
            "skill_complexity",
            "tool_complexity",
            "risk_complexity",
            "task_size",
            "integration_complexity",
        ]

    def test_overall_within_bounds_for_random_tasks(self):
        """Test the weighted sum never leaves [0, 1]."""
        rng = random.Random(99)

        for _ in range(100):
            task = Task(
                name="Random",
                description=rng.choice(["", "integration work"]),
                category=rng.choice(list(TaskCategory)),
                estimated_hours=rng.uniform(0.5, 200),
                dependencies=[f"d{i}" for i in range(rng.randint(0, 20))],
                deliverables=[
                    Deliverable(
                        name=f"del{i}",
                        type=rng.choice(list(DeliverableType)),
                        format=rng.choice(["standard", "complex"]),
                    )
                    for i in range(rng.randint(0, 12))
                ],
                risks=[
                    Risk(
                        name=f"risk{i}",
                        impact=rng.choice(list(RiskImpact)),
                        probability=rng.choice(list(RiskProbability)),
                    )
                    for i in range(rng.randint(0, 8))
                ],
                skills=[
                    Skill(name=f"skill{i}", level=rng.choice(list(SkillLevel)))
                    for i in range(rng.randint(0, 6))
                ],
                tools=[
                    Tool(name=f"tool{i}", category=rng.choice(list(ToolCategory)))
                    for i in range(rng.randint(0, 10))
                ],
            )

            score = self.scorer.score(task)

            assert 0 <= score.overall <= 1
            assert len(score.factors) == 8

    def test_dependency_factor(self):
        task = bare_configuration_task()
        task.dependencies = ["a", "b", "c"]

        factor = self.scorer.analyze_factors(task)[1]

        assert factor.score == pytest.approx(0.4)
        assert factor.weight == 0.12

    def test_context_dependency_hints_count(self):
        task = bare_configuration_task()
        task.dependencies = ["a"]
        context = PlanningContext(dependency_hints=["a", "b"])

        factor = self.scorer.analyze_factors(task, context)[1]

        assert factor.score == pytest.approx(0.3)

    def test_deliverable_factor_counts_complex(self):
        task = bare_configuration_task()
        task.deliverables = [
            Deliverable(name="service", type=DeliverableType.CODE, format="complex"),
            Deliverable(name="slides", type=DeliverableType.PRESENTATION, format="complex"),
        ]

        factor = self.scorer.analyze_factors(task)[2]

        assert factor.score == pytest.approx(0.35)

    def test_skill_factor(self):
        task = bare_configuration_task()
        task.skills = [Skill(name="rust", level=SkillLevel.ADVANCED)]

        factor = self.scorer.analyze_factors(task)[3]

        assert factor.score == pytest.approx(0.58)
        assert factor.weight == 0.13

    def test_empty_skills_and_risks(self):
        factors = self.scorer.analyze_factors(bare_configuration_task())

        assert (factors[3].score, factors[3].weight) == (0.2, 0.08)
        assert (factors[5].score, factors[5].weight) == (0.2, 0.10)

    def test_tool_factor(self):
        task = bare_configuration_task()
        task.tools = [
            Tool(name="editor", category=ToolCategory.IDE),
            Tool(name="git", category=ToolCategory.VERSION_CONTROL),
        ]

        factor = self.scorer.analyze_factors(task)[4]

        assert factor.score == pytest.approx(0.25)

    def test_risk_factor(self):
        task = bare_configuration_task()
        task.risks = [
            Risk(name="typo", impact=RiskImpact.MINOR, probability=RiskProbability.LOW)
        ]

        factor = self.scorer.analyze_factors(task)[5]

        assert factor.score == pytest.approx(0.14)
        assert factor.weight == 0.15

    @pytest.mark.parametrize(
        "hours,expected",
        [(4, 0.2), (4.5, 0.4), (16, 0.4), (40, 0.6), (40.5, 0.8)],
    )
    def test_size_factor(self, hours, expected):
        task = Task(name="Sized", category=TaskCategory.DEVELOPMENT, estimated_hours=hours)

        assert self.scorer.analyze_factors(task)[6].score == expected

    def test_integration_from_deliverable_type(self):
        task = bare_configuration_task()
        task.deliverables = [Deliverable(name="client", type=DeliverableType.API)]

        factor = self.scorer.analyze_factors(task)[7]

        assert (factor.score, factor.weight) == (0.8, 0.18)

    def test_dimensions_use_factors_and_learned_patterns(self):
        """Test technical blends category and learned development patterns."""
        task = Task(name="Feature", category=TaskCategory.DEVELOPMENT, estimated_hours=8)

        score = self.scorer.score(task)

        assert score.technical == pytest.approx((0.6 + 0.67) / 2)
        assert score.cognitive == 0.2
        assert score.uncertainty == 0.2

    def test_analyze_reasoning(self):
        analysis = self.scorer.analyze(heavy_integration_task())

        assert analysis.algorithm == "multi_factor_heuristic"
        assert analysis.reasoning.startswith("Primary complexity drivers: task_category")
        assert analysis.scoring == pytest.approx(self.scorer.score(heavy_integration_task()).overall)


class TestEstimate:
    """Tests for heuristic and estimator blending."""

    @pytest.mark.asyncio
    async def test_heuristic_only(self):
        scorer = ComplexityScorer()
        task = bare_configuration_task()

        estimate = await scorer.estimate(task)

        assert estimate.task_id == task.id
        assert estimate.estimator_analysis is None
        assert estimate.estimated_hours == pytest.approx(2 * (0.5 + 0.103 * 1.5))
        assert estimate.confidence == pytest.approx(0.103)
        assert len(estimate.factors) == 8

    @pytest.mark.asyncio
    async def test_blends_estimator(self):
        """Test the 0.6 / 0.4 * confidence blend."""
        estimator = FixedEstimator(confidence=0.8)
        scorer = ComplexityScorer(estimator=estimator)
        task = heavy_integration_task()
        scoring = scorer.analyze(task).scoring

        estimate = await scorer.estimate(task)

        heuristic_hours = 50 * (0.5 + scoring * 1.5)
        estimator_hours = 50 * (0.5 + 0.8 * 0.8 * 1.5)
        assert estimator.calls == 1
        assert estimate.estimator_analysis.model == "fixed"
        assert estimate.estimated_hours == pytest.approx(
            heuristic_hours * 0.6 + estimator_hours * 0.32
        )
        assert estimate.confidence == pytest.approx(scoring * 0.6 + 0.8 * 0.32)

    @pytest.mark.asyncio
    async def test_estimator_argument_overrides_default(self):
        default = FixedEstimator(confidence=0.5)
        override = FixedEstimator(confidence=0.9)
        scorer = ComplexityScorer(estimator=default)

        estimate = await scorer.estimate(bare_configuration_task(), estimator=override)

        assert default.calls == 0
        assert override.calls == 1
        assert estimate.estimator_analysis.confidence == 0.9

    @pytest.mark.asyncio
    async def test_timeout_falls_back_to_heuristic(self, caplog):
        """Test a hanging estimator is abandoned after the timeout."""
        scorer = ComplexityScorer(estimator=SlowEstimator(), estimator_timeout=0.05)
        task = bare_configuration_task()

        with caplog.at_level(logging.WARNING):
            estimate = await scorer.estimate(task)

        assert estimate.estimator_analysis is None
        assert estimate.confidence == pytest.approx(0.103)
        assert any(
            r.levelno == logging.WARNING and "Estimator unavailable" in r.getMessage()
            for r in caplog.records
        )

    @pytest.mark.asyncio
    async def test_estimator_error_falls_back_to_heuristic(self, caplog):
        scorer = ComplexityScorer(estimator=BrokenEstimator())

        with caplog.at_level(logging.WARNING):
            estimate = await scorer.estimate(bare_configuration_task())

        assert estimate.estimator_analysis is None
        assert any("model offline" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_malformed_estimator_result_falls_back(self, caplog):
        """Test a result that is not an analysis counts as unavailable."""
        scorer = ComplexityScorer(estimator=MalformedEstimator("seven hours"))

        with caplog.at_level(logging.WARNING):
            estimate = await scorer.estimate(bare_configuration_task())

        assert estimate.estimator_analysis is None
        assert estimate.confidence == pytest.approx(0.103)
        assert any("Estimator unavailable" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_out_of_range_estimator_confidence_falls_back(self):
        scorer = ComplexityScorer(estimator=MalformedEstimator({"confidence": 1.5}))

        estimate = await scorer.estimate(bare_configuration_task())

        assert estimate.estimator_analysis is None

    @pytest.mark.asyncio
    async def test_dict_estimator_result_is_coerced(self):
        scorer = ComplexityScorer(estimator=MalformedEstimator({"confidence": 0.5}))

        estimate = await scorer.estimate(bare_configuration_task())

        assert estimate.estimator_analysis.confidence == 0.5
        assert estimate.estimator_analysis.model == "external"

    @pytest.mark.asyncio
    async def test_slow_finder_is_bounded_by_timeout(self):
        """Test the similar task lookup shares the estimator deadline."""
        scorer = ComplexityScorer(
            estimator=FixedEstimator(confidence=0.8),
            similar_task_finder=SlowFinder(),
            estimator_timeout=0.05,
        )

        started = time.monotonic()
        estimate = await scorer.estimate(bare_configuration_task())
        elapsed = time.monotonic() - started

        assert elapsed < 0.4
        assert estimate.estimator_analysis is None

    @pytest.mark.asyncio
    async def test_clamps(self):
        """Test hours are at least 0.5 and confidence at least 0.1."""
        scorer = ComplexityScorer()
        task = Task(name="Blink", category=TaskCategory.CONFIGURATION, estimated_hours=0.1)

        estimate = await scorer.estimate(task)

        assert estimate.estimated_hours == 0.5
        assert estimate.confidence >= 0.1

    @pytest.mark.asyncio
    async def test_similar_tasks_limited(self):
        """Test the finder result is capped before reaching the estimator."""
        history = [
            Task(name=f"old-{i}", category=TaskCategory.CONFIGURATION, estimated_hours=2)
            for i in range(4)
        ]
        scorer = ComplexityScorer(
            estimator=PatternEstimator(),
            similar_task_finder=StaticSimilarTaskFinder(history),
            similar_task_limit=2,
        )

        estimate = await scorer.estimate(bare_configuration_task())

        assert len(estimate.estimator_analysis.similar_tasks) == 2
        assert estimate.estimator_analysis.confidence == pytest.approx(0.7)

    @pytest.mark.asyncio
    async def test_estimate_many_falls_back_per_task(self):
        """Test one failing task does not abort the batch."""

        class FlakyScorer(ComplexityScorer):
            def analyze(self, task, context=None):
                if task.name == "broken":
                    raise ValueError("cannot analyze")
                return super().analyze(task, context)

        scorer = FlakyScorer()
        tasks = [
            bare_configuration_task(),
            Task(name="broken", category=TaskCategory.TESTING, estimated_hours=3),
        ]

        estimates = await scorer.estimate_many(tasks)

        assert len(estimates) == 2
        assert estimates[0].heuristic_analysis.algorithm == "multi_factor_heuristic"
        assert estimates[1].task_id == tasks[1].id
        assert estimates[1].estimated_hours == 3
        assert estimates[1].confidence == 0.1
        assert estimates[1].heuristic_analysis.algorithm == "fallback"


def test_record_outcome_publishes_new_version():
    scorer = ComplexityScorer()
    task = Task(name="Feature", category=TaskCategory.DEVELOPMENT, estimated_hours=8)
    task.complexity_score = scorer.score(task)
    before = scorer.weight_table.snapshot()

    version = scorer.record_outcome(task, actual_complexity=0.9)

    assert version == before.version + 1
    assert scorer.weight_table.snapshot().weighted_score(TaskCategory.DEVELOPMENT) != (
        before.weighted_score(TaskCategory.DEVELOPMENT)
    )
