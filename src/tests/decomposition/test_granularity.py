"""Tests for granularity transformation."""

import math
import random
import pytest
from task_planner.decomposition import GranularityTransformer, split_task
from task_planner.models import Task, TaskCategory, Granularity


def make_task(name, category, hours):
    return Task(name=name, category=category, estimated_hours=hours)


class TestGranularityTransformer:
    """Tests for merge/split passes."""

    def setup_method(self):
        self.transformer = GranularityTransformer()
        self.tasks = [
            make_task("dev-a", TaskCategory.DEVELOPMENT, 1),
            make_task("dev-b", TaskCategory.DEVELOPMENT, 2),
            make_task("dev-c", TaskCategory.DEVELOPMENT, 5),
            make_task("test-a", TaskCategory.TESTING, 1),
        ]

    def test_medium_is_identity(self):
        result = self.transformer.apply(self.tasks, Granularity.MEDIUM)

        assert [t.id for t in result] == [t.id for t in self.tasks]

    def test_coarse_merges_same_bucket(self):
        """Test coarse buckets by category and 4-hour size band."""
        result = self.transformer.apply(self.tasks, Granularity.COARSE)

        assert len(result) == 3
        assert result[0].name == "dev-a"
        assert result[0].estimated_hours == 3
        assert result[0].id not in {t.id for t in self.tasks}
        assert result[1].id == self.tasks[2].id
        assert result[2].id == self.tasks[3].id

    def test_very_coarse_uses_wider_buckets(self):
        result = self.transformer.apply(self.tasks, Granularity.VERY_COARSE)

        assert len(result) == 2
        assert result[0].estimated_hours == 8
        assert result[1].category == TaskCategory.TESTING

    def test_coarse_conserves_total_hours(self):
        rng = random.Random(7)
        tasks = [
            make_task(
                f"t{i}",
                rng.choice([TaskCategory.DEVELOPMENT, TaskCategory.TESTING]),
                rng.uniform(0.5, 20),
            )
            for i in range(30)
        ]

        result = self.transformer.apply(tasks, Granularity.VERY_COARSE)

        assert sum(t.estimated_hours for t in result) == pytest.approx(
            sum(t.estimated_hours for t in tasks)
        )

    def test_fine_splits_above_threshold(self):
        """Test fine splits tasks over 4 hours into 2-hour parts."""
        tasks = [
            make_task("Big", TaskCategory.DEVELOPMENT, 5),
            make_task("Edge", TaskCategory.DEVELOPMENT, 4),
        ]

        result = self.transformer.apply(tasks, Granularity.FINE)

        assert [t.name for t in result] == [
            "Big (Part 1)",
            "Big (Part 2)",
            "Big (Part 3)",
            "Edge",
        ]
        assert result[0].estimated_hours == pytest.approx(5 / 3)
        assert result[3].id == tasks[1].id

    def test_very_fine_uses_steps(self):
        tasks = [
            make_task("Write", TaskCategory.DOCUMENTATION, 2.5),
            make_task("Tiny", TaskCategory.DOCUMENTATION, 1),
        ]

        result = self.transformer.apply(tasks, Granularity.VERY_FINE)

        assert [t.name for t in result] == [
            "Write (Step 1)",
            "Write (Step 2)",
            "Write (Step 3)",
            "Tiny",
        ]

    def test_accepts_string_preference(self):
        result = self.transformer.apply(self.tasks, "medium")
        assert len(result) == len(self.tasks)

    def test_inputs_not_mutated(self):
        before = [(t.id, t.name, t.estimated_hours) for t in self.tasks]

        self.transformer.apply(self.tasks, Granularity.COARSE)
        self.transformer.apply(self.tasks, Granularity.VERY_FINE)

        assert [(t.id, t.name, t.estimated_hours) for t in self.tasks] == before


def test_split_count_and_bounds():
    """Test split produces ceil(hours / max_part) parts within bounds."""
    rng = random.Random(1234)

    for _ in range(100):
        hours = rng.uniform(0.1, 60)
        max_part = rng.choice([1.0, 2.0])
        task = make_task("Work", TaskCategory.DEVELOPMENT, hours)

        parts = split_task(task, max_part)

        assert len(parts) == math.ceil(hours / max_part)
        assert all(p.estimated_hours <= max_part for p in parts)
        assert sum(p.estimated_hours for p in parts) == pytest.approx(hours)
        assert len({p.id for p in parts} | {task.id}) == len(parts) + 1
        assert all(p.subtasks == [] for p in parts)


def test_split_rejects_non_positive_part():
    task = make_task("Work", TaskCategory.DEVELOPMENT, 3)

    with pytest.raises(ValueError):
        split_task(task, 0)
