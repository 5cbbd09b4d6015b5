"""Tests for relationship wiring."""

from task_planner.decomposition import (
    RelationshipBuilder,
    RelationshipStrategy,
    NoDependencyStrategy,
    SameCategoryChainStrategy,
)
from task_planner.models import Task, TaskCategory


def make_tasks():
    return [
        Task(name="dev-1", category=TaskCategory.DEVELOPMENT, estimated_hours=2),
        Task(name="test-1", category=TaskCategory.TESTING, estimated_hours=2),
        Task(name="dev-2", category=TaskCategory.DEVELOPMENT, estimated_hours=2),
        Task(name="dev-3", category=TaskCategory.DEVELOPMENT, estimated_hours=2),
    ]


def test_same_category_chain():
    """Test tasks depend on the previous task of their category."""
    tasks = make_tasks()
    dev1, test1, dev2, dev3 = tasks

    added = SameCategoryChainStrategy().link(tasks)

    assert added == 2
    assert dev1.dependencies == []
    assert test1.dependencies == []
    assert dev2.dependencies == [dev1.id]
    assert dev3.dependencies == [dev2.id]


def test_wire_adds_parent_prerequisite():
    """Test every task gets the parent as a non-blocking prerequisite."""
    tasks = make_tasks()

    RelationshipBuilder().wire(tasks, "parent-id")

    assert all(t.prerequisites == ["parent-id"] for t in tasks)
    assert all("parent-id" not in t.dependencies for t in tasks)


def test_wire_twice_does_not_duplicate():
    tasks = make_tasks()
    builder = RelationshipBuilder()

    builder.wire(tasks, "parent-id")
    builder.wire(tasks, "parent-id")

    assert tasks[2].dependencies == [tasks[0].id]
    assert tasks[0].prerequisites == ["parent-id"]


def test_no_dependency_strategy():
    """Test the parallel strategy leaves tasks independent."""
    tasks = make_tasks()

    RelationshipBuilder(NoDependencyStrategy()).wire(tasks, "parent-id")

    assert all(t.dependencies == [] for t in tasks)
    assert all(t.prerequisites == ["parent-id"] for t in tasks)


def test_custom_strategy():
    """Test the dependency policy is injectable."""

    class ReverseChain(RelationshipStrategy):
        def link(self, tasks):
            for later, earlier in zip(tasks, tasks[1:]):
                later.add_dependency(earlier.id)
            return len(tasks) - 1

    tasks = make_tasks()

    RelationshipBuilder(ReverseChain()).wire(tasks, "parent-id")

    assert tasks[0].dependencies == [tasks[1].id]
    assert tasks[-1].dependencies == []
