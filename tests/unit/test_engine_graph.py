import pytest

from envs_provisioner.engine.errors import DependencyCycleError
from envs_provisioner.engine.graph import DependencyGraph
from envs_provisioner.engine.pipeline import DEFAULT_CATEGORIES, Category, category_order


def test_topological_order_deterministic() -> None:
    graph = DependencyGraph(nodes=["a", "b", "c"], dependencies={"b": ["a"], "c": ["a"]})
    assert graph.topological_order() == ["a", "b", "c"]


def test_topological_order_ignores_external_deps() -> None:
    graph = DependencyGraph(nodes=["a", "b"], dependencies={"b": ["external"]})
    assert graph.topological_order() == ["a", "b"]


def test_cycle_detection() -> None:
    graph = DependencyGraph(nodes=["a", "b"], dependencies={"a": ["b"], "b": ["a"]})
    with pytest.raises(DependencyCycleError):
        graph.topological_order()


def test_priority_ordering() -> None:
    """Nodes with lower priority come first when no deps constrain order."""
    graph = DependencyGraph(
        nodes=["high", "low"],
        dependencies={},
        priorities={"high": 100, "low": 0},
    )
    assert graph.topological_order() == ["low", "high"]


def test_priority_does_not_override_deps() -> None:
    graph = DependencyGraph(
        nodes=["high", "low"],
        dependencies={"low": ["high"]},
        priorities={"high": 100, "low": 0},
    )
    assert graph.topological_order() == ["high", "low"]


def test_default_category_order() -> None:
    assert [c.name for c in category_order(DEFAULT_CATEGORIES)] == [
        "python_build",
        "pythons",
        "pythons_from_zip",
        "condas",
        "virtual_envs",
        "conda_envs",
        "files",
        "links",
    ]


def test_category_after_beats_priority() -> None:
    categories = [
        Category("late", priority=0, after=("early",)),
        Category("early", priority=50),
    ]
    assert [c.name for c in category_order(categories)] == ["early", "late"]
