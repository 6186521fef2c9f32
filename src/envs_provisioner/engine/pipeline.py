"""Provisioning categories and the order they run in."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from envs_provisioner.engine.graph import DependencyGraph

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True)
class Category:
    """A group of resources sharing a provisioning strategy.

    ``after`` lists the categories whose resources must be provisioned first;
    ``priority`` only breaks ties between unrelated categories.
    """

    name: str
    after: tuple[str, ...] = ()
    priority: int = 100


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category("python_build", priority=0),
    Category("pythons", after=("python_build",), priority=10),
    Category("pythons_from_zip", priority=20),
    Category("condas", priority=30),
    Category("virtual_envs", after=("pythons", "pythons_from_zip", "condas"), priority=40),
    Category("conda_envs", after=("condas",), priority=50),
    Category("files", priority=60),
    Category("links", priority=70),
)


def category_order(categories: Iterable[Category]) -> list[Category]:
    """Topological order of *categories* according to their ``after`` declarations."""
    by_name = {c.name: c for c in categories}
    graph = DependencyGraph(
        by_name,
        {name: c.after for name, c in by_name.items()},
        priorities={name: c.priority for name, c in by_name.items()},
    )
    return [by_name[name] for name in graph.topological_order()]
