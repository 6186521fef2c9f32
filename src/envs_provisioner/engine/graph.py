"""Dependency graph utilities."""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING

from envs_provisioner.engine.errors import DependencyCycleError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class DependencyGraph:
    """A directed graph where nodes must come after the nodes they depend on."""

    def __init__(
        self,
        nodes: Iterable[str],
        dependencies: Mapping[str, Iterable[str]],
        priorities: Mapping[str, int] | None = None,
    ) -> None:
        self._nodes = set(nodes)
        self._priorities = priorities or {}
        # Dependencies on nodes outside the graph are satisfied by definition.
        self._deps: dict[str, set[str]] = {
            node: {d for d in dependencies.get(node, ()) if d in self._nodes}
            for node in self._nodes
        }

    def topological_order(self) -> list[str]:
        """Return deterministic topo order (priority, then lexicographic tie-break)."""
        indegree = {node: len(deps) for node, deps in self._deps.items()}
        dependents: dict[str, set[str]] = {n: set() for n in self._nodes}
        for node, deps in self._deps.items():
            for dep in deps:
                dependents[dep].add(node)

        ready = [(self._priorities.get(n, 0), n) for n, deg in indegree.items() if deg == 0]
        heapq.heapify(ready)

        order: list[str] = []
        while ready:
            _, node = heapq.heappop(ready)
            order.append(node)
            for child in dependents[node]:
                indegree[child] -= 1
                if indegree[child] == 0:
                    heapq.heappush(ready, (self._priorities.get(child, 0), child))

        if len(order) != len(self._nodes):
            raise DependencyCycleError(sorted(self._nodes - set(order)))
        return order
