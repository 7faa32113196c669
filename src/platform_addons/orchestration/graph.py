"""Dependency ordering for resource nodes."""

import heapq
import logging
from collections.abc import Iterable

from platform_addons.orchestration.nodes import ResourceNode
from platform_addons.utils.errors import CycleError, DuplicateNodeError, UnknownDependencyError

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Orders resource nodes so every node follows all of its dependencies."""

    @staticmethod
    def build(nodes: Iterable[ResourceNode]) -> list[ResourceNode]:
        """Produce a deterministic deployment order.

        Independent nodes keep their insertion order, so identical input always
        yields identical output.

        Args:
            nodes: Resource nodes in insertion order

        Returns:
            Nodes in topological order

        Raises:
            DuplicateNodeError: If two nodes share an id
            UnknownDependencyError: If a node references an id not in the set
            CycleError: If dependencies form a cycle (including self-references)
        """
        ordered_input = list(nodes)
        index: dict[str, int] = {}
        for position, node in enumerate(ordered_input):
            if node.id in index:
                raise DuplicateNodeError(node.id)
            index[node.id] = position

        in_degree = [0] * len(ordered_input)
        dependents: list[list[int]] = [[] for _ in ordered_input]
        for position, node in enumerate(ordered_input):
            # A repeated dependency id counts once
            for dep_id in dict.fromkeys(node.depends_on):
                if dep_id not in index:
                    raise UnknownDependencyError(node.id, dep_id)
                dependents[index[dep_id]].append(position)
                in_degree[position] += 1

        # Kahn's algorithm with a min-heap on insertion position
        ready = [position for position, degree in enumerate(in_degree) if degree == 0]
        heapq.heapify(ready)
        result: list[ResourceNode] = []
        while ready:
            position = heapq.heappop(ready)
            result.append(ordered_input[position])
            for dependent in dependents[position]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    heapq.heappush(ready, dependent)

        if len(result) != len(ordered_input):
            remaining = {ordered_input[p].id for p, degree in enumerate(in_degree) if degree > 0}
            raise CycleError(_find_cycle(ordered_input, remaining))

        logger.debug(f"Resolved deployment order: {[node.id for node in result]}")
        return result


def _find_cycle(nodes: list[ResourceNode], remaining: set[str]) -> list[str]:
    """Return one dependency cycle among nodes that could not be ordered.

    Every unordered node has at least one unordered dependency, so walking
    dependencies from any of them must revisit a node.
    """
    by_id = {node.id: node for node in nodes}
    start = next(node.id for node in nodes if node.id in remaining)

    path: list[str] = []
    seen: dict[str, int] = {}
    current = start
    while current not in seen:
        seen[current] = len(path)
        path.append(current)
        current = next(dep for dep in by_id[current].depends_on if dep in remaining)

    return path[seen[current] :] + [current]
