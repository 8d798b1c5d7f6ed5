"""Shared graph fixtures for the test suite."""

import itertools

from gcp import Graph


def cycle_graph(n: int) -> Graph:
    return Graph.from_edges([(i, i % n + 1) for i in range(1, n + 1)], n, name=f"cycle{n}")


def complete_graph(n: int) -> Graph:
    return Graph.from_edges(itertools.combinations(range(1, n + 1), 2), n, name=f"complete{n}")


def empty_graph() -> Graph:
    return Graph.from_edges([], 0, name="empty")


def brute_force_conflicts(graph: Graph, coloring: dict[int, int]) -> int:
    """Count conflicts by checking every vertex pair."""
    conflicts = 0
    for u, v in itertools.combinations(graph.vertices, 2):
        if v in graph.adjacency[u] and coloring[u] != 0 and coloring[u] == coloring[v]:
            conflicts += 1
    return conflicts
