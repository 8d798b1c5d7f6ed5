"""
DSATUR (Degree of Saturation) Graph Coloring Algorithm, capped at k colors.

DSATUR is a greedy graph coloring heuristic that selects vertices based on
their "saturation degree" - the number of distinct colors already assigned
to their neighbors.

## Algorithm:
1. Start with all vertices uncolored (color 0)
2. Repeat until all vertices are colored:
   a. Select the uncolored vertex with the highest saturation degree
   b. Break ties by highest degree, then by position in the graph's vertex order
   c. Assign the smallest color (from 1) not used by any neighbor
   d. If that color exceeds k, use instead the color in 1..k held by the
      fewest neighbors (lowest color on ties), accepting conflicts
3. Return the coloring

The first selection (all saturations 0) is the maximum-degree vertex, which
receives color 1.

Ref: https://www.geeksforgeeks.org/dsa/dsatur-algorithm-for-graph-coloring/
"""

import logging
import time
from typing import Optional

from .conflicts import count_conflicts
from .errors import InvalidParameterError
from .graph import Graph
from .results import SolverResult, verify_result

logger = logging.getLogger(__name__)


def color_greedy(graph: Graph, k: int) -> dict[int, int]:
    """
    Color a graph with at most k colors using DSATUR.

    Args:
        graph: Graph to color
        k: Color budget (colors are 1..k)

    Returns:
        Dictionary mapping each vertex to a color in 1..k. The coloring may
        contain conflicts when the graph needs more than k colors.

    Example:
        >>> g = Graph.from_edges([(1, 2), (2, 3)], 3)
        >>> color_greedy(g, 2)  # {1: 2, 2: 1, 3: 2}
    """
    if k < 1:
        raise InvalidParameterError(f"k must be >= 1, got {k}")

    vertices = graph.vertices
    if not vertices:
        return {}

    adjacency = graph.adjacency

    # Track coloring state
    color: dict[int, int] = {v: 0 for v in vertices}  # 0 = uncolored
    neighbor_colors: dict[int, set[int]] = {v: set() for v in vertices}  # saturation tracking

    # Static degrees (for tie-breaking)
    degree = {v: len(adjacency[v]) for v in vertices}

    capped = 0
    for _ in range(len(vertices)):
        # Select vertex with max saturation, break ties by max degree
        best_vertex: Optional[int] = None
        best_saturation = -1
        best_degree = -1

        for v in vertices:
            if color[v] != 0:
                continue  # already colored

            sat = len(neighbor_colors[v])
            deg = degree[v]

            if sat > best_saturation or (sat == best_saturation and deg > best_degree):
                best_vertex = v
                best_saturation = sat
                best_degree = deg

        if best_vertex is None:
            break  # all colored

        # Find smallest available color for best_vertex
        used_colors = neighbor_colors[best_vertex]
        c = 1
        while c in used_colors:
            c += 1

        if c > k:
            c = _least_conflicting_color(best_vertex, adjacency, color, k)
            capped += 1

        # Assign color
        color[best_vertex] = c

        # Update saturation of uncolored neighbors
        for neighbor in adjacency[best_vertex]:
            if color[neighbor] == 0:
                neighbor_colors[neighbor].add(c)

    if capped:
        logger.debug("DSATUR on %s: %d vertices forced into conflicting colors (k=%d)", graph.name, capped, k)

    return color


def _least_conflicting_color(
    vertex: int,
    adjacency: dict[int, frozenset[int]],
    color: dict[int, int],
    k: int,
) -> int:
    """Color in 1..k used by the fewest neighbors of vertex, lowest index on ties."""
    counts = [0] * (k + 1)
    for neighbor in adjacency[vertex]:
        c = color[neighbor]
        if 1 <= c <= k:
            counts[c] += 1

    best_color = 1
    for c in range(2, k + 1):
        if counts[c] < counts[best_color]:
            best_color = c
    return best_color


class DSATURSolver:
    """Deterministic one-shot DSATUR coloring with a k-color cap."""

    def __init__(self, k: int = 3):
        if k < 1:
            raise InvalidParameterError(f"k must be >= 1, got {k}")
        self.k = k

    def solve(self, graph: Graph) -> SolverResult:
        start_time = time.time()
        coloring = color_greedy(graph, self.k)
        conflicts = count_conflicts(graph, coloring)

        return SolverResult.from_runs(
            instance_name=graph.name,
            solver="DSATUR",
            num_vertices=graph.num_vertices,
            num_edges=graph.num_edges,
            k=self.k,
            all_conflicts=[conflicts],
            best_coloring=coloring,
            total_runtime_seconds=time.time() - start_time,
        )

    def get_params(self) -> dict:
        return {"solver": "DSATUR", "k": self.k}

    def verify_solution(self, graph: Graph, result: SolverResult) -> bool:
        return verify_result(graph, result)
