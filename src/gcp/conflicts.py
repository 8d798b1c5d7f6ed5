"""
Conflict evaluation over colorings.

A conflict is an edge whose two endpoints share the same non-zero color.
Color 0 means "uncolored" and never conflicts.
"""

from typing import Optional

from .graph import Graph


def count_conflicts(graph: Graph, coloring: dict[int, int]) -> int:
    """
    Count conflicting edges in a coloring.

    Args:
        graph: Graph to evaluate
        coloring: Color assignment (missing vertices count as uncolored)

    Returns:
        Number of edges with equal non-zero endpoint colors
    """
    conflicts = 0
    for u, v in graph.edges:
        color = coloring.get(u, 0)
        if color != 0 and color == coloring.get(v, 0):
            conflicts += 1
    return conflicts


def local_conflicts(graph: Graph, coloring: dict[int, int], vertex: int, color: int) -> int:
    """Count neighbors of vertex currently holding color."""
    conflicts = 0
    for neighbor in graph.adjacency[vertex]:
        if coloring.get(neighbor) == color:
            conflicts += 1
    return conflicts


def conflicted_vertices(graph: Graph, coloring: dict[int, int]) -> list[int]:
    """Vertices involved in at least one conflict, in graph order."""
    conflicted = set()
    for u, v in conflict_edges(graph, coloring):
        conflicted.add(u)
        conflicted.add(v)
    return [v for v in graph.vertices if v in conflicted]


def conflict_edges(graph: Graph, coloring: dict[int, int]) -> list[tuple[int, int]]:
    """Get all conflicting edges of a coloring."""
    return [
        (u, v) for u, v in graph.edges if coloring.get(u, 0) != 0 and coloring.get(u) == coloring.get(v)
    ]


def count_colors(coloring: dict[int, int]) -> int:
    """
    Count the number of distinct colors used in a coloring.

    Args:
        coloring: Dictionary mapping vertices to colors

    Returns:
        Number of distinct non-zero colors (0 if empty)
    """
    return len({c for c in coloring.values() if c != 0})


def verify_coloring(graph: Graph, coloring: dict[int, int], k: Optional[int] = None) -> bool:
    """
    Verify that a coloring is complete and proper.

    Args:
        graph: Graph the coloring belongs to
        coloring: Color assignment to verify
        k: If given, every color must also lie in 1..k

    Returns:
        True if every vertex is colored, colors are in range and no edge conflicts
    """
    for v in graph.vertices:
        color = coloring.get(v, 0)
        if color < 1:
            return False  # vertex not colored
        if k is not None and color > k:
            return False

    return count_conflicts(graph, coloring) == 0


def coloring_to_pairs(coloring: dict[int, int]) -> list[tuple[int, int]]:
    """Serialize a coloring as an ordered list of (vertex, color) pairs."""
    return sorted(coloring.items())
