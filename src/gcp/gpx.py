"""
Greedy Partition Crossover (GPX) for k-colorings.

Builds a child coloring color class by color class. Slot c = 1..k takes,
from parent 1 on odd slots and parent 2 on even slots, the class covering
the most still-unassigned vertices, and gives those vertices color c.
Vertices left over after k slots get a random color.

Unlike the canonical GPX of Galinier & Hao, each slot only looks at one
parent instead of comparing the best classes of both.
"""

import random
from collections.abc import Iterable
from typing import Optional

from .errors import InvalidParameterError


def color_classes(coloring: dict[int, int], k: int) -> dict[int, set[int]]:
    """Partition a coloring into classes for colors 1..k (others are ignored)."""
    classes: dict[int, set[int]] = {c: set() for c in range(1, k + 1)}
    for vertex, color in coloring.items():
        if color in classes:
            classes[color].add(vertex)
    return classes


def gpx_crossover(
    parent1: dict[int, int],
    parent2: dict[int, int],
    k: int,
    vertices: Iterable[int],
    rng: Optional[random.Random] = None,
) -> dict[int, int]:
    """
    Combine two parent colorings into a child coloring.

    Args:
        parent1: First parent coloring (used on odd slots)
        parent2: Second parent coloring (used on even slots)
        k: Number of colors
        vertices: Vertex set of the graph, in its fixed order
        rng: Random number generator for leftover vertices

    Returns:
        New dictionary mapping every vertex to a color in 1..k
    """
    if k < 1:
        raise InvalidParameterError(f"k must be >= 1, got {k}")
    if rng is None:
        rng = random.Random()

    vertices = list(vertices)
    parent_classes = (color_classes(parent1, k), color_classes(parent2, k))

    child: dict[int, int] = {}
    unassigned = set(vertices)

    for c in range(1, k + 1):
        if not unassigned:
            break

        classes = parent_classes[(c - 1) % 2]

        # Largest class restricted to unassigned vertices, lowest color on ties
        best_class: Optional[set[int]] = None
        best_count = -1
        for color in range(1, k + 1):
            count = len(classes[color] & unassigned)
            if count > best_count:
                best_count = count
                best_class = classes[color]

        for vertex in best_class & unassigned:
            child[vertex] = c
        unassigned -= best_class

    # Randomly assign remaining
    for vertex in vertices:
        if vertex in unassigned:
            child[vertex] = rng.randint(1, k)

    return {vertex: child[vertex] for vertex in vertices}
