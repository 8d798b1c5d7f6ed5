"""
Tabu Search for graph k-coloring (TabuCol).

This module implements the local search from:
"Using tabu search techniques for graph coloring" (Hertz & de Werra, 1987)

The implementation includes:
- refine_with_tabu: TabuCol refinement of a seed coloring with k colors
- select_move: one iteration's move choice (tabu status, aspiration, tie-breaking)
- TabuColSolver: DSATUR seed followed by TabuCol, repeated over several runs

Algorithm overview:
1. Normalize the seed so every color lies in 1..k
2. Each iteration, look at every (conflicted vertex, other color) move:
   - delta = conflicts gained at the new color - conflicts lost at the old one
   - a move is allowed if it is not tabu, or if it would beat the best
     conflict count seen so far (aspiration)
   - apply the allowed move with the smallest delta, then forbid moving the
     vertex back to its old color for `tenure` iterations
3. If every move is tabu, recolor a random conflicted vertex at random
4. Stop when the budget is spent or a conflict-free coloring is found,
   returning the best coloring seen
"""

import logging
import random
import time
from typing import Optional

import numpy as np

from .conflicts import conflicted_vertices, count_conflicts, local_conflicts
from .dsatur import color_greedy
from .errors import InvalidParameterError
from .graph import Graph
from .results import SolverResult, verify_result

logger = logging.getLogger(__name__)


def refine_with_tabu(
    graph: Graph,
    k: int,
    seed: dict[int, int],
    max_iter: int,
    tenure: int,
    rng: Optional[random.Random] = None,
) -> tuple[dict[int, int], int]:
    """
    Reduce the conflicts of a seed coloring with TabuCol.

    Args:
        graph: Graph to color
        k: Number of colors (1..k)
        seed: Starting coloring. Colors outside 1..k (and missing vertices)
              get a uniformly random color. The mapping is not modified.
        max_iter: Iteration budget
        tenure: Base number of iterations a reverse move stays tabu
        rng: Random number generator (default: fresh unseeded generator)

    Returns:
        Tuple of (best coloring seen, its conflict count)
    """
    if k < 1:
        raise InvalidParameterError(f"k must be >= 1, got {k}")
    if max_iter < 1:
        raise InvalidParameterError(f"max_iter must be >= 1, got {max_iter}")
    if tenure < 0:
        raise InvalidParameterError(f"tenure must be >= 0, got {tenure}")
    if rng is None:
        rng = random.Random()

    current: dict[int, int] = {}
    for v in graph.vertices:
        c = seed.get(v, 0)
        if not 1 <= c <= k:
            c = rng.randint(1, k)
        current[v] = c

    current_conflicts = count_conflicts(graph, current)
    best = dict(current)
    best_conflicts = current_conflicts

    # With a single color there is no move to make
    if k == 1 or current_conflicts == 0:
        return best, best_conflicts

    # tabu[i, c] = iteration until which moving vertex i to color c is forbidden
    index = graph.index
    tabu = np.zeros((graph.num_vertices, k + 1), dtype=np.int64)

    iteration = 0
    forced_moves = 0
    for iteration in range(max_iter):
        if best_conflicts == 0:
            break

        conflicted = conflicted_vertices(graph, current)
        if not conflicted:
            break

        best_move = select_move(
            graph, current, conflicted, k, tabu, iteration, current_conflicts, best_conflicts, rng
        )

        if best_move is not None:
            v, old_color, new_color, best_delta = best_move
            current[v] = new_color
            current_conflicts += best_delta
            tabu[index[v], old_color] = iteration + tenure + rng.randint(0, 1)

            if current_conflicts < best_conflicts:
                best_conflicts = current_conflicts
                best = dict(current)
        else:
            # Every move is tabu: random move, conflicts no longer delta-tracked
            v = rng.choice(conflicted)
            current[v] = rng.randint(1, k)
            current_conflicts = count_conflicts(graph, current)
            forced_moves += 1

    logger.debug(
        "TabuCol on %s: best=%d conflicts after %d iterations (%d forced moves)",
        graph.name,
        best_conflicts,
        iteration + 1,
        forced_moves,
    )

    return best, best_conflicts


def select_move(
    graph: Graph,
    current: dict[int, int],
    conflicted: list[int],
    k: int,
    tabu: np.ndarray,
    iteration: int,
    current_conflicts: int,
    best_conflicts: int,
    rng: random.Random,
) -> Optional[tuple[int, int, int, int]]:
    """
    Pick the best admissible 1-move of a TabuCol iteration.

    Moves are scanned vertex by vertex (in the order of `conflicted`), colors
    ascending. Moving v to c is tabu while iteration < tabu[index(v), c],
    unless it would beat best_conflicts. Among admissible moves the smallest
    delta wins; each later move with an equal delta replaces the current
    choice with probability 0.5.

    Returns:
        (vertex, old_color, new_color, delta), or None if every move is tabu
    """
    index = graph.index
    best_move: Optional[tuple[int, int, int, int]] = None

    for v in conflicted:
        old_color = current[v]
        old_local = local_conflicts(graph, current, v, old_color)
        tabu_row = tabu[index[v]]

        for c in range(1, k + 1):
            if c == old_color:
                continue

            delta = local_conflicts(graph, current, v, c) - old_local

            is_tabu = iteration < tabu_row[c]
            aspiration = current_conflicts + delta < best_conflicts
            if is_tabu and not aspiration:
                continue

            if best_move is None or delta < best_move[3]:
                best_move = (v, old_color, c, delta)
            elif delta == best_move[3] and rng.random() < 0.5:
                best_move = (v, old_color, c, delta)

    return best_move


class TabuColSolver:
    """
    TabuCol solver for graph k-coloring.

    Uses a DSATUR construction capped at k colors followed by tabu search on
    the 1-move neighborhood.
    """

    def __init__(
        self,
        k: int = 3,
        max_iter: int = 1000,
        tabu_tenure: int = 5,
        num_runs: int = 1,
        base_seed: Optional[int] = None,
    ):
        """
        Initialize the TabuCol solver.

        Args:
            k: Number of colors
            max_iter: Iteration budget of each tabu search
            tabu_tenure: Base tabu tenure
            num_runs: Number of independent runs for statistical evaluation
            base_seed: Base random seed for reproducibility
        """
        if k < 1:
            raise InvalidParameterError(f"k must be >= 1, got {k}")
        if max_iter < 1:
            raise InvalidParameterError(f"max_iter must be >= 1, got {max_iter}")
        if tabu_tenure < 0:
            raise InvalidParameterError(f"tabu_tenure must be >= 0, got {tabu_tenure}")
        if num_runs < 1:
            raise InvalidParameterError(f"num_runs must be >= 1, got {num_runs}")

        self.k = k
        self.max_iter = max_iter
        self.tabu_tenure = tabu_tenure
        self.num_runs = num_runs
        self.base_seed = base_seed

    def solve(self, graph: Graph) -> SolverResult:
        """
        Color a graph using TabuCol.

        Args:
            graph: The graph to color

        Returns:
            SolverResult with statistics across all runs
        """
        start_time = time.time()

        all_conflicts: list[int] = []
        best_coloring: Optional[dict[int, int]] = None
        best_conflicts: Optional[int] = None

        for run_idx in range(self.num_runs):
            # Set seed for this run
            seed = self.base_seed + run_idx if self.base_seed is not None else None

            coloring, conflicts = self._single_run(graph, seed)
            all_conflicts.append(conflicts)

            if best_conflicts is None or conflicts < best_conflicts:
                best_conflicts = conflicts
                best_coloring = coloring
                logger.info("Run %d/%d: new best = %d conflicts", run_idx + 1, self.num_runs, conflicts)

            if conflicts == 0:
                logger.debug("Run %d/%d found a proper %d-coloring", run_idx + 1, self.num_runs, self.k)

        return SolverResult.from_runs(
            instance_name=graph.name,
            solver="TabuCol",
            num_vertices=graph.num_vertices,
            num_edges=graph.num_edges,
            k=self.k,
            all_conflicts=all_conflicts,
            best_coloring=best_coloring,
            total_runtime_seconds=time.time() - start_time,
        )

    def _single_run(self, graph: Graph, seed: Optional[int]) -> tuple[dict[int, int], int]:
        """Execute a single run."""
        rng = random.Random(seed)
        initial = color_greedy(graph, self.k)
        return refine_with_tabu(graph, self.k, initial, self.max_iter, self.tabu_tenure, rng)

    def get_params(self) -> dict:
        """Get solver parameters as a dictionary."""
        return {
            "solver": "TabuCol",
            "k": self.k,
            "max_iter": self.max_iter,
            "tabu_tenure": self.tabu_tenure,
            "num_runs": self.num_runs,
            "base_seed": self.base_seed,
        }

    def verify_solution(self, graph: Graph, result: SolverResult) -> bool:
        return verify_result(graph, result)
