"""
Hybrid Evolutionary Algorithm (HEA) for graph k-coloring.

Implements the population scheme of:
"Hybrid Evolutionary Algorithms for Graph Coloring" (Galinier & Hao, 1999)

## Algorithm:
1. Initialize a population of pop_size individuals: a DSATUR coloring capped
   at k colors, each improved by a short TabuCol run
2. For each generation:
   a. Select two parents by tournament (best of 3 uniform draws)
   b. Combine them with GPX
   c. Improve the child with a short TabuCol run
   d. Replace the worst individual with the child if the child is strictly
      better and no individual already has the child's conflict count
   e. Track the best coloring seen
3. Stop when a conflict-free coloring is found or the generation budget runs out

Generations are driven one at a time through HEAState.advance(), so a caller
can interleave other work (rendering, logging) between generations.
"""

import copy
import logging
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .dsatur import color_greedy
from .errors import InvalidParameterError
from .gpx import gpx_crossover
from .graph import Graph
from .params import AlgorithmParams
from .results import SolverResult, verify_result
from .tabu_search import refine_with_tabu

logger = logging.getLogger(__name__)

TOURNAMENT_SIZE = 3


@dataclass
class Individual:
    """A coloring together with its conflict count."""

    coloring: dict[int, int]
    conflicts: int

    def copy(self) -> "Individual":
        return Individual(coloring=dict(self.coloring), conflicts=self.conflicts)


class HEAStatus(Enum):
    """Lifecycle of an HEA run."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    ITERATING = "iterating"
    CONVERGED = "converged"  # best coloring has no conflicts
    EXHAUSTED = "exhausted"  # generation budget spent

    @property
    def is_terminal(self) -> bool:
        return self in (HEAStatus.CONVERGED, HEAStatus.EXHAUSTED)


@dataclass
class GenerationResult:
    """Outcome of step_generation."""

    population: list[Individual]
    best_coloring: dict[int, int]
    best_conflicts: int
    messages: list[str] = field(default_factory=list)
    replaced_index: Optional[int] = None  # None if the child was discarded


@dataclass
class StepOutcome:
    """What HEAState.advance() reports to its driver."""

    generation: int
    status: HEAStatus
    best_coloring: dict[int, int]
    best_conflicts: int
    messages: list[str] = field(default_factory=list)

    @property
    def terminated(self) -> bool:
        return self.status.is_terminal


def initialize_population(
    graph: Graph,
    params: AlgorithmParams,
    rng: Optional[random.Random] = None,
) -> list[Individual]:
    """
    Build the initial population.

    Every individual starts from the DSATUR coloring and is refined by its
    own TabuCol run, so diversity comes from the tabu search randomness.

    Args:
        graph: Graph to color
        params: Algorithm parameters (k, pop_size, tabu_tenure, max_iter_tabu)
        rng: Random number generator

    Returns:
        List of pop_size independent individuals
    """
    if rng is None:
        rng = random.Random()

    seed = color_greedy(graph, params.k)

    population = []
    for _ in range(params.pop_size):
        coloring, conflicts = refine_with_tabu(
            graph, params.k, seed, params.max_iter_tabu, params.tabu_tenure, rng
        )
        population.append(Individual(coloring=coloring, conflicts=conflicts))

    return population


def best_individual(population: list[Individual]) -> Individual:
    """Individual with the fewest conflicts (first one on ties)."""
    if not population:
        raise ValueError("Population is empty")

    best = population[0]
    for individual in population[1:]:
        if individual.conflicts < best.conflicts:
            best = individual
    return best


def worst_index(population: list[Individual]) -> int:
    """Index of the individual with the most conflicts (first one on ties)."""
    if not population:
        raise ValueError("Population is empty")

    worst_idx = 0
    for idx, individual in enumerate(population):
        if individual.conflicts > population[worst_idx].conflicts:
            worst_idx = idx
    return worst_idx


def tournament_select(
    population: list[Individual],
    rng: random.Random,
    size: int = TOURNAMENT_SIZE,
) -> Individual:
    """Best of `size` individuals drawn uniformly with replacement."""
    if not population:
        raise ValueError("Population is empty")

    winner: Optional[Individual] = None
    for _ in range(size):
        candidate = population[rng.randrange(len(population))]
        if winner is None or candidate.conflicts < winner.conflicts:
            winner = candidate
    return winner


def step_generation(
    population: list[Individual],
    graph: Graph,
    params: AlgorithmParams,
    rng: Optional[random.Random] = None,
    best: Optional[Individual] = None,
) -> GenerationResult:
    """
    Run one HEA generation.

    The input list is left untouched; the returned population is a new list
    in which at most one slot holds the new child.

    Args:
        population: Current population
        graph: Graph being colored
        params: Algorithm parameters
        rng: Random number generator
        best: Best individual tracked so far (default: best of population)

    Returns:
        GenerationResult with the new population, tracked best and messages
    """
    if rng is None:
        rng = random.Random()
    if best is None:
        best = best_individual(population)

    messages: list[str] = []

    # Select parents (Tournament)
    parent1 = tournament_select(population, rng)
    parent2 = tournament_select(population, rng)

    # Crossover
    child_seed = gpx_crossover(parent1.coloring, parent2.coloring, params.k, graph.vertices, rng)

    # Local search (TabuCol)
    child_coloring, child_conflicts = refine_with_tabu(
        graph, params.k, child_seed, params.max_iter_tabu, params.tabu_tenure, rng
    )

    new_population = list(population)

    # Replacement: child takes the worst slot if better and not a duplicate.
    # Duplicates are detected by conflict count only.
    worst_idx = worst_index(new_population)
    worst_conflicts = new_population[worst_idx].conflicts
    is_duplicate = any(ind.conflicts == child_conflicts for ind in new_population)

    replaced_index = None
    if child_conflicts < worst_conflicts and not is_duplicate:
        new_population[worst_idx] = Individual(coloring=child_coloring, conflicts=child_conflicts)
        replaced_index = worst_idx
        messages.append(
            f"Child (conflicts: {child_conflicts}) replaced individual {worst_idx} (conflicts: {worst_conflicts})"
        )
    elif is_duplicate:
        messages.append(f"Child (conflicts: {child_conflicts}) discarded: duplicate conflict count.")
    else:
        messages.append(f"Child (conflicts: {child_conflicts}) discarded: worst is {worst_conflicts}.")

    if child_conflicts < best.conflicts:
        best = Individual(coloring=dict(child_coloring), conflicts=child_conflicts)
        messages.append(f"New best: {child_conflicts} conflicts")

    return GenerationResult(
        population=new_population,
        best_coloring=dict(best.coloring),
        best_conflicts=best.conflicts,
        messages=messages,
        replaced_index=replaced_index,
    )


class HEAState:
    """
    Stepwise HEA run: UNINITIALIZED -> INITIALIZING -> ITERATING -> CONVERGED | EXHAUSTED.

    Owns the population. The first advance() builds the population, each
    later one runs exactly one generation; stopping a run means no longer
    calling it.
    """

    def __init__(self, graph: Graph, params: AlgorithmParams, rng: Optional[random.Random] = None):
        self.graph = graph
        self.params = params
        self.rng = rng if rng is not None else random.Random()

        self.status = HEAStatus.UNINITIALIZED
        self.population: list[Individual] = []
        self.best: Optional[Individual] = None
        self.generation = 0
        self.history: list[int] = []  # best conflicts after init and each generation

    @property
    def terminated(self) -> bool:
        return self.status.is_terminal

    def initialize(self) -> StepOutcome:
        """Build the initial population (restarts the run if called again)."""
        self.status = HEAStatus.INITIALIZING
        self.population = initialize_population(self.graph, self.params, self.rng)
        self.best = best_individual(self.population).copy()
        self.generation = 0
        self.history = [self.best.conflicts]

        messages = [f"Initial best conflicts: {self.best.conflicts}"]
        if self.best.conflicts == 0:
            self.status = HEAStatus.CONVERGED
            messages.append("Optimal solution found in initialization!")
        else:
            self.status = HEAStatus.ITERATING

        logger.debug("HEA on %s initialized: best=%d", self.graph.name, self.best.conflicts)
        return self._outcome(messages)

    def advance(self) -> StepOutcome:
        """
        Make one state transition.

        An uninitialized run builds its population and stops there; later
        calls run one generation each. On a terminated run this does no work
        and only reports the final state.
        """
        if self.status is HEAStatus.UNINITIALIZED:
            return self.initialize()
        if self.terminated:
            return self._outcome([f"HEA already stopped ({self.status.value})."])

        result = step_generation(self.population, self.graph, self.params, self.rng, self.best)
        self.population = result.population
        self.best = Individual(coloring=result.best_coloring, conflicts=result.best_conflicts)
        self.generation += 1
        self.history.append(self.best.conflicts)
        messages = list(result.messages)

        for message in result.messages:
            logger.debug("Generation %d: %s", self.generation, message)

        if self.best.conflicts == 0:
            self.status = HEAStatus.CONVERGED
            messages.append("HEA stopped: optimal solution found!")
        elif self.generation >= self.params.max_iter_hea:
            self.status = HEAStatus.EXHAUSTED
            messages.append("HEA stopped: max iterations reached.")

        if self.terminated:
            logger.info(
                "HEA on %s %s after %d generations: best=%d conflicts",
                self.graph.name,
                self.status.value,
                self.generation,
                self.best.conflicts,
            )

        return self._outcome(messages)

    def run(self, max_generations: Optional[int] = None) -> StepOutcome:
        """
        Initialize if needed, then advance until the run terminates (or
        max_generations more generations ran).

        Args:
            max_generations: Optional cap on the generations run by this call

        Returns:
            Outcome of the last transition
        """
        if max_generations is not None and max_generations < 1:
            raise InvalidParameterError(f"max_generations must be >= 1, got {max_generations}")

        outcome: Optional[StepOutcome] = None
        if self.status is HEAStatus.UNINITIALIZED:
            outcome = self.initialize()

        steps = 0
        while (outcome is None or not outcome.terminated) and (
            max_generations is None or steps < max_generations
        ):
            outcome = self.advance()
            steps += 1
        return outcome

    def clone(self, rng: Optional[random.Random] = None) -> "HEAState":
        """
        Deep copy of the run for independent continuation (e.g. multi-start).

        The graph is immutable and shared. Without an explicit rng the clone
        gets a copy of this run's generator state.
        """
        other = HEAState(self.graph, self.params, rng if rng is not None else copy.deepcopy(self.rng))
        other.status = self.status
        other.population = [ind.copy() for ind in self.population]
        other.best = self.best.copy() if self.best is not None else None
        other.generation = self.generation
        other.history = list(self.history)
        return other

    def _outcome(self, messages: list[str]) -> StepOutcome:
        best = self.best
        return StepOutcome(
            generation=self.generation,
            status=self.status,
            best_coloring=dict(best.coloring) if best is not None else {},
            best_conflicts=best.conflicts if best is not None else 0,
            messages=messages,
        )


class HEASolver:
    """
    HEA solver for graph k-coloring.

    Runs complete HEA searches, repeated num_runs times with seeds
    base_seed + run for statistical evaluation.
    """

    def __init__(
        self,
        params: Optional[AlgorithmParams] = None,
        num_runs: int = 1,
        base_seed: Optional[int] = None,
    ):
        """
        Initialize the HEA solver.

        Args:
            params: Algorithm parameters (default: AlgorithmParams())
            num_runs: Number of independent runs for statistical evaluation
            base_seed: Base random seed for reproducibility
        """
        if num_runs < 1:
            raise InvalidParameterError(f"num_runs must be >= 1, got {num_runs}")

        self.params = params if params is not None else AlgorithmParams()
        self.num_runs = num_runs
        self.base_seed = base_seed

    def solve(self, graph: Graph) -> SolverResult:
        """
        Color a graph using HEA.

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
            seed = self.base_seed + run_idx if self.base_seed is not None else None

            state = HEAState(graph, self.params, random.Random(seed))
            outcome = state.run()
            all_conflicts.append(outcome.best_conflicts)

            if best_conflicts is None or outcome.best_conflicts < best_conflicts:
                best_conflicts = outcome.best_conflicts
                best_coloring = outcome.best_coloring
                logger.info(
                    "Run %d/%d: new best = %d conflicts", run_idx + 1, self.num_runs, outcome.best_conflicts
                )

        return SolverResult.from_runs(
            instance_name=graph.name,
            solver="HEA",
            num_vertices=graph.num_vertices,
            num_edges=graph.num_edges,
            k=self.params.k,
            all_conflicts=all_conflicts,
            best_coloring=best_coloring,
            total_runtime_seconds=time.time() - start_time,
        )

    def get_params(self) -> dict:
        """Get solver parameters as a dictionary."""
        params = {"solver": "HEA"}
        params.update(self.params.to_dict())
        params["num_runs"] = self.num_runs
        params["base_seed"] = self.base_seed
        return params

    def verify_solution(self, graph: Graph, result: SolverResult) -> bool:
        return verify_result(graph, result)
