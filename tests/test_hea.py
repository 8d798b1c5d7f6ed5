"""
Unit tests for the hybrid evolutionary algorithm
"""

import random
import unittest
from unittest.mock import patch

from gcp import (
    AlgorithmParams,
    HEASolver,
    HEAState,
    HEAStatus,
    Individual,
    InvalidParameterError,
    count_conflicts,
    initialize_population,
    random_graph,
    step_generation,
    tournament_select,
)
from tests.helpers import complete_graph, cycle_graph, empty_graph


class FixedRandom:
    """Stand-in generator returning preset indices from randrange."""

    def __init__(self, indices):
        self.indices = list(indices)

    def randrange(self, n):
        return self.indices.pop(0)


class TestAlgorithmParams(unittest.TestCase):
    """Test parameter validation"""

    def test_defaults(self):
        params = AlgorithmParams()
        self.assertEqual(params.k, 3)
        self.assertEqual(params.pop_size, 10)
        self.assertEqual(params.max_iter_hea, 50)
        self.assertEqual(params.tabu_tenure, 5)
        self.assertEqual(params.max_iter_tabu, 20)

    def test_alpha_is_passed_through(self):
        params = AlgorithmParams(alpha=0.75)
        self.assertEqual(params.to_dict()["alpha"], 0.75)

    def test_invalid_values(self):
        for kwargs in (
            {"k": 0},
            {"pop_size": 0},
            {"max_iter_hea": 0},
            {"max_iter_tabu": 0},
            {"tabu_tenure": -1},
        ):
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(InvalidParameterError):
                    AlgorithmParams(**kwargs)

    def test_error_is_value_error(self):
        with self.assertRaises(ValueError):
            AlgorithmParams(k=-3)


class TestPopulation(unittest.TestCase):
    """Test initialization and tournament selection"""

    def test_initialize_population(self):
        graph = random_graph(20, 0.4, seed=3)
        params = AlgorithmParams(k=3, pop_size=6, max_iter_tabu=30)
        population = initialize_population(graph, params, random.Random(1))

        self.assertEqual(len(population), 6)
        for individual in population:
            self.assertEqual(individual.conflicts, count_conflicts(graph, individual.coloring))
            self.assertEqual(set(individual.coloring), set(graph.vertices))
            self.assertTrue(all(1 <= c <= 3 for c in individual.coloring.values()))

        colorings = [id(ind.coloring) for ind in population]
        self.assertEqual(len(set(colorings)), len(colorings))

    def test_empty_graph_population(self):
        """Test an empty graph gives pop_size identical trivial individuals"""
        params = AlgorithmParams(k=2, pop_size=4)
        population = initialize_population(empty_graph(), params, random.Random(0))

        self.assertEqual(len(population), 4)
        for individual in population:
            self.assertEqual(individual, Individual(coloring={}, conflicts=0))

    def test_tournament_keeps_lowest_conflicts(self):
        population = [
            Individual({1: 1}, 5),
            Individual({1: 2}, 1),
            Individual({1: 3}, 3),
        ]
        winner = tournament_select(population, FixedRandom([0, 2, 0]))
        self.assertIs(winner, population[2])

        winner = tournament_select(population, FixedRandom([2, 1, 0]))
        self.assertIs(winner, population[1])

    def test_tournament_single_individual(self):
        population = [Individual({1: 1}, 2)]
        self.assertIs(tournament_select(population, random.Random(0)), population[0])

    def test_individual_copy(self):
        individual = Individual({1: 1, 2: 2}, 0)
        clone = individual.copy()
        clone.coloring[1] = 5
        self.assertEqual(individual.coloring, {1: 1, 2: 2})


class TestStepGeneration(unittest.TestCase):
    """Test selection, replacement and the duplicate guard"""

    def setUp(self):
        self.graph = cycle_graph(4)
        self.params = AlgorithmParams(k=2, pop_size=3, max_iter_tabu=5)
        self.population = [
            Individual({1: 1, 2: 1, 3: 1, 4: 1}, 5),
            Individual({1: 1, 2: 2, 3: 2, 4: 1}, 2),
            Individual({1: 2, 2: 2, 3: 2, 4: 2}, 7),
        ]

    def test_child_replaces_worst(self):
        child = {1: 1, 2: 2, 3: 1, 4: 1}
        with patch("gcp.hea.refine_with_tabu", return_value=(child, 1)):
            result = step_generation(self.population, self.graph, self.params, random.Random(0))

        self.assertEqual(result.replaced_index, 2)
        self.assertEqual(result.population[2], Individual(child, 1))
        self.assertEqual(result.best_conflicts, 1)
        self.assertEqual(result.best_coloring, child)
        self.assertIn("replaced individual 2", result.messages[0])

    def test_duplicate_conflict_count_is_discarded(self):
        """Test a child matching an existing conflict count is not inserted"""
        with patch("gcp.hea.refine_with_tabu", return_value=({1: 2, 2: 1, 3: 1, 4: 2}, 2)):
            result = step_generation(self.population, self.graph, self.params, random.Random(0))

        self.assertIsNone(result.replaced_index)
        self.assertEqual([ind.conflicts for ind in result.population], [5, 2, 7])
        self.assertIn("discarded", result.messages[0])

    def test_child_not_better_than_worst_is_discarded(self):
        with patch("gcp.hea.refine_with_tabu", return_value=({1: 1, 2: 1, 3: 1, 4: 1}, 8)):
            result = step_generation(self.population, self.graph, self.params, random.Random(0))

        self.assertIsNone(result.replaced_index)
        self.assertEqual(result.best_conflicts, 2)

    def test_input_population_is_not_mutated(self):
        before = list(self.population)
        result = step_generation(self.population, self.graph, self.params, random.Random(3))

        self.assertEqual(len(result.population), 3)
        for old, new in zip(before, self.population):
            self.assertIs(old, new)
        self.assertIsNot(result.population, self.population)

    def test_tracked_best_updated_from_rejected_child(self):
        """Test the tracked best follows the child even when it is not inserted"""
        tracked = Individual({1: 1, 2: 1, 3: 1, 4: 1}, 4)
        population = [Individual({1: 1, 2: 1, 3: 1, 4: 1}, 3), Individual({1: 1, 2: 2, 3: 1, 4: 2}, 3)]
        with patch("gcp.hea.refine_with_tabu", return_value=({1: 1, 2: 2, 3: 1, 4: 2}, 3)):
            result = step_generation(population, self.graph, self.params, random.Random(0), best=tracked)

        self.assertIsNone(result.replaced_index)
        self.assertEqual(result.best_conflicts, 3)


class TestHEAState(unittest.TestCase):
    """Test the stepwise HEA driver"""

    def test_converges_at_initialization(self):
        graph = cycle_graph(4)
        state = HEAState(graph, AlgorithmParams(k=2, pop_size=3), random.Random(0))
        self.assertEqual(state.status, HEAStatus.UNINITIALIZED)

        outcome = state.advance()
        self.assertTrue(outcome.terminated)
        self.assertEqual(outcome.status, HEAStatus.CONVERGED)
        self.assertEqual(outcome.best_conflicts, 0)
        self.assertEqual(outcome.generation, 0)

        again = state.advance()
        self.assertTrue(again.terminated)
        self.assertEqual(again.generation, 0)

    def test_first_advance_only_initializes(self):
        """Test each advance() call makes exactly one state transition"""
        graph = complete_graph(6)
        params = AlgorithmParams(k=3, pop_size=3, max_iter_hea=5, max_iter_tabu=5)
        state = HEAState(graph, params, random.Random(0))

        outcome = state.advance()
        self.assertEqual(outcome.status, HEAStatus.ITERATING)
        self.assertEqual(outcome.generation, 0)
        self.assertEqual(len(state.history), 1)
        self.assertEqual(len(state.population), 3)
        self.assertTrue(outcome.messages[0].startswith("Initial best conflicts"))

        outcome = state.advance()
        self.assertEqual(outcome.generation, 1)
        self.assertEqual(len(state.history), 2)

    def test_empty_graph_converges(self):
        state = HEAState(empty_graph(), AlgorithmParams(k=3, pop_size=2), random.Random(0))
        outcome = state.run()
        self.assertEqual(outcome.status, HEAStatus.CONVERGED)
        self.assertEqual(outcome.best_coloring, {})
        self.assertEqual(len(state.population), 2)

    def test_exhausts_budget_on_impossible_instance(self):
        """Test K6 with 3 colors runs the full generation budget"""
        graph = complete_graph(6)
        params = AlgorithmParams(k=3, pop_size=4, max_iter_hea=8, max_iter_tabu=10)
        state = HEAState(graph, params, random.Random(2))
        outcome = state.run()

        self.assertEqual(outcome.status, HEAStatus.EXHAUSTED)
        self.assertEqual(outcome.generation, 8)
        self.assertEqual(outcome.best_conflicts, 3)
        self.assertEqual(count_conflicts(graph, outcome.best_coloring), 3)
        self.assertEqual(len(state.history), 9)

    def test_best_never_increases(self):
        graph = random_graph(30, 0.5, seed=4)
        params = AlgorithmParams(k=4, pop_size=5, max_iter_hea=15, max_iter_tabu=15)
        state = HEAState(graph, params, random.Random(9))

        previous = None
        while not state.terminated:
            outcome = state.advance()
            if previous is not None:
                self.assertLessEqual(outcome.best_conflicts, previous)
            previous = outcome.best_conflicts
            self.assertEqual(count_conflicts(graph, outcome.best_coloring), outcome.best_conflicts)
            self.assertTrue(outcome.messages)

        self.assertEqual(state.history, sorted(state.history, reverse=True))

    def test_run_with_generation_cap(self):
        graph = complete_graph(6)
        params = AlgorithmParams(k=3, pop_size=3, max_iter_hea=20, max_iter_tabu=5)
        state = HEAState(graph, params, random.Random(0))

        outcome = state.run(max_generations=4)
        self.assertEqual(outcome.generation, 4)
        self.assertEqual(outcome.status, HEAStatus.ITERATING)
        self.assertFalse(outcome.terminated)

    def test_reproducible_with_seeded_rng(self):
        graph = random_graph(25, 0.5, seed=6)
        params = AlgorithmParams(k=3, pop_size=4, max_iter_hea=10, max_iter_tabu=10)

        first = HEAState(graph, params, random.Random(11))
        second = HEAState(graph, params, random.Random(11))
        first.run()
        second.run()
        self.assertEqual(first.history, second.history)
        self.assertEqual(first.best, second.best)

    def test_clone_is_independent(self):
        graph = complete_graph(6)
        params = AlgorithmParams(k=3, pop_size=3, max_iter_hea=10, max_iter_tabu=5)
        state = HEAState(graph, params, random.Random(1))
        state.initialize()

        clone = state.clone()
        self.assertIsNot(clone.population[0].coloring, state.population[0].coloring)

        clone_outcome = clone.advance()
        self.assertEqual(clone.generation, 1)
        self.assertEqual(state.generation, 0)

        # Same generator state, same generation
        state_outcome = state.advance()
        self.assertEqual(state_outcome.best_conflicts, clone_outcome.best_conflicts)
        self.assertEqual(
            [ind.conflicts for ind in state.population],
            [ind.conflicts for ind in clone.population],
        )

    def test_invalid_generation_cap(self):
        state = HEAState(cycle_graph(4), AlgorithmParams(k=2))
        with self.assertRaises(InvalidParameterError):
            state.run(max_generations=0)


class TestHEASolver(unittest.TestCase):
    """Test the multi-run HEA solver"""

    def test_solve(self):
        graph = random_graph(20, 0.3, seed=12)
        params = AlgorithmParams(k=4, pop_size=4, max_iter_hea=5, max_iter_tabu=20)
        solver = HEASolver(params=params, num_runs=2, base_seed=3)
        result = solver.solve(graph)

        self.assertEqual(result.solver, "HEA")
        self.assertEqual(result.num_runs, 2)
        self.assertEqual(result.k, 4)
        self.assertTrue(solver.verify_solution(graph, result))

    def test_get_params(self):
        params = HEASolver(AlgorithmParams(alpha=1.5), num_runs=3, base_seed=0).get_params()
        self.assertEqual(params["solver"], "HEA")
        self.assertEqual(params["alpha"], 1.5)
        self.assertEqual(params["num_runs"], 3)

    def test_invalid_runs(self):
        with self.assertRaises(InvalidParameterError):
            HEASolver(num_runs=0)


if __name__ == "__main__":
    unittest.main()
