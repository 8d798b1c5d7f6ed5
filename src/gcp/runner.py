"""
Experiment runner for graph coloring instances.

Supports DSATUR, TabuCol and HEA solvers with a unified interface.
"""

import csv
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol, Union

from .dsatur import DSATURSolver
from .graph import Graph, random_graph
from .hea import HEASolver
from .results import SolverResult
from .tabu_search import TabuColSolver


class Solver(Protocol):
    """Protocol for coloring solvers."""

    def solve(self, graph: Graph) -> SolverResult: ...
    def verify_solution(self, graph: Graph, result: SolverResult) -> bool: ...
    def get_params(self) -> dict: ...


class ExperimentRunner:
    """Runs experiments on graphs and collects results.

    Results are appended to the CSV file as they come in once init_output()
    has been called.
    """

    def __init__(
        self,
        solver: Union[DSATURSolver, TabuColSolver, HEASolver],
        output_dir: Optional[Path] = None,
    ):
        """
        Initialize the experiment runner.

        Args:
            solver: The coloring solver to use (DSATURSolver, TabuColSolver or HEASolver)
            output_dir: Directory for output files (default: current directory)
        """
        self.solver = solver
        self.output_dir = Path(output_dir) if output_dir else Path.cwd()
        self.results: list[SolverResult] = []
        self.csv_path: Optional[Path] = None
        self._solver_type = solver.get_params()["solver"]

    def init_output(self, filename: Optional[str] = None) -> Path:
        """
        Create the CSV output file with its header.

        Args:
            filename: Output filename (default: results_SOLVER_TIMESTAMP.csv)

        Returns:
            Path to the CSV file
        """
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"results_{self._solver_type}_{timestamp}.csv"

        self.csv_path = self.output_dir / filename
        self.csv_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.csv_path, "w", newline="") as f:
            f.write(SolverResult.csv_header() + "\n")

        return self.csv_path

    def _append_result_csv(self, result: SolverResult) -> None:
        """Append one result row to the CSV file, if output was initialized."""
        if self.csv_path is None:
            return
        with open(self.csv_path, "a", newline="") as f:
            f.write(result.to_csv_row() + "\n")

    def run_graph(self, graph: Graph) -> SolverResult:
        """Run solver on a single graph."""
        result = self.solver.solve(graph)
        self.results.append(result)
        self._append_result_csv(result)
        return result

    def run_instance(self, filepath: Path) -> SolverResult:
        """Run solver on a single DIMACS instance file."""
        return self.run_graph(Graph.from_dimacs(filepath))

    def run_directory(
        self,
        directory: Path,
        pattern: str = "*.col",
        max_instances: Optional[int] = None,
        from_end: bool = False,
    ) -> list[SolverResult]:
        """
        Run solver on all instances in a directory.

        Args:
            directory: Directory containing instance files
            pattern: Glob pattern for instance files
            max_instances: Maximum number of instances to run (for testing)
            from_end: If True, select instances from the end of the sorted list

        Returns:
            List of results
        """
        directory = Path(directory)
        files = sorted(directory.glob(pattern))

        if max_instances:
            if from_end:
                files = files[-max_instances:]
            else:
                files = files[:max_instances]

        results = []
        for i, filepath in enumerate(files):
            print(f"[{i + 1}/{len(files)}] Processing {filepath.name}...", end=" ")
            sys.stdout.flush()

            try:
                result = self.run_instance(filepath)
                self._print_result_line(result)
            except (OSError, ValueError) as e:
                print(f"ERROR: {e}")
                continue

            results.append(result)

        return results

    def run_random(
        self,
        n: int,
        p: float,
        count: int = 1,
        seed: Optional[int] = None,
    ) -> list[SolverResult]:
        """
        Run solver on randomly generated G(n, p) graphs.

        Args:
            n: Number of vertices
            p: Edge probability
            count: Number of graphs to generate
            seed: Base seed; graph i uses seed + i

        Returns:
            List of results
        """
        results = []
        for i in range(count):
            graph_seed = seed + i if seed is not None else None
            graph = random_graph(n, p, seed=graph_seed, name=f"gnp_n{n}_p{p}_g{i}")

            print(f"[{i + 1}/{count}] Processing {graph}...", end=" ")
            sys.stdout.flush()

            result = self.run_graph(graph)
            self._print_result_line(result)
            results.append(result)

        return results

    def _print_result_line(self, result: SolverResult) -> None:
        """Print a single result line."""
        print(
            f"best={result.best_conflicts}, avg={result.avg_conflicts:.2f}, "
            f"std={result.std_conflicts:.2f} in {result.total_runtime_seconds:.2f}s"
        )

    def save_results_csv(self, filename: Optional[str] = None) -> Path:
        """
        Save all results to a CSV file.

        Args:
            filename: Output filename (default: results_SOLVER_TIMESTAMP.csv)

        Returns:
            Path to the saved file
        """
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"results_{self._solver_type}_{timestamp}.csv"

        filepath = self.output_dir / filename
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(SolverResult.csv_header().split(","))
            for result in self.results:
                writer.writerow(result.to_csv_row().split(","))

        print(f"\nResults saved to: {filepath}")
        return filepath

    def save_params_json(self, csv_filepath: Path) -> Path:
        """
        Save solver parameters to a JSON file alongside the CSV.

        Args:
            csv_filepath: Path to the CSV file (JSON will be saved with same name)

        Returns:
            Path to the saved JSON file
        """
        json_filepath = Path(csv_filepath).with_suffix(".json")

        params = self.solver.get_params()
        params["timestamp"] = datetime.now().isoformat()
        params["num_instances"] = len(self.results)

        with open(json_filepath, "w") as f:
            json.dump(params, f, indent=2)

        print(f"Parameters saved to: {json_filepath}")
        return json_filepath

    def print_summary(self):
        """Print a summary of results."""
        if not self.results:
            print("No results to summarize.")
            return

        print(f"\n{'=' * 60}")
        print("SUMMARY")
        print(f"{'=' * 60}")

        total = len(self.results)
        solved = sum(1 for r in self.results if r.solved)
        avg_best = sum(r.best_conflicts for r in self.results) / total
        avg_avg = sum(r.avg_conflicts for r in self.results) / total
        avg_time = sum(r.total_runtime_seconds for r in self.results) / total

        print(f"Solver: {self._solver_type}")
        print(f"Total instances: {total}")
        print(f"Runs per instance: {self.results[0].num_runs}")
        print(f"  Conflict-free: {solved} ({100 * solved / total:.1f}%)")
        print(f"Avg best conflicts: {avg_best:.2f}")
        print(f"Avg avg conflicts: {avg_avg:.2f}")
        print(f"Avg time per instance: {avg_time:.2f}s")

    def print_table(self):
        """Print results as a formatted table."""
        if not self.results:
            print("No results to display.")
            return

        print(
            f"\n{'Instance':<25} {'V':>5} {'E':>6} {'k':>4} "
            f"{'Runs':>5} {'Best':>5} {'Avg':>7} {'Std':>6} {'Time':>8}"
        )
        print("-" * 85)

        for r in self.results:
            print(
                f"{r.instance_name:<25} {r.num_vertices:>5} {r.num_edges:>6} "
                f"{r.k:>4} {r.num_runs:>5} {r.best_conflicts:>5} "
                f"{r.avg_conflicts:>7.2f} {r.std_conflicts:>6.2f} {r.total_runtime_seconds:>7.2f}s"
            )
