"""Multi-run result record shared by the coloring solvers."""

import statistics
from dataclasses import dataclass, field
from typing import Optional

from .conflicts import count_conflicts, verify_coloring
from .graph import Graph


@dataclass
class SolverResult:
    """Result of a coloring solver on one graph.

    Supports both single-run and multi-run evaluation.
    For proper statistical evaluation, use num_runs > 1.
    """

    instance_name: str
    solver: str
    num_vertices: int
    num_edges: int
    k: int
    num_runs: int  # Number of independent runs
    best_conflicts: int  # Best result across all runs
    avg_conflicts: float  # Average conflicts across runs
    std_conflicts: float  # Standard deviation of conflicts (0 if single run)
    total_runtime_seconds: float  # Total time for all runs
    all_conflicts: list[int] = field(default_factory=list)  # Conflicts from each run
    best_coloring: Optional[dict[int, int]] = None  # Best solution coloring

    @property
    def solved(self) -> bool:
        return self.best_conflicts == 0

    @classmethod
    def from_runs(
        cls,
        instance_name: str,
        solver: str,
        num_vertices: int,
        num_edges: int,
        k: int,
        all_conflicts: list[int],
        best_coloring: Optional[dict[int, int]],
        total_runtime_seconds: float,
    ) -> "SolverResult":
        """Compute statistics over the per-run conflict counts."""
        if all_conflicts:
            best = min(all_conflicts)
            avg = statistics.mean(all_conflicts)
            std = statistics.stdev(all_conflicts) if len(all_conflicts) > 1 else 0.0
        else:
            best = 0
            avg = 0.0
            std = 0.0

        return cls(
            instance_name=instance_name,
            solver=solver,
            num_vertices=num_vertices,
            num_edges=num_edges,
            k=k,
            num_runs=len(all_conflicts),
            best_conflicts=best,
            avg_conflicts=avg,
            std_conflicts=std,
            total_runtime_seconds=total_runtime_seconds,
            all_conflicts=list(all_conflicts),
            best_coloring=best_coloring,
        )

    def to_csv_row(self) -> str:
        """Format as CSV row."""
        return ",".join(
            [
                self.instance_name,
                self.solver,
                str(self.num_vertices),
                str(self.num_edges),
                str(self.k),
                str(self.num_runs),
                str(self.best_conflicts),
                f"{self.avg_conflicts:.2f}",
                f"{self.std_conflicts:.2f}",
                f"{self.total_runtime_seconds:.3f}",
            ]
        )

    @staticmethod
    def csv_header() -> str:
        """Return CSV header."""
        return "instance,solver,vertices,edges,k,runs,best,avg,std,total_time_s"


def verify_result(graph: Graph, result: SolverResult) -> bool:
    """
    Verify that a result's best coloring is complete, within 1..k and
    has exactly the reported number of conflicts.

    Args:
        graph: The graph that was colored
        result: The result to verify

    Returns:
        True if the best coloring is consistent with the result
    """
    coloring = result.best_coloring
    if coloring is None:
        return False

    if set(coloring) != set(graph.vertices):
        return False

    if result.solved:
        return verify_coloring(graph, coloring, result.k)

    if any(not 1 <= c <= result.k for c in coloring.values()):
        return False

    return count_conflicts(graph, coloring) == result.best_conflicts
