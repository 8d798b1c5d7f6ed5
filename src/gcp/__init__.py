"""
Graph k-Coloring (GCP)

This package provides DSATUR, TabuCol and a hybrid evolutionary algorithm
(HEA) for coloring graphs with k colors while minimizing conflicts.
"""

from .conflicts import (
    coloring_to_pairs,
    conflict_edges,
    conflicted_vertices,
    count_colors,
    count_conflicts,
    local_conflicts,
    verify_coloring,
)
from .dsatur import DSATURSolver, color_greedy
from .errors import InvalidParameterError
from .gpx import color_classes, gpx_crossover
from .graph import Graph, parse_edge_list, random_graph
from .hea import (
    GenerationResult,
    HEASolver,
    HEAState,
    HEAStatus,
    Individual,
    StepOutcome,
    initialize_population,
    step_generation,
    tournament_select,
)
from .params import AlgorithmParams
from .results import SolverResult, verify_result
from .tabu_search import TabuColSolver, refine_with_tabu

__all__ = [
    # Graph
    "Graph",
    "random_graph",
    "parse_edge_list",
    # Configuration and errors
    "AlgorithmParams",
    "InvalidParameterError",
    # Conflict evaluation
    "count_conflicts",
    "local_conflicts",
    "conflicted_vertices",
    "conflict_edges",
    "count_colors",
    "verify_coloring",
    "coloring_to_pairs",
    # DSATUR
    "color_greedy",
    "DSATURSolver",
    # TabuCol
    "refine_with_tabu",
    "TabuColSolver",
    # GPX
    "color_classes",
    "gpx_crossover",
    # HEA
    "Individual",
    "HEAStatus",
    "HEAState",
    "GenerationResult",
    "StepOutcome",
    "initialize_population",
    "step_generation",
    "tournament_select",
    "HEASolver",
    # Results
    "SolverResult",
    "verify_result",
]
