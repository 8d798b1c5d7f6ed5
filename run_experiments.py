#!/usr/bin/env python3
"""
Main script to run graph coloring experiments.

Usage:
    # Run HEA on a single DIMACS instance with 5 colors
    python run_experiments.py --instance instances/myciel5.col -k 6

    # Run on every .col file of a directory (first 5 only)
    python run_experiments.py --dir instances --max-instances 5 -k 8

    # Run on 10 random G(50, 0.3) graphs
    python run_experiments.py --random 50 --edge-prob 0.3 --count 10 --graph-seed 1

    # Run on a hand-written edge list
    python run_experiments.py --edges "((1,2),(2,3),(3,4),(4,1))" --num-vertices 4 -k 2

    # Run DSATUR only
    python run_experiments.py --solver DSATUR --random 30 -k 4

    # Run TabuCol (DSATUR seed + tabu search, default: 1000 iterations per run)
    python run_experiments.py --solver TabuCol --random 30 -k 4 --runs 20 --seed 0

    # Run HEA with custom parameters
    python run_experiments.py --random 80 -k 6 --pop-size 20 --max-iter-hea 200 --max-iter-tabu 100
"""

import argparse
import logging
from pathlib import Path
from typing import Union

from gcp import (
    AlgorithmParams,
    DSATURSolver,
    Graph,
    HEASolver,
    InvalidParameterError,
    TabuColSolver,
    coloring_to_pairs,
    count_colors,
    parse_edge_list,
)
from gcp.runner import ExperimentRunner


def main():
    parser = argparse.ArgumentParser(description="Run graph k-coloring solvers")

    # Instance selection
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--instance", type=Path, help="Path to a single DIMACS .col file")
    group.add_argument("--dir", type=Path, help="Directory of DIMACS .col files")
    group.add_argument("--random", type=int, metavar="N", help="Generate random G(N, p) graphs")
    group.add_argument("--edges", type=str, help="Edge list such as '((1,2),(2,3))'")

    # Graph generation parameters
    parser.add_argument("--edge-prob", type=float, default=0.3, help="Edge probability p for --random (default: 0.3)")
    parser.add_argument("--count", type=int, default=1, help="Number of random graphs (default: 1)")
    parser.add_argument("--graph-seed", type=int, default=None, help="Seed for random graph generation")
    parser.add_argument("--num-vertices", type=int, default=None, help="Number of vertices for --edges")

    # Solver selection
    parser.add_argument(
        "--solver",
        type=str,
        default="HEA",
        choices=["DSATUR", "TabuCol", "HEA"],
        help="Solver type to use (default: HEA)",
    )

    # Algorithm parameters
    defaults = AlgorithmParams()
    parser.add_argument("-k", "--colors", type=int, default=defaults.k, help=f"Number of colors (default: {defaults.k})")
    parser.add_argument(
        "--pop-size", type=int, default=defaults.pop_size, help=f"HEA population size (default: {defaults.pop_size})"
    )
    parser.add_argument(
        "--max-iter-hea",
        type=int,
        default=defaults.max_iter_hea,
        help=f"HEA generation budget (default: {defaults.max_iter_hea})",
    )
    parser.add_argument(
        "--alpha", type=float, default=defaults.alpha, help=f"Reserved DSATUR weighting (default: {defaults.alpha})"
    )
    parser.add_argument(
        "--tabu-tenure", type=int, default=defaults.tabu_tenure, help=f"Tabu tenure (default: {defaults.tabu_tenure})"
    )
    parser.add_argument(
        "--max-iter-tabu",
        type=int,
        default=defaults.max_iter_tabu,
        help=f"TabuCol iterations inside HEA (default: {defaults.max_iter_tabu})",
    )
    parser.add_argument(
        "--tabu-iterations",
        type=int,
        default=1000,
        help="TabuCol iterations for the standalone TabuCol solver (default: 1000)",
    )

    # Common parameters
    parser.add_argument("--runs", type=int, default=1, help="Independent runs per instance (default: 1)")
    parser.add_argument("--seed", type=int, default=None, help="Base random seed (default: None = random)")
    parser.add_argument("--verbose", action="store_true", help="Print detailed solver output")

    # Experiment parameters
    parser.add_argument("--max-instances", type=int, help="Maximum instances to run from --dir (for testing)")
    parser.add_argument(
        "--from-end",
        action="store_true",
        help="Select instances from end of sorted list",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("results"),
        help="Directory for output files",
    )
    parser.add_argument("--output-file", type=str, help="Output CSV filename (default: auto-generated)")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Create solver based on type
    solver: Union[DSATURSolver, TabuColSolver, HEASolver]
    try:
        if args.solver == "DSATUR":
            solver = DSATURSolver(k=args.colors)
        elif args.solver == "TabuCol":
            solver = TabuColSolver(
                k=args.colors,
                max_iter=args.tabu_iterations,
                tabu_tenure=args.tabu_tenure,
                num_runs=args.runs,
                base_seed=args.seed,
            )
        else:
            params = AlgorithmParams(
                k=args.colors,
                pop_size=args.pop_size,
                max_iter_hea=args.max_iter_hea,
                alpha=args.alpha,
                tabu_tenure=args.tabu_tenure,
                max_iter_tabu=args.max_iter_tabu,
            )
            solver = HEASolver(params=params, num_runs=args.runs, base_seed=args.seed)
    except InvalidParameterError as e:
        parser.error(str(e))

    runner = ExperimentRunner(solver, output_dir=args.output_dir)
    csv_path = runner.init_output(args.output_file)

    if args.instance or args.edges:
        # Single graph mode
        if args.instance:
            graph = Graph.from_dimacs(args.instance)
        else:
            if args.num_vertices is None:
                parser.error("--edges requires --num-vertices")
            graph = parse_edge_list(args.edges, args.num_vertices)

        print(f"Running {args.solver} on: {graph}")
        result = runner.run_graph(graph)

        print(f"\nResult ({result.num_runs} runs, k={result.k}):")
        print(f"  Best conflicts: {result.best_conflicts}")
        print(f"  Avg conflicts: {result.avg_conflicts:.2f}")
        print(f"  Std conflicts: {result.std_conflicts:.2f}")
        print(f"  All runs: {result.all_conflicts}")
        if result.best_coloring is not None:
            print(f"  Colors used: {count_colors(result.best_coloring)}")
            print(f"  Coloring: {coloring_to_pairs(result.best_coloring)}")
        if solver.verify_solution(graph, result):
            print("  Best solution verified: VALID")
        else:
            print("  Best solution verified: INVALID!")
        print(f"  Total runtime: {result.total_runtime_seconds:.3f}s")

    elif args.dir:
        runner.run_directory(args.dir, max_instances=args.max_instances, from_end=args.from_end)
        runner.print_table()
        runner.print_summary()

    else:
        runner.run_random(args.random, args.edge_prob, count=args.count, seed=args.graph_seed)
        runner.print_table()
        runner.print_summary()

    print(f"\nResults saved to: {csv_path}")
    runner.save_params_json(csv_path)


if __name__ == "__main__":
    main()
