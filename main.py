"""
KEYMAZE - Main Entry Point
==========================
Load -> Build -> Check -> Solve

Usage:
    # Sequential planner on a labyrinth file (goal = first goal cell)
    python main.py labyrinth.txt --start 0

    # Explicit goal, draw the maze with the route
    python main.py labyrinth.txt --start 0 --goal 47 --show

    # Parallel state-space search only
    python main.py labyrinth.txt --parallel --workers 8

    # Both solvers side by side
    python main.py labyrinth.txt --compare
"""

import argparse
import logging
import sys

from keymaze.core import DEFAULT_COLUMNS, SolverOptions, build_maze_graph
from keymaze.data import LabyrinthFormatError, read_labyrinth
from keymaze.simulation import ParallelBacktrackSolver, SequentialSolver, SolverComparison, replay_path
from keymaze.utils import check_maze, count_elements, goal_connected
from keymaze.visualization import render_labyrinth, render_path

logger = logging.getLogger(__name__)


def build_options(args) -> SolverOptions:
    """Map CLI flags onto a SolverOptions profile."""
    options = SolverOptions.for_profile(args.profile)
    if args.workers:
        options.n_workers = args.workers
    if args.idle_retries:
        options.idle_retry_limit = args.idle_retries
    if args.exhaustive:
        options.exhaustive = True
        options.prune_revisits = True
    return options


def run(args) -> int:
    try:
        grid = read_labyrinth(args.labyrinth, columns=args.columns)
    except (OSError, LabyrinthFormatError) as e:
        logger.error(f"Could not load labyrinth: {e}")
        return 2

    graph = build_maze_graph(grid)
    counts = count_elements(graph)
    logger.info(f"Maze: {counts['nodes']} nodes, {counts['open_edges']} open edges, "
                f"{counts['doors']} doors, {counts['keys']} keys")

    goal = args.goal
    if goal is None:
        goals = graph.goal_nodes()
        if not goals:
            logger.error("Labyrinth has no goal cell; pass --goal")
            return 2
        goal = goals[0]

    is_valid, errors = check_maze(graph, args.start, goal)
    if not is_valid:
        for error in errors:
            logger.warning(error)
        # Out-of-range nodes cannot be solved at all
        if not (0 <= args.start < graph.n_nodes and 0 <= goal < graph.n_nodes):
            return 2
        if not goal_connected(graph, args.start, goal):
            print(f"\nNo route: goal {goal} is not connected to start {args.start}")
            return 1

    options = build_options(args)

    if args.compare:
        results = SolverComparison(graph, options).compare_all(args.start, goal)
        print("\n" + "=" * 60)
        print("SOLVER COMPARISON")
        print("=" * 60)
        for metrics in results.values():
            print(metrics)
        best = [m for m in results.values() if m.success]
        if args.show:
            print(render_labyrinth(grid, best[0].path if best else None))
        return 0 if best else 1

    if args.parallel:
        result = ParallelBacktrackSolver(graph, options).solve(args.start, goal)
        path = result.walk
        print(f"\nParallel search: {'SUCCESS' if result.success else 'FAILED'} "
              f"({result.states_explored} states, {result.n_workers} workers, "
              f"{result.time_taken:.3f}s)")
        success = result.success
    else:
        result = SequentialSolver(graph, options).solve(args.start, goal)
        path = result.path
        print(result.summary())
        success = result.success

    if success:
        replay = replay_path(graph, path, goal)
        if not replay.valid:
            logger.warning(f"Route does not replay: {replay.error_message}")
        print(f"Path ({len(path)} nodes): {render_path(path)}")

    if args.show:
        print(render_labyrinth(grid, path if success else None))

    return 0 if success else 1


def main():
    parser = argparse.ArgumentParser(
        description='KEYMAZE - Locked-door maze solver'
    )

    parser.add_argument(
        'labyrinth', type=str,
        help='Labyrinth text file (one 14-character cell per line)'
    )
    parser.add_argument(
        '--columns', '-c', type=int, default=DEFAULT_COLUMNS,
        help=f'Cells per row (default: {DEFAULT_COLUMNS})'
    )
    parser.add_argument(
        '--start', '-s', type=int, default=0,
        help='Start node (default: 0)'
    )
    parser.add_argument(
        '--goal', '-g', type=int, default=None,
        help='Goal node (default: first goal cell in the file)'
    )
    parser.add_argument(
        '--parallel', '-p', action='store_true',
        help='Use the parallel state-space search instead of the sequential planner'
    )
    parser.add_argument(
        '--compare', action='store_true',
        help='Run both solvers and compare them'
    )
    parser.add_argument(
        '--workers', '-w', type=int, default=0,
        help='Parallel worker threads (default: CPU count)'
    )
    parser.add_argument(
        '--idle-retries', type=int, default=0,
        help='Empty pops before a parallel worker retires'
    )
    parser.add_argument(
        '--exhaustive', action='store_true',
        help='Parallel search: barrier termination and revisit pruning'
    )
    parser.add_argument(
        '--profile', choices=['default', 'legacy', 'exhaustive'], default='default',
        help='Solver profile (default: default)'
    )
    parser.add_argument(
        '--show', action='store_true',
        help='Print ASCII drawing of the labyrinth and route'
    )
    parser.add_argument(
        '--verbose', '-v', action='store_true',
        help='Debug logging'
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    sys.exit(run(args))


if __name__ == "__main__":
    main()
