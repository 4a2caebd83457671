"""
KEYMAZE Simulation Module
=========================
Solvers for locked-door mazes.

This module contains:
- bfs_utility: Breadth-first traversal core (nearest key, ranked keys, door-free shortest path)
- astar: Shortest hop route ignoring key availability
- key_requirements: Keys owed along a route
- key_planner: Key-collection detours spliced into a route
- sequential: Orchestrator looping A* / analyzer / planner
- parallel_backtrack: Multi-threaded state-space cross-check
- path_utils: Route dedup, replay and metrics
- solver_comparison: Side-by-side solver benchmarking
"""

from .bfs_utility import (
    Traversal,
    BfsHit,
    breadth_first,
    nearest_key,
    ranked_keys,
    shortest_path_ignoring_doors,
)
from .astar import AStarResult, a_star, heuristic
from .key_requirements import key_cumsum
from .key_planner import PickupPlan, KeyWalker, key_pickup
from .path_utils import ReplayReport, deduplicate_path, replay_path, calculate_backtracking
from .sequential import SolveResult, SequentialSolver, solve_sequential
from .parallel_backtrack import SearchState, ParallelResult, ParallelBacktrackSolver, solve_parallel
from .solver_comparison import SolverMetrics, SolverComparison

__all__ = [
    'Traversal',
    'BfsHit',
    'breadth_first',
    'nearest_key',
    'ranked_keys',
    'shortest_path_ignoring_doors',
    'AStarResult',
    'a_star',
    'heuristic',
    'key_cumsum',
    'PickupPlan',
    'KeyWalker',
    'key_pickup',
    'ReplayReport',
    'deduplicate_path',
    'replay_path',
    'calculate_backtracking',
    'SolveResult',
    'SequentialSolver',
    'solve_sequential',
    'SearchState',
    'ParallelResult',
    'ParallelBacktrackSolver',
    'solve_parallel',
    'SolverMetrics',
    'SolverComparison',
]
