"""
Solver Comparison - Sequential Planner vs Parallel Search
=========================================================

Runs both solvers on the same maze and reports length, timing and whether
the sequential route survives a fresh replay. The parallel search works as
an independent cross-check of the sequential planner.
"""

import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

from keymaze.core.config import SolverOptions
from keymaze.core.graph_builder import MazeGraph
from keymaze.simulation.parallel_backtrack import ParallelBacktrackSolver
from keymaze.simulation.path_utils import calculate_backtracking, replay_path
from keymaze.simulation.sequential import SequentialSolver

logger = logging.getLogger(__name__)


@dataclass
class SolverMetrics:
    """Performance metrics for a solver."""
    name: str
    success: bool
    path: List[int]
    path_length: int
    time_taken: float  # seconds
    backtracking: float
    replay_valid: bool
    optimality: float = 1.0  # 1.0 = shortest among the compared solvers

    def __str__(self):
        status = "OK" if self.success else "FAILED"
        return (f"[{status}] {self.name}: "
                f"Length={self.path_length}, "
                f"Time={self.time_taken:.3f}s, "
                f"Backtracking={self.backtracking:.2f}, "
                f"Replay={'valid' if self.replay_valid else 'invalid'}, "
                f"Optimality={self.optimality:.2f}x")


class SolverComparison:
    """Run the sequential and parallel solvers side by side."""

    def __init__(self, graph: MazeGraph, options: Optional[SolverOptions] = None):
        self.graph = graph
        self.options = options or SolverOptions()

    def compare_all(self, start: int, goal: int) -> Dict[str, SolverMetrics]:
        """
        Run both solvers and collect metrics.

        Returns:
            Dict mapping solver name to metrics
        """
        logger.info("=== Starting Solver Comparison ===")
        results = {
            'Sequential': self._run_sequential(start, goal),
            'Parallel': self._run_parallel(start, goal),
        }

        successful = [m for m in results.values() if m.success]
        if successful:
            shortest = min(m.path_length for m in successful)
            for metrics in results.values():
                metrics.optimality = metrics.path_length / shortest if metrics.success else float('inf')

        logger.info("=== Comparison Results ===")
        for metrics in results.values():
            logger.info(str(metrics))

        seq, par = results['Sequential'], results['Parallel']
        if seq.success and par.success and par.path_length < seq.path_length:
            logger.info(f"Parallel search found a shorter walk ({par.path_length} < {seq.path_length})")
        return results

    def _metrics(self, name: str, success: bool, path: List[int], elapsed: float, goal: int) -> SolverMetrics:
        replay = replay_path(self.graph, path, goal) if success else None
        return SolverMetrics(
            name=name,
            success=success,
            path=path,
            path_length=len(path),
            time_taken=elapsed,
            backtracking=calculate_backtracking(path),
            replay_valid=bool(replay and replay.valid and replay.reached_goal),
        )

    def _run_sequential(self, start: int, goal: int) -> SolverMetrics:
        t0 = time.perf_counter()
        result = SequentialSolver(self.graph, self.options).solve(start, goal)
        return self._metrics("Sequential", result.success, result.path, time.perf_counter() - t0, goal)

    def _run_parallel(self, start: int, goal: int) -> SolverMetrics:
        t0 = time.perf_counter()
        result = ParallelBacktrackSolver(self.graph, self.options).solve(start, goal)
        return self._metrics("Parallel", result.success, result.walk, time.perf_counter() - t0, goal)
