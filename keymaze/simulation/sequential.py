"""
Sequential Orchestrator
=======================

Deterministic single-threaded solver:

    loop:
        A*                  route from the current node to the goal (doors ignored)
        key_cumsum          keys owed at every position of that route
        key_pickup          walk the route, splicing key detours in
        no detour           -> the route is final, stop
        detour              -> keep the walked part, restart A* from its end

Opened doors and collected keys persist in the solver's own working copies
of the matrix and key vector across iterations of one solve, so a restart
sees the doors it already paid for. Each solve starts from fresh copies.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from keymaze.core.config import SolverOptions
from keymaze.core.definitions import FailureKind
from keymaze.core.graph_builder import MazeGraph
from keymaze.simulation.astar import a_star
from keymaze.simulation.key_planner import key_pickup
from keymaze.simulation.key_requirements import key_cumsum
from keymaze.simulation.path_utils import deduplicate_path

logger = logging.getLogger(__name__)


@dataclass
class SolveResult:
    """Result of a sequential solve."""
    success: bool
    path: List[int] = field(default_factory=list)
    failure: Optional[FailureKind] = None
    iterations: int = 0
    keys_collected: int = 0
    doors_opened: int = 0
    final_inventory: int = 0
    time_taken_ms: float = 0.0

    def summary(self) -> str:
        """Human-readable summary of the solve."""
        status = "SUCCESS" if self.success else f"FAILED: {self.failure.value if self.failure else 'unknown'}"
        return f"""
=== Sequential Solve ===
Status: {status}
Path Length: {len(self.path)}
Iterations: {self.iterations}
Keys Collected: {self.keys_collected}
Doors Opened: {self.doors_opened}
Time Taken: {self.time_taken_ms:.1f}ms
========================"""


class SequentialSolver:
    """
    A* + key-requirement analysis + key-pickup planning, repeated until a
    key-sufficient route reaches the goal.

    After `solve`, `maze` and `keys` hold the working state of that run
    (doors opened, keys still lying around).
    """

    def __init__(self, graph: MazeGraph, options: Optional[SolverOptions] = None):
        self.graph = graph
        self.options = options or SolverOptions()
        self.maze: Optional[np.ndarray] = None
        self.keys: Optional[np.ndarray] = None

    def solve(self, start: int, goal: int) -> SolveResult:
        """
        Find a key-feasible route from start to goal.

        Returns:
            SolveResult with the deduplicated node path, or a failure kind
        """
        self.graph.check_node(start)
        self.graph.check_node(goal)

        t0 = time.perf_counter()
        self.maze = self.graph.copy_matrix()
        self.keys = self.graph.copy_keys()

        inventory = 0
        keys_collected = 0
        doors_opened = 0
        whole_path: List[int] = []
        current = start

        def finish(success: bool, failure: Optional[FailureKind], iterations: int) -> SolveResult:
            result = SolveResult(
                success=success,
                path=deduplicate_path(whole_path) if success else [],
                failure=failure,
                iterations=iterations,
                keys_collected=keys_collected,
                doors_opened=doors_opened,
                final_inventory=inventory,
                time_taken_ms=(time.perf_counter() - t0) * 1000.0,
            )
            if success:
                logger.info(f"Sequential: solved {start}->{goal}, path length {len(result.path)}, "
                            f"{iterations} iteration(s)")
            else:
                logger.warning(f"Sequential: {start}->{goal} failed ({failure.value}) "
                               f"after {iterations} iteration(s)")
            return result

        for iteration in range(1, self.options.max_iterations + 1):
            ideal = a_star(current, goal, self.maze, self.graph.columns,
                           ordering=self.options.astar_ordering,
                           max_expansions=self.options.max_expansions)
            if ideal is None:
                return finish(False, FailureKind.NO_PATH_FOUND, iteration)

            requirement = key_cumsum(ideal.path, ideal.forced, self.keys)
            plan = key_pickup(ideal.path, requirement, self.maze, self.keys, inventory)
            if plan is None:
                return finish(False, FailureKind.KEY_UNREACHABLE, iteration)

            inventory = plan.inventory
            keys_collected += plan.keys_collected
            doors_opened += plan.doors_opened

            if not plan.has_detour:
                whole_path.extend(ideal.path)
                return finish(True, None, iteration)

            logger.debug(f"Iteration {iteration}: detour ends at {plan.path[-1]}, inventory={inventory}")
            current = plan.path[-1]
            whole_path.extend(plan.path)

        logger.warning(f"Sequential: iteration budget ({self.options.max_iterations}) exhausted")
        return finish(False, FailureKind.NO_PATH_FOUND, self.options.max_iterations)


def solve_sequential(graph: MazeGraph, start: int, goal: int,
                     options: Optional[SolverOptions] = None) -> SolveResult:
    """Convenience wrapper: one SequentialSolver run."""
    return SequentialSolver(graph, options).solve(start, goal)
