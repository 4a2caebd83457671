"""
Solver configuration.

One options object is shared by the sequential planner and the parallel
state-space search so that the CLI and the comparison harness can configure
both from the same place.
"""

import os
from dataclasses import dataclass
from enum import Enum


class AStarOrdering(str, Enum):
    """Open-set ordering used by the heuristic search."""
    COST = "cost"     # (hops, forced doors, heuristic) priority, hop-optimal
    INDEX = "index"   # Legacy max-heap of node indices


@dataclass
class SolverOptions:
    """Configuration options for the solvers.

    Sequential planner:
        astar_ordering: open-set ordering of A*
        max_expansions: A* expansion budget per search (safeguard)
        max_iterations: orchestrator loop budget (A* restarts)

    Parallel search:
        n_workers: worker thread count (default: CPU count)
        idle_retry_limit: consecutive empty pops before a worker retires
        idle_sleep_s: pause between empty pops
        exhaustive: only retire when the frontier is empty AND no worker is busy
        prune_revisits: drop states whose (position, doors, keys) was already expanded
    """
    astar_ordering: AStarOrdering = AStarOrdering.COST
    max_expansions: int = 200000
    max_iterations: int = 1000

    n_workers: int = 0
    idle_retry_limit: int = 200
    idle_sleep_s: float = 0.001
    exhaustive: bool = False
    prune_revisits: bool = False

    def __post_init__(self):
        self.astar_ordering = AStarOrdering(self.astar_ordering)
        if self.n_workers <= 0:
            self.n_workers = os.cpu_count() or 1
        if self.idle_retry_limit < 1:
            raise ValueError("idle_retry_limit must be at least 1")

    @classmethod
    def for_profile(cls, profile: str = "default") -> 'SolverOptions':
        """Factory method for common solver configurations."""
        if profile == "legacy":
            return cls(astar_ordering=AStarOrdering.INDEX)
        elif profile == "exhaustive":
            return cls(exhaustive=True, prune_revisits=True)
        elif profile == "default":
            return cls()
        raise ValueError(f"Unknown solver profile: {profile!r}")
