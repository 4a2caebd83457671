"""
Parallel State-Space Search (Backtracking Cross-Check)
======================================================

Independent alternative to the sequential planner. Explores full
(position, opened doors, keys held) states with a fixed pool of worker
threads.

Shared resources (each behind its own lock, never nested):
- frontier: heap of SearchStates, shortest walk first
- incumbent: best complete walk found so far

Worker loop:
    pop a state            (empty pop -> idle counter; too many -> retire)
    expand to neighbours   (open edges freely; door edges only with a
                            positive net key balance, opening the door)
    prune                  (last three nodes a, b, a with no key on b)
    goal reached           -> replace incumbent if strictly shorter
    otherwise              -> enqueue only if shorter than the incumbent and
                              than any walk already queued for the same
                              (position, opened doors, picked keys)

States compare ONLY by walk length. Two states of equal length are equal
regardless of content, so the incumbent is replaced only by a strictly
shorter walk and the first of several equally long walks wins.

The per-state length table only drops walks that an equally short or
shorter walk with the same state already covers, so the best walk found is
a shortest key-feasible walk. It also bounds the search on mazes with
loops: every state is queued a finite number of times.

Termination is emergent: the search ends when every worker has retired on
its idle counter. `exhaustive=True` replaces this with a barrier: workers
retire only once the frontier is empty and nobody is expanding.
"""

import heapq
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

import numpy as np

from keymaze.core.config import SolverOptions
from keymaze.core.definitions import DOOR_EDGE, NO_EDGE
from keymaze.core.graph_builder import MazeGraph
from keymaze.simulation.bfs_utility import shortest_path_ignoring_doors

logger = logging.getLogger(__name__)

Signature = Tuple[int, FrozenSet[FrozenSet[int]], FrozenSet[int]]


def door_key(a: int, b: int) -> FrozenSet[int]:
    """Unordered node pair identifying a door edge."""
    return frozenset((a, b))


@dataclass(eq=False)
class SearchState:
    """
    One branch of the search: owned walk, opened doors and picked keys.

    Ordering is a weak order on walk length only.
    """
    walk: List[int]
    opened_doors: FrozenSet[FrozenSet[int]] = frozenset()
    picked_keys: FrozenSet[int] = frozenset()

    @property
    def position(self) -> int:
        return self.walk[-1]

    @property
    def key_balance(self) -> int:
        """Keys collected minus doors opened."""
        return len(self.picked_keys) - len(self.opened_doors)

    def signature(self) -> Signature:
        return (self.position, self.opened_doors, self.picked_keys)

    def __len__(self):
        return len(self.walk)

    def __lt__(self, other: 'SearchState') -> bool:
        return len(self.walk) < len(other.walk)

    def __le__(self, other: 'SearchState') -> bool:
        return len(self.walk) <= len(other.walk)

    def __eq__(self, other):
        if not isinstance(other, SearchState):
            return NotImplemented
        return len(self.walk) == len(other.walk)

    __hash__ = None


@dataclass
class ParallelResult:
    """Result of a parallel search run."""
    success: bool
    walk: List[int] = field(default_factory=list)
    states_explored: int = 0
    states_pruned: int = 0
    n_workers: int = 0
    time_taken: float = 0.0  # seconds

    @property
    def path_length(self) -> int:
        return len(self.walk)


class ParallelBacktrackSolver:
    """
    Multi-threaded best-first backtracking search over the full state space.

    Features:
    - Fixed worker pool sharing one lock-guarded frontier
    - Lock-guarded incumbent used as pruning bound
    - Oscillation pruning through key-less nodes
    - Dominance pruning: one queued walk per state and length
    - Optional revisit pruning and termination barrier

    Every pruning rule only drops walks that cannot beat a kept one, so the
    result is a shortest key-feasible walk, never longer than the sequential
    planner's route.
    """

    def __init__(self, graph: MazeGraph, options: Optional[SolverOptions] = None):
        self.graph = graph
        self.options = options or SolverOptions()
        self.matrix = graph.copy_matrix()
        self.keys = graph.copy_keys()

        self._frontier: List[SearchState] = []
        self._frontier_lock = threading.Lock()
        self._incumbent: Optional[SearchState] = None
        self._incumbent_lock = threading.Lock()

        self._active = 0
        self._expanded: Set[Signature] = set()
        self._shortest: Dict[Signature, int] = {}
        self._stats_lock = threading.Lock()
        self._states_explored = 0
        self._states_pruned = 0
        self._goal = -1

    # ------------------------------------------------------------------
    # Shared structures
    # ------------------------------------------------------------------

    def _push(self, state: SearchState) -> bool:
        """Queue a state unless its (position, doors, keys) is already queued with a walk no longer."""
        signature = state.signature()
        with self._frontier_lock:
            known = self._shortest.get(signature)
            if known is not None and known <= len(state):
                return False
            self._shortest[signature] = len(state)
            heapq.heappush(self._frontier, state)
            return True

    def _pop(self) -> Tuple[Optional[SearchState], bool]:
        """Pop the shortest state. Second value: frontier drained and no worker busy."""
        with self._frontier_lock:
            if self._frontier:
                self._active += 1
                return heapq.heappop(self._frontier), False
            return None, self._active == 0

    def _done_with(self) -> None:
        with self._frontier_lock:
            self._active -= 1

    def _incumbent_length(self) -> Optional[int]:
        with self._incumbent_lock:
            return None if self._incumbent is None else len(self._incumbent)

    def _offer(self, state: SearchState) -> bool:
        """Replace the incumbent if `state` is strictly shorter."""
        with self._incumbent_lock:
            if self._incumbent is None or state < self._incumbent:
                self._incumbent = state
                return True
            return False

    def _count(self, explored: int = 0, pruned: int = 0) -> None:
        with self._stats_lock:
            self._states_explored += explored
            self._states_pruned += pruned

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def solve(self, start: int, goal: int) -> ParallelResult:
        """
        Search for the shortest walk from start to goal.

        Returns:
            ParallelResult; success=False when every worker retired without
            an incumbent (unsolvable under the pruning policy)
        """
        self.graph.check_node(start)
        self.graph.check_node(goal)

        self._frontier = []
        self._incumbent = None
        self._active = 0
        self._expanded = set()
        self._shortest = {}
        self._states_explored = 0
        self._states_pruned = 0
        self._goal = goal

        t0 = time.perf_counter()
        picked = frozenset((start,)) if self.keys[start] else frozenset()
        root = SearchState(walk=[start], picked_keys=picked)
        n_workers = self.options.n_workers
        if start == goal:
            self._incumbent = root
        elif shortest_path_ignoring_doors(self.matrix, start, goal) is None:
            logger.debug(f"ParallelBacktrack: goal {goal} not connected to {start}, no workers started")
            n_workers = 0
        else:
            self._push(root)

        workers = [
            threading.Thread(target=self._worker, args=(worker_id,), name=f'backtrack-{worker_id}', daemon=True)
            for worker_id in range(n_workers)
        ]
        for t in workers:
            t.start()
        for t in workers:
            t.join()

        elapsed = time.perf_counter() - t0
        best = self._incumbent
        result = ParallelResult(
            success=best is not None,
            walk=list(best.walk) if best is not None else [],
            states_explored=self._states_explored,
            states_pruned=self._states_pruned,
            n_workers=len(workers),
            time_taken=elapsed,
        )
        if result.success:
            logger.info(f"ParallelBacktrack: walk length {result.path_length}, "
                        f"{result.states_explored} states, {len(workers)} workers, {elapsed:.3f}s")
        else:
            logger.warning(f"ParallelBacktrack: no walk {start}->{goal} after "
                           f"{result.states_explored} states")
        return result

    def _worker(self, worker_id: int) -> None:
        idle = 0
        while True:
            state, drained = self._pop()
            if state is None:
                if self.options.exhaustive:
                    if drained:
                        break
                else:
                    idle += 1
                    if idle > self.options.idle_retry_limit:
                        break
                time.sleep(self.options.idle_sleep_s)
                continue

            idle = 0
            try:
                self._expand(state)
            finally:
                self._done_with()
        logger.debug(f"Worker {worker_id} retired")

    def _expand(self, state: SearchState) -> None:
        if self.options.prune_revisits:
            signature = state.signature()
            with self._stats_lock:
                if signature in self._expanded:
                    self._states_pruned += 1
                    return
                self._expanded.add(signature)

        explored = 1
        pruned = 0
        current = state.position

        for neighbour in np.flatnonzero(self.matrix[current] != NO_EDGE):
            neighbour = int(neighbour)
            successor = self._successor(state, current, neighbour)
            if successor is None:
                continue

            walk = successor.walk
            if len(walk) >= 3 and walk[-3] == walk[-1] and not self.keys[walk[-2]]:
                pruned += 1
                continue

            if neighbour == self._goal:
                if self._offer(successor):
                    logger.debug(f"New incumbent of length {len(successor)}")
                continue

            bound = self._incumbent_length()
            if bound is not None and len(successor) >= bound:
                pruned += 1
            elif not self._push(successor):
                pruned += 1

        self._count(explored, pruned)

    def _successor(self, state: SearchState, current: int, neighbour: int) -> Optional[SearchState]:
        """Next state when moving current -> neighbour, or None if the door stays shut."""
        opened = state.opened_doors
        if self.matrix[current, neighbour] == DOOR_EDGE:
            door = door_key(current, neighbour)
            if door not in opened:
                if state.key_balance <= 0:
                    return None
                opened = opened | {door}

        picked = state.picked_keys
        if self.keys[neighbour] and neighbour not in picked:
            picked = picked | {neighbour}

        return SearchState(walk=state.walk + [neighbour], opened_doors=opened, picked_keys=picked)


def solve_parallel(graph: MazeGraph, start: int, goal: int,
                   options: Optional[SolverOptions] = None) -> ParallelResult:
    """Convenience wrapper: one ParallelBacktrackSolver run."""
    return ParallelBacktrackSolver(graph, options).solve(start, goal)
