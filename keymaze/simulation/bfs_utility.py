"""
Breadth-First Utility Search
============================

One level-order traversal core shared by three use-cases:

1. NEAREST_KEY      - closest uncollected key, stop at the first hit
2. ALL_KEYS_RANKED  - every uncollected key, ranked by discovery order
3. SHORTEST_PATH    - shortest hop path to a target node

Each variant defines a match predicate over (current, target, matrix, keys)
and what to do on a hit: return immediately or accumulate and continue. The
door flag decides whether door edges are impassable (False) or treated as
open (True). Door-ignoring results are NOT legal moves on their own; callers
must pay for every door in `BfsHit.doors_crossed` before walking the route.
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

from keymaze.core.definitions import DOOR_EDGE, NO_EDGE

logger = logging.getLogger(__name__)


class Traversal(Enum):
    """Closed set of traversal variants dispatched by `breadth_first`."""
    NEAREST_KEY = "nearest_key"
    ALL_KEYS_RANKED = "all_keys_ranked"
    SHORTEST_PATH = "shortest_path"

    def matches(self, current: int, target: Optional[int], matrix: np.ndarray, keys: np.ndarray) -> bool:
        if self is Traversal.SHORTEST_PATH:
            return current == target
        return bool(keys[current])

    @property
    def stops_on_hit(self) -> bool:
        return self is not Traversal.ALL_KEYS_RANKED


@dataclass
class BfsHit:
    """A matched node with the route that discovered it."""
    node: int
    path: List[int]
    doors_crossed: int

    @property
    def distance(self) -> int:
        return len(self.path) - 1


def _reconstruct(parents: List[Optional[int]], node: int) -> List[int]:
    path = [node]
    while parents[node] is not None:
        node = parents[node]
        path.append(node)
    path.reverse()
    return path


def breadth_first(
    matrix: np.ndarray,
    start: int,
    keys: np.ndarray,
    traversal: Traversal,
    target: Optional[int] = None,
    ignore_doors: bool = False,
) -> Optional[List[BfsHit]]:
    """
    Level-order traversal from `start`, never revisiting a node.

    Args:
        matrix: Adjacency matrix of EdgeType codes
        start: Source node
        keys: Uncollected-key vector
        traversal: Which variant decides hits
        target: Target node (SHORTEST_PATH only)
        ignore_doors: Treat door edges as open

    Returns:
        Hits in discovery order, or None when nothing matched
    """
    if traversal is Traversal.SHORTEST_PATH and target is None:
        raise ValueError("SHORTEST_PATH traversal needs a target node")

    n = matrix.shape[0]
    parents: List[Optional[int]] = [None] * n
    doors = [0] * n
    visited = np.zeros(n, dtype=bool)
    visited[start] = True
    queue = deque([start])
    hits: List[BfsHit] = []

    while queue:
        current = queue.popleft()

        if traversal.matches(current, target, matrix, keys):
            hits.append(BfsHit(current, _reconstruct(parents, current), doors[current]))
            if traversal.stops_on_hit:
                break

        for neighbour in np.flatnonzero(matrix[current] != NO_EDGE):
            neighbour = int(neighbour)
            if visited[neighbour]:
                continue
            is_door = matrix[current, neighbour] == DOOR_EDGE
            if is_door and not ignore_doors:
                continue
            visited[neighbour] = True
            parents[neighbour] = current
            doors[neighbour] = doors[current] + int(is_door)
            queue.append(neighbour)

    if not hits:
        return None
    return hits


def nearest_key(matrix: np.ndarray, start: int, keys: np.ndarray,
                ignore_doors: bool = False) -> Optional[BfsHit]:
    """Closest uncollected key (door edges impassable unless ignored)."""
    hits = breadth_first(matrix, start, keys, Traversal.NEAREST_KEY, ignore_doors=ignore_doors)
    return hits[0] if hits else None


def ranked_keys(matrix: np.ndarray, start: int, keys: np.ndarray,
                ignore_doors: bool = True) -> Optional[List[BfsHit]]:
    """All uncollected keys ranked by BFS discovery order."""
    return breadth_first(matrix, start, keys, Traversal.ALL_KEYS_RANKED, ignore_doors=ignore_doors)


def shortest_path_ignoring_doors(matrix: np.ndarray, start: int, target: int) -> Optional[BfsHit]:
    """Shortest hop route treating doors as open. The route still owes its doors."""
    no_keys = np.zeros(matrix.shape[0], dtype=bool)
    hits = breadth_first(matrix, start, no_keys, Traversal.SHORTEST_PATH, target=target, ignore_doors=True)
    return hits[0] if hits else None
