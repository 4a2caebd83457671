"""
Heuristic Search (A*) over the Adjacency Matrix
===============================================

Shortest hop-count route from start to end that IGNORES key availability:
doors are crossed freely and reported back so the key planner can pay for
them afterwards.

Door handling:
    The search runs on a private copy of the matrix. Crossing a door edge
    downgrades it to an open edge for the rest of this run, and the node
    reached through it is flagged in `forced`.

Orderings (see AStarOrdering):
    COST  - priority (hops, forced doors, heuristic). Hop-optimal, fewest
            forced doors among hop-optimal routes; the heuristic only breaks
            the remaining ties.
    INDEX - legacy order: a max-heap of node indices. A neighbour is relaxed
            when its hop count OR its forced-door count improves, and any
            door examined into a node flags that node as forced.

Heuristic:
    Squared grid distance derived from the flattened index delta. It is a
    design-given estimate, not a lower bound, which is why COST ordering does
    not rank by g + h.
"""

import heapq
import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from keymaze.core.config import AStarOrdering
from keymaze.core.definitions import DOOR_EDGE, NO_EDGE, OPEN_EDGE

logger = logging.getLogger(__name__)


@dataclass
class AStarResult:
    """Reconstructed route and per-node door-forced flags."""
    path: List[int]
    forced: List[bool]
    expansions: int = 0

    @property
    def doors_forced(self) -> int:
        return sum(1 for node in self.path if self.forced[node])


def heuristic(from_node: int, to_node: int, columns: int) -> int:
    """Squared grid distance estimated from the flattened index delta."""
    dist = abs(from_node - to_node)
    r, c = divmod(dist, columns)
    return r * r + c * c


def _reconstruct(came_from: List[Optional[int]], end: int) -> Optional[List[int]]:
    current = end
    path = [current]
    while came_from[current] is not None:
        current = came_from[current]
        path.append(current)
        if len(path) > len(came_from):
            logger.warning("A*: predecessor chain contains a cycle, discarding route")
            return None
    path.reverse()
    return path


def _open_door(graph: np.ndarray, a: int, b: int) -> None:
    graph[a, b] = OPEN_EDGE
    graph[b, a] = OPEN_EDGE


def a_star(
    start: int,
    end: int,
    matrix: np.ndarray,
    columns: int,
    ordering: AStarOrdering = AStarOrdering.COST,
    max_expansions: int = 200000,
) -> Optional[AStarResult]:
    """
    Find a route from start to end ignoring key availability.

    Args:
        start: Source node
        end: Target node
        matrix: Adjacency matrix (not modified)
        columns: Grid width, used by the heuristic
        ordering: Open-set ordering
        max_expansions: Expansion budget before giving up

    Returns:
        AStarResult, or None when no route exists (NoPathFound)
    """
    n = matrix.shape[0]
    if not (0 <= start < n and 0 <= end < n):
        raise ValueError(f"start={start} / end={end} outside maze with {n} nodes")

    graph = np.array(matrix, dtype=np.uint8, copy=True)
    if AStarOrdering(ordering) is AStarOrdering.INDEX:
        return _a_star_index_order(start, end, graph, max_expansions)
    return _a_star_cost_order(start, end, graph, columns, max_expansions)


def _a_star_cost_order(start: int, end: int, graph: np.ndarray,
                       columns: int, max_expansions: int) -> Optional[AStarResult]:
    n = graph.shape[0]
    came_from: List[Optional[int]] = [None] * n
    forced = [False] * n
    g_score = [float('inf')] * n
    door_score = [float('inf')] * n
    closed = np.zeros(n, dtype=bool)

    g_score[start] = 0
    door_score[start] = 0
    counter = 0
    open_set = [(0, 0, heuristic(start, end, columns), counter, start)]
    expansions = 0

    while open_set:
        g, doors, _, _, current = heapq.heappop(open_set)
        if closed[current]:
            continue
        closed[current] = True
        expansions += 1

        if current == end:
            path = _reconstruct(came_from, end)
            if path is None:
                return None
            logger.debug(f"A*: {start}->{end} in {len(path) - 1} hops, {doors} forced door(s), "
                         f"{expansions} expansions")
            return AStarResult(path=path, forced=forced, expansions=expansions)

        if expansions >= max_expansions:
            logger.warning(f"A*: expansion budget ({max_expansions}) exhausted before reaching {end}")
            return None

        for neighbour in np.flatnonzero(graph[current] != NO_EDGE):
            neighbour = int(neighbour)
            if closed[neighbour]:
                continue
            is_door = graph[current, neighbour] == DOOR_EDGE
            tentative = (g + 1, doors + int(is_door))
            if tentative < (g_score[neighbour], door_score[neighbour]):
                came_from[neighbour] = current
                forced[neighbour] = bool(is_door)
                g_score[neighbour], door_score[neighbour] = tentative
                if is_door:
                    _open_door(graph, current, neighbour)
                counter += 1
                heapq.heappush(open_set, (tentative[0], tentative[1],
                                          heuristic(neighbour, end, columns), counter, neighbour))

    logger.debug(f"A*: frontier exhausted, no route {start}->{end}")
    return None


def _a_star_index_order(start: int, end: int, graph: np.ndarray,
                        max_expansions: int) -> Optional[AStarResult]:
    n = graph.shape[0]
    came_from: List[Optional[int]] = [None] * n
    forced = [False] * n
    g_score = [float('inf')] * n
    key_util = [float('inf')] * n
    g_score[start] = 0
    key_util[start] = 0

    # Max-heap on node index
    open_set = [-start]
    in_open = {start}
    expansions = 0

    while open_set:
        current = -heapq.heappop(open_set)
        in_open.discard(current)
        expansions += 1

        if current == end:
            path = _reconstruct(came_from, end)
            if path is None:
                return None
            return AStarResult(path=path, forced=forced, expansions=expansions)

        if expansions >= max_expansions:
            logger.warning(f"A* (index order): expansion budget ({max_expansions}) exhausted")
            return None

        for neighbour in np.flatnonzero(graph[current] != NO_EDGE):
            neighbour = int(neighbour)
            tentative_score = g_score[current] + 1
            tentative_keys = key_util[current]
            if graph[current, neighbour] == DOOR_EDGE:
                tentative_keys += 1
                _open_door(graph, current, neighbour)
                forced[neighbour] = True
            if tentative_score < g_score[neighbour] or tentative_keys < key_util[neighbour]:
                came_from[neighbour] = current
                g_score[neighbour] = tentative_score
                key_util[neighbour] = tentative_keys
                if neighbour not in in_open:
                    heapq.heappush(open_set, -neighbour)
                    in_open.add(neighbour)

    logger.debug(f"A* (index order): frontier exhausted, no route {start}->{end}")
    return None
