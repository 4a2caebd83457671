"""
Path utilities: collapsing spliced routes, replaying routes against a fresh
key/door state, and simple route metrics.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from keymaze.core.definitions import DOOR_EDGE, NO_EDGE
from keymaze.core.graph_builder import MazeGraph

logger = logging.getLogger(__name__)


def deduplicate_path(path: Sequence[int]) -> List[int]:
    """Remove immediate repeats (a, a) left behind by spliced detours."""
    result: List[int] = []
    for node in path:
        if not result or result[-1] != node:
            result.append(node)
    return result


@dataclass
class ReplayReport:
    """Outcome of walking a route on a fresh key/door state."""
    valid: bool
    reached_goal: bool
    keys_collected: int = 0
    doors_opened: int = 0
    stalled_at: Optional[int] = None
    error_message: str = ""


def replay_path(graph: MazeGraph, path: Sequence[int], goal: Optional[int] = None) -> ReplayReport:
    """
    Walk `path` from scratch: collect every key passed over, open a door only
    while the net key balance is positive.

    Args:
        graph: Pristine maze graph (not modified)
        path: Route to replay (consecutive duplicates are allowed)
        goal: Expected final node (default: any goal cell)

    Returns:
        ReplayReport; `stalled_at` is the position index where the walk failed
    """
    if not path:
        return ReplayReport(valid=False, reached_goal=False, error_message="Empty path")

    matrix = graph.copy_matrix()
    keys = graph.copy_keys()
    balance = 0
    collected = 0
    opened = 0

    for i, node in enumerate(path):
        if i > 0 and node != path[i - 1]:
            previous = path[i - 1]
            edge = matrix[previous, node]
            if edge == NO_EDGE:
                return ReplayReport(False, False, collected, opened, i,
                                    f"No edge between {previous} and {node}")
            if edge == DOOR_EDGE:
                if balance <= 0:
                    return ReplayReport(False, False, collected, opened, i,
                                        f"Locked door {previous}->{node} with no key in hand")
                balance -= 1
                opened += 1
                matrix[previous, node] = matrix[node, previous] = 1
        if keys[node]:
            keys[node] = False
            balance += 1
            collected += 1

    last = path[-1]
    reached = bool(graph.goals[last]) if goal is None else last == goal
    return ReplayReport(valid=True, reached_goal=reached, keys_collected=collected, doors_opened=opened)


def calculate_backtracking(path: Sequence[int]) -> float:
    """Fraction of steps that land on an already visited node."""
    if len(path) < 2:
        return 0.0
    seen = {path[0]}
    revisits = 0
    for node in path[1:]:
        if node in seen:
            revisits += 1
        seen.add(node)
    return revisits / (len(path) - 1)
