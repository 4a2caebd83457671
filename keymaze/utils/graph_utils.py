"""
Maze Graph Utilities
====================

networkx view of a MazeGraph for reporting collaborators, plus structural
sanity checks run before the (more expensive) solvers.

Usage:
    from keymaze.utils.graph_utils import to_networkx, check_maze

    G = to_networkx(graph)
    G.edges[0, 1]['edge_type']     # 'open' or 'door'

    is_valid, errors = check_maze(graph, start=0, goal=47)
    if not is_valid:
        print(f"Maze rejected: {errors}")
"""

import logging
from typing import Dict, List, Tuple

import networkx as nx
import numpy as np

from keymaze.core.definitions import DOOR_EDGE, OPEN_EDGE
from keymaze.core.graph_builder import MazeGraph

logger = logging.getLogger(__name__)

EDGE_TYPE_NAMES: Dict[int, str] = {
    OPEN_EDGE: 'open',
    DOOR_EDGE: 'door',
}


# ==========================================
# NETWORKX EXPORT
# ==========================================

def to_networkx(graph: MazeGraph, include_doors: bool = True) -> nx.Graph:
    """
    Undirected networkx graph of the maze.

    Nodes carry 'pos' (row, col), 'has_key' and 'is_goal'; edges carry
    'edge_type' ('open' / 'door').

    Args:
        graph: Maze graph
        include_doors: If False, door edges are left out (door-respecting view)
    """
    G = nx.Graph()
    for node in range(graph.n_nodes):
        G.add_node(node, pos=graph.position(node),
                   has_key=bool(graph.keys[node]), is_goal=bool(graph.goals[node]))

    rows, cols = np.nonzero(np.triu(graph.matrix))
    for a, b in zip(rows, cols):
        code = int(graph.matrix[a, b])
        if code == DOOR_EDGE and not include_doors:
            continue
        G.add_edge(int(a), int(b), edge_type=EDGE_TYPE_NAMES.get(code, 'open'))
    return G


# ==========================================
# SANITY CHECKS
# ==========================================

def goal_connected(graph: MazeGraph, start: int, goal: int, include_doors: bool = True) -> bool:
    """Whether any route start -> goal exists (doors treated as open by default)."""
    return nx.has_path(to_networkx(graph, include_doors=include_doors), start, goal)


def check_maze(graph: MazeGraph, start: int, goal: int) -> Tuple[bool, List[str]]:
    """
    Structural checks that do not need a solver.

    - start / goal inside the maze
    - matrix symmetric
    - goal reachable at all when doors are treated as open
    - doors present but no keys anywhere

    Returns:
        is_valid: Whether the maze passes all checks
        errors: List of error messages
    """
    errors = []

    if not 0 <= start < graph.n_nodes:
        errors.append(f"Start node {start} outside maze ({graph.n_nodes} nodes)")
    if not 0 <= goal < graph.n_nodes:
        errors.append(f"Goal node {goal} outside maze ({graph.n_nodes} nodes)")
    if errors:
        return False, errors

    if not np.array_equal(graph.matrix, graph.matrix.T):
        errors.append("Adjacency matrix is not symmetric")

    if not goal_connected(graph, start, goal):
        errors.append(f"Goal {goal} is not connected to start {start}, even through doors")

    n_doors = len(graph.door_edges())
    n_keys = int(graph.keys.sum())
    if n_doors > 0 and n_keys == 0:
        errors.append(f"Doors ({n_doors}) but no keys")

    if errors:
        logger.debug(f"Maze check failed: {errors}")
    return len(errors) == 0, errors


def count_elements(graph: MazeGraph) -> Dict[str, int]:
    """Count nodes, open edges, doors, keys and goals."""
    upper = np.triu(graph.matrix)
    return {
        'nodes': graph.n_nodes,
        'open_edges': int(np.count_nonzero(upper == OPEN_EDGE)),
        'doors': int(np.count_nonzero(upper == DOOR_EDGE)),
        'keys': int(graph.keys.sum()),
        'goals': int(graph.goals.sum()),
    }
