"""
KEYMAZE Core Module
===================

Definitions, solver configuration and the grid-to-graph builder.

Usage:
    from keymaze.core import build_maze_graph, SolverOptions

    graph = build_maze_graph(grid)
    graph.matrix   # N x N EdgeType codes
    graph.keys     # uncollected keys
    graph.goals    # goal cells
"""

from keymaze.core.definitions import (
    EdgeType,
    NO_EDGE,
    OPEN_EDGE,
    DOOR_EDGE,
    PATH_FLAG_WEIGHT,
    DOOR_FLAG_WEIGHT,
    DEFAULT_COLUMNS,
    Direction,
    DIRECTION_DELTAS,
    FailureKind,
    DirectionFlags,
    Cell,
    Grid,
    node_index,
    node_position,
)
from keymaze.core.config import AStarOrdering, SolverOptions
from keymaze.core.graph_builder import MazeGraph, build_maze_graph, graph_from_matrix

__all__ = [
    'EdgeType',
    'NO_EDGE',
    'OPEN_EDGE',
    'DOOR_EDGE',
    'PATH_FLAG_WEIGHT',
    'DOOR_FLAG_WEIGHT',
    'DEFAULT_COLUMNS',
    'Direction',
    'DIRECTION_DELTAS',
    'FailureKind',
    'DirectionFlags',
    'Cell',
    'Grid',
    'node_index',
    'node_position',
    'AStarOrdering',
    'SolverOptions',
    'MazeGraph',
    'build_maze_graph',
    'graph_from_matrix',
]
