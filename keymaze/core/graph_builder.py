"""
Graph Builder - Grid to Adjacency Matrix
========================================

Converts a validated grid of Cells into the representation every solver
works on:

- adjacency matrix (N x N, uint8): 0 = no edge, 1 = open edge, 255 = door edge
- key vector (N, bool): True where an uncollected key lies
- goal vector (N, bool): True on goal cells

Nodes are row-major linear indices. Each side of a connection adds its flags
to the shared entry (path flag = 2, door flag = 3). A connection is only real
when both sides agree: two path flags (4) make an open edge, two path flags
plus one door flag (7) make a door. Every other sum is a malformed pair of
cells and is silently dropped.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from keymaze.core.definitions import (
    Cell,
    Direction,
    DIRECTION_DELTAS,
    DOOR_EDGE,
    DOOR_FLAG_WEIGHT,
    EDGE_CLASSIFICATION,
    NO_EDGE,
    OPEN_EDGE,
    PATH_FLAG_WEIGHT,
    node_index,
    node_position,
)

logger = logging.getLogger(__name__)


@dataclass
class MazeGraph:
    """Adjacency matrix plus key and goal indicator vectors."""
    matrix: np.ndarray
    keys: np.ndarray
    goals: np.ndarray
    columns: int

    @property
    def n_nodes(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def rows(self) -> int:
        return self.n_nodes // self.columns

    def goal_nodes(self) -> List[int]:
        return [int(n) for n in np.flatnonzero(self.goals)]

    def key_nodes(self) -> List[int]:
        return [int(n) for n in np.flatnonzero(self.keys)]

    def door_edges(self) -> List[Tuple[int, int]]:
        """Door edges as (low, high) node pairs."""
        rows, cols = np.nonzero(np.triu(self.matrix == DOOR_EDGE))
        return [(int(a), int(b)) for a, b in zip(rows, cols)]

    def position(self, node: int) -> Tuple[int, int]:
        return node_position(node, self.columns)

    def copy_matrix(self) -> np.ndarray:
        return self.matrix.copy()

    def copy_keys(self) -> np.ndarray:
        return self.keys.copy()

    def check_node(self, node: int) -> None:
        if not 0 <= node < self.n_nodes:
            raise ValueError(f"Node {node} outside maze with {self.n_nodes} nodes")


def _grid_shape(grid: Sequence[Sequence[Cell]]) -> Tuple[int, int]:
    rows = len(grid)
    if rows == 0:
        raise ValueError("Grid must contain at least one row")
    columns = len(grid[0])
    for r, row in enumerate(grid):
        if len(row) != columns:
            raise ValueError(f"Grid is not rectangular: row {r} has {len(row)} cells, expected {columns}")
    if columns == 0:
        raise ValueError("Grid rows must contain at least one cell")
    return rows, columns


def build_maze_graph(grid: Sequence[Sequence[Cell]]) -> MazeGraph:
    """
    Build the adjacency matrix and key/goal vectors of a grid.

    Args:
        grid: Rectangular row-major grid of Cells

    Returns:
        MazeGraph with a symmetric matrix of EdgeType codes
    """
    rows, columns = _grid_shape(grid)
    n = rows * columns

    # Accumulate flag weights from both sides of every in-bounds connection
    weights = np.zeros((n, n), dtype=np.int32)
    keys = np.zeros(n, dtype=bool)
    goals = np.zeros(n, dtype=bool)

    for r in range(rows):
        for c in range(columns):
            cell = grid[r][c]
            here = node_index(r, c, columns)
            for direction in Direction:
                dr, dc = DIRECTION_DELTAS[direction]
                nr, nc = r + dr, c + dc
                if not (0 <= nr < rows and 0 <= nc < columns):
                    continue
                there = node_index(nr, nc, columns)
                if cell.paths.get(direction):
                    weights[here, there] += PATH_FLAG_WEIGHT
                    weights[there, here] += PATH_FLAG_WEIGHT
                if cell.doors.get(direction):
                    weights[here, there] += DOOR_FLAG_WEIGHT
                    weights[there, here] += DOOR_FLAG_WEIGHT
            keys[here] = cell.has_key
            goals[here] = cell.is_goal

    matrix = np.full((n, n), NO_EDGE, dtype=np.uint8)
    for total, code in EDGE_CLASSIFICATION.items():
        matrix[weights == total] = code

    malformed = int(np.count_nonzero(np.triu(weights > 0) & np.triu(matrix == NO_EDGE)))
    if malformed:
        logger.debug(f"Dropped {malformed} malformed connection(s) with disagreeing flags")

    logger.debug(
        f"Built maze graph: {rows}x{columns} cells, "
        f"{int(np.count_nonzero(np.triu(matrix == OPEN_EDGE)))} open edges, "
        f"{int(np.count_nonzero(np.triu(matrix == DOOR_EDGE)))} doors, "
        f"{int(keys.sum())} keys"
    )
    return MazeGraph(matrix=matrix, keys=keys, goals=goals, columns=columns)


def graph_from_matrix(matrix, keys=None, goals=None, columns=None) -> MazeGraph:
    """
    Wrap an existing adjacency matrix (e.g. hand-written test mazes).

    Args:
        matrix: Square symmetric matrix of EdgeType codes
        keys: Key vector (default: no keys)
        goals: Goal vector (default: no goals)
        columns: Grid width used for the heuristic (default: single row)
    """
    matrix = np.asarray(matrix, dtype=np.uint8)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"Adjacency matrix must be square, got shape {matrix.shape}")
    n = matrix.shape[0]
    keys = np.zeros(n, dtype=bool) if keys is None else np.asarray(keys, dtype=bool)
    goals = np.zeros(n, dtype=bool) if goals is None else np.asarray(goals, dtype=bool)
    if keys.shape != (n,) or goals.shape != (n,):
        raise ValueError("Key and goal vectors must have one entry per node")
    return MazeGraph(matrix=matrix.copy(), keys=keys.copy(), goals=goals.copy(), columns=columns or n)
