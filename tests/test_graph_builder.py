"""
Tests for the grid -> adjacency matrix builder.
"""

import logging

import numpy as np
import pytest

from keymaze.core import (
    Cell,
    DOOR_EDGE,
    DirectionFlags,
    NO_EDGE,
    OPEN_EDGE,
    build_maze_graph,
    graph_from_matrix,
)

from maze_factory import create_detour_maze, create_grid, create_noisy_grid, create_random_grid

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_pair(left: Cell, right: Cell):
    return build_maze_graph([[left, right]])


def flags(**kwargs) -> DirectionFlags:
    return DirectionFlags(**kwargs)


class TestEdgeClassification:
    """Summed flag weights -> edge codes."""

    def test_agreeing_paths_make_open_edge(self):
        graph = create_pair(Cell(paths=flags(east=True)), Cell(paths=flags(west=True)))
        assert graph.matrix[0, 1] == OPEN_EDGE
        assert graph.matrix[1, 0] == OPEN_EDGE

    def test_paths_plus_one_door_flag_make_door(self):
        graph = create_pair(Cell(paths=flags(east=True), doors=flags(east=True)),
                            Cell(paths=flags(west=True)))
        assert graph.matrix[0, 1] == DOOR_EDGE
        assert graph.matrix[1, 0] == DOOR_EDGE

    def test_one_sided_path_is_dropped(self):
        graph = create_pair(Cell(paths=flags(east=True)), Cell())
        assert graph.matrix[0, 1] == NO_EDGE

    def test_door_flagged_on_both_sides_is_dropped(self):
        # 2 + 2 + 3 + 3 = 10 is not a valid sum
        graph = create_pair(Cell(paths=flags(east=True), doors=flags(east=True)),
                            Cell(paths=flags(west=True), doors=flags(west=True)))
        assert graph.matrix[0, 1] == NO_EDGE

    def test_door_without_paths_is_dropped(self):
        graph = create_pair(Cell(doors=flags(east=True)), Cell())
        assert graph.matrix[0, 1] == NO_EDGE

    def test_out_of_bounds_flags_ignored(self):
        graph = create_pair(Cell(paths=flags(west=True, north=True, south=True)),
                            Cell(paths=flags(east=True)))
        assert not graph.matrix.any()

    def test_malformed_count_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger='keymaze.core.graph_builder'):
            create_pair(Cell(paths=flags(east=True)), Cell())
        assert any('malformed' in record.message for record in caplog.records)


class TestGraphStructure:
    """Matrix shape, symmetry and indicator vectors."""

    @pytest.mark.parametrize('seed', range(20))
    def test_symmetric_for_noisy_grids(self, seed):
        graph = build_maze_graph(create_noisy_grid(seed))
        assert np.array_equal(graph.matrix, graph.matrix.T)
        assert set(np.unique(graph.matrix)) <= {NO_EDGE, OPEN_EDGE, DOOR_EDGE}

    @pytest.mark.parametrize('seed', range(10))
    def test_consistent_grid_keeps_every_edge(self, seed):
        grid = create_random_grid(seed, rows=5, columns=5)
        graph = build_maze_graph(grid)
        # Every connection drawn on a cell's east/south side must survive
        for r in range(5):
            for c in range(5):
                node = r * 5 + c
                if grid[r][c].paths.east:
                    assert graph.matrix[node, node + 1] != NO_EDGE
                if grid[r][c].paths.south:
                    assert graph.matrix[node, node + 5] != NO_EDGE

    def test_diagonal_is_empty(self):
        graph = build_maze_graph(create_noisy_grid(3))
        assert not np.diag(graph.matrix).any()

    def test_dtype_and_shape(self):
        graph = create_detour_maze()
        assert graph.matrix.dtype == np.uint8
        assert graph.matrix.shape == (6, 6)
        assert graph.n_nodes == 6
        assert graph.rows == 2
        assert graph.columns == 3

    def test_keys_goals_and_doors(self):
        graph = create_detour_maze()
        assert graph.key_nodes() == [4]
        assert graph.goal_nodes() == [5]
        assert graph.door_edges() == [(1, 2)]
        assert graph.position(4) == (1, 1)

    def test_copies_are_independent(self):
        graph = create_detour_maze()
        matrix = graph.copy_matrix()
        keys = graph.copy_keys()
        matrix[1, 2] = OPEN_EDGE
        keys[4] = False
        assert graph.matrix[1, 2] == DOOR_EDGE
        assert graph.keys[4]


class TestBuilderErrors:
    """Contract violations raise ValueError."""

    def test_ragged_grid(self):
        grid = create_grid(2, 3)
        grid[1].pop()
        with pytest.raises(ValueError):
            build_maze_graph(grid)

    def test_empty_grid(self):
        with pytest.raises(ValueError):
            build_maze_graph([])

    def test_empty_rows(self):
        with pytest.raises(ValueError):
            build_maze_graph([[], []])

    def test_check_node(self):
        graph = create_detour_maze()
        graph.check_node(5)
        with pytest.raises(ValueError):
            graph.check_node(6)
        with pytest.raises(ValueError):
            graph.check_node(-1)


class TestGraphFromMatrix:
    """Wrapping hand-written matrices."""

    def test_defaults(self):
        graph = graph_from_matrix([[0, 1], [1, 0]])
        assert graph.columns == 2
        assert graph.key_nodes() == []
        assert graph.goal_nodes() == []

    def test_input_is_copied(self):
        matrix = np.array([[0, 255], [255, 0]], dtype=np.uint8)
        graph = graph_from_matrix(matrix, keys=[True, False], goals=[False, True])
        matrix[0, 1] = 0
        assert graph.matrix[0, 1] == DOOR_EDGE
        assert graph.door_edges() == [(0, 1)]

    def test_non_square_matrix(self):
        with pytest.raises(ValueError):
            graph_from_matrix(np.zeros((2, 3)))

    def test_vector_length_mismatch(self):
        with pytest.raises(ValueError):
            graph_from_matrix(np.zeros((3, 3)), keys=[True, False])
