"""
Tests for the key requirement analyzer and the key acquisition planner.
"""

import logging

import numpy as np
import pytest

from keymaze.core import DOOR_EDGE, OPEN_EDGE, build_maze_graph
from keymaze.simulation import KeyWalker, a_star, key_cumsum, key_pickup

from maze_factory import (
    create_detour_maze,
    create_grid,
    create_line_maze,
    create_locked_key_maze,
    create_random_grid,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_two_door_corridor():
    """1x4 line: key at 0, open 0-1, doors 1-2 and 2-3."""
    return build_maze_graph(create_grid(1, 4, open_edges=[(0, 1)], door_edges=[(1, 2), (2, 3)],
                                        keys=[0], goals=[3]))


class TestKeyCumsum:

    def test_key_covers_door(self):
        keys = np.array([True, False, False])
        assert key_cumsum([0, 1, 2], [False, False, True], keys) == [0, 1, 0]

    def test_two_doors_one_key(self):
        keys = np.array([True, False, False, False])
        forced = [False, False, True, True]
        assert key_cumsum([0, 1, 2, 3], forced, keys) == [1, 2, 1, 0]

    def test_no_doors(self):
        keys = np.array([False, True, False])
        assert key_cumsum([0, 1, 2], [False] * 3, keys) == [0, 0, 0]

    def test_surplus_keys_clamped(self):
        keys = np.array([True, True, True])
        assert key_cumsum([0, 1, 2], [False, False, True], keys) == [0, 0, 0]

    def test_empty_and_single(self):
        assert key_cumsum([], [], np.zeros(0, dtype=bool)) == []
        assert key_cumsum([4], [False] * 5, np.ones(5, dtype=bool)) == [0]

    @pytest.mark.parametrize('seed', range(15))
    def test_never_negative(self, seed):
        graph = build_maze_graph(create_random_grid(seed, rows=5, columns=5, p_door=0.4, p_key=0.3))
        result = a_star(0, graph.n_nodes - 1, graph.matrix, graph.columns)
        if result is None:
            return
        owed = key_cumsum(result.path, result.forced, graph.keys)
        assert len(owed) == len(result.path)
        assert all(r >= 0 for r in owed)
        assert owed[-1] == 0


class TestKeyWalker:

    def test_collect_once(self):
        graph = create_line_maze()
        keys = graph.copy_keys()
        walker = KeyWalker(graph.copy_matrix(), keys, 0, 0)
        assert walker.collect() == 1
        assert walker.collect() == 0
        assert walker.inventory == 1
        assert not keys[0]

    def test_door_needs_key(self):
        graph = create_line_maze()
        maze = graph.copy_matrix()
        walker = KeyWalker(maze, graph.copy_keys(), 0, 1)
        assert walker.is_locked(2)
        assert not walker.step(2)
        assert walker.position == 1

        walker.inventory = 1
        assert walker.step(2)
        assert walker.inventory == 0
        assert walker.doors_opened == 1
        assert maze[1, 2] == OPEN_EDGE and maze[2, 1] == OPEN_EDGE
        assert walker.trail == [1, 2]

    def test_step_requires_adjacency(self):
        graph = create_line_maze()
        walker = KeyWalker(graph.copy_matrix(), graph.copy_keys(), 0, 0)
        with pytest.raises(ValueError):
            walker.step(2)

    def test_walk_collects_on_the_way(self):
        graph = create_detour_maze()
        walker = KeyWalker(graph.copy_matrix(), graph.copy_keys(), 0, 0)
        assert walker.walk([0, 3, 4])
        assert walker.inventory == 1
        assert walker.keys_collected == 1
        assert walker.trail == [0, 3, 4]


class TestKeyPickup:

    def test_route_without_detour(self):
        graph = create_line_maze()
        maze, keys = graph.copy_matrix(), graph.copy_keys()
        plan = key_pickup([0, 1, 2], [0, 1, 0], maze, keys, 0)
        assert plan is not None
        assert not plan.has_detour
        assert plan.path == []
        assert plan.inventory == 0
        assert plan.keys_collected == 1
        assert plan.doors_opened == 1
        assert maze[1, 2] == OPEN_EDGE
        assert not keys[0]

    def test_detour_to_side_key(self):
        graph = create_detour_maze()
        maze, keys = graph.copy_matrix(), graph.copy_keys()
        result = a_star(0, 5, maze, graph.columns)
        requirement = key_cumsum(result.path, result.forced, keys)
        assert requirement == [1, 1, 0, 0]

        plan = key_pickup(result.path, requirement, maze, keys, 0)
        assert plan.has_detour
        assert plan.path == [0, 3, 4]
        assert plan.inventory == 1
        assert not keys[4]
        # Door not paid yet
        assert maze[1, 2] == DOOR_EDGE

    def test_key_behind_its_own_door(self):
        graph = create_locked_key_maze()
        maze, keys = graph.copy_matrix(), graph.copy_keys()
        result = a_star(0, 2, maze, graph.columns)
        requirement = key_cumsum(result.path, result.forced, keys)
        assert key_pickup(result.path, requirement, maze, keys, 0) is None

    def test_inventory_carried_in(self):
        graph = create_locked_key_maze()
        maze, keys = graph.copy_matrix(), graph.copy_keys()
        plan = key_pickup([0, 1, 2], [1, 0, 0], maze, keys, 1)
        assert plan is not None and not plan.has_detour
        # Paid the door, then picked up the key behind it
        assert plan.inventory == 1
        assert plan.doors_opened == 1

    def test_detour_through_door_when_affordable(self):
        """
        1x4 line 0 == 1 -- 2 == 3, goal at 0, start at 1, key at 3 and one
        key in hand: the only key lies behind the second door.
        """
        graph = build_maze_graph(create_grid(1, 4, open_edges=[(1, 2)],
                                             door_edges=[(0, 1), (2, 3)], keys=[3], goals=[0]))
        maze, keys = graph.copy_matrix(), graph.copy_keys()
        # Route 1 -> 0 forces one door; pretend two are owed
        plan = key_pickup([1, 0], [2, 0], maze, keys, 1)
        assert plan.has_detour
        assert plan.path == [1, 2, 3]
        assert plan.inventory == 1
        assert plan.doors_opened == 1
        assert maze[2, 3] == OPEN_EDGE

    def test_two_doors_single_key_fails(self):
        graph = create_two_door_corridor()
        maze, keys = graph.copy_matrix(), graph.copy_keys()
        result = a_star(0, 3, maze, graph.columns)
        requirement = key_cumsum(result.path, result.forced, keys)
        assert key_pickup(result.path, requirement, maze, keys, 0) is None
        # Key at 0 was picked up, but the first door stays shut
        assert not keys[0]
        assert maze[1, 2] == DOOR_EDGE
        assert maze[2, 3] == DOOR_EDGE

    def test_fails_at_last_open_node_before_unpaid_door(self):
        graph = build_maze_graph(create_grid(1, 4, open_edges=[(0, 1), (1, 2)], door_edges=[(2, 3)],
                                             goals=[3]))
        maze, keys = graph.copy_matrix(), graph.copy_keys()
        result = a_star(0, 3, maze, graph.columns)
        requirement = key_cumsum(result.path, result.forced, keys)
        assert key_pickup(result.path, requirement, maze, keys, 0) is None
        assert maze[2, 3] == DOOR_EDGE

    def test_empty_route(self):
        graph = create_line_maze()
        plan = key_pickup([], [], graph.copy_matrix(), graph.copy_keys(), 2)
        assert plan.path == []
        assert plan.inventory == 2
