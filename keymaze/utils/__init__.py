"""KEYMAZE utilities: networkx export and maze sanity checks."""

from keymaze.utils.graph_utils import to_networkx, goal_connected, check_maze, count_elements

__all__ = ['to_networkx', 'goal_connected', 'check_maze', 'count_elements']
