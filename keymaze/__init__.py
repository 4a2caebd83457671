"""
KEYMAZE Source Package - Locked-Door Maze Solving
=================================================

Route finding in grid mazes where some connections are locked doors that
need previously collected keys.

Submodules:
- core: Definitions, solver options and the adjacency-matrix graph builder
- simulation: Sequential planner (A* + key planning) and parallel state-space search
- utils: networkx export and maze sanity checks
- data: Labyrinth text-file loader
- visualization: Terminal renderer

Solving Pipeline:
    Grid of Cells -> build_maze_graph -> MazeGraph
        -> SequentialSolver        (A*, key requirements, key pickup, BFS utility)
        -> ParallelBacktrackSolver (multi-threaded cross-check)
"""

__version__ = "1.0.0"
__author__ = "KEYMAZE Project"

__all__ = ['core', 'simulation', 'utils', 'data', 'visualization']
