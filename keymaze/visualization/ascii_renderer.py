"""
Terminal renderer for labyrinth grids.

Every cell is drawn as a 6x4 character box:

    +-  -+      top: gap = path north, '==' = door north, '--' = wall
    | kk |      side: ' ' = path, 'D' = door, '|' = wall; kk = key, GG = goal
    | 12 |      node index
    +----+      bottom

Cells without any passage are left blank. Cells on an optional route are
marked with '**' when they hold neither key nor goal.
"""

from typing import Iterable, Optional

from keymaze.core.definitions import Cell, Direction, Grid, node_index


def _horizontal(cell: Cell, direction: Direction) -> str:
    if cell.doors.get(direction):
        return '=='
    if cell.paths.get(direction):
        return '  '
    return '--'


def _vertical(cell: Cell, direction: Direction) -> str:
    if cell.doors.get(direction):
        return 'D'
    if cell.paths.get(direction):
        return ' '
    return '|'


def _content(cell: Cell, on_route: bool) -> str:
    if cell.is_goal:
        return 'GG'
    if cell.has_key:
        return 'kk'
    if on_route:
        return '**'
    return '  '


def render_labyrinth(grid: Grid, path: Optional[Iterable[int]] = None) -> str:
    """
    ASCII drawing of a grid, optionally marking a route.

    Args:
        grid: Row-major grid of Cells
        path: Node indices to highlight

    Returns:
        Multi-line string (no trailing newline)
    """
    columns = len(grid[0]) if grid else 0
    route = set(path or [])
    lines = []

    for r, row in enumerate(grid):
        boxes = [[], [], [], []]
        for c, cell in enumerate(row):
            node = node_index(r, c, columns)
            if cell.is_empty():
                for part in boxes:
                    part.append(' ' * 6)
                continue
            west = _vertical(cell, Direction.WEST)
            east = _vertical(cell, Direction.EAST)
            boxes[0].append(f"+-{_horizontal(cell, Direction.NORTH)}-+")
            boxes[1].append(f"{west} {_content(cell, node in route)} {east}")
            boxes[2].append(f"{west} {node:2} {east}")
            boxes[3].append(f"+-{_horizontal(cell, Direction.SOUTH)}-+")
        lines.extend(''.join(part) for part in boxes)

    return '\n'.join(lines)


def render_path(path: Iterable[int]) -> str:
    """Compact route listing: 0 -> 1 -> 10 -> ..."""
    return ' -> '.join(str(node) for node in path)
