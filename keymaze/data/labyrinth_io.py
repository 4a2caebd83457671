"""
Labyrinth Text Format
=====================

Loader (and writer) for the labyrinth files the solvers were built around.
One cell per line, row-major, a fixed number of cells per row (9 by default).
Each line has exactly 14 characters:

    0-3    path bits   W E N S   ('0' / '1')
    4      separator   (any character)
    5-8    door bits   W E N S   ('0' / '1')
    9      separator   (any character)
    10-11  key         cell holds a key iff both characters are '1'
    12-13  end         cell is the goal iff both characters are '1'

Example line (open to the east and south, door to the south, key):

    0101 0001 1100
"""

import logging
from pathlib import Path
from typing import Iterable, List, Union

from keymaze.core.definitions import DEFAULT_COLUMNS, Cell, Direction, DirectionFlags, Grid

logger = logging.getLogger(__name__)

LINE_LENGTH = 14


class LabyrinthFormatError(ValueError):
    """Raised when a labyrinth file does not follow the line format."""


def _parse_bits(field: str, line_no: int) -> DirectionFlags:
    if len(field) != 4 or any(ch not in '01' for ch in field):
        raise LabyrinthFormatError(f"Line {line_no}: direction bits must be four '0'/'1' characters, got {field!r}")
    return DirectionFlags.from_sequence([ch == '1' for ch in field])


def _all_ones(field: str) -> bool:
    return bool(field) and all(ch == '1' for ch in field)


def parse_cell(line: str, line_no: int = 0) -> Cell:
    """Decode one 14-character cell line."""
    if len(line) != LINE_LENGTH:
        raise LabyrinthFormatError(f"Line {line_no}: expected {LINE_LENGTH} characters, got {len(line)}")
    return Cell(
        paths=_parse_bits(line[0:4], line_no),
        doors=_parse_bits(line[5:9], line_no),
        has_key=_all_ones(line[10:12]),
        is_goal=_all_ones(line[12:14]),
    )


def parse_labyrinth(lines: Iterable[str], columns: int = DEFAULT_COLUMNS) -> Grid:
    """
    Decode cell lines into a rectangular grid.

    Args:
        lines: One cell per line (trailing newlines and blank lines ignored)
        columns: Cells per row

    Returns:
        Row-major grid of Cells
    """
    if columns < 1:
        raise ValueError("columns must be positive")

    cells = []
    for line_no, raw in enumerate(lines, start=1):
        line = raw.rstrip('\r\n')
        if not line.strip():
            continue
        cells.append(parse_cell(line, line_no))

    if not cells:
        raise LabyrinthFormatError("Labyrinth contains no cells")
    if len(cells) % columns != 0:
        raise LabyrinthFormatError(f"{len(cells)} cells do not fill rows of {columns}")

    grid = [cells[r:r + columns] for r in range(0, len(cells), columns)]
    logger.debug(f"Parsed labyrinth: {len(grid)} rows x {columns} columns")
    return grid


def read_labyrinth(path: Union[str, Path], columns: int = DEFAULT_COLUMNS) -> Grid:
    """Load a labyrinth file from disk."""
    path = Path(path)
    with path.open('r', encoding='utf-8') as handle:
        grid = parse_labyrinth(handle, columns)
    logger.info(f"Loaded labyrinth {path.name}: {len(grid)}x{columns} cells")
    return grid


def format_cell(cell: Cell) -> str:
    """Encode one Cell as a 14-character line."""
    paths = ''.join('1' if cell.paths.get(d) else '0' for d in Direction)
    doors = ''.join('1' if cell.doors.get(d) else '0' for d in Direction)
    key = '11' if cell.has_key else '00'
    end = '11' if cell.is_goal else '00'
    return f"{paths} {doors} {key}{end}"


def format_labyrinth(grid: Grid) -> List[str]:
    """Encode a grid as row-major cell lines."""
    return [format_cell(cell) for row in grid for cell in row]


def write_labyrinth(grid: Grid, path: Union[str, Path]) -> None:
    """Write a grid in the labyrinth text format."""
    Path(path).write_text('\n'.join(format_labyrinth(grid)) + '\n', encoding='utf-8')
