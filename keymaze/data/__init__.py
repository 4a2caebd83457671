"""KEYMAZE data loading: labyrinth text format."""

from keymaze.data.labyrinth_io import (
    LabyrinthFormatError,
    parse_cell,
    parse_labyrinth,
    read_labyrinth,
    format_cell,
    format_labyrinth,
    write_labyrinth,
)

__all__ = [
    'LabyrinthFormatError',
    'parse_cell',
    'parse_labyrinth',
    'read_labyrinth',
    'format_cell',
    'format_labyrinth',
    'write_labyrinth',
]
