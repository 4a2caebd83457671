"""
Tests for the labyrinth text format loader and writer.
"""

import logging

import pytest

from keymaze.core import DOOR_EDGE, OPEN_EDGE, build_maze_graph
from keymaze.data import (
    LabyrinthFormatError,
    format_cell,
    format_labyrinth,
    parse_cell,
    parse_labyrinth,
    read_labyrinth,
    write_labyrinth,
)
from keymaze.simulation import solve_sequential

from maze_factory import create_detour_maze, create_grid

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# 1x3 line: key at 0, open 0-1, door 1-2 (flagged on cell 1), goal at 2
LINE_LABYRINTH = [
    "0100 0000 1100\n",
    "1100 0100 0000\n",
    "1000 0000 0011\n",
]


class TestParseCell:

    def test_fields(self):
        cell = parse_cell("0101 0001 1100")
        assert cell.paths.east and cell.paths.south
        assert not cell.paths.west and not cell.paths.north
        assert cell.doors.south
        assert not cell.doors.east
        assert cell.has_key
        assert not cell.is_goal

    def test_goal(self):
        assert parse_cell("1000 0000 0011").is_goal

    def test_half_set_markers_are_ignored(self):
        cell = parse_cell("1000 0000 1001")
        assert not cell.has_key
        assert not cell.is_goal

    def test_separators_are_free(self):
        assert parse_cell("0101|0001|1100").paths.south

    @pytest.mark.parametrize('line', ["0101 0001 110", "0101 0001 11000", ""])
    def test_wrong_length(self, line):
        with pytest.raises(LabyrinthFormatError):
            parse_cell(line)

    @pytest.mark.parametrize('line', ["01x1 0001 1100", "0101 0002 1100"])
    def test_bad_direction_bits(self, line):
        with pytest.raises(LabyrinthFormatError):
            parse_cell(line, line_no=7)

    def test_format_error_is_value_error(self):
        assert issubclass(LabyrinthFormatError, ValueError)


class TestParseLabyrinth:

    def test_line_labyrinth(self):
        grid = parse_labyrinth(LINE_LABYRINTH, columns=3)
        assert len(grid) == 1 and len(grid[0]) == 3
        graph = build_maze_graph(grid)
        assert graph.matrix[0, 1] == OPEN_EDGE
        assert graph.matrix[1, 2] == DOOR_EDGE
        assert graph.key_nodes() == [0]
        assert graph.goal_nodes() == [2]

    def test_blank_lines_skipped(self):
        lines = ["\n"] + LINE_LABYRINTH[:2] + ["   \n"] + LINE_LABYRINTH[2:] + ["\n"]
        assert len(parse_labyrinth(lines, columns=3)[0]) == 3

    def test_windows_line_endings(self):
        lines = [line.replace("\n", "\r\n") for line in LINE_LABYRINTH]
        assert len(parse_labyrinth(lines, columns=3)[0]) == 3

    def test_rows_must_fill(self):
        with pytest.raises(LabyrinthFormatError):
            parse_labyrinth(LINE_LABYRINTH, columns=2)

    def test_empty(self):
        with pytest.raises(LabyrinthFormatError):
            parse_labyrinth([], columns=3)

    def test_bad_columns(self):
        with pytest.raises(ValueError):
            parse_labyrinth(LINE_LABYRINTH, columns=0)


class TestFiles:

    def test_format_cell(self):
        line = "0101 0001 1100"
        assert format_cell(parse_cell(line)) == line

    def test_write_then_solve(self, tmp_path):
        grid = create_grid(2, 3,
                           open_edges=[(0, 1), (2, 5), (0, 3), (3, 4)],
                           door_edges=[(1, 2)], keys=[4], goals=[5])
        path = tmp_path / "detour.txt"
        write_labyrinth(grid, path)

        loaded = read_labyrinth(path, columns=3)
        assert format_labyrinth(loaded) == format_labyrinth(grid)

        graph = build_maze_graph(loaded)
        expected = create_detour_maze()
        assert (graph.matrix == expected.matrix).all()
        result = solve_sequential(graph, 0, graph.goal_nodes()[0])
        assert result.path == [0, 3, 4, 3, 0, 1, 2, 5]

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            read_labyrinth(tmp_path / "missing.txt")
