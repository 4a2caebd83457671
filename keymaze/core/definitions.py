"""
KEYMAZE DEFINITIONS
===================
Central constants and type definitions for the entire project.

This file is the SINGLE SOURCE OF TRUTH for:
- Adjacency matrix edge codes
- Graph builder flag weights
- Directions and their grid deltas
- Cell / direction flag types
- Failure kinds reported by the solvers

Import from here instead of duplicating constants across modules.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Sequence, Tuple


# ==========================================
# ADJACENCY MATRIX EDGE CODES
# ==========================================
# The builder produces these numbers; every solver reads them

class EdgeType(IntEnum):
    """Entry values of the adjacency matrix."""
    NONE = 0      # Wall / no connection
    OPEN = 1      # Free passage
    DOOR = 255    # Locked door (needs a key, opens permanently)


NO_EDGE: int = EdgeType.NONE
OPEN_EDGE: int = EdgeType.OPEN
DOOR_EDGE: int = EdgeType.DOOR

# ==========================================
# GRAPH BUILDER WEIGHTS
# ==========================================
# Each side of a connection contributes its flags to the shared entry.
# Two agreeing path flags sum to 4; adding one door flag gives 7.

PATH_FLAG_WEIGHT: int = 2
DOOR_FLAG_WEIGHT: int = 3

EDGE_CLASSIFICATION: Dict[int, int] = {
    2 * PATH_FLAG_WEIGHT: OPEN_EDGE,
    2 * PATH_FLAG_WEIGHT + DOOR_FLAG_WEIGHT: DOOR_EDGE,
}

# Column count of the labyrinth files this project was built around
DEFAULT_COLUMNS: int = 9


# ==========================================
# DIRECTIONS
# ==========================================

class Direction(IntEnum):
    """Cardinal directions in labyrinth file order (W, E, N, S)."""
    WEST = 0
    EAST = 1
    NORTH = 2
    SOUTH = 3

    @property
    def opposite(self) -> 'Direction':
        return OPPOSITE[self]


DIRECTION_DELTAS: Dict[Direction, Tuple[int, int]] = {
    Direction.WEST: (0, -1),
    Direction.EAST: (0, 1),
    Direction.NORTH: (-1, 0),
    Direction.SOUTH: (1, 0),
}

OPPOSITE: Dict[Direction, Direction] = {
    Direction.WEST: Direction.EAST,
    Direction.EAST: Direction.WEST,
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
}


# ==========================================
# FAILURE KINDS
# ==========================================

class FailureKind(str, Enum):
    """Why a solve produced no route."""
    NO_PATH_FOUND = "no_path_found"        # A* exhausted its frontier
    KEY_UNREACHABLE = "key_unreachable"    # Planner could not reach a needed key
    MALFORMED_CELL = "malformed_cell"      # Builder dropped disagreeing flags (never raised)


# ==========================================
# CELL TYPES
# ==========================================

@dataclass
class DirectionFlags:
    """One boolean per cardinal direction."""
    west: bool = False
    east: bool = False
    north: bool = False
    south: bool = False

    def get(self, direction: Direction) -> bool:
        return getattr(self, direction.name.lower())

    def any(self) -> bool:
        return self.west or self.east or self.north or self.south

    @classmethod
    def from_sequence(cls, bits: Sequence[bool]) -> 'DirectionFlags':
        """Build from four values in W, E, N, S order."""
        if len(bits) != 4:
            raise ValueError(f"Expected 4 direction flags, got {len(bits)}")
        return cls(*(bool(b) for b in bits))


@dataclass
class Cell:
    """A validated grid cell as handed over by the grid loader."""
    paths: DirectionFlags = field(default_factory=DirectionFlags)
    doors: DirectionFlags = field(default_factory=DirectionFlags)
    has_key: bool = False
    is_goal: bool = False

    def is_empty(self) -> bool:
        """True for cells without any passage (rendered as blank space)."""
        return not (self.paths.any() or self.doors.any())


Grid = List[List[Cell]]


def node_index(row: int, col: int, columns: int) -> int:
    """Row-major linear index of a grid position."""
    return row * columns + col


def node_position(node: int, columns: int) -> Tuple[int, int]:
    """Inverse of node_index."""
    return divmod(node, columns)
