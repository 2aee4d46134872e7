# dungeon/world/cells.py
"""Cell flag encoding for the dungeon grid."""
from enum import IntFlag
from typing import Final, Tuple


class Cell(IntFlag):
    DOOR_NORTH = 1
    DOOR_EAST = 2
    DOOR_SOUTH = 4
    DOOR_WEST = 8
    ENTRANCE = 16
    USED = 32


EMPTY: Final[int] = 0
# Visiting order used by the generator
DIRECTIONS: Final[Tuple[Cell, ...]] = (
    Cell.DOOR_NORTH,
    Cell.DOOR_EAST,
    Cell.DOOR_SOUTH,
    Cell.DOOR_WEST,
)
DOOR_MASK: Final[int] = int(
    Cell.DOOR_NORTH | Cell.DOOR_EAST | Cell.DOOR_SOUTH | Cell.DOOR_WEST
)

_OPPOSITES: Final[dict[Cell, Cell]] = {
    Cell.DOOR_NORTH: Cell.DOOR_SOUTH,
    Cell.DOOR_EAST: Cell.DOOR_WEST,
    Cell.DOOR_SOUTH: Cell.DOOR_NORTH,
    Cell.DOOR_WEST: Cell.DOOR_EAST,
}


def is_direction(flag: int) -> bool:
    """True if ``flag`` is exactly one of the four door bits."""
    return flag in _OPPOSITES


def opposite(direction: int) -> Cell:
    """Returns the door bit facing back from the neighbour in ``direction``."""
    try:
        return _OPPOSITES[Cell(direction)]
    except (KeyError, ValueError):
        raise ValueError(f"Not a single door direction: {direction!r}") from None


def describe(value: int) -> str:
    """Short human readable form of a cell value, e.g. ``'N|E|USED'``."""
    names = []
    for flag, label in (
        (Cell.DOOR_NORTH, "N"),
        (Cell.DOOR_EAST, "E"),
        (Cell.DOOR_SOUTH, "S"),
        (Cell.DOOR_WEST, "W"),
        (Cell.ENTRANCE, "ENTRANCE"),
        (Cell.USED, "USED"),
    ):
        if value & flag:
            names.append(label)
    return "|".join(names) if names else "EMPTY"
