# dungeon/world/neighbors.py
from typing import Iterator, Optional, Tuple

from dungeon.world.cells import DIRECTIONS, Cell, is_direction


def neighbor(width: int, height: int, index: int, direction: int) -> Optional[int]:
    """
    Index of the cell next to ``index`` in ``direction``, or ``None`` when
    ``index`` sits on the grid edge facing that way.
    """
    area = width * height
    if not 0 <= index < area:
        raise ValueError(f"Cell index {index} outside grid of {area} cells")
    if not is_direction(direction):
        raise ValueError(f"Not a single door direction: {direction!r}")

    column = index % width
    if direction == Cell.DOOR_NORTH:
        candidate = index - width
        return candidate if candidate >= 0 else None
    if direction == Cell.DOOR_SOUTH:
        candidate = index + width
        return candidate if candidate < area else None
    if direction == Cell.DOOR_EAST:
        # Stay on the same row
        return index + 1 if column < width - 1 else None
    return index - 1 if column > 0 else None


def iter_neighbors(
    width: int, height: int, index: int
) -> Iterator[Tuple[Cell, int]]:
    """Yields ``(direction, neighbour_index)`` for every in-grid neighbour."""
    for direction in DIRECTIONS:
        candidate = neighbor(width, height, index, direction)
        if candidate is not None:
            yield direction, candidate
