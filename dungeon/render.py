# dungeon/render.py
"""Text output for finished dungeons: a raw value dump or an ASCII box map."""
from typing import Final, List

import structlog

from dungeon.world.cells import EMPTY, Cell
from dungeon.world.dungeon_grid import DungeonGrid

log = structlog.get_logger(__name__)

WALL_GLYPH: Final[str] = "#"
OPEN_GLYPH: Final[str] = " "
ENTRANCE_GLYPH: Final[str] = "E"
RENDER_MODES: Final[tuple[str, ...]] = ("visual", "raw")


def render_raw(grid: DungeonGrid) -> str:
    """One decimal cell value per line, row-major."""
    return "\n".join(str(int(value)) for value in grid.cells)


def _side(value: int, door: Cell) -> str:
    return OPEN_GLYPH if value & door else WALL_GLYPH


def _cell_rows(value: int) -> tuple[str, str, str]:
    if value == EMPTY:
        blank = OPEN_GLYPH * 3
        return blank, blank, blank
    top = WALL_GLYPH + _side(value, Cell.DOOR_NORTH) + WALL_GLYPH
    centre = ENTRANCE_GLYPH if value & Cell.ENTRANCE else OPEN_GLYPH
    middle = _side(value, Cell.DOOR_WEST) + centre + _side(value, Cell.DOOR_EAST)
    bottom = WALL_GLYPH + _side(value, Cell.DOOR_SOUTH) + WALL_GLYPH
    return top, middle, bottom


def render_ascii(grid: DungeonGrid) -> str:
    """
    Draws every cell as a 3x3 block: walls as ``#``, doors as gaps in the
    wall, the entrance marked ``E`` in its centre. Cells the generator never
    reached are left blank.
    """
    lines: List[str] = []
    for row in grid.as_rows():
        blocks = [_cell_rows(int(value)) for value in row]
        for rank in range(3):
            lines.append("".join(block[rank] for block in blocks))
    return "\n".join(lines)


def render(grid: DungeonGrid, mode: str = "visual") -> str:
    if mode == "visual":
        return render_ascii(grid)
    if mode == "raw":
        return render_raw(grid)
    log.error("Unknown render mode", mode=mode, expected=RENDER_MODES)
    raise ValueError(f"Unknown render mode: {mode!r}")
