# dungeon/world/dungeon_grid.py
from typing import List, Sequence, Tuple

import numpy as np
import structlog

from dungeon.world.cells import DIRECTIONS, Cell
from dungeon.world.neighbors import iter_neighbors

log = structlog.get_logger(__name__)

CELL_DTYPE = np.uint8


def _check_dimensions(width: int, height: int) -> None:
    if width < 1 or height < 1:
        log.error("Invalid dungeon dimensions", width=width, height=height)
        raise ValueError("Dungeon width and height must be positive integers.")


def new_cell_array(width: int, height: int) -> np.ndarray:
    """Allocates the empty, row-major cell storage for a ``width`` x ``height`` grid."""
    _check_dimensions(width, height)
    return np.zeros(width * height, dtype=CELL_DTYPE)


class DungeonGrid:
    """
    A finished dungeon layout.

    Cells are kept row-major in a flat array, index ``y * width + x``. The
    array is frozen on construction; the generator is the only code that ever
    writes cell values, and it does so before handing them over here.
    """

    def __init__(
        self,
        width: int,
        height: int,
        cells: np.ndarray,
        entrance: int,
        frontier: Sequence[int],
    ):
        _check_dimensions(width, height)
        if cells.shape != (width * height,):
            log.error(
                "Cell array does not match dimensions",
                shape=cells.shape,
                width=width,
                height=height,
            )
            raise ValueError("Cell array size must equal width * height.")
        if not 0 <= entrance < width * height:
            raise ValueError(f"Entrance index {entrance} outside grid.")

        self._width = width
        self._height = height
        self._cells: np.ndarray = np.array(cells, dtype=CELL_DTYPE, copy=True)
        self._cells.setflags(write=False)
        self._entrance = entrance
        self._frontier: Tuple[int, ...] = tuple(int(i) for i in frontier)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def area(self) -> int:
        return self._width * self._height

    @property
    def entrance(self) -> int:
        return self._entrance

    @property
    def cells(self) -> np.ndarray:
        """Read-only flat view of every cell value."""
        return self._cells

    @property
    def frontier(self) -> Tuple[int, ...]:
        """Cell indices in the order they were discovered, entrance first."""
        return self._frontier

    @property
    def covered(self) -> int:
        return len(self._frontier)

    @property
    def coverage(self) -> float:
        return self.covered / self.area

    def as_rows(self) -> np.ndarray:
        """Read-only ``(height, width)`` view of the cells."""
        return self._cells.reshape(self._height, self._width)

    def position(self, index: int) -> Tuple[int, int]:
        """``(x, y)`` of a cell index."""
        self._check_index(index)
        return index % self._width, index // self._width

    def cell(self, index: int) -> Cell:
        self._check_index(index)
        return Cell(int(self._cells[index]))

    def has_door(self, index: int, direction: Cell) -> bool:
        return bool(self.cell(index) & direction)

    def doors(self, index: int) -> Tuple[Cell, ...]:
        value = self.cell(index)
        return tuple(d for d in DIRECTIONS if value & d)

    def door_neighbors(self, index: int) -> List[int]:
        """Indices reachable from ``index`` through one of its doors."""
        value = self.cell(index)
        return [
            n
            for d, n in iter_neighbors(self._width, self._height, index)
            if value & d
        ]

    def is_entrance(self, index: int) -> bool:
        return bool(self.cell(index) & Cell.ENTRANCE)

    def is_used(self, index: int) -> bool:
        return bool(self.cell(index) & Cell.USED)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.area:
            raise IndexError(f"Cell index {index} outside grid of {self.area} cells")

    def __repr__(self) -> str:
        return (
            f"DungeonGrid(width={self._width}, height={self._height}, "
            f"entrance={self._entrance}, covered={self.covered})"
        )
