import pytest

from dungeon.world.cells import Cell, describe, is_direction, opposite
from dungeon.world.neighbors import iter_neighbors, neighbor

N, E, S, W = Cell.DOOR_NORTH, Cell.DOOR_EAST, Cell.DOOR_SOUTH, Cell.DOOR_WEST


def test_interior_cell_has_all_neighbors():
    # 3x3 centre
    assert neighbor(3, 3, 4, N) == 1
    assert neighbor(3, 3, 4, E) == 5
    assert neighbor(3, 3, 4, S) == 7
    assert neighbor(3, 3, 4, W) == 3


def test_edges_have_no_neighbor():
    # 4x2 grid: indices 0..3 on top row, 4..7 bottom
    assert neighbor(4, 2, 2, N) is None
    assert neighbor(4, 2, 6, S) is None
    assert neighbor(4, 2, 3, E) is None
    assert neighbor(4, 2, 7, E) is None
    assert neighbor(4, 2, 0, W) is None
    assert neighbor(4, 2, 4, W) is None


def test_row_wrap_is_not_a_neighbor():
    # East of the last column must not wrap to the next row's first cell
    assert neighbor(3, 3, 2, E) is None
    assert neighbor(3, 3, 3, W) is None
    assert neighbor(3, 3, 5, E) is None


def test_single_column_grid():
    assert neighbor(1, 3, 0, E) is None
    assert neighbor(1, 3, 0, W) is None
    assert neighbor(1, 3, 1, N) == 0
    assert neighbor(1, 3, 1, S) == 2


def test_single_cell_grid_is_isolated():
    assert list(iter_neighbors(1, 1, 0)) == []


def test_iter_neighbors_corner():
    assert list(iter_neighbors(3, 2, 0)) == [(E, 1), (S, 3)]


@pytest.mark.parametrize("direction", [0, 3, 15, int(Cell.USED), int(Cell.ENTRANCE)])
def test_invalid_direction_rejected(direction):
    with pytest.raises(ValueError):
        neighbor(3, 3, 4, direction)


@pytest.mark.parametrize("index", [-1, 9, 100])
def test_out_of_grid_index_rejected(index):
    with pytest.raises(ValueError):
        neighbor(3, 3, index, N)


def test_opposites():
    assert opposite(N) == S
    assert opposite(S) == N
    assert opposite(E) == W
    assert opposite(W) == E
    with pytest.raises(ValueError):
        opposite(N | E)


def test_is_direction_and_describe():
    assert is_direction(E)
    assert not is_direction(N | S)
    assert describe(int(N | W | Cell.USED)) == "N|W|USED"
    assert describe(0) == "EMPTY"
