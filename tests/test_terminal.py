from __future__ import annotations

from merge2048.core.board import board_from_values, board_values
from merge2048.core.engine import Direction, resolve_move
from merge2048.core.terminal import available_directions, can_move

STUCK = [
    [2, 4, 2, 4],
    [4, 2, 4, 2],
    [2, 4, 2, 4],
    [4, 2, 4, 2],
]

DISTINCT = [
    [2, 4, 8, 16],
    [32, 64, 128, 256],
    [512, 1024, 2048, 4096],
    [8192, 16384, 32768, 65536],
]


def test_any_empty_cell_means_playable() -> None:
    rows = [row[:] for row in STUCK]
    rows[3][3] = 0
    assert can_move(board_from_values(rows)) is True


def test_full_board_without_equal_neighbours_is_stuck() -> None:
    b = board_from_values(STUCK)

    assert can_move(b) is False
    assert available_directions(b) == []
    for d in Direction:
        assert resolve_move(b, d).moved is False
    assert board_values(b) == STUCK


def test_horizontal_pair_keeps_full_board_playable() -> None:
    rows = [row[:] for row in DISTINCT]
    rows[1][1] = 32  # next to the 32 at (1, 0)

    b = board_from_values(rows)

    assert can_move(b) is True
    assert set(available_directions(b)) == {Direction.left, Direction.right}


def test_vertical_pair_keeps_full_board_playable() -> None:
    rows = [row[:] for row in DISTINCT]
    rows[2][0] = 32  # below the 32 at (1, 0)

    b = board_from_values(rows)

    assert can_move(b) is True
    assert set(available_directions(b)) == {Direction.up, Direction.down}


def test_available_directions_leaves_board_untouched() -> None:
    rows = [[0, 2, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]
    b = board_from_values(rows)
    ids = [[t.id if t else None for t in row] for row in b]

    assert set(available_directions(b)) == {Direction.left, Direction.right, Direction.down}
    assert [[t.id if t else None for t in row] for row in b] == ids
