from __future__ import annotations

import random
from collections import Counter

import pytest
from pydantic import ValidationError

from merge2048.core.board import (
    CounterIds,
    Tile,
    board_from_values,
    board_values,
    clone_board,
    count_tiles,
    empty_board,
    max_tile,
    random_empty_cell,
    spawn_tile,
)


FULL = [
    [2, 4, 2, 4],
    [4, 2, 4, 2],
    [2, 4, 2, 4],
    [4, 2, 4, 2],
]


def test_empty_board_is_square_and_empty() -> None:
    b = empty_board()
    assert len(b) == 4
    assert all(len(row) == 4 for row in b)
    assert count_tiles(b) == 0
    assert max_tile(b) == 0


def test_clone_shares_no_rows() -> None:
    b = board_from_values([[2, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4])
    c = clone_board(b)

    c[0][0] = None
    c[1][1] = Tile(id="x", value=8)

    assert b[0][0] is not None
    assert b[1][1] is None
    assert board_values(clone_board(b)) == board_values(b)
    assert clone_board(b)[0][0].id == b[0][0].id  # type: ignore[union-attr]


def test_random_empty_cell_indexes_over_all_empty_cells(fixed_random) -> None:
    b = board_from_values(FULL)
    for r, c in [(0, 1), (1, 2), (2, 0), (3, 3)]:
        b[r][c] = None

    assert random_empty_cell(b, rng=fixed_random(0.0)) == (0, 1)
    assert random_empty_cell(b, rng=fixed_random(0.3)) == (1, 2)
    assert random_empty_cell(b, rng=fixed_random(0.74)) == (2, 0)
    assert random_empty_cell(b, rng=fixed_random(0.99)) == (3, 3)


def test_random_empty_cell_is_uniform_not_row_weighted() -> None:
    # Three empties in row 0, one in row 3. Picking a row first would give
    # the lone cell half of all draws.
    b = board_from_values(FULL)
    for r, c in [(0, 0), (0, 1), (0, 2), (3, 3)]:
        b[r][c] = None

    rng = random.Random(1234)
    counts = Counter(random_empty_cell(b, rng=rng) for _ in range(4000))

    assert set(counts) == {(0, 0), (0, 1), (0, 2), (3, 3)}
    for n in counts.values():
        assert 850 <= n <= 1150


def test_random_empty_cell_none_when_full(fixed_random) -> None:
    assert random_empty_cell(board_from_values(FULL), rng=fixed_random()) is None


@pytest.mark.parametrize(
    ("value_draw", "expected"),
    [(0.0, 2), (0.5, 2), (0.8999, 2), (0.9, 4), (0.95, 4)],
)
def test_spawn_tile_value_distribution_threshold(fixed_random, value_draw: float, expected: int) -> None:
    b = empty_board()
    ids = CounterIds(start=7)

    assert spawn_tile(b, rng=fixed_random(0.0, value_draw), new_id=ids) is True

    assert b[0][0] == Tile(id="t7", value=expected)
    assert count_tiles(b) == 1


def test_spawn_tile_on_full_board_is_a_noop(fixed_random) -> None:
    b = board_from_values(FULL)
    before = board_values(b)

    assert spawn_tile(b, rng=fixed_random()) is False
    assert board_values(b) == before


def test_tile_rejects_non_powers_of_two() -> None:
    for bad in (0, 1, 3, 6, -2):
        with pytest.raises(ValidationError):
            Tile(id="x", value=bad)


def test_tile_accepts_short_value_key_and_is_frozen() -> None:
    t = Tile.model_validate({"id": "abc", "v": 16})
    assert t.value == 16

    with pytest.raises(ValidationError):
        t.value = 32  # type: ignore[misc]


def test_counter_ids_are_monotonic() -> None:
    ids = CounterIds(prefix="n")
    assert [ids(), ids(), ids()] == ["n1", "n2", "n3"]
