from __future__ import annotations

import itertools
from collections.abc import Callable, Sequence
from typing import Protocol
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Tile(BaseModel):
    """A numbered tile. Frozen: a merge creates a new tile rather than mutating one."""

    model_config = ConfigDict(frozen=True)

    id: str
    # Saves written by the browser version of the game use "v".
    value: int = Field(..., validation_alias=AliasChoices("value", "v"))

    @field_validator("value")
    @classmethod
    def _power_of_two(cls, v: int) -> int:
        if v < 2 or v & (v - 1):
            raise ValueError(f"tile value must be a power of two >= 2, got {v}")
        return v


Board = list[list[Tile | None]]
Cell = tuple[int, int]
IdFactory = Callable[[], str]


class RandomSource(Protocol):
    """Uniform floats in [0, 1). `random.Random` satisfies this."""

    def random(self) -> float: ...


def new_tile_id() -> str:
    return uuid4().hex


class CounterIds:
    """Monotonic id factory: t1, t2, t3, ..."""

    def __init__(self, *, start: int = 1, prefix: str = "t") -> None:
        self._counter = itertools.count(start)
        self._prefix = prefix

    def __call__(self) -> str:
        return f"{self._prefix}{next(self._counter)}"


def empty_board(size: int = 4) -> Board:
    return [[None] * size for _ in range(size)]


def clone_board(board: Board) -> Board:
    # Tiles are frozen, so copying the rows is enough to decouple the grids.
    return [list(row) for row in board]


def empty_cells(board: Board) -> list[Cell]:
    return [(r, c) for r, row in enumerate(board) for c, tile in enumerate(row) if tile is None]


def random_empty_cell(board: Board, *, rng: RandomSource) -> Cell | None:
    """Pick one empty cell uniformly over all empty cells, or None when the board is full."""

    cells = empty_cells(board)
    if not cells:
        return None
    return cells[int(rng.random() * len(cells))]


def spawn_tile(
    board: Board,
    *,
    rng: RandomSource,
    new_id: IdFactory = new_tile_id,
    four_probability: float = 0.1,
) -> bool:
    """Place a 2 (or, rarely, a 4) on a random empty cell.

    The cell is drawn first, then the value. Returns False if the board is full.
    """

    cell = random_empty_cell(board, rng=rng)
    if cell is None:
        return False
    r, c = cell
    value = 2 if rng.random() < 1.0 - four_probability else 4
    board[r][c] = Tile(id=new_id(), value=value)
    return True


def board_from_values(rows: Sequence[Sequence[int]], *, new_id: IdFactory | None = None) -> Board:
    """Build a tile grid from plain ints, 0 meaning empty."""

    make_id = new_id or CounterIds()
    return [[Tile(id=make_id(), value=v) if v else None for v in row] for row in rows]


def board_values(board: Board) -> list[list[int]]:
    return [[tile.value if tile is not None else 0 for tile in row] for row in board]


def count_tiles(board: Board) -> int:
    return sum(1 for row in board for tile in row if tile is not None)


def max_tile(board: Board) -> int:
    return max((tile.value for row in board for tile in row if tile is not None), default=0)
