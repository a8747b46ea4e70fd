"""Move resolution.

`resolve_move` compacts every line of the board towards the move direction,
merging equal neighbours pairwise, and reports what happened to each tile so a
renderer can animate it.

Convention: the board passed in is rewritten in place. Callers that may need to
roll back (the session's undo stack) snapshot it before calling.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from merge2048.core.board import Board, Cell, IdFactory, Tile, new_tile_id
from merge2048.errors import InvalidDirection


class Direction(StrEnum):
    left = "left"
    right = "right"
    up = "up"
    down = "down"


def parse_direction(value: str | Direction) -> Direction:
    if isinstance(value, Direction):
        return value
    try:
        return Direction(value)
    except ValueError as e:
        raise InvalidDirection(value) from e


class TileTransition(BaseModel):
    """Where one tile went during a move.

    Two `removed` transitions sharing a destination are a merge pair; the merged
    tile itself has a fresh id and no transition of its own.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    from_: Cell = Field(..., alias="from")
    to: Cell
    removed: bool = False


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Outcome of resolving one direction.

    - `moved`: some tile was displaced or merged; False means the move is a no-op.
    - `gained`: sum of the values of all tiles created by merges.
    - `plan`: transitions in line order, then scan order within the line.
    """

    moved: bool
    gained: int
    plan: list[TileTransition]


def line_cells(direction: Direction, index: int, size: int) -> list[Cell]:
    """Cells of line `index`, ordered from the edge tiles compact towards."""

    if direction == Direction.left:
        return [(index, j) for j in range(size)]
    if direction == Direction.right:
        return [(index, size - 1 - j) for j in range(size)]
    if direction == Direction.up:
        return [(j, index) for j in range(size)]
    return [(size - 1 - j, index) for j in range(size)]


def resolve_move(board: Board, direction: str | Direction, *, new_id: IdFactory = new_tile_id) -> MoveResult:
    d = parse_direction(direction)
    size = len(board)

    plan: list[TileTransition] = []
    gained = 0

    for i in range(size):
        cells = line_cells(d, i, size)
        occupied: list[tuple[Tile, Cell]] = []
        for r, c in cells:
            tile = board[r][c]
            if tile is not None:
                occupied.append((tile, (r, c)))

        out: list[Tile | None] = [None] * size
        write = 0
        k = 0
        while k < len(occupied):
            tile, src = occupied[k]
            dst = cells[write]

            # Advancing past both tiles of a pair is what stops a merged tile
            # from merging again in the same move.
            if k + 1 < len(occupied) and occupied[k + 1][0].value == tile.value:
                other, other_src = occupied[k + 1]
                merged = Tile(id=new_id(), value=tile.value * 2)
                out[write] = merged
                gained += merged.value
                plan.append(TileTransition(id=tile.id, from_=src, to=dst, removed=True))
                plan.append(TileTransition(id=other.id, from_=other_src, to=dst, removed=True))
                k += 2
            else:
                out[write] = tile
                plan.append(TileTransition(id=tile.id, from_=src, to=dst, removed=False))
                k += 1
            write += 1

        for (r, c), tile in zip(cells, out):
            board[r][c] = tile

    moved = any(t.removed or t.from_ != t.to for t in plan)
    return MoveResult(moved=moved, gained=gained, plan=plan)
