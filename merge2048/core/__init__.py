"""Board, move engine and terminal detection.

Kept free of FastAPI and redis concerns so it can be driven by the session,
the API routes, and tests alike.
"""

from merge2048.core.board import (
    Board,
    Cell,
    CounterIds,
    IdFactory,
    RandomSource,
    Tile,
    board_from_values,
    board_values,
    clone_board,
    count_tiles,
    empty_board,
    empty_cells,
    max_tile,
    new_tile_id,
    random_empty_cell,
    spawn_tile,
)
from merge2048.core.engine import Direction, MoveResult, TileTransition, parse_direction, resolve_move
from merge2048.core.terminal import available_directions, can_move

__all__ = [
    "Board",
    "Cell",
    "CounterIds",
    "Direction",
    "IdFactory",
    "MoveResult",
    "RandomSource",
    "Tile",
    "TileTransition",
    "available_directions",
    "board_from_values",
    "board_values",
    "can_move",
    "clone_board",
    "count_tiles",
    "empty_board",
    "empty_cells",
    "max_tile",
    "new_tile_id",
    "parse_direction",
    "random_empty_cell",
    "resolve_move",
    "spawn_tile",
]
