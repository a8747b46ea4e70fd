from __future__ import annotations

from merge2048.core.board import Board, board_values, clone_board
from merge2048.core.engine import Direction, resolve_move


def can_move(board: Board) -> bool:
    """True if an empty cell or an orthogonally adjacent equal pair exists.

    That is exactly the condition for at least one direction to produce a move.
    """

    values = board_values(board)
    size = len(values)

    for row in values:
        if 0 in row:
            return True

    for r in range(size):
        for c in range(size):
            v = values[r][c]
            if r + 1 < size and values[r + 1][c] == v:
                return True
            if c + 1 < size and values[r][c + 1] == v:
                return True
    return False


def available_directions(board: Board) -> list[Direction]:
    """Directions that would change the board. The input board is not touched."""

    return [
        d
        for d in Direction
        # Throwaway ids: only the `moved` flag is inspected.
        if resolve_move(clone_board(board), d, new_id=lambda: "_").moved
    ]
