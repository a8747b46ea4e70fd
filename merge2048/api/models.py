from __future__ import annotations

from enum import StrEnum

from pydantic import AliasChoices, BaseModel, Field, model_validator

from merge2048.core.board import Board
from merge2048.core.engine import Direction, TileTransition


class GamePhase(StrEnum):
    idle = "idle"
    in_progress = "in_progress"
    game_over = "game_over"


def _check_square(board: Board) -> None:
    size = len(board)
    if size == 0 or any(len(row) != size for row in board):
        raise ValueError("board must be a non-empty square grid")


class UndoEntry(BaseModel):
    """Board + score captured right before a move was attempted."""

    # Older saves use the short keys "b" / "s".
    board: Board = Field(..., validation_alias=AliasChoices("board", "b"))
    score: int = Field(0, ge=0, validation_alias=AliasChoices("score", "s"))

    @model_validator(mode="after")
    def _square(self) -> UndoEntry:
        _check_square(self.board)
        return self


class SessionState(BaseModel):
    """Persisted session record: `{board, score, best, undoStack}`."""

    board: Board
    score: int = Field(0, ge=0)
    best: int = Field(0, ge=0)
    undo_stack: list[UndoEntry] = Field(
        default_factory=list,
        validation_alias=AliasChoices("undoStack", "undo_stack"),
        serialization_alias="undoStack",
    )

    @model_validator(mode="after")
    def _consistent_sizes(self) -> SessionState:
        _check_square(self.board)
        size = len(self.board)
        if any(len(e.board) != size for e in self.undo_stack):
            raise ValueError("undo snapshots must match the board size")
        return self


class LeaderboardRecord(BaseModel):
    name: str = Field(..., min_length=1, max_length=24)
    score: int = Field(..., ge=0)
    # Epoch milliseconds; breaks score ties (earlier wins).
    timestamp: int
    # ISO calendar date, for display.
    date: str


class MoveRequest(BaseModel):
    direction: Direction


class LeaderboardSubmitRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=24)


class GameView(BaseModel):
    board: Board
    score: int
    best: int
    phase: GamePhase
    can_undo: bool
    max_tile: int


class MoveResponse(BaseModel):
    moved: bool
    gained: int = 0
    plan: list[TileTransition] = Field(default_factory=list)
    game: GameView


class UndoResponse(BaseModel):
    changed: bool
    game: GameView


class LeaderboardResponse(BaseModel):
    records: list[LeaderboardRecord]
