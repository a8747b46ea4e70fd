from __future__ import annotations

import logging
import random
from collections import deque
from collections.abc import Callable

import redis

from merge2048.api.models import GamePhase, SessionState, UndoEntry
from merge2048.config import DEFAULT_CONFIG, GameConfig
from merge2048.core.board import Board, IdFactory, RandomSource, Tile, clone_board, empty_board, new_tile_id, spawn_tile
from merge2048.core.engine import Direction, MoveResult, TileTransition, parse_direction, resolve_move
from merge2048.core.terminal import can_move
from merge2048.fsm import GameFSM
from merge2048.game_store import load_best, load_state, raise_best, save_state

logger = logging.getLogger(__name__)

MoveListener = Callable[[list[TileTransition]], None]


class GameSession:
    """One player's game: board, score, best score and undo history.

    Contract for presentation layers:
      - read with `get_board()`, `score`, `best`, `is_game_over()`.
      - drive with `request_move()`, `request_undo()`, `request_new_game()`.
      - animate via `on_move_resolved(callback)`; the callback receives the
        transition plan. While a plan is being animated the session is `busy`
        and drops further move requests until `complete_animation()` is called.

    When a redis client is given, every committed change is written through
    `game_store` (best-effort). Without one the session is purely in-memory.
    """

    def __init__(
        self,
        *,
        r: redis.Redis | None = None,
        rng: RandomSource | None = None,
        new_id: IdFactory = new_tile_id,
        config: GameConfig = DEFAULT_CONFIG,
    ) -> None:
        self.config = config
        self._r = r
        self._rng: RandomSource = rng or random.Random()
        self._new_id = new_id

        self._board: Board = empty_board(config.size)
        self._score = 0
        self._best = load_best(r=r) if r is not None else 0
        self._undo: deque[UndoEntry] = deque(maxlen=config.undo_limit)
        self._fsm = GameFSM()

        self._listeners: list[MoveListener] = []
        self._busy = False

    @classmethod
    def restore(
        cls,
        *,
        r: redis.Redis,
        rng: RandomSource | None = None,
        new_id: IdFactory = new_tile_id,
        config: GameConfig = DEFAULT_CONFIG,
    ) -> GameSession:
        """Resume the saved game, or start a fresh one if nothing usable is saved."""

        session = cls(r=r, rng=rng, new_id=new_id, config=config)
        state = load_state(r=r)
        if state is not None and len(state.board) == config.size:
            session.load(state)
        else:
            session.new_game()
        return session

    # --- read side -------------------------------------------------------

    @property
    def score(self) -> int:
        return self._score

    @property
    def best(self) -> int:
        return self._best

    @property
    def phase(self) -> GamePhase:
        return self._fsm.phase

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    def get_board(self) -> tuple[tuple[Tile | None, ...], ...]:
        return tuple(tuple(row) for row in self._board)

    def is_game_over(self) -> bool:
        return self.phase == GamePhase.game_over

    def snapshot(self) -> SessionState:
        return SessionState(
            board=clone_board(self._board),
            score=self._score,
            best=self._best,
            undo_stack=list(self._undo),
        )

    # --- lifecycle -------------------------------------------------------

    def load(self, state: SessionState) -> None:
        self._board = clone_board(state.board)
        self._score = state.score
        self._best = max(self._best, state.best, state.score)
        # deque(maxlen) keeps the newest entries if the saved stack is longer.
        self._undo = deque(state.undo_stack, maxlen=self.config.undo_limit)
        self._busy = False
        self._fsm = GameFSM(GamePhase.in_progress if can_move(self._board) else GamePhase.game_over)

    def new_game(self) -> None:
        self._board = empty_board(self.config.size)
        self._score = 0
        self._undo.clear()
        self._busy = False
        self._spawn()
        self._spawn()
        self._fsm.start_game()
        logger.info("New game started")
        self._persist()

    def apply_move(self, direction: str | Direction) -> MoveResult:
        """Resolve a move and commit it.

        A snapshot is pushed before resolving and popped again if nothing moved,
        so only real moves are undoable. A no-op on a stuck board ends the game.
        """

        d = parse_direction(direction)
        if self.phase != GamePhase.in_progress:
            return MoveResult(moved=False, gained=0, plan=[])

        evicted = self._undo[0] if len(self._undo) == self._undo.maxlen else None
        self._undo.append(UndoEntry(board=clone_board(self._board), score=self._score))

        result = resolve_move(self._board, d, new_id=self._new_id)
        if not result.moved:
            self._undo.pop()
            if evicted is not None:
                self._undo.appendleft(evicted)
            if not can_move(self._board):
                self._lose()
            return result

        self._score += result.gained
        if self._score > self._best:
            self._best = self._score
            if self._r is not None:
                self._best = raise_best(r=self._r, best=self._best)

        self._spawn()
        if not can_move(self._board):
            self._lose()

        logger.debug("Move %s: +%d (score=%d)", d.value, result.gained, self._score)
        self._persist()
        self._notify(result)
        return result

    def undo(self) -> bool:
        """Restore the board and score from before the last move. Never lowers `best`."""

        if not self._undo:
            return False
        entry = self._undo.pop()
        self._board = clone_board(entry.board)
        self._score = entry.score
        self._busy = False
        if self.phase == GamePhase.game_over and can_move(self._board):
            self._fsm.resume()
        logger.debug("Undo (score=%d, depth=%d)", self._score, len(self._undo))
        self._persist()
        return True

    # --- presentation-facing ---------------------------------------------

    def request_move(self, direction: str | Direction) -> MoveResult | None:
        """Gated `apply_move`: None if dropped (busy / not playing) or a no-op."""

        d = parse_direction(direction)
        if self._busy:
            logger.debug("Dropping move %s: animation pending", d.value)
            return None
        result = self.apply_move(d)
        return result if result.moved else None

    def request_undo(self) -> bool:
        return self.undo()

    def request_new_game(self) -> None:
        self.new_game()

    def on_move_resolved(self, callback: MoveListener) -> MoveListener:
        """Register an animation callback. Usable as a decorator."""

        self._listeners.append(callback)
        return callback

    def complete_animation(self) -> None:
        self._busy = False

    # --- internals -------------------------------------------------------

    def _spawn(self) -> bool:
        return spawn_tile(
            self._board,
            rng=self._rng,
            new_id=self._new_id,
            four_probability=self.config.four_probability,
        )

    def _lose(self) -> None:
        self._fsm.lose()
        logger.info("Game over (score=%d, best=%d)", self._score, self._best)

    def _persist(self) -> None:
        if self._r is not None:
            save_state(r=self._r, state=self.snapshot())

    def _notify(self, result: MoveResult) -> None:
        if not self._listeners:
            return
        # Set before calling out so a listener that finishes synchronously can clear it.
        self._busy = True
        try:
            for callback in list(self._listeners):
                callback(result.plan)
        except Exception:
            self._busy = False
            raise
