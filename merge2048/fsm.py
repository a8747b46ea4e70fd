from __future__ import annotations

from statemachine import State, StateMachine

from merge2048.api.models import GamePhase


class GameFSM(StateMachine):
    """Session lifecycle: idle -> in_progress -> game_over -> (new game) -> in_progress.

    The session owns the board and score; the FSM only guards which lifecycle
    transitions are legal.
    """

    idle = State(GamePhase.idle.value, value=GamePhase.idle.value, initial=True)
    in_progress = State(GamePhase.in_progress.value, value=GamePhase.in_progress.value)
    game_over = State(GamePhase.game_over.value, value=GamePhase.game_over.value)

    # Restarting mid-game is allowed.
    start_game = idle.to(in_progress) | in_progress.to(in_progress) | game_over.to(in_progress)
    lose = in_progress.to(game_over)
    # Undo out of a finished game.
    resume = game_over.to(in_progress)

    def __init__(self, phase: GamePhase = GamePhase.idle):
        super().__init__(start_value=phase.value)

    @property
    def phase(self) -> GamePhase:
        return GamePhase(str(self.current_state.value))
