from __future__ import annotations

import redis
from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from merge2048.api.deps import get_redis, get_session
from merge2048.api.models import (
    GameView,
    LeaderboardResponse,
    LeaderboardSubmitRequest,
    MoveRequest,
    MoveResponse,
    UndoResponse,
)
from merge2048.core.board import max_tile
from merge2048.game_store import add_leaderboard_record, get_leaderboard
from merge2048.leaderboard import make_record
from merge2048.session import GameSession
from merge2048.websocket_hub import hub

router = APIRouter()


def _view(session: GameSession) -> GameView:
    board = [list(row) for row in session.get_board()]
    return GameView(
        board=board,
        score=session.score,
        best=session.best,
        phase=session.phase,
        can_undo=session.can_undo,
        max_tile=max_tile(board),
    )


@router.websocket("/ws/game")
async def game_updates_ws(websocket: WebSocket) -> None:
    await hub.connect(websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(websocket)
    except Exception:
        await hub.disconnect(websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/game", response_model=GameView)
async def get_game_route(session: GameSession = Depends(get_session)) -> GameView:
    return _view(session)


@router.post("/game", response_model=GameView, status_code=status.HTTP_201_CREATED)
async def new_game_route(session: GameSession = Depends(get_session)) -> GameView:
    session.request_new_game()
    await hub.game_updated()
    return _view(session)


@router.post("/game/move", response_model=MoveResponse)
async def move_route(payload: MoveRequest, session: GameSession = Depends(get_session)) -> MoveResponse:
    result = session.request_move(payload.direction)
    if result is None:
        return MoveResponse(moved=False, game=_view(session))

    await hub.move_resolved(gained=result.gained, plan=result.plan)
    return MoveResponse(moved=True, gained=result.gained, plan=result.plan, game=_view(session))


@router.post("/game/undo", response_model=UndoResponse)
async def undo_route(session: GameSession = Depends(get_session)) -> UndoResponse:
    changed = session.request_undo()
    if changed:
        await hub.game_updated()
    return UndoResponse(changed=changed, game=_view(session))


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard_route(
    r: redis.Redis = Depends(get_redis),
    session: GameSession = Depends(get_session),
) -> LeaderboardResponse:
    return LeaderboardResponse(records=get_leaderboard(r=r, limit=session.config.leaderboard_limit))


@router.post("/leaderboard", response_model=LeaderboardResponse, status_code=status.HTTP_201_CREATED)
async def submit_score_route(
    payload: LeaderboardSubmitRequest,
    r: redis.Redis = Depends(get_redis),
    session: GameSession = Depends(get_session),
) -> LeaderboardResponse:
    """Record the current game's score under `name`."""

    try:
        record = make_record(payload.name, session.score)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    records = add_leaderboard_record(r=r, record=record, limit=session.config.leaderboard_limit)
    return LeaderboardResponse(records=records)
