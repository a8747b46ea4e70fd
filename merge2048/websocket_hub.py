from __future__ import annotations

import asyncio

from fastapi import WebSocket

from merge2048.core.engine import TileTransition


class GameWebSocketHub:
    """In-process fan-out of game events to connected renderers.

    Events are small JSON dicts:
      - ``{"type": "move_resolved", "gained": int, "plan": [...]}`` after a move commits.
      - ``{"type": "game_updated"}`` after new game / undo.

    Renderers re-fetch ``GET /game`` for the full board.
    """

    def __init__(self) -> None:
        self._conns: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._conns.add(websocket)

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._conns.discard(websocket)

    async def broadcast(self, payload: dict[str, object]) -> None:
        async with self._lock:
            conns = list(self._conns)

        dead: list[WebSocket] = []
        for ws in conns:
            try:
                await ws.send_json(payload)
            except Exception:
                dead.append(ws)

        if dead:
            async with self._lock:
                self._conns.difference_update(dead)

    async def move_resolved(self, *, gained: int, plan: list[TileTransition]) -> None:
        await self.broadcast(
            {
                "type": "move_resolved",
                "gained": gained,
                "plan": [t.model_dump(mode="json", by_alias=True) for t in plan],
            }
        )

    async def game_updated(self) -> None:
        await self.broadcast({"type": "game_updated"})


hub = GameWebSocketHub()
