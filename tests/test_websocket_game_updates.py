from __future__ import annotations

import fakeredis
from fastapi.testclient import TestClient

from merge2048.api.models import SessionState
from merge2048.core.board import board_from_values
from merge2048.game_store import save_state


def test_ws_receives_move_plan(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, r = client_and_redis
    save_state(r=r, state=SessionState(board=board_from_values([[0, 0, 0, 8], [0] * 4, [0] * 4, [0] * 4])))

    with client.websocket_connect("/ws/game") as ws:
        res = client.post("/game/move", json={"direction": "left"})
        assert res.status_code == 200

        msg = ws.receive_json()
        assert msg == {
            "type": "move_resolved",
            "gained": 0,
            "plan": [{"id": "t1", "from": [0, 3], "to": [0, 0], "removed": False}],
        }


def test_ws_notified_on_new_game(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis

    with client.websocket_connect("/ws/game") as ws:
        assert client.post("/game").status_code == 201
        assert ws.receive_json() == {"type": "game_updated"}
