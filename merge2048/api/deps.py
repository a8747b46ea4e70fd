from __future__ import annotations

from collections.abc import Generator

import redis
from fastapi import Depends

from merge2048.config import config_from_env
from merge2048.infra.redis_client import shared_redis
from merge2048.session import GameSession

_SESSION: GameSession | None = None


def get_redis() -> Generator[redis.Redis, None, None]:
    yield shared_redis()


async def get_session(r: redis.Redis = Depends(get_redis)) -> GameSession:
    """The single game this server hosts, restored from redis on first use.

    Runs on the event loop with the routes, so concurrent first requests share one session.
    """

    global _SESSION
    if _SESSION is None:
        _SESSION = GameSession.restore(r=r, config=config_from_env())
    return _SESSION


def reset_session_for_tests() -> None:
    global _SESSION
    _SESSION = None
