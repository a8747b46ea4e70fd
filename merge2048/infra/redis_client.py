from __future__ import annotations

import os

import redis

_SHARED: redis.Redis | None = None


def get_redis_url() -> str:
    return os.environ.get("MERGE2048_REDIS_URL") or os.environ.get("REDIS_URL", "redis://localhost:6379/0")


def create_redis(url: str | None = None) -> redis.Redis:
    # Stored values are JSON / integer strings, so decode to str on the way out.
    return redis.Redis.from_url(url or get_redis_url(), decode_responses=True)


def shared_redis() -> redis.Redis:
    """Process-wide client. The game session outlives any single request, so it
    must not hold a per-request connection."""

    global _SHARED
    if _SHARED is None:
        _SHARED = create_redis()
    return _SHARED


def close_shared_redis() -> None:
    global _SHARED
    if _SHARED is not None:
        _SHARED.close()
        _SHARED = None
