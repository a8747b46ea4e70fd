"""Persistence of session state, best score and leaderboard in redis.

Three independent string keys, so clearing one never loses the others:

- ``2048-best``: best score as a plain integer string.
- ``2048-game-state``: the full session (board, score, best, undo stack) as JSON.
- ``2048-leaderboard``: JSON list of the top records.

Reads never fail the caller: missing or malformed data reads as "nothing saved".
Writes are best-effort: a storage error is logged and gameplay carries on.
"""

from __future__ import annotations

import logging

import redis
from pydantic import TypeAdapter, ValidationError

from merge2048.api.models import LeaderboardRecord, SessionState
from merge2048.errors import PersistenceReadError
from merge2048.leaderboard import rank_records

logger = logging.getLogger(__name__)

KEY_BEST = "2048-best"
KEY_STATE = "2048-game-state"
KEY_LEADERBOARD = "2048-leaderboard"

_RECORDS = TypeAdapter(list[LeaderboardRecord])


def _read(*, r: redis.Redis, key: str) -> str | bytes | None:
    try:
        return r.get(key)  # type: ignore[return-value]
    except redis.RedisError as e:
        raise PersistenceReadError(f"could not read {key}: {e}") from e


def _write(*, r: redis.Redis, key: str, value: str) -> bool:
    try:
        r.set(key, value)
    except redis.RedisError as e:
        logger.warning("Failed to write %s: %s", key, e)
        return False
    return True


def decode_state(raw: str | bytes | None) -> SessionState:
    if not raw:
        raise PersistenceReadError("no saved state")
    try:
        return SessionState.model_validate_json(raw)
    except ValidationError as e:
        raise PersistenceReadError(f"malformed saved state: {e.error_count()} error(s)") from e


def save_state(*, r: redis.Redis, state: SessionState) -> bool:
    return _write(r=r, key=KEY_STATE, value=state.model_dump_json(by_alias=True))


def load_state(*, r: redis.Redis) -> SessionState | None:
    try:
        return decode_state(_read(r=r, key=KEY_STATE))
    except PersistenceReadError as e:
        logger.info("No usable saved state (%s)", e)
        return None


def clear_state(*, r: redis.Redis) -> None:
    try:
        r.delete(KEY_STATE)
    except redis.RedisError as e:
        logger.warning("Failed to clear %s: %s", KEY_STATE, e)


def save_best(*, r: redis.Redis, best: int) -> bool:
    return _write(r=r, key=KEY_BEST, value=str(best))


def _parse_best(raw: str | bytes | None) -> int:
    return max(int(raw), 0) if raw else 0


def load_best(*, r: redis.Redis) -> int:
    try:
        return _parse_best(_read(r=r, key=KEY_BEST))
    except (PersistenceReadError, ValueError) as e:
        logger.warning("Ignoring unreadable best score: %s", e)
        return 0


def raise_best(*, r: redis.Redis, best: int) -> int:
    """Store `best` if it beats the stored value and return the higher of the two.

    Nothing is written when the key cannot be read, so a storage hiccup never
    replaces a higher stored best.
    """

    try:
        raw = _read(r=r, key=KEY_BEST)
    except PersistenceReadError as e:
        logger.warning("Not saving best score: %s", e)
        return best
    try:
        stored = _parse_best(raw)
    except ValueError:
        stored = 0
    if best <= stored:
        return stored
    save_best(r=r, best=best)
    return best


def get_leaderboard(*, r: redis.Redis, limit: int = 10) -> list[LeaderboardRecord]:
    try:
        raw = _read(r=r, key=KEY_LEADERBOARD)
        records = _RECORDS.validate_json(raw) if raw else []
    except (PersistenceReadError, ValidationError) as e:
        logger.warning("Ignoring unreadable leaderboard: %s", e)
        return []
    return rank_records(records, limit=limit)


def add_leaderboard_record(*, r: redis.Redis, record: LeaderboardRecord, limit: int = 10) -> list[LeaderboardRecord]:
    """Insert, re-rank and truncate to `limit`. Returns the resulting table.

    A malformed stored table is replaced. If the table cannot be read at all the
    record is not stored and the returned table holds only the new record.
    """

    try:
        raw = _read(r=r, key=KEY_LEADERBOARD)
    except PersistenceReadError as e:
        logger.warning("Not recording score for %s: %s", record.name, e)
        return [record]
    try:
        current = _RECORDS.validate_json(raw) if raw else []
    except ValidationError as e:
        logger.warning("Replacing unreadable leaderboard: %s", e)
        current = []

    records = rank_records([*current, record], limit=limit)
    _write(r=r, key=KEY_LEADERBOARD, value=_RECORDS.dump_json(records).decode())
    return records
