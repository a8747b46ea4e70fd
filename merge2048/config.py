from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GameConfig:
    # Board side length.
    size: int = 4
    # Max undo snapshots kept; oldest evicted first.
    undo_limit: int = 30
    # Max leaderboard records kept after each insert.
    leaderboard_limit: int = 10
    # Chance that a spawned tile is a 4 instead of a 2.
    four_probability: float = 0.1


DEFAULT_CONFIG = GameConfig()


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return value


def config_from_env() -> GameConfig:
    """Build a GameConfig, honouring MERGE2048_UNDO_LIMIT / MERGE2048_LEADERBOARD_LIMIT."""

    return GameConfig(
        undo_limit=_int_from_env("MERGE2048_UNDO_LIMIT", DEFAULT_CONFIG.undo_limit),
        leaderboard_limit=_int_from_env("MERGE2048_LEADERBOARD_LIMIT", DEFAULT_CONFIG.leaderboard_limit),
    )
